"""
MERIT Identity - Public API
===========================
Administrator identity and authorization guard.
"""

from core.identity.administrator import (
    AdministratorGuard,
    administrator_required_policy,
)

__all__ = [
    "AdministratorGuard",
    "administrator_required_policy",
]
