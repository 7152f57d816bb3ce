"""
MERIT Core Config — Public API
=================================
Ledger bounds and overflow policy.
Doctrine: No hardcoded limits in engine logic.
"""

from core.config.limits import (
    DEFAULT_LIMITS,
    LedgerLimits,
)

__all__ = [
    "DEFAULT_LIMITS",
    "LedgerLimits",
]
