"""
MERIT HTTP API Auth - Public API
================================
"""

from core.http_api.auth.provider import (
    AuthPrincipal,
    AuthProvider,
    InMemoryAuthProvider,
)
from core.http_api.auth.resolver import (
    HEADER_API_KEY,
    extract_api_key,
    resolve_auth_principal,
    resolve_caller,
)

__all__ = [
    "AuthPrincipal",
    "AuthProvider",
    "InMemoryAuthProvider",
    "HEADER_API_KEY",
    "extract_api_key",
    "resolve_auth_principal",
    "resolve_caller",
]
