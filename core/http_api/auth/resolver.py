"""
MERIT HTTP API Auth - Caller Resolver
=====================================
The caller of every ledger write comes from the X-API-KEY
header, never from the request body.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.commands.rejection import ReasonCode, RejectionReason
from core.http_api.auth.provider import AuthPrincipal

HEADER_API_KEY = "x-api-key"


def extract_api_key(headers: Mapping[str, Any] | None) -> str | None:
    """Header names match case-insensitively; values are stripped."""
    for name, value in (headers or {}).items():
        if str(name).strip().lower() == HEADER_API_KEY:
            return str(value).strip() or None
    return None


def resolve_auth_principal(
    headers: Mapping[str, Any] | None,
    provider,
) -> AuthPrincipal | RejectionReason:
    api_key = extract_api_key(headers)
    if api_key is None:
        return RejectionReason(
            code=ReasonCode.AUTH_REQUIRED,
            message="Missing required header X-API-KEY.",
            policy_name="http_api_auth_resolver",
        )

    principal = provider.resolve_api_key(api_key)
    if principal is None:
        return RejectionReason(
            code=ReasonCode.AUTH_INVALID,
            message="Unknown API key.",
            policy_name="http_api_auth_resolver",
        )
    return principal


def resolve_caller(
    headers: Mapping[str, Any] | None,
    provider,
) -> str | RejectionReason:
    resolved = resolve_auth_principal(headers, provider)
    if isinstance(resolved, AuthPrincipal):
        return resolved.actor_id
    return resolved
