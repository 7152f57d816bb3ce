"""
MERIT HTTP API Auth - Principals
================================
An API key maps to exactly one principal. The principal's
actor_id is the caller identity the ledger sees.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Protocol


@dataclass(frozen=True)
class AuthPrincipal:
    actor_id: str
    display_name: str = ""

    def __post_init__(self):
        if not isinstance(self.actor_id, str) or not self.actor_id.strip():
            raise ValueError("actor_id must be a non-empty string.")
        if self.actor_id != self.actor_id.strip():
            raise ValueError("actor_id must not carry surrounding whitespace.")
        if not isinstance(self.display_name, str):
            raise ValueError("display_name must be a string.")


class AuthProvider(Protocol):
    def resolve_api_key(self, api_key: str) -> AuthPrincipal | None:
        ...


class InMemoryAuthProvider:
    """Fixed key table, loaded once from settings or a test fixture."""

    def __init__(self, principals: Mapping[str, AuthPrincipal] | None = None):
        self._principals: dict[str, AuthPrincipal] = {}
        for api_key, principal in (principals or {}).items():
            self.add(api_key, principal)

    @classmethod
    def from_actor_ids(cls, actor_by_key: Mapping[str, str]) -> "InMemoryAuthProvider":
        return cls({key: AuthPrincipal(actor_id=actor) for key, actor in actor_by_key.items()})

    def add(self, api_key: str, principal: AuthPrincipal) -> None:
        if not isinstance(api_key, str) or not api_key.strip():
            raise ValueError("API key must be a non-empty string.")
        if not isinstance(principal, AuthPrincipal):
            raise ValueError("Principal must be AuthPrincipal.")
        self._principals[api_key] = principal

    def resolve_api_key(self, api_key: str) -> AuthPrincipal | None:
        if not isinstance(api_key, str):
            return None
        return self._principals.get(api_key)

    def __len__(self) -> int:
        return len(self._principals)
