"""
MERIT Tokens - Proof Token Registry
===================================
External ledger of non-transferable attendance tokens.

The presence engine only needs mint(token_id, owner) -> bool:
- True  → token minted to owner
- False → token_id already used (or owner invalid)

A registry may also raise TokenRegistryError when it is unreachable;
the engine treats that exactly like a False result.

There is deliberately no transfer operation.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Protocol

logger = logging.getLogger("merit.tokens")


class TokenRegistryError(Exception):
    """The token registry could not process a mint request."""
    pass


@dataclass(frozen=True)
class ProofToken:
    token_id: int
    owner: str

    def to_dict(self) -> dict:
        return {"token_id": self.token_id, "owner": self.owner}


class TokenRegistry(Protocol):
    def mint(self, token_id: int, owner: str) -> bool:
        ...


class InMemoryTokenRegistry:
    """
    Thread-safe in-memory token registry for tests and local wiring.
    """

    def __init__(self) -> None:
        self._tokens: dict[int, ProofToken] = {}
        self._lock = threading.Lock()

    def mint(self, token_id: int, owner: str) -> bool:
        if not isinstance(token_id, int) or isinstance(token_id, bool) or token_id < 1:
            return False
        if not owner or not isinstance(owner, str):
            return False
        with self._lock:
            if token_id in self._tokens:
                logger.info(f"Mint refused: token {token_id} already exists")
                return False
            self._tokens[token_id] = ProofToken(token_id=token_id, owner=owner)
        logger.info(f"Token {token_id} minted to {owner}")
        return True

    def owner_of(self, token_id: int) -> Optional[str]:
        with self._lock:
            token = self._tokens.get(token_id)
        return None if token is None else token.owner

    def exists(self, token_id: int) -> bool:
        with self._lock:
            return token_id in self._tokens

    def tokens_of(self, owner: str) -> tuple[int, ...]:
        with self._lock:
            return tuple(
                sorted(t.token_id for t in self._tokens.values() if t.owner == owner)
            )

    @property
    def token_count(self) -> int:
        with self._lock:
            return len(self._tokens)
