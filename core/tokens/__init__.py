"""
MERIT Tokens - Public API
=========================
Non-transferable proof token registry contract.
"""

from core.tokens.registry import (
    InMemoryTokenRegistry,
    ProofToken,
    TokenRegistry,
    TokenRegistryError,
)

__all__ = [
    "InMemoryTokenRegistry",
    "ProofToken",
    "TokenRegistry",
    "TokenRegistryError",
]
