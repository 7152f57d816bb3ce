"""
MERIT Core Primitives — Bounded Collections
==============================================
Primitives are the shared, engine-agnostic building blocks that
the presence engine consumes. They are:

- Pure Python (no Django dependency)
- Immutable (tuples in, tuples out)
- Deterministic (same input → same output)

Primitives:
    bounded — append-with-cap and dedup-append-with-cap helpers
"""

from core.primitives.bounded import (
    BoundedCollectionFull,
    OverflowPolicy,
    append_capped,
    append_capped_unique,
    would_overflow,
)

__all__ = [
    "BoundedCollectionFull",
    "OverflowPolicy",
    "append_capped",
    "append_capped_unique",
    "would_overflow",
]
