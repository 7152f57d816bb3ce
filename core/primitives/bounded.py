"""
MERIT Primitives — Bounded Collections
=========================================
Append helpers for every collection-valued record field.

Collections are tuples with an explicit capacity. Appending
to a full collection is governed by an OverflowPolicy:

- DROP   → collection returned unchanged (silent no-op)
- REJECT → BoundedCollectionFull raised

These two functions are the ONLY collection-mutation primitives
in the ledger. Tags, proof ids, bonus history and rosters all
route through them.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Tuple


# ══════════════════════════════════════════════════════════════
# OVERFLOW POLICY
# ══════════════════════════════════════════════════════════════

class OverflowPolicy(Enum):
    """What happens when a value is appended to a full collection."""
    DROP = "DROP"
    REJECT = "REJECT"


class BoundedCollectionFull(Exception):
    """Raised under OverflowPolicy.REJECT when a collection is at capacity."""

    def __init__(self, cap: int, value: Any):
        self.cap = cap
        self.value = value
        super().__init__(
            f"Collection is at capacity ({cap}); cannot append {value!r}."
        )


# ══════════════════════════════════════════════════════════════
# APPEND HELPERS
# ══════════════════════════════════════════════════════════════

def _check_cap(cap: int) -> None:
    if not isinstance(cap, int) or isinstance(cap, bool) or cap < 0:
        raise ValueError(f"cap must be a non-negative integer, got {cap!r}.")


def append_capped(
    items: Tuple[Any, ...],
    value: Any,
    cap: int,
    policy: OverflowPolicy = OverflowPolicy.DROP,
) -> Tuple[Any, ...]:
    """
    Append value unless the collection already holds cap entries.

    Returns a new tuple; the input is never mutated.
    """
    _check_cap(cap)
    if len(items) >= cap:
        if policy == OverflowPolicy.REJECT:
            raise BoundedCollectionFull(cap, value)
        return tuple(items)
    return tuple(items) + (value,)


def append_capped_unique(
    items: Tuple[Any, ...],
    value: Any,
    cap: int,
    policy: OverflowPolicy = OverflowPolicy.DROP,
) -> Tuple[Any, ...]:
    """
    Append value if absent, subject to cap.

    A value already present returns the collection unchanged,
    even when the collection is full.
    """
    if value in items:
        return tuple(items)
    return append_capped(items, value, cap, policy)


def would_overflow(items: Tuple[Any, ...], value: Any, cap: int, *, unique: bool) -> bool:
    """True if appending value would hit the cap (pre-check for REJECT)."""
    if unique and value in items:
        return False
    return len(items) >= cap
