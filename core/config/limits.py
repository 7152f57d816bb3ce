"""
MERIT Core Config — Ledger Limits
====================================
Every numeric bound the ledger enforces, in one frozen record.

Engine logic never hardcodes a bound. Limits are injected
into the presence service; the defaults below are the
production values.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.primitives.bounded import OverflowPolicy


@dataclass(frozen=True)
class LedgerLimits:
    """
    Bounds for gatherings, partners and per-participant collections.

    Ranges are inclusive. overflow_policy governs what happens when
    a bounded collection (proofs, bonus history, roster) is full.
    """

    title_min_length: int = 1
    title_max_length: int = 50
    tag_min_length: int = 1
    tag_max_length: int = 20
    max_network_tags: int = 10
    capacity_min: int = 1
    capacity_max: int = 1000
    base_points_min: int = 1
    base_points_max: int = 10000
    multiplier_min: int = 1
    multiplier_max: int = 5
    bonus_history_cap: int = 10
    proofs_cap: int = 100
    roster_cap: int = 1000
    overflow_policy: OverflowPolicy = OverflowPolicy.DROP

    def __post_init__(self) -> None:
        for name in (
            "title_min_length", "title_max_length",
            "tag_min_length", "tag_max_length",
            "max_network_tags",
            "capacity_min", "capacity_max",
            "base_points_min", "base_points_max",
            "multiplier_min", "multiplier_max",
            "bonus_history_cap", "proofs_cap", "roster_cap",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer.")

        for low, high in (
            ("title_min_length", "title_max_length"),
            ("tag_min_length", "tag_max_length"),
            ("capacity_min", "capacity_max"),
            ("base_points_min", "base_points_max"),
            ("multiplier_min", "multiplier_max"),
        ):
            if getattr(self, low) > getattr(self, high):
                raise ValueError(f"{low} must be <= {high}.")

        if self.roster_cap < self.capacity_max:
            raise ValueError("roster_cap must be >= capacity_max.")

        if not isinstance(self.overflow_policy, OverflowPolicy):
            raise ValueError("overflow_policy must be an OverflowPolicy.")


DEFAULT_LIMITS = LedgerLimits()
