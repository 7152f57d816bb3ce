"""
MERIT Presence Engine — Ledger Records
=========================================
Immutable value objects for the five ledger maps.

Records are never mutated in place; the projection store
replaces a record with an updated copy (dataclasses.replace),
which is what makes snapshot/restore a shallow dict copy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Gathering:
    """An event definition with capacity and a base reward."""
    gathering_id: int
    title: str
    scheduled_at: int
    capacity: int
    base_points: int
    network_tags: Tuple[str, ...] = ()
    admitted_count: int = 0

    def __post_init__(self):
        if not 0 <= self.admitted_count <= self.capacity:
            raise ValueError("admitted_count must be within [0, capacity].")

    @property
    def is_full(self) -> bool:
        return self.admitted_count >= self.capacity

    def to_dict(self) -> dict:
        return {
            "gathering_id": self.gathering_id,
            "title": self.title,
            "scheduled_at": self.scheduled_at,
            "capacity": self.capacity,
            "admitted_count": self.admitted_count,
            "base_points": self.base_points,
            "network_tags": list(self.network_tags),
        }


@dataclass(frozen=True)
class PartnerNetwork:
    tag: str
    multiplier: int

    def to_dict(self) -> dict:
        return {"tag": self.tag, "multiplier": self.multiplier}


@dataclass(frozen=True)
class MeritAccount:
    """
    Earned/claimed split per participant.

    Invariant: claimed_points <= earned_points.
    """
    owner: str
    earned_points: int = 0
    claimed_points: int = 0
    bonus_history: Tuple[int, ...] = ()

    def __post_init__(self):
        if self.claimed_points > self.earned_points:
            raise ValueError("claimed_points cannot exceed earned_points.")

    @property
    def available_points(self) -> int:
        return self.earned_points - self.claimed_points

    def to_dict(self) -> dict:
        return {
            "owner": self.owner,
            "earned_points": self.earned_points,
            "claimed_points": self.claimed_points,
            "available_points": self.available_points,
            "bonus_history": list(self.bonus_history),
        }


@dataclass(frozen=True)
class ProofRecord:
    """Proof-token ids issued to one owner, in admission order."""
    owner: str
    proof_ids: Tuple[int, ...] = ()

    def to_dict(self) -> dict:
        return {"owner": self.owner, "proof_ids": list(self.proof_ids)}


@dataclass(frozen=True)
class GatheringRoster:
    gathering_id: int
    attendees: Tuple[str, ...] = ()

    def has_attendee(self, identity: str) -> bool:
        return identity in self.attendees

    def to_dict(self) -> dict:
        return {"gathering_id": self.gathering_id, "attendees": list(self.attendees)}
