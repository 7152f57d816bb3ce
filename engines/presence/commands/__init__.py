"""
MERIT Presence Engine — Request Commands
===========================================
Typed requests that convert into canonical Command objects.

Requests only guard shape (types a caller could never mean).
Domain ranges — title length, capacity, multipliers — are judged
by the engine policies so that they surface as ledger error codes.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Tuple

from core.commands.base import Command


# ══════════════════════════════════════════════════════════════
# COMMAND TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

PRESENCE_PARTNER_REGISTER_REQUEST = "presence.partner.register.request"
PRESENCE_GATHERING_CREATE_REQUEST = "presence.gathering.create.request"
PRESENCE_GATHERING_JOIN_REQUEST = "presence.gathering.join.request"
PRESENCE_MERITS_CLAIM_REQUEST = "presence.merits.claim.request"

PRESENCE_COMMAND_TYPES = frozenset({
    PRESENCE_PARTNER_REGISTER_REQUEST,
    PRESENCE_GATHERING_CREATE_REQUEST,
    PRESENCE_GATHERING_JOIN_REQUEST,
    PRESENCE_MERITS_CLAIM_REQUEST,
})

def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _build(
    command_type: str,
    payload: dict,
    *,
    actor_id: str,
    command_id: uuid.UUID,
    correlation_id: uuid.UUID,
    issued_at: datetime,
) -> Command:
    return Command(
        command_id=command_id,
        command_type=command_type,
        actor_id=actor_id,
        payload=payload,
        issued_at=issued_at,
        correlation_id=correlation_id,
        source_engine="presence",
    )


# ══════════════════════════════════════════════════════════════
# REQUEST COMMANDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RegisterPartnerRequest:
    """Upsert a partner network's bonus multiplier (administrator only)."""
    tag: Any
    multiplier: Any

    def to_command(self, **command_args) -> Command:
        return _build(
            PRESENCE_PARTNER_REGISTER_REQUEST,
            {"tag": self.tag, "multiplier": self.multiplier},
            **command_args,
        )


@dataclass(frozen=True)
class CreateGatheringRequest:
    """Define a new gathering (administrator only)."""
    title: Any
    scheduled_at: Any
    capacity: Any
    base_points: Any
    network_tags: Tuple[Any, ...] = ()

    def __post_init__(self):
        if isinstance(self.network_tags, list):
            object.__setattr__(self, "network_tags", tuple(self.network_tags))

    def to_command(self, **command_args) -> Command:
        tags = self.network_tags
        return _build(
            PRESENCE_GATHERING_CREATE_REQUEST,
            {
                "title": self.title,
                "scheduled_at": self.scheduled_at,
                "capacity": self.capacity,
                "base_points": self.base_points,
                "network_tags": list(tags) if isinstance(tags, tuple) else tags,
            },
            **command_args,
        )


@dataclass(frozen=True)
class JoinGatheringRequest:
    """Register the caller's attendance at a gathering."""
    gathering_id: int

    def __post_init__(self):
        if not _is_int(self.gathering_id):
            raise ValueError("gathering_id must be an integer.")

    def to_command(self, **command_args) -> Command:
        return _build(
            PRESENCE_GATHERING_JOIN_REQUEST,
            {"gathering_id": self.gathering_id},
            **command_args,
        )


@dataclass(frozen=True)
class ClaimMeritsRequest:
    """Withdraw part of the caller's available merit balance."""
    points: int

    def __post_init__(self):
        if not _is_int(self.points):
            raise ValueError("points must be an integer.")
        if self.points <= 0:
            raise ValueError("points must be > 0.")

    def to_command(self, **command_args) -> Command:
        return _build(
            PRESENCE_MERITS_CLAIM_REQUEST,
            {"points": self.points},
            **command_args,
        )
