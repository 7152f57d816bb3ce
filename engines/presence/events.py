"""
MERIT Presence Engine — Event Types and Payload Builders
===========================================================
Engine: Presence (attendance proofs + merit accounting)

Presence owns the gathering lifecycle: partners are registered,
gatherings are created, participants join (proof minted, merits
credited) and later claim part of their balance.

Payloads carry every value the projection needs. Anything the
engine computes (ids, bonus, credited points) is decided before
the payload is built, so applying a payload is pure bookkeeping.
"""

from __future__ import annotations

from core.commands.base import Command


# ══════════════════════════════════════════════════════════════
# EVENT TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

PRESENCE_PARTNER_REGISTERED_V1 = "presence.partner.registered.v1"
PRESENCE_GATHERING_CREATED_V1 = "presence.gathering.created.v1"
PRESENCE_GATHERING_JOINED_V1 = "presence.gathering.joined.v1"
PRESENCE_MERITS_CLAIMED_V1 = "presence.merits.claimed.v1"

PRESENCE_EVENT_TYPES = (
    PRESENCE_PARTNER_REGISTERED_V1,
    PRESENCE_GATHERING_CREATED_V1,
    PRESENCE_GATHERING_JOINED_V1,
    PRESENCE_MERITS_CLAIMED_V1,
)


# ══════════════════════════════════════════════════════════════
# COMMAND → EVENT MAPPING
# ══════════════════════════════════════════════════════════════

COMMAND_TO_EVENT_TYPE = {
    "presence.partner.register.request": PRESENCE_PARTNER_REGISTERED_V1,
    "presence.gathering.create.request": PRESENCE_GATHERING_CREATED_V1,
    "presence.gathering.join.request": PRESENCE_GATHERING_JOINED_V1,
    "presence.merits.claim.request": PRESENCE_MERITS_CLAIMED_V1,
}


def resolve_presence_event_type(command_type: str) -> str | None:
    return COMMAND_TO_EVENT_TYPE.get(command_type)


def register_presence_event_types(event_type_registry) -> None:
    for event_type in sorted(PRESENCE_EVENT_TYPES):
        event_type_registry.register(event_type)


# ══════════════════════════════════════════════════════════════
# PAYLOAD BUILDERS
# ══════════════════════════════════════════════════════════════

def _base_payload(command: Command) -> dict:
    return {
        "actor_id": command.actor_id,
        "correlation_id": str(command.correlation_id),
        "command_id": str(command.command_id),
    }


def build_partner_registered_payload(command: Command) -> dict:
    payload = _base_payload(command)
    payload.update({
        "tag": command.payload["tag"],
        "multiplier": command.payload["multiplier"],
    })
    return payload


def build_gathering_created_payload(
    command: Command,
    *,
    gathering_id: int,
    network_tags: tuple,
) -> dict:
    payload = _base_payload(command)
    payload.update({
        "gathering_id": gathering_id,
        "title": command.payload["title"],
        "scheduled_at": command.payload["scheduled_at"],
        "capacity": command.payload["capacity"],
        "base_points": command.payload["base_points"],
        "network_tags": list(network_tags),
    })
    return payload


def build_gathering_joined_payload(
    command: Command,
    *,
    proof_id: int,
    base_points: int,
    bonus: int,
    credited_points: int,
) -> dict:
    payload = _base_payload(command)
    payload.update({
        "gathering_id": command.payload["gathering_id"],
        "participant": command.actor_id,
        "proof_id": proof_id,
        "base_points": base_points,
        "bonus": bonus,
        "credited_points": credited_points,
    })
    return payload


def build_merits_claimed_payload(command: Command) -> dict:
    payload = _base_payload(command)
    payload.update({
        "owner": command.actor_id,
        "points": command.payload["points"],
    })
    return payload
