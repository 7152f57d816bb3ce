"""
MERIT Command Layer — Command
================================
Every ledger mutation starts life as a Command: a frozen record
of who asked for what, and when. It holds no logic and emits
nothing; the dispatcher and the engine decide what happens to it.

Command types are namespaced `<engine>.<domain>.<action>.request`,
e.g. `presence.gathering.join.request`.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

REQUEST_SUFFIX = ".request"
REJECTED_SUFFIX = ".rejected"


@dataclass(frozen=True)
class Command:
    """
    Fields:
        command_id:     UUID of this request.
        command_type:   `<engine>.<domain>.<action>.request`.
        actor_id:       The caller, as resolved by the identity provider.
        payload:        Operation arguments.
        issued_at:      Wall-clock time of issue (audit only).
        correlation_id: Ties related commands and events together.
        source_engine:  Owning engine; must equal the first type segment.
    """

    command_id: uuid.UUID
    command_type: str
    actor_id: str
    payload: dict
    issued_at: datetime
    correlation_id: uuid.UUID
    source_engine: str

    def __post_init__(self):
        if not isinstance(self.command_id, uuid.UUID):
            raise ValueError(
                f"command_id must be UUID, got {type(self.command_id).__name__}"
            )
        if not isinstance(self.correlation_id, uuid.UUID):
            raise ValueError("correlation_id must be UUID.")

        if not self.command_type or not isinstance(self.command_type, str):
            raise ValueError("command_type must be a non-empty string.")
        if not self.command_type.endswith(REQUEST_SUFFIX):
            raise ValueError(
                f"command_type '{self.command_type}' must end with '{REQUEST_SUFFIX}'."
            )
        segments = self.command_type.split(".")
        if len(segments) < 4:
            raise ValueError(
                f"command_type '{self.command_type}' needs at least "
                f"engine.domain.action.request."
            )
        if segments[0] != self.source_engine:
            raise ValueError(
                f"command_type namespace '{segments[0]}' does not match "
                f"source_engine '{self.source_engine}'."
            )

        if not self.actor_id or not isinstance(self.actor_id, str):
            raise ValueError("actor_id must be a non-empty string.")
        if not isinstance(self.payload, dict):
            raise TypeError("payload must be a dict.")
        if not isinstance(self.issued_at, datetime):
            raise ValueError("issued_at must be a datetime.")


def derive_rejection_event_type(command_type: str) -> str:
    """presence.gathering.join.request → presence.gathering.join.rejected"""
    if not command_type.endswith(REQUEST_SUFFIX):
        raise ValueError(f"command_type '{command_type}' must end with '{REQUEST_SUFFIX}'.")
    return command_type[: -len(REQUEST_SUFFIX)] + REJECTED_SUFFIX