"""
MERIT Command Layer — Outcomes
=================================
The verdict on a command: ACCEPTED or REJECTED, never both,
never neither. A rejection always names its reason.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from core.commands.rejection import RejectionReason


class CommandStatus(Enum):
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class CommandOutcome:
    """
    Decision for one command.

    reason is required when REJECTED and forbidden when ACCEPTED.
    """

    command_id: uuid.UUID
    status: CommandStatus
    reason: Optional[RejectionReason]
    occurred_at: datetime

    def __post_init__(self):
        if not isinstance(self.command_id, uuid.UUID):
            raise ValueError("command_id must be UUID.")
        if not isinstance(self.status, CommandStatus):
            raise ValueError("status must be a CommandStatus.")
        if not isinstance(self.occurred_at, datetime):
            raise ValueError("occurred_at must be a datetime.")

        rejected = self.status is CommandStatus.REJECTED
        if rejected and self.reason is None:
            raise ValueError("A REJECTED outcome needs a RejectionReason.")
        if not rejected and self.reason is not None:
            raise ValueError("An ACCEPTED outcome cannot carry a RejectionReason.")

    @property
    def is_accepted(self) -> bool:
        return self.status is CommandStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status is CommandStatus.REJECTED

    @classmethod
    def accepted(cls, command_id: uuid.UUID, occurred_at: datetime) -> "CommandOutcome":
        return cls(
            command_id=command_id,
            status=CommandStatus.ACCEPTED,
            reason=None,
            occurred_at=occurred_at,
        )

    @classmethod
    def rejected(
        cls, command_id: uuid.UUID, reason: RejectionReason, occurred_at: datetime,
    ) -> "CommandOutcome":
        return cls(
            command_id=command_id,
            status=CommandStatus.REJECTED,
            reason=reason,
            occurred_at=occurred_at,
        )

    def to_dict(self) -> dict:
        return {
            "command_id": str(self.command_id),
            "status": self.status.value,
            "reason": None if self.reason is None else self.reason.to_dict(),
            "occurred_at": self.occurred_at.isoformat(),
        }
