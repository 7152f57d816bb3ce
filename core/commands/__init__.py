"""
MERIT Command Layer
======================
Command → dispatcher verdict → engine execution → outcome.
Every command ends ACCEPTED or REJECTED; rejections are journaled.
"""

from core.commands.base import (
    Command,
    derive_rejection_event_type,
)
from core.commands.bus import (
    CommandBus,
    CommandBusError,
    CommandResult,
    NoHandlerRegistered,
    build_rejection_event,
    is_persist_accepted,
)
from core.commands.dispatcher import CommandDispatcher, PolicyEvaluator
from core.commands.outcomes import CommandOutcome, CommandStatus
from core.commands.rejection import (
    NUMERIC_CODES,
    CommandRejectedError,
    ReasonCode,
    RejectionReason,
)
from core.commands.validator import CommandValidationError, validate_command

__all__ = [
    "Command",
    "CommandBus",
    "CommandBusError",
    "CommandDispatcher",
    "CommandOutcome",
    "CommandRejectedError",
    "CommandResult",
    "CommandStatus",
    "CommandValidationError",
    "NUMERIC_CODES",
    "NoHandlerRegistered",
    "PolicyEvaluator",
    "ReasonCode",
    "RejectionReason",
    "build_rejection_event",
    "derive_rejection_event_type",
    "is_persist_accepted",
    "validate_command",
]
