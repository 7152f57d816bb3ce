"""
MERIT Command Layer — Structural Validation
==============================================
Shape checks that run before any policy. Nothing here reads
ledger state or judges domain ranges.
"""

from __future__ import annotations

from typing import FrozenSet, Optional

from core.commands.base import REQUEST_SUFFIX, Command
from core.commands.rejection import ReasonCode


class CommandValidationError(Exception):
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


def validate_command(
    command: Command,
    known_command_types: Optional[FrozenSet[str]] = None,
) -> None:
    """
    Raise CommandValidationError on the first failing check:
    instance type, non-blank actor, type format, known type (when
    a whitelist is given), dict payload.
    """
    if not isinstance(command, Command):
        raise CommandValidationError(
            ReasonCode.INVALID_COMMAND_STRUCTURE,
            f"Expected Command, got {type(command).__name__}.",
        )

    if not command.actor_id.strip():
        raise CommandValidationError(
            ReasonCode.INVALID_ACTOR,
            "actor_id must not be blank.",
        )

    command_type = command.command_type
    if not command_type.endswith(REQUEST_SUFFIX) or command_type.count(".") < 3:
        raise CommandValidationError(
            ReasonCode.INVALID_COMMAND_TYPE,
            f"command_type '{command_type}' must look like engine.domain.action.request.",
        )

    if known_command_types is not None and command_type not in known_command_types:
        raise CommandValidationError(
            ReasonCode.INVALID_COMMAND_TYPE,
            f"Unknown command_type '{command_type}'.",
        )

    if not isinstance(command.payload, dict):
        raise CommandValidationError(
            ReasonCode.INVALID_COMMAND_STRUCTURE,
            "payload must be a dict.",
        )
