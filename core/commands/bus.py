"""
MERIT Command Layer — Command Bus
====================================
Routes a command through the dispatcher to its engine handler.

    dispatch ──ACCEPTED──▶ handler.execute(command) ──▶ CommandResult
        │                        │
        │                 CommandRejectedError
        ▼                        ▼
     REJECTED ──────────▶ journal "<engine>.<domain>.<action>.rejected"

The bus never touches ledger state. Engines commit and journal
their own accepted events; the bus journals every rejection so
that no command disappears without a trace.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.commands.base import Command, derive_rejection_event_type
from core.commands.dispatcher import CommandDispatcher
from core.commands.outcomes import CommandOutcome
from core.commands.rejection import CommandRejectedError, RejectionReason

logger = logging.getLogger("merit.commands")


class CommandBusError(Exception):
    pass


class NoHandlerRegistered(CommandBusError):
    def __init__(self, command_type: str):
        self.command_type = command_type
        super().__init__(f"No handler registered for '{command_type}'.")


@dataclass(frozen=True)
class CommandResult:
    outcome: CommandOutcome
    execution_result: Any = None
    rejection_event_persisted: bool = False

    @property
    def is_accepted(self) -> bool:
        return self.outcome.is_accepted

    @property
    def is_rejected(self) -> bool:
        return self.outcome.is_rejected

    @property
    def reason(self) -> Optional[RejectionReason]:
        return self.outcome.reason


def is_persist_accepted(persist_result: Any) -> bool:
    """Accepts a JournalResult, an {"accepted": ...} dict or a plain truthy value."""
    if hasattr(persist_result, "accepted"):
        return bool(persist_result.accepted)
    if isinstance(persist_result, dict):
        return bool(persist_result.get("accepted"))
    return bool(persist_result)


def build_rejection_event(command: Command, outcome: CommandOutcome) -> dict:
    return {
        "event_id": uuid.uuid4(),
        "event_type": derive_rejection_event_type(command.command_type),
        "event_version": 1,
        "source_engine": command.source_engine,
        "actor_id": command.actor_id,
        "correlation_id": command.correlation_id,
        "causation_id": command.command_id,
        "payload": {
            "command_id": str(command.command_id),
            "command_type": command.command_type,
            "rejection": outcome.reason.to_dict(),
            "original_payload": command.payload,
        },
        "created_at": outcome.occurred_at,
        "status": "FINAL",
    }


class CommandBus:
    """
    Usage:
        bus = CommandBus(
            dispatcher=CommandDispatcher(),
            persist_event=journal,
            context=None,
            event_type_registry=registry,
        )
        bus.register_handler("presence.gathering.join.request", handler)
        result = bus.handle(command)
    """

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        persist_event,
        context: Any,
        event_type_registry: Any,
    ):
        self._dispatcher = dispatcher
        self._persist_event = persist_event
        self._context = context
        self._event_type_registry = event_type_registry
        self._handlers: Dict[str, Any] = {}

    def register_handler(self, command_type: str, handler: Any) -> None:
        """Handler must expose execute(command). Also whitelists the type."""
        if not command_type.endswith(".request"):
            raise ValueError(f"command_type '{command_type}' must end with '.request'.")
        if not callable(getattr(handler, "execute", None)):
            raise TypeError("Handler must have callable .execute() method.")

        self._handlers[command_type] = handler
        self._dispatcher.allow_command_types({command_type})
        logger.info(f"Handler registered: {command_type}")

    def has_handler(self, command_type: str) -> bool:
        return command_type in self._handlers

    def handle(self, command: Command) -> CommandResult:
        outcome = self._dispatcher.dispatch(command)
        if outcome.is_rejected:
            return self._reject(command, outcome)

        handler = self._handlers.get(command.command_type)
        if handler is None:
            raise NoHandlerRegistered(command.command_type)

        logger.info(f"Executing {command.command_type} ({command.command_id})")
        try:
            execution_result = handler.execute(command)
        except CommandRejectedError as exc:
            return self._reject(
                command,
                CommandOutcome.rejected(
                    command_id=command.command_id,
                    reason=exc.reason,
                    occurred_at=outcome.occurred_at,
                ),
            )

        return CommandResult(outcome=outcome, execution_result=execution_result)

    def _reject(self, command: Command, outcome: CommandOutcome) -> CommandResult:
        event_data = build_rejection_event(command, outcome)
        self._register_rejection_type(event_data["event_type"])

        logger.info(
            f"Command {command.command_id} rejected "
            f"[{outcome.reason.code}]: {outcome.reason.message}"
        )
        persist_result = self._persist_event(
            event_data=event_data,
            context=self._context,
            registry=self._event_type_registry,
        )
        return CommandResult(
            outcome=outcome,
            rejection_event_persisted=is_persist_accepted(persist_result),
        )

    def _register_rejection_type(self, event_type: str) -> None:
        registry = self._event_type_registry
        if registry is None or not callable(getattr(registry, "register", None)):
            return
        if not registry.is_registered(event_type):
            registry.register(event_type)
