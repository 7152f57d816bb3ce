"""
MERIT Command Layer — Dispatcher
===================================
Structural validation plus stateless, cross-cutting policies.

The dispatcher decides before any engine runs. Checks that need
ledger state (capacity, rosters, balances) are the engine's: it
raises CommandRejectedError while holding its own lock.

A policy is `(command, context) -> Optional[RejectionReason]`.
Policies run in registration order and the first rejection wins.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, FrozenSet, Iterable, List, Optional

from core.commands.base import Command
from core.commands.outcomes import CommandOutcome
from core.commands.rejection import RejectionReason
from core.commands.validator import CommandValidationError, validate_command
from core.time.clock import Clock, SystemClock

logger = logging.getLogger("merit.commands")

PolicyEvaluator = Callable[[Command, Any], Optional[RejectionReason]]


class CommandDispatcher:
    def __init__(
        self,
        context: Any = None,
        *,
        clock: Clock | None = None,
        known_command_types: Optional[FrozenSet[str]] = None,
    ):
        self._context = context
        self._clock = clock or SystemClock()
        self._known_command_types = known_command_types
        self._policies: List[PolicyEvaluator] = []

    @property
    def clock(self) -> Clock:
        return self._clock

    def register_policy(self, policy: PolicyEvaluator) -> None:
        if not callable(policy):
            raise TypeError(f"Policy must be callable, got {type(policy).__name__}.")
        self._policies.append(policy)
        logger.debug(f"Policy registered: {getattr(policy, '__qualname__', policy)}")

    def allow_command_types(self, command_types: Iterable[str]) -> None:
        """Once any type is allowed, unknown types are rejected."""
        current = self._known_command_types or frozenset()
        self._known_command_types = current | frozenset(command_types)

    def dispatch(self, command: Command) -> CommandOutcome:
        now = self._clock.now_utc()

        try:
            validate_command(command, self._known_command_types)
        except CommandValidationError as exc:
            logger.info(f"Command failed validation: [{exc.code}] {exc.message}")
            return CommandOutcome.rejected(
                command_id=command.command_id,
                reason=RejectionReason(
                    code=exc.code,
                    message=exc.message,
                    policy_name="command_validator",
                ),
                occurred_at=now,
            )

        for policy in self._policies:
            rejection = policy(command, self._context)
            if rejection is None:
                continue
            if not isinstance(rejection, RejectionReason):
                raise TypeError(
                    f"Policy must return RejectionReason or None, "
                    f"got {type(rejection).__name__}."
                )
            logger.info(
                f"Command {command.command_id} rejected by {rejection.policy_name}: "
                f"[{rejection.code}] {rejection.message}"
            )
            return CommandOutcome.rejected(
                command_id=command.command_id,
                reason=rejection,
                occurred_at=now,
            )

        logger.info(f"Command {command.command_id} ACCEPTED")
        return CommandOutcome.accepted(command_id=command.command_id, occurred_at=now)
