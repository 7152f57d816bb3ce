"""
MERIT Command Layer — Tests
==============================
Command → Outcome → Event chain.

Scenarios:
1. Valid command → ACCEPTED
2. Invalid structure → validation error
3. Policy failure → REJECTED outcome
4. REJECTED produces a journaled rejection event
5. Engine-raised rejection becomes a REJECTED outcome
6. No silent path
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import pytest

from core.commands.base import (
    Command,
    derive_rejection_event_type,
)
from core.commands.bus import (
    CommandBus,
    NoHandlerRegistered,
    build_rejection_event,
    is_persist_accepted,
)
from core.commands.dispatcher import CommandDispatcher
from core.commands.outcomes import CommandOutcome, CommandStatus
from core.commands.rejection import (
    CommandRejectedError,
    ReasonCode,
    RejectionReason,
)
from core.commands.validator import CommandValidationError, validate_command
from core.events.journal import InMemoryEventJournal
from core.events.registry import EventTypeRegistry
from core.time.clock import FixedClock

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
JOIN = "presence.gathering.join.request"


def _command(**overrides) -> Command:
    params = dict(
        command_id=uuid.uuid4(),
        command_type=JOIN,
        actor_id="alice",
        payload={"gathering_id": 1},
        issued_at=NOW,
        correlation_id=uuid.uuid4(),
        source_engine="presence",
    )
    params.update(overrides)
    return Command(**params)


class StubEngineService:
    """Records execute calls."""

    def __init__(self, result="done", reject_with=None):
        self.calls = []
        self._result = result
        self._reject_with = reject_with

    def execute(self, command):
        self.calls.append(command)
        if self._reject_with is not None:
            raise CommandRejectedError(self._reject_with)
        return self._result


def _bus(dispatcher=None):
    journal = InMemoryEventJournal()
    registry = EventTypeRegistry()
    bus = CommandBus(
        dispatcher=dispatcher or CommandDispatcher(clock=FixedClock(NOW)),
        persist_event=journal,
        context=None,
        event_type_registry=registry,
    )
    return bus, journal


# ══════════════════════════════════════════════════════════════
# COMMAND CONTRACT
# ══════════════════════════════════════════════════════════════

class TestCommandContract:
    def test_valid_command(self):
        cmd = _command()
        assert cmd.source_engine == "presence"
        assert cmd.command_type == JOIN

    def test_frozen(self):
        cmd = _command()
        with pytest.raises(Exception):
            cmd.actor_id = "mallory"

    def test_type_must_end_with_request(self):
        with pytest.raises(ValueError, match=".request"):
            _command(command_type="presence.gathering.join")

    def test_namespace_must_match_engine(self):
        with pytest.raises(ValueError, match="does not match"):
            _command(source_engine="loyalty")

    def test_actor_required(self):
        with pytest.raises(ValueError, match="actor_id"):
            _command(actor_id="")

    def test_payload_must_be_dict(self):
        with pytest.raises(TypeError):
            _command(payload=[1])

    def test_rejection_event_type(self):
        assert derive_rejection_event_type(JOIN) == "presence.gathering.join.rejected"


class TestValidator:
    def test_blank_actor(self):
        with pytest.raises(CommandValidationError) as exc:
            validate_command(_command(actor_id="   "))
        assert exc.value.code == ReasonCode.INVALID_ACTOR

    def test_unknown_type(self):
        with pytest.raises(CommandValidationError) as exc:
            validate_command(_command(), frozenset({"presence.merits.claim.request"}))
        assert exc.value.code == ReasonCode.INVALID_COMMAND_TYPE

    def test_not_a_command(self):
        with pytest.raises(CommandValidationError) as exc:
            validate_command({"command_type": JOIN})
        assert exc.value.code == ReasonCode.INVALID_COMMAND_STRUCTURE


class TestRejectionReason:
    def test_numeric_code(self):
        reason = RejectionReason(
            code=ReasonCode.CAPACITY_REACHED, message="full", policy_name="p",
        )
        assert reason.numeric_code == 101
        assert reason.to_dict()["numeric_code"] == 101

    def test_codes_outside_taxonomy_have_no_number(self):
        reason = RejectionReason(code=ReasonCode.INVALID_ACTOR, message="m", policy_name="p")
        assert reason.numeric_code is None

    def test_network_not_found_is_numbered(self):
        reason = RejectionReason(code=ReasonCode.NETWORK_NOT_FOUND, message="m", policy_name="p")
        assert reason.numeric_code == 106

    def test_empty_message_refused(self):
        with pytest.raises(ValueError):
            RejectionReason(code="X", message="", policy_name="p")


# ══════════════════════════════════════════════════════════════
# DISPATCHER
# ══════════════════════════════════════════════════════════════

class TestDispatcher:
    def test_accepts_valid_command(self):
        outcome = CommandDispatcher(clock=FixedClock(NOW)).dispatch(_command())
        assert outcome.status == CommandStatus.ACCEPTED
        assert outcome.occurred_at == NOW

    def test_first_rejecting_policy_wins(self):
        dispatcher = CommandDispatcher(clock=FixedClock(NOW))
        seen = []

        def _first(command, context):
            seen.append("first")
            return RejectionReason(code="FIRST", message="no", policy_name="first")

        def _second(command, context):
            seen.append("second")
            return None

        dispatcher.register_policy(_first)
        dispatcher.register_policy(_second)
        outcome = dispatcher.dispatch(_command())
        assert outcome.is_rejected
        assert outcome.reason.code == "FIRST"
        assert seen == ["first"]

    def test_policy_must_return_reason_or_none(self):
        dispatcher = CommandDispatcher(clock=FixedClock(NOW))
        dispatcher.register_policy(lambda command, context: "nope")
        with pytest.raises(TypeError):
            dispatcher.dispatch(_command())

    def test_non_callable_policy(self):
        with pytest.raises(TypeError):
            CommandDispatcher().register_policy("policy")

    def test_whitelist_extended(self):
        dispatcher = CommandDispatcher(known_command_types=frozenset())
        assert dispatcher.dispatch(_command()).is_rejected
        dispatcher.allow_command_types({JOIN})
        assert dispatcher.dispatch(_command()).is_accepted


# ══════════════════════════════════════════════════════════════
# BUS
# ══════════════════════════════════════════════════════════════

class TestCommandBus:
    def test_accepted_command_executes_handler(self):
        bus, journal = _bus()
        handler = StubEngineService(result=7)
        bus.register_handler(JOIN, handler)

        result = bus.handle(_command())
        assert result.is_accepted
        assert result.execution_result == 7
        assert len(handler.calls) == 1
        assert journal.event_count == 0

    def test_engine_rejection_is_journaled(self):
        bus, journal = _bus()
        reason = RejectionReason(
            code=ReasonCode.CAPACITY_REACHED, message="full", policy_name="capacity",
        )
        bus.register_handler(JOIN, StubEngineService(reject_with=reason))

        result = bus.handle(_command())
        assert result.is_rejected
        assert result.reason == reason
        assert result.rejection_event_persisted is True

        events = journal.events_of_type("presence.gathering.join.rejected")
        assert len(events) == 1
        assert events[0]["payload"]["rejection"]["code"] == "CAPACITY_REACHED"

    def test_policy_rejection_skips_handler(self):
        dispatcher = CommandDispatcher(clock=FixedClock(NOW))
        dispatcher.register_policy(
            lambda command, context: RejectionReason(
                code="BLOCKED", message="blocked", policy_name="block",
            )
        )
        bus, journal = _bus(dispatcher)
        handler = StubEngineService()
        bus.register_handler(JOIN, handler)

        result = bus.handle(_command())
        assert result.is_rejected
        assert handler.calls == []
        assert journal.event_count == 1

    def test_unregistered_type_rejected_once_any_handler_exists(self):
        bus, journal = _bus()
        bus.register_handler("presence.merits.claim.request", StubEngineService())

        result = bus.handle(_command())
        assert result.is_rejected
        assert result.reason.code == ReasonCode.INVALID_COMMAND_TYPE

    def test_no_handler_is_loud(self):
        bus, _ = _bus()
        with pytest.raises(NoHandlerRegistered):
            bus.handle(_command())

    def test_handler_registration_rules(self):
        bus, _ = _bus()
        with pytest.raises(ValueError):
            bus.register_handler("presence.gathering.join", StubEngineService())
        with pytest.raises(TypeError):
            bus.register_handler(JOIN, object())
        bus.register_handler(JOIN, StubEngineService())
        assert bus.has_handler(JOIN)


class TestIsPersistAccepted:
    def test_shapes(self):
        class _Result:
            accepted = False

        assert is_persist_accepted({"accepted": True}) is True
        assert is_persist_accepted({"accepted": False}) is False
        assert is_persist_accepted(_Result()) is False
        assert is_persist_accepted(None) is False


class TestOutcome:
    def test_rejected_needs_reason(self):
        with pytest.raises(ValueError):
            CommandOutcome(
                command_id=uuid.uuid4(),
                status=CommandStatus.REJECTED,
                reason=None,
                occurred_at=NOW,
            )

    def test_accepted_refuses_reason(self):
        reason = RejectionReason(code="X", message="m", policy_name="p")
        with pytest.raises(ValueError):
            CommandOutcome(
                command_id=uuid.uuid4(),
                status=CommandStatus.ACCEPTED,
                reason=reason,
                occurred_at=NOW,
            )

    def test_to_dict(self):
        command_id = uuid.uuid4()
        data = CommandOutcome.accepted(command_id, NOW).to_dict()
        assert data == {
            "command_id": str(command_id),
            "status": "ACCEPTED",
            "reason": None,
            "occurred_at": NOW.isoformat(),
        }

    def test_rejection_event_shape(self):
        cmd = _command()
        reason = RejectionReason(
            code=ReasonCode.DUPLICATE_REGISTRATION, message="again", policy_name="roster",
        )
        event = build_rejection_event(cmd, CommandOutcome.rejected(cmd.command_id, reason, NOW))
        assert event["event_type"] == "presence.gathering.join.rejected"
        assert event["causation_id"] == cmd.command_id
        assert event["payload"]["original_payload"] == {"gathering_id": 1}
        assert event["payload"]["rejection"]["numeric_code"] == 102
        assert event["created_at"] == NOW
