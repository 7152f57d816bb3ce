"""MERIT event registry and journal tests."""

import uuid
from datetime import datetime, timezone

import pytest

from core.commands.base import Command
from core.events.errors import InvalidEventTypeFormat, UnregisteredEventType
from core.events.journal import EventFactory, InMemoryEventJournal
from core.events.registry import EventTypeRegistry
from core.time.clock import FixedClock

NOW = datetime(2026, 4, 2, 9, 30, tzinfo=timezone.utc)
JOINED = "presence.gathering.joined.v1"


class TestEventTypeRegistry:
    def test_starts_empty(self):
        assert EventTypeRegistry().get_all_registered() == frozenset()

    def test_register_is_idempotent(self):
        registry = EventTypeRegistry()
        registry.register(JOINED)
        registry.register(JOINED)
        assert registry.get_all_registered() == frozenset({JOINED})

    @pytest.mark.parametrize("event_type", ["", "presence.joined", "presence..joined"])
    def test_format_enforced(self, event_type):
        with pytest.raises(InvalidEventTypeFormat):
            EventTypeRegistry().register(event_type)

    def test_require(self):
        registry = EventTypeRegistry()
        with pytest.raises(UnregisteredEventType):
            registry.require(JOINED)
        registry.register(JOINED)
        registry.require(JOINED)


class TestEventJournal:
    def _event(self, event_type=JOINED):
        command = Command(
            command_id=uuid.uuid4(),
            command_type="presence.gathering.join.request",
            actor_id="alice",
            payload={"gathering_id": 1},
            issued_at=NOW,
            correlation_id=uuid.uuid4(),
            source_engine="presence",
        )
        return EventFactory(FixedClock(NOW))(
            command=command, event_type=event_type, payload={"proof_id": 1},
        ), command

    def test_factory_envelope(self):
        event, command = self._event()
        assert event["event_type"] == JOINED
        assert event["causation_id"] == command.command_id
        assert event["correlation_id"] == command.correlation_id
        assert event["created_at"] == NOW
        assert event["source_engine"] == "presence"

    def test_sequence_numbers(self):
        registry = EventTypeRegistry()
        registry.register(JOINED)
        journal = InMemoryEventJournal()

        first = journal(event_data=self._event()[0], context=None, registry=registry)
        second = journal(event_data=self._event()[0], context=None, registry=registry)
        assert (first.accepted, first.sequence) == (True, 1)
        assert second.sequence == 2
        assert journal.event_count == 2

    def test_unregistered_type_refused(self):
        journal = InMemoryEventJournal()
        result = journal(
            event_data=self._event()[0], context=None, registry=EventTypeRegistry(),
        )
        assert result.accepted is False
        assert "not registered" in result.reason
        assert journal.event_count == 0

    def test_stored_events_are_copies(self):
        journal = InMemoryEventJournal()
        event, _ = self._event()
        journal(event_data=event)
        event["payload"]["proof_id"] = 99
        assert journal.all_events()[0]["payload"]["proof_id"] == 1
