"""
MERIT Events — In-Memory Event Journal
=========================================
Append-only record of every committed and rejected command.

The journal is the persistence callable injected into the command
bus and the engine services:

    journal(event_data=..., context=..., registry=...) -> JournalResult

It refuses event types the registry does not know. It never
mutates ledger state — projections are the engines' business.
"""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from core.commands.base import Command
from core.time.clock import Clock, SystemClock

logger = logging.getLogger("merit.events")


# ══════════════════════════════════════════════════════════════
# EVENT FACTORY
# ══════════════════════════════════════════════════════════════

class EventFactory:
    """Builds the event envelope for an accepted command."""

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or SystemClock()

    def __call__(self, *, command: Command, event_type: str, payload: dict) -> dict:
        return {
            "event_id": uuid.uuid4(),
            "event_type": event_type,
            "event_version": 1,
            "source_engine": command.source_engine,
            "actor_id": command.actor_id,
            "correlation_id": command.correlation_id,
            "causation_id": command.command_id,
            "payload": payload,
            "created_at": self._clock.now_utc(),
            "status": "FINAL",
        }


# ══════════════════════════════════════════════════════════════
# JOURNAL
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class JournalResult:
    accepted: bool
    sequence: Optional[int] = None
    reason: Optional[str] = None


class InMemoryEventJournal:
    """
    Thread-safe append-only journal.

    Each accepted event receives a 1-based sequence number.
    """

    def __init__(self):
        self._events: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def __call__(
        self,
        *,
        event_data: dict,
        context: Any = None,
        registry: Any = None,
        **kwargs: Any,
    ) -> JournalResult:
        event_type = event_data.get("event_type")
        if registry is not None and not registry.is_registered(event_type):
            logger.warning(f"Journal refused unregistered event type: {event_type}")
            return JournalResult(
                accepted=False,
                reason=f"Event type '{event_type}' is not registered.",
            )

        with self._lock:
            stored = copy.deepcopy(event_data)
            self._events.append(stored)
            sequence = len(self._events)

        logger.info(f"Event journaled #{sequence}: {event_type}")
        return JournalResult(accepted=True, sequence=sequence)

    def all_events(self) -> tuple[dict[str, Any], ...]:
        with self._lock:
            return tuple(copy.deepcopy(self._events))

    def events_of_type(self, event_type: str) -> tuple[dict[str, Any], ...]:
        with self._lock:
            return tuple(
                copy.deepcopy(e) for e in self._events if e["event_type"] == event_type
            )

    @property
    def event_count(self) -> int:
        with self._lock:
            return len(self._events)
