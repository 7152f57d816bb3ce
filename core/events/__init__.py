"""
MERIT Events — Public API
============================
The journal seals truth. Engines project it.
Truth must be committed before it is journaled.
"""

from core.events.errors import (
    EventJournalError,
    InvalidEventTypeFormat,
    UnregisteredEventType,
)
from core.events.journal import (
    EventFactory,
    InMemoryEventJournal,
    JournalResult,
)
from core.events.registry import EventTypeRegistry

__all__ = [
    "EventFactory",
    "EventJournalError",
    "EventTypeRegistry",
    "InMemoryEventJournal",
    "InvalidEventTypeFormat",
    "JournalResult",
    "UnregisteredEventType",
]
