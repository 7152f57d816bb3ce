"""
MERIT Events — Event Type Registry
=====================================
Controls which event types may be journaled.
Free-text event types are forbidden.

Rules:
- Registry starts EMPTY
- Engines register their types at bootstrap
- The journal refuses any unregistered event type
- Format: engine.domain.action[.version] (e.g. presence.gathering.joined.v1)
- Thread-safe
"""

import logging
from threading import Lock

from core.events.errors import InvalidEventTypeFormat, UnregisteredEventType

logger = logging.getLogger("merit.events")


class EventTypeRegistry:
    """
    In-memory registry of permitted event types.

    Usage:
        registry = EventTypeRegistry()
        registry.register("presence.gathering.created.v1")

        registry.is_registered("presence.gathering.created.v1")  # True
        registry.is_registered("foo.bar.baz")                    # False
    """

    def __init__(self):
        self._registered_types: set[str] = set()
        self._lock = Lock()

    @staticmethod
    def _validate_event_type_format(event_type: str) -> None:
        if not event_type or not isinstance(event_type, str):
            raise InvalidEventTypeFormat(event_type or "")

        parts = event_type.strip().split(".")
        if len(parts) < 3 or any(not part for part in parts):
            raise InvalidEventTypeFormat(event_type)

    def register(self, event_type: str) -> None:
        """Register a permitted event type. Idempotent."""
        self._validate_event_type_format(event_type)

        with self._lock:
            is_new = event_type not in self._registered_types
            self._registered_types.add(event_type)

        if is_new:
            logger.info(f"Event type registered: {event_type}")

    def is_registered(self, event_type: str) -> bool:
        with self._lock:
            return event_type in self._registered_types

    def get_all_registered(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._registered_types)

    def require(self, event_type: str) -> None:
        """Raise UnregisteredEventType unless event_type is registered."""
        if not self.is_registered(event_type):
            raise UnregisteredEventType(event_type)
