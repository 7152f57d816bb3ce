"""
MERIT Events — Errors
========================
"""


class EventJournalError(Exception):
    pass


class InvalidEventTypeFormat(EventJournalError):
    """Event types are dotted `engine.domain.action[.qualifier]`."""

    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(f"Malformed event type {event_type!r}.")


class UnregisteredEventType(EventJournalError):
    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(f"No engine registered event type {event_type!r}.")
