"""Event source interface."""

from typing import Protocol

from tickler.core.events import EventRecord


class EventSource(Protocol):
    """Interface for supplying parsed event records from any backend."""

    def fetch_events(self) -> list[EventRecord]:
        """Fetch every current event record."""
        ...
