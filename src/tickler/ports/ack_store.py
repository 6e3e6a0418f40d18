"""Acknowledgement storage interface."""

from datetime import date
from typing import Protocol


class AcknowledgementStore(Protocol):
    """Interface for persisting dismissed notifications."""

    def load(self) -> dict[str, date]:
        """Load all acknowledgements, keyed by notification key."""
        ...

    def acknowledge(self, key: str, on: date) -> None:
        """Record that a notification was dismissed on a date."""
        ...

    def unacknowledge(self, key: str) -> bool:
        """Forget an acknowledgement. Returns False if there was none."""
        ...
