"""Shared fixtures."""

from datetime import date

import pytest

from tickler.core.events import ActiveNotification, EventRecord, ReminderOffset


@pytest.fixture
def make_notification():
    """Factory for active notifications."""
    def _make(
        title: str = "Dentist",
        event_date: date = date(2025, 1, 15),
        offset: ReminderOffset | None = None,
        context: str = "today",
        trigger_date: date | None = None,
        file_path: str = "health.md",
        line_number: int = 3,
        block_id: str = "abc123",
    ) -> ActiveNotification:
        event = EventRecord(
            title=title,
            event_date=event_date,
            file_path=file_path,
            line_number=line_number,
            block_id=block_id,
        )
        return ActiveNotification(
            event=event,
            offset=offset,
            context=context,
            trigger_date=trigger_date or event_date,
        )
    return _make
