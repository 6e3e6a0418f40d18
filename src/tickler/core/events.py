"""Event and notification data model - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date
from typing import Literal

Unit = Literal["day", "week", "month", "year"]


def pluralize(count: int, unit: str) -> str:
    """'1 day', '2 days'."""
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


@dataclass(frozen=True)
class ReminderOffset:
    """Remind this many units before the event."""

    number: int
    unit: Unit

    def describe(self) -> str:
        """Context text shown when this offset fires."""
        return f"{pluralize(self.number, self.unit)} early"

    def key(self) -> str:
        return f"{self.number}-{self.unit}"


@dataclass
class EventRecord:
    """
    One user-defined event.

    The source location fields (file_path, line_number, block_id,
    original_text) are carried through for callers; the matcher never
    reads them.
    """

    title: str
    event_date: date
    repeat_interval: Unit | None = None
    reminder_offsets: list[ReminderOffset] = field(default_factory=list)
    file_path: str = ""
    line_number: int = 0
    block_id: str = ""
    original_text: str = ""


@dataclass(frozen=True)
class ActiveNotification:
    """An event that should surface on a given reference date."""

    event: EventRecord
    offset: ReminderOffset | None  # None means the event date itself matched
    context: str
    trigger_date: date

    @property
    def is_reminder(self) -> bool:
        return self.offset is not None

    @property
    def is_past(self) -> bool:
        """Event-date match that fired inside the lookback window."""
        return self.context.endswith(" ago")
