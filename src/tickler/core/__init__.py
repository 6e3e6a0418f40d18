"""Functional core - pure business logic with no I/O."""

from .events import ActiveNotification, EventRecord, ReminderOffset, Unit
from .matcher import get_active_notifications
from .parser import parse_line, parse_note, extract_date_from_filename
from .acks import notification_key, filter_unacknowledged
from .digest import format_digest, format_notification_line

__all__ = [
    # Events
    "ActiveNotification",
    "EventRecord",
    "ReminderOffset",
    "Unit",
    # Matching
    "get_active_notifications",
    # Parsing
    "parse_line",
    "parse_note",
    "extract_date_from_filename",
    # Acknowledgements
    "notification_key",
    "filter_unacknowledged",
    # Presentation
    "format_digest",
    "format_notification_line",
]
