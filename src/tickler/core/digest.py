"""Pure notification formatting - no I/O dependencies."""

from datetime import date

from .acks import is_notification_acknowledged
from .events import ActiveNotification, EventRecord
from .parser import DATE_MARKER

EMPTY_DIGEST = "No notifications for today"


def format_link(event: EventRecord) -> str:
    """Wiki link to the event's line, or to its note when it has no block id."""
    if event.block_id:
        return f"[[{event.file_path}#^{event.block_id}|{event.title}]]"
    return f"[[{event.file_path}|{event.title}]]"


def format_notification_line(
    notification: ActiveNotification,
    acknowledged: bool = False,
) -> str:
    """
    Format a notification as a markdown task line.

    Pure function - no I/O. Past events get their date struck through.
    """
    event = notification.event
    checkbox = "[x]" if acknowledged else "[ ]"
    event_date = event.event_date.isoformat()
    if notification.is_past:
        event_date = f"~~{event_date}~~"
    return f"- {checkbox} {format_link(event)} {DATE_MARKER} {event_date} — *{notification.context}*"


def format_digest(
    notifications: list[ActiveNotification],
    acks: dict[str, date] | None = None,
    include_acknowledged: bool = True,
) -> str:
    """
    Format active notifications as a markdown task list.

    Pure function - no I/O.
    """
    acks = acks or {}
    lines = []
    for notification in notifications:
        acknowledged = is_notification_acknowledged(acks, notification)
        if acknowledged and not include_acknowledged:
            continue
        lines.append(format_notification_line(notification, acknowledged))
    return "\n".join(lines) or EMPTY_DIGEST


def format_event_line(event: EventRecord) -> str:
    """One-line summary of a parsed event for listings."""
    repeat = event.repeat_interval or "once"
    offsets = ", ".join(o.key() for o in event.reminder_offsets) or "-"
    block = f" ^{event.block_id}" if event.block_id else ""
    return (
        f"{event.file_path}:{event.line_number}{block}  "
        f"{event.event_date.isoformat()}  {repeat:<5}  [{offsets}]  {event.title}"
    )


def format_event_table(events: list[EventRecord]) -> str:
    return "\n".join(format_event_line(e) for e in events) or "No notification events found."
