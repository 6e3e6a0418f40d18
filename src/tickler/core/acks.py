"""Pure acknowledgement logic - no I/O dependencies.

An acknowledgement maps a notification key to the date it was dismissed.
It silences the notification for the trigger cycle it was made in: once the
event recurs (or another reminder fires) with a later trigger date, the
notification shows again.
"""

from datetime import date

from .events import ActiveNotification


def notification_key(notification: ActiveNotification) -> str:
    """Stable key: ``<file_path>:<line_number>:<event | number-unit>``."""
    event = notification.event
    offset = notification.offset.key() if notification.offset else "event"
    return f"{event.file_path}:{event.line_number}:{offset}"


def is_acknowledged(acks: dict[str, date], key: str, trigger_date: date) -> bool:
    """Acknowledged on or after the trigger date."""
    acknowledged_on = acks.get(key)
    if acknowledged_on is None:
        return False
    return acknowledged_on >= trigger_date


def is_notification_acknowledged(
    acks: dict[str, date],
    notification: ActiveNotification,
) -> bool:
    return is_acknowledged(acks, notification_key(notification), notification.trigger_date)


def filter_unacknowledged(
    notifications: list[ActiveNotification],
    acks: dict[str, date],
) -> list[ActiveNotification]:
    """
    Drop notifications already dismissed for their current trigger.

    Pure function - no I/O. Order is preserved.
    """
    return [n for n in notifications if not is_notification_acknowledged(acks, n)]
