"""Pure notification matching logic - no I/O dependencies.

Two independent checks run for every event:

1. Event-date match: the reference date falls in the event's due window.
   One-time and yearly events stay active for ``lookback_days`` after the
   due date; monthly, weekly and daily events only match exactly.
2. Reminder match: for each reminder offset, the next occurrence of the
   event minus the offset lands exactly on the reference date.
"""

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from .events import ActiveNotification, EventRecord, ReminderOffset, Unit, pluralize

DEFAULT_LOOKBACK_DAYS = 3


def _shift(unit: Unit, number: int) -> relativedelta:
    """Calendar-aware delta; months and years clamp the day to the month end."""
    return relativedelta(**{f"{unit}s": number})


def yearly_anchor(event_date: date, reference_date: date) -> date:
    """This year's occurrence of a yearly event (Feb 29 becomes Feb 28)."""
    return event_date + relativedelta(year=reference_date.year)


def days_since_occurrence(
    event_date: date,
    reference_date: date,
    repeat_interval: Unit | None,
) -> int:
    """
    Days between the occurrence the reference date belongs to and the
    reference date. Only one-time and yearly events can drift; the other
    recurrences match exactly and always report 0.
    """
    if repeat_interval is None:
        return (reference_date - event_date).days
    if repeat_interval == "year":
        return (reference_date - yearly_anchor(event_date, reference_date)).days
    return 0


def event_date_matches(
    event_date: date,
    reference_date: date,
    repeat_interval: Unit | None,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> bool:
    """Check whether the reference date falls in the event's due window."""
    match repeat_interval:
        case None | "year":
            diff = days_since_occurrence(event_date, reference_date, repeat_interval)
            return 0 <= diff <= lookback_days
        case "month":
            return event_date.day == reference_date.day
        case "week":
            return event_date.weekday() == reference_date.weekday()
        case "day":
            return True
    return False


def event_context(days_diff: int) -> str:
    """Human-readable text for an event-date match."""
    if days_diff == 0:
        return "today"
    if days_diff > 0:
        return f"{pluralize(days_diff, 'day')} ago"
    return f"in {pluralize(-days_diff, 'day')}"


def next_occurrence(
    event_date: date,
    reference_date: date,
    repeat_interval: Unit | None,
) -> date:
    """
    The occurrence a reminder counts back from.

    Yearly and monthly events target the current period's occurrence, or the
    next one if it has already passed. Weekly events always target a date
    strictly after the reference date. Daily events target the reference date.
    """
    match repeat_interval:
        case "year":
            target = yearly_anchor(event_date, reference_date)
            if target < reference_date:
                target += relativedelta(years=1)
            return target
        case "month":
            target = event_date + relativedelta(
                year=reference_date.year, month=reference_date.month
            )
            if target < reference_date:
                target += relativedelta(months=1)
            return target
        case "week":
            days_ahead = (event_date.weekday() - reference_date.weekday()) % 7 or 7
            return reference_date + timedelta(days=days_ahead)
        case "day":
            return reference_date
    return event_date


def reminder_date(
    event_date: date,
    offset: ReminderOffset,
    repeat_interval: Unit | None,
    reference_date: date,
) -> date:
    """Date on which a reminder offset fires, relative to the next occurrence."""
    target = next_occurrence(event_date, reference_date, repeat_interval)
    return target - _shift(offset.unit, offset.number)


def get_active_notifications(
    events: list[EventRecord],
    reference_date: date,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> list[ActiveNotification]:
    """
    Find every notification active on the reference date.

    Pure function - no I/O. Output follows the order of ``events``; for each
    event the event-date match comes first, then reminder matches in offset
    order. Matches are not deduplicated. A negative lookback is treated as 0
    and offsets below 1 never fire.
    """
    lookback_days = max(lookback_days, 0)
    active: list[ActiveNotification] = []

    for event in events:
        if event_date_matches(
            event.event_date, reference_date, event.repeat_interval, lookback_days
        ):
            diff = days_since_occurrence(
                event.event_date, reference_date, event.repeat_interval
            )
            active.append(
                ActiveNotification(
                    event=event,
                    offset=None,
                    context=event_context(diff),
                    trigger_date=reference_date - timedelta(days=diff),
                )
            )

        for offset in event.reminder_offsets:
            # A reminder must come before its occurrence
            if offset.number < 1:
                continue
            fires_on = reminder_date(
                event.event_date, offset, event.repeat_interval, reference_date
            )
            if fires_on == reference_date:
                active.append(
                    ActiveNotification(
                        event=event,
                        offset=offset,
                        context=offset.describe(),
                        trigger_date=reference_date,
                    )
                )

    return active
