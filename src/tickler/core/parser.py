"""Extract event records from markdown task lines - no I/O dependencies.

A notification line is a markdown task carrying the bell marker:

    - [ ] Dentist 📆 2025-03-04 🔁 year 1️⃣ week 2️⃣ day 🔔 ^a1b2c3
"""

import random
import re
import string
from datetime import date
from pathlib import PurePosixPath

from .events import EventRecord, ReminderOffset, Unit

NOTIFICATION_MARKER = "\U0001F514"  # 🔔
DATE_MARKER = "\U0001F4C6"  # 📆
REPEAT_MARKER = "\U0001F501"  # 🔁

_TASK_LINE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+\[.\]")
_FENCE = re.compile(r"^\s*(`{3,}|~{3,})")
_DATE = re.compile(DATE_MARKER + r"\s*(\d{4}-\d{2}-\d{2})")
_FILENAME_DATE = re.compile(r"^(\d{4}-\d{2}-\d{2})(?=$|[\s.])")
_REPEAT = re.compile(REPEAT_MARKER + r"\s*(day|week|month|year)")
# Keycap digits come as digit + keycap, optionally joined by a variation
# selector or a zero-width joiner.
_REMINDER = re.compile(r"([1-9])[\uFE0F\u200D]?\u20E3\s*(day|week|month|year)")
_CHECKBOX_PREFIX = re.compile(r"^(?:[\s\-*+|\u2190\u2192\u2022]|\d+[.)])+\[.\]\s*")
_BLOCK_ID = re.compile(r"\^([a-zA-Z0-9-]+)\s*$")

_BLOCK_ID_ALPHABET = string.ascii_lowercase + string.digits


def is_task_line(text: str) -> bool:
    """Markdown list item with a checkbox."""
    return bool(_TASK_LINE.match(text))


def has_notification_marker(text: str) -> bool:
    return NOTIFICATION_MARKER in text


def extract_date(text: str) -> str | None:
    """Date following the calendar marker, format-checked only."""
    match = _DATE.search(text)
    return match.group(1) if match else None


def extract_date_from_filename(path: str) -> date | None:
    """
    Date at the start of a note's file name, e.g. ``Daily/2026-01-07 Notes.md``.

    Returns None unless it is a real calendar date.
    """
    match = _FILENAME_DATE.match(PurePosixPath(path.replace("\\", "/")).name)
    if not match:
        return None
    try:
        return date.fromisoformat(match.group(1))
    except ValueError:
        return None


def extract_repeat_interval(text: str) -> Unit | None:
    match = _REPEAT.search(text)
    return match.group(1) if match else None


def extract_reminder_offsets(text: str) -> list[ReminderOffset]:
    """All keycap reminders (``1️⃣ week``, ``2️⃣ day``...) in text order."""
    return [
        ReminderOffset(number=int(number), unit=unit)
        for number, unit in _REMINDER.findall(text)
    ]


def extract_title(text: str) -> str:
    """Everything before the date marker, without list marker and checkbox."""
    cleaned = _CHECKBOX_PREFIX.sub("", text, count=1)
    return cleaned.split(DATE_MARKER, 1)[0].strip()


def extract_block_id(text: str) -> str | None:
    """Block id at the very end of the line (``^abc123``)."""
    match = _BLOCK_ID.search(text)
    return match.group(1) if match else None


def generate_block_id() -> str:
    """Random six-character lowercase alphanumeric id."""
    return "".join(random.choices(_BLOCK_ID_ALPHABET, k=6))


def parse_line(text: str, file_path: str = "", line_number: int = 0) -> EventRecord | None:
    """
    Build an EventRecord from a notification line.

    Returns None for lines that are not bell-marked tasks, or whose date is
    missing or not a real calendar date.
    """
    if not is_task_line(text) or not has_notification_marker(text):
        return None

    raw_date = extract_date(text)
    if raw_date is None:
        return None
    try:
        event_date = date.fromisoformat(raw_date)
    except ValueError:
        return None

    return EventRecord(
        title=extract_title(text),
        event_date=event_date,
        repeat_interval=extract_repeat_interval(text),
        reminder_offsets=extract_reminder_offsets(text),
        file_path=file_path,
        line_number=line_number,
        block_id=extract_block_id(text) or "",
        original_text=text,
    )


def parse_note(content: str, file_path: str = "") -> list[EventRecord]:
    """
    Parse every notification line of a note. Line numbers are 1-indexed.

    Lines inside fenced code blocks are ignored.
    """
    records = []
    fence = None
    for index, line in enumerate(content.split("\n"), start=1):
        match = _FENCE.match(line)
        if match:
            marker = match.group(1)
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
            continue
        if fence is not None:
            continue

        record = parse_line(line, file_path, index)
        if record is not None:
            records.append(record)
    return records
