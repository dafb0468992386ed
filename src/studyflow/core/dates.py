# src/studyflow/core/dates.py

"""Date helpers shared by the stores (day keys, ISO re-hydration, rounding)."""

from __future__ import annotations

import math
import uuid
from datetime import UTC, date, datetime, timedelta

WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def utc_now() -> datetime:
    return datetime.now(UTC)


def new_id() -> str:
    return uuid.uuid4().hex


def date_key(d: date) -> str:
    """Calendar day as YYYY-MM-DD."""
    return d.isoformat()


def parse_datetime(raw: str | datetime) -> datetime:
    """
    Re-hydrate a serialized timestamp.

    Accepts Python isoformat output and JS `toISOString()` output ("...Z").
    Naive values are assumed to be UTC.
    """
    if isinstance(raw, datetime):
        dt = raw
    else:
        dt = datetime.fromisoformat(str(raw).strip())
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def parse_date(raw: str | date) -> date:
    """Re-hydrate a calendar day; full ISO timestamps are truncated to their date part."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    s = str(raw).strip()
    if len(s) == 10:
        return date.fromisoformat(s)
    return datetime.fromisoformat(s).date()


def sunday_on_or_before(d: date) -> date:
    """Python weekday: Monday=0..Sunday=6; weeks here start on Sunday."""
    return d - timedelta(days=(d.weekday() + 1) % 7)


def weekday_index(d: date) -> int:
    """Day of week where Sunday=0, Saturday=6."""
    return (d.weekday() + 1) % 7


def round_half_up(value: float) -> int:
    """Round like Math.round: .5 always goes up (round() would use banker's rounding)."""
    return int(math.floor(value + 0.5))


def percentage(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(part / total * 100)
