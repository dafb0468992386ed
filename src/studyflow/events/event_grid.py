# src/studyflow/events/event_grid.py

"""Month and week grids for the calendar view (weeks start on Sunday)."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from ..core.dates import sunday_on_or_before
from .event_models import CalendarEvent, DayCell

MONTH_GRID_CELLS = 42  # 6 rows x 7 columns, regardless of month length


def _by_day(events: Iterable[CalendarEvent]) -> dict[date, tuple[CalendarEvent, ...]]:
    out: dict[date, list[CalendarEvent]] = {}
    for e in events:
        out.setdefault(e.date, []).append(e)
    return {d: tuple(items) for d, items in out.items()}


def month_dates(reference: date) -> list[date]:
    first = reference.replace(day=1)
    start = sunday_on_or_before(first)
    return [start + timedelta(days=i) for i in range(MONTH_GRID_CELLS)]


def week_dates(reference: date) -> list[date]:
    start = sunday_on_or_before(reference)
    return [start + timedelta(days=i) for i in range(7)]


def month_grid(
    reference: date,
    events: Iterable[CalendarEvent] = (),
    today: date | None = None,
) -> list[DayCell]:
    """
    42 cells starting from the Sunday on/before the first of the month.

    Days outside the reference month have in_current_month=False (shown dimmed)
    but are otherwise regular cells.
    """
    today = today or date.today()
    index = _by_day(events)
    return [
        DayCell(
            date=d,
            in_current_month=(d.year, d.month) == (reference.year, reference.month),
            is_today=d == today,
            events=index.get(d, ()),
        )
        for d in month_dates(reference)
    ]


def week_grid(
    reference: date,
    events: Iterable[CalendarEvent] = (),
    today: date | None = None,
) -> list[DayCell]:
    today = today or date.today()
    index = _by_day(events)
    return [
        DayCell(
            date=d,
            in_current_month=(d.year, d.month) == (reference.year, reference.month),
            is_today=d == today,
            events=index.get(d, ()),
        )
        for d in week_dates(reference)
    ]


def shift_month(reference: date, direction: int) -> date:
    """Move to the first day of the previous/next month."""
    month_index = reference.year * 12 + (reference.month - 1) + direction
    year, month0 = divmod(month_index, 12)
    return date(year, month0 + 1, 1)


def shift_week(reference: date, direction: int) -> date:
    return reference + timedelta(days=7 * direction)
