# src/studyflow/events/event_store.py

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any

from ..core.dates import new_id, parse_date, utc_now
from ..habits.habit_models import ColorTag
from ..storage.collection import CollectionStore
from . import event_grid
from .event_models import (
    DEFAULT_DURATION_MINUTES,
    CalendarEvent,
    DayCell,
    EventCategory,
    normalize_time,
)

logger = logging.getLogger(__name__)

UPCOMING_LIMIT = 5

_UPDATABLE_FIELDS = frozenset(
    {"title", "description", "date", "time", "duration", "category", "color"}
)


class EventStore(CollectionStore[CalendarEvent]):
    """Scheduled events, kept in insertion order."""

    storage_key = "studyflow-events"

    _decode = staticmethod(CalendarEvent.from_dict)
    _encode = staticmethod(CalendarEvent.to_dict)

    def add(
        self,
        title: str,
        date: date | str | None,
        description: str | None = None,
        time: str | None = None,
        duration: int | None = DEFAULT_DURATION_MINUTES,
        category: EventCategory | str = EventCategory.STUDY,
        color: ColorTag | str = ColorTag.BLUE,
    ) -> CalendarEvent | None:
        title = (title or "").strip()
        if not title or not date:
            return None

        event = CalendarEvent(
            id=new_id(),
            title=title,
            date=parse_date(date),
            category=EventCategory(category),
            color=ColorTag(color),
            created_at=utc_now(),
            description=(description or "").strip() or None,
            time=normalize_time(time),
            duration=int(duration) if duration is not None else None,
        )
        self._commit([*self._items, event])
        logger.debug("Event added id=%s date=%s", event.id, event.date)
        return event

    def update(self, event_id: str, **fields: Any) -> CalendarEvent | None:
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown event fields: {', '.join(sorted(unknown))}")

        if "title" in fields:
            title = (fields["title"] or "").strip()
            if not title:
                return None
            fields["title"] = title
        if "date" in fields:
            if not fields["date"]:
                return None
            fields["date"] = parse_date(fields["date"])
        if "description" in fields:
            fields["description"] = (fields["description"] or "").strip() or None
        if "time" in fields:
            fields["time"] = normalize_time(fields["time"])
        if "duration" in fields and fields["duration"] is not None:
            fields["duration"] = int(fields["duration"])
        if "category" in fields:
            fields["category"] = EventCategory(fields["category"])
        if "color" in fields:
            fields["color"] = ColorTag(fields["color"])

        return self._replace(event_id, lambda e: replace(e, **fields))

    def events_for(self, day: date) -> list[CalendarEvent]:
        return [e for e in self._items if e.date == day]

    def upcoming(self, today: date | None = None, limit: int = UPCOMING_LIMIT) -> list[CalendarEvent]:
        """Events on or after today, soonest first (stable for same-day events)."""
        today = today or date.today()
        pending = [e for e in self._items if e.date >= today]
        pending.sort(key=lambda e: e.date)
        return pending[:limit]

    def month_grid(self, reference: date, today: date | None = None) -> list[DayCell]:
        return event_grid.month_grid(reference, self._items, today)

    def week_grid(self, reference: date, today: date | None = None) -> list[DayCell]:
        return event_grid.week_grid(reference, self._items, today)
