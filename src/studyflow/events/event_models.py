# src/studyflow/events/event_models.py

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from ..core.dates import date_key, parse_date, parse_datetime
from ..habits.habit_models import ColorTag

TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

DEFAULT_DURATION_MINUTES = 60


class EventCategory(StrEnum):
    STUDY = "Study"
    ASSIGNMENT = "Assignment"
    EXAM = "Exam"
    MEETING = "Meeting"
    PERSONAL = "Personal"
    OTHER = "Other"


def normalize_time(raw: str | None) -> str | None:
    """'' -> None; otherwise require HH:MM (24h)."""
    s = (raw or "").strip()
    if not s:
        return None
    if not TIME_RE.match(s):
        raise ValueError(f"time must be HH:MM, got {raw!r}")
    return s


@dataclass(slots=True)
class CalendarEvent:
    id: str
    title: str
    date: date
    category: EventCategory
    color: ColorTag
    created_at: datetime

    description: str | None = None
    time: str | None = None
    duration: int | None = DEFAULT_DURATION_MINUTES

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "date": date_key(self.date),
            "category": self.category.value,
            "color": self.color.value,
            "createdAt": self.created_at.isoformat(),
        }
        if self.description is not None:
            out["description"] = self.description
        if self.time is not None:
            out["time"] = self.time
        if self.duration is not None:
            out["duration"] = self.duration
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> CalendarEvent:
        duration = raw.get("duration")
        return cls(
            id=str(raw["id"]),
            title=str(raw["title"]),
            date=parse_date(raw["date"]),
            category=EventCategory(raw.get("category", EventCategory.OTHER)),
            color=ColorTag(raw.get("color", ColorTag.BLUE)),
            created_at=parse_datetime(raw["createdAt"]),
            description=raw.get("description") or None,
            time=raw.get("time") or None,
            duration=int(duration) if duration is not None else None,
        )


@dataclass(frozen=True, slots=True)
class DayCell:
    date: date
    in_current_month: bool
    is_today: bool
    events: tuple[CalendarEvent, ...] = field(default_factory=tuple)
