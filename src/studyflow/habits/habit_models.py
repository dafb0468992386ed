# src/studyflow/habits/habit_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from ..core.dates import date_key, parse_date, parse_datetime


class HabitFrequency(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"


class HabitCategory(StrEnum):
    HEALTH = "Health"
    LEARNING = "Learning"
    PRODUCTIVITY = "Productivity"
    FITNESS = "Fitness"
    MINDFULNESS = "Mindfulness"
    OTHER = "Other"


class ColorTag(StrEnum):
    """Color tags shared by habits and calendar events."""

    BLUE = "bg-blue-500"
    GREEN = "bg-green-500"
    PURPLE = "bg-purple-500"
    RED = "bg-red-500"
    YELLOW = "bg-yellow-500"
    PINK = "bg-pink-500"
    INDIGO = "bg-indigo-500"
    TEAL = "bg-teal-500"


@dataclass(frozen=True, slots=True)
class HabitEntry:
    date: date
    completed: bool

    def to_dict(self) -> dict[str, Any]:
        return {"date": date_key(self.date), "completed": self.completed}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> HabitEntry:
        return cls(date=parse_date(raw["date"]), completed=bool(raw.get("completed", False)))


@dataclass(slots=True)
class Habit:
    id: str
    name: str
    frequency: HabitFrequency
    category: HabitCategory
    color: ColorTag
    created_at: datetime

    description: str | None = None
    # Insertion ordered, at most one entry per date.
    entries: tuple[HabitEntry, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "frequency": self.frequency.value,
            "category": self.category.value,
            "color": self.color.value,
            "createdAt": self.created_at.isoformat(),
            "entries": [e.to_dict() for e in self.entries],
        }
        if self.description is not None:
            out["description"] = self.description
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Habit:
        entries: list[HabitEntry] = []
        seen: set[date] = set()
        for e in raw.get("entries") or []:
            entry = HabitEntry.from_dict(e)
            # Keep the first record if an older payload carries duplicates.
            if entry.date in seen:
                continue
            seen.add(entry.date)
            entries.append(entry)

        return cls(
            id=str(raw["id"]),
            name=str(raw["name"]),
            frequency=HabitFrequency(raw.get("frequency", HabitFrequency.DAILY)),
            category=HabitCategory(raw.get("category", HabitCategory.OTHER)),
            color=ColorTag(raw.get("color", ColorTag.BLUE)),
            created_at=parse_datetime(raw["createdAt"]),
            description=raw.get("description") or None,
            entries=tuple(entries),
        )

    def entry_for(self, day: date) -> HabitEntry | None:
        for entry in self.entries:
            if entry.date == day:
                return entry
        return None

    def is_completed_on(self, day: date) -> bool:
        entry = self.entry_for(day)
        return entry is not None and entry.completed


@dataclass(frozen=True, slots=True)
class WeekCell:
    date: date
    weekday: str
    completed: bool
    is_today: bool
    disabled: bool


@dataclass(frozen=True, slots=True)
class HabitOverview:
    active_habits: int
    total_streaks: int
    weekly_average: int
    total_completions: int
