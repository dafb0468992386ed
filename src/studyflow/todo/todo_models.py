# src/studyflow/todo/todo_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from ..core.dates import parse_date, parse_datetime


class TaskCategory(StrEnum):
    PERSONAL = "Personal"
    WORK = "Work"
    STUDY = "Study"
    HEALTH = "Health"
    OTHER = "Other"


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StatusFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(slots=True)
class Task:
    id: str
    title: str
    completed: bool
    category: TaskCategory
    priority: TaskPriority
    created_at: datetime

    description: str | None = None
    due_date: date | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "category": self.category.value,
            "priority": self.priority.value,
            "createdAt": self.created_at.isoformat(),
        }
        if self.description is not None:
            out["description"] = self.description
        if self.due_date is not None:
            out["dueDate"] = self.due_date.isoformat()
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        due = raw.get("dueDate")
        return cls(
            id=str(raw["id"]),
            title=str(raw["title"]),
            completed=bool(raw.get("completed", False)),
            category=TaskCategory(raw.get("category", TaskCategory.OTHER)),
            priority=TaskPriority(raw.get("priority", TaskPriority.MEDIUM)),
            created_at=parse_datetime(raw["createdAt"]),
            description=raw.get("description") or None,
            due_date=parse_date(due) if due else None,
        )


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    percentage: int
