# src/studyflow/todo/todo_store.py

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any

from ..core.dates import new_id, parse_date, percentage, utc_now
from ..storage.collection import CollectionStore
from .todo_models import StatusFilter, Task, TaskCategory, TaskPriority, TaskStats

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset(
    {"title", "description", "completed", "category", "priority", "due_date"}
)


class TodoStore(CollectionStore[Task]):
    """To-do items, newest first."""

    storage_key = "studyflow-tasks"

    _decode = staticmethod(Task.from_dict)
    _encode = staticmethod(Task.to_dict)

    def add(
        self,
        title: str,
        description: str | None = None,
        category: TaskCategory | str = TaskCategory.STUDY,
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        due_date: date | str | None = None,
    ) -> Task | None:
        title = (title or "").strip()
        if not title:
            return None

        task = Task(
            id=new_id(),
            title=title,
            completed=False,
            category=TaskCategory(category),
            priority=TaskPriority(priority),
            created_at=utc_now(),
            description=(description or "").strip() or None,
            due_date=parse_date(due_date) if due_date else None,
        )
        self._commit([task, *self._items])
        logger.debug("Task added id=%s category=%s priority=%s", task.id, task.category, task.priority)
        return task

    def toggle_complete(self, task_id: str) -> Task | None:
        return self._replace(task_id, lambda t: replace(t, completed=not t.completed))

    def update(self, task_id: str, **fields: Any) -> Task | None:
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown task fields: {', '.join(sorted(unknown))}")

        if "title" in fields:
            title = (fields["title"] or "").strip()
            if not title:
                return None
            fields["title"] = title
        if "description" in fields:
            fields["description"] = (fields["description"] or "").strip() or None
        if "category" in fields:
            fields["category"] = TaskCategory(fields["category"])
        if "priority" in fields:
            fields["priority"] = TaskPriority(fields["priority"])
        if "due_date" in fields:
            fields["due_date"] = parse_date(fields["due_date"]) if fields["due_date"] else None
        if "completed" in fields:
            fields["completed"] = bool(fields["completed"])

        return self._replace(task_id, lambda t: replace(t, **fields))

    def filtered(
        self,
        status: StatusFilter | str = StatusFilter.ALL,
        category: TaskCategory | str = "all",
    ) -> list[Task]:
        status = StatusFilter(status)
        category_filter = None if category == "all" else TaskCategory(category)

        def status_match(t: Task) -> bool:
            if status is StatusFilter.ACTIVE:
                return not t.completed
            if status is StatusFilter.COMPLETED:
                return t.completed
            return True

        return [
            t
            for t in self._items
            if status_match(t) and (category_filter is None or t.category == category_filter)
        ]

    def stats(self) -> TaskStats:
        total = len(self._items)
        completed = sum(1 for t in self._items if t.completed)
        return TaskStats(total=total, completed=completed, percentage=percentage(completed, total))
