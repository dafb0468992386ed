# src/studyflow/habits/habit_store.py

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

from ..core.dates import new_id, parse_date, utc_now
from ..storage.collection import CollectionStore
from .habit_models import ColorTag, Habit, HabitCategory, HabitEntry, HabitFrequency

logger = logging.getLogger(__name__)


class HabitStore(CollectionStore[Habit]):
    """
    Habits with date-keyed completion entries.

    Entries are never removed: toggling an existing date flips its flag,
    toggling a new date appends a completed entry.
    """

    storage_key = "studyflow-habits"

    _decode = staticmethod(Habit.from_dict)
    _encode = staticmethod(Habit.to_dict)

    def add(
        self,
        name: str,
        description: str | None = None,
        frequency: HabitFrequency | str = HabitFrequency.DAILY,
        category: HabitCategory | str = HabitCategory.HEALTH,
        color: ColorTag | str = ColorTag.BLUE,
    ) -> Habit | None:
        name = (name or "").strip()
        if not name:
            return None

        habit = Habit(
            id=new_id(),
            name=name,
            frequency=HabitFrequency(frequency),
            category=HabitCategory(category),
            color=ColorTag(color),
            created_at=utc_now(),
            description=(description or "").strip() or None,
        )
        self._commit([habit, *self._items])
        logger.debug("Habit added id=%s name=%s", habit.id, habit.name)
        return habit

    def toggle_entry(self, habit_id: str, day: date | str) -> Habit | None:
        day = parse_date(day)

        def toggle(habit: Habit) -> Habit:
            entries = list(habit.entries)
            for i, entry in enumerate(entries):
                if entry.date == day:
                    entries[i] = replace(entry, completed=not entry.completed)
                    break
            else:
                entries.append(HabitEntry(date=day, completed=True))
            return replace(habit, entries=tuple(entries))

        updated = self._replace(habit_id, toggle)
        if updated is not None:
            logger.debug(
                "Habit entry toggled id=%s date=%s completed=%s",
                habit_id,
                day,
                updated.is_completed_on(day),
            )
        return updated
