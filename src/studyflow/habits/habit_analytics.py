# src/studyflow/habits/habit_analytics.py

"""
Streaks, completion rates and week grids.

All functions are pure: they take a Habit (or a list of them) and an optional
`today` so results are deterministic in tests. Weeks start on Sunday.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, timedelta

from ..core.dates import WEEKDAY_NAMES, percentage, round_half_up, sunday_on_or_before, weekday_index
from .habit_models import Habit, HabitOverview, WeekCell

logger = logging.getLogger(__name__)

DISPLAY_WINDOW_DAYS = 30
WEEKLY_WINDOW_DAYS = 7


def calculate_streak(habit: Habit, today: date | None = None) -> int:
    """
    Count consecutive completed days ending today.

    If today has no completed entry the walk starts from yesterday, so an
    unfinished today does not break the streak. The walk stops at the first gap.
    """
    today = today or date.today()

    completed_days = {e.date for e in habit.entries if e.completed}
    if not completed_days:
        return 0

    current = today if today in completed_days else today - timedelta(days=1)

    streak = 0
    while current in completed_days:
        streak += 1
        current -= timedelta(days=1)
    return streak


def completion_rate(habit: Habit, days: int = DISPLAY_WINDOW_DAYS, today: date | None = None) -> int:
    """
    Percentage of days in [today - days, today] with a completed entry.

    The window is inclusive at both ends, so it spans `days + 1` calendar days.
    """
    today = today or date.today()
    start = today - timedelta(days=max(0, days))

    total_days = 0
    completed_days = 0
    current = start
    while current <= today:
        total_days += 1
        if habit.is_completed_on(current):
            completed_days += 1
        current += timedelta(days=1)

    return percentage(completed_days, total_days)


def week_dates(week_offset: int = 0, today: date | None = None) -> list[date]:
    """
    Sunday-starting 7-day window containing today + week_offset weeks.

    Future weeks are not navigable: positive offsets are clamped to 0.
    """
    today = today or date.today()
    offset = min(0, int(week_offset))
    start = sunday_on_or_before(today) + timedelta(days=offset * 7)
    return [start + timedelta(days=i) for i in range(7)]


def week_grid(habit: Habit, week_offset: int = 0, today: date | None = None) -> list[WeekCell]:
    today = today or date.today()
    return [
        WeekCell(
            date=d,
            weekday=WEEKDAY_NAMES[weekday_index(d)],
            completed=habit.is_completed_on(d),
            is_today=d == today,
            disabled=d > today,
        )
        for d in week_dates(week_offset, today)
    ]


def habit_overview(habits: Sequence[Habit], today: date | None = None) -> HabitOverview:
    """Aggregate numbers for the habit dashboard header."""
    today = today or date.today()

    if habits:
        weekly_average = round_half_up(
            sum(completion_rate(h, WEEKLY_WINDOW_DAYS, today) for h in habits) / len(habits)
        )
    else:
        weekly_average = 0

    overview = HabitOverview(
        active_habits=len(habits),
        total_streaks=sum(calculate_streak(h, today) for h in habits),
        weekly_average=weekly_average,
        total_completions=sum(1 for h in habits for e in h.entries if e.completed),
    )
    logger.debug("Habit overview: %s", overview)
    return overview
