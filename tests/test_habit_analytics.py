# tests/test_habit_analytics.py

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

from studyflow.habits.habit_analytics import (
    calculate_streak,
    completion_rate,
    habit_overview,
    week_dates,
    week_grid,
)
from studyflow.habits.habit_models import (
    ColorTag,
    Habit,
    HabitCategory,
    HabitEntry,
    HabitFrequency,
    HabitOverview,
)

# Wednesday; the week containing it starts on Sunday 2024-05-12.
TODAY = date(2024, 5, 15)


def make_habit(*entries: tuple[date, bool], name: str = "Read 20 pages") -> Habit:
    return Habit(
        id=name.lower().replace(" ", "-"),
        name=name,
        frequency=HabitFrequency.DAILY,
        category=HabitCategory.LEARNING,
        color=ColorTag.GREEN,
        created_at=datetime(2024, 4, 1, tzinfo=UTC),
        entries=tuple(HabitEntry(date=d, completed=c) for d, c in entries),
    )


def days_back(n: int, *, completed: bool = True) -> list[tuple[date, bool]]:
    return [(TODAY - timedelta(days=i), completed) for i in range(n)]


def test_streak_is_zero_without_completed_entries() -> None:
    assert calculate_streak(make_habit(), TODAY) == 0
    assert calculate_streak(make_habit(*days_back(3, completed=False)), TODAY) == 0


def test_streak_counts_consecutive_days_ending_today() -> None:
    # Today and the 3 preceding days, the day before that missing.
    habit = make_habit(*days_back(4), (TODAY - timedelta(days=5), True))
    assert calculate_streak(habit, TODAY) == 4


def test_unfinished_today_does_not_break_streak() -> None:
    yesterday = TODAY - timedelta(days=1)
    habit = make_habit((yesterday, True), (yesterday - timedelta(days=1), True), (TODAY, False))
    assert calculate_streak(habit, TODAY) == 2


def test_streak_stops_at_first_gap() -> None:
    habit = make_habit((TODAY, True), (TODAY - timedelta(days=2), True))
    assert calculate_streak(habit, TODAY) == 1


def test_completion_rate_window_is_inclusive() -> None:
    assert completion_rate(make_habit(), 30, TODAY) == 0

    # 31 calendar days in [today - 30, today].
    assert completion_rate(make_habit(*days_back(31)), 30, TODAY) == 100
    assert completion_rate(make_habit((TODAY, True)), 30, TODAY) == 3

    # 8 calendar days in [today - 7, today].
    assert completion_rate(make_habit(*days_back(4)), 7, TODAY) == 50

    # Entries outside the window do not count.
    old = make_habit((TODAY - timedelta(days=40), True))
    assert completion_rate(old, 30, TODAY) == 0


def test_week_dates_start_on_sunday_and_clamp_future_offsets() -> None:
    week = week_dates(0, TODAY)
    assert week[0] == date(2024, 5, 12)
    assert week[-1] == date(2024, 5, 18)

    assert week_dates(-1, TODAY)[0] == date(2024, 5, 5)
    assert week_dates(2, TODAY) == week


def test_week_grid_marks_today_and_disables_future_days() -> None:
    habit = make_habit((date(2024, 5, 13), True), (date(2024, 5, 14), False))
    cells = week_grid(habit, 0, TODAY)

    assert [c.weekday for c in cells] == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    assert [c.completed for c in cells] == [False, True, False, False, False, False, False]
    assert [c.is_today for c in cells].index(True) == 3
    assert [c.disabled for c in cells] == [False, False, False, False, True, True, True]


def test_overview_aggregates_across_habits() -> None:
    a = make_habit(*days_back(4), name="Meditate")  # streak 4, weekly 50%
    b = make_habit((TODAY - timedelta(days=1), True), name="Stretch")  # streak 1, weekly 13%

    assert habit_overview([a, b], TODAY) == HabitOverview(
        active_habits=2,
        total_streaks=5,
        weekly_average=32,
        total_completions=5,
    )
    assert habit_overview([], TODAY) == HabitOverview(0, 0, 0, 0)
