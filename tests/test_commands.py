# tests/test_commands.py

from __future__ import annotations

from datetime import date

from studyflow.cli.commands import CommandRegistry, registry


def test_command_registry_routes_and_aliases(state) -> None:
    reg = CommandRegistry()
    called = {"a": 0}

    def handler(state, args):
        called["a"] += 1
        return f"args={args}"

    reg.register("alpha", handler, "alpha", aliases=["a"])

    assert reg.handle(state, "/alpha x y") == "args=['x', 'y']"
    assert reg.handle(state, "/A") == "args=[]"
    assert called["a"] == 2
    assert "/alpha - alpha" in reg.build_help()


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_value_errors_become_usage_messages(state) -> None:
    reply = registry.handle(state, "/todo add Essay --priority urgent")
    assert reply.startswith("Invalid input:")
    assert len(state.todos) == 0


def test_todo_commands(state) -> None:
    reply = registry.handle(state, "/todo add Read Chapter 3 --category Study --priority high --due 2024-05-20")
    assert "Read Chapter 3" in reply
    task = state.todos.items[0]
    assert task.due_date == date(2024, 5, 20)

    assert "0/1 completed (0%)" in registry.handle(state, "/todo stats")
    registry.handle(state, f"/todo done {task.id[:8]}")
    assert "1/1 completed (100%)" in registry.handle(state, "/todo stats")

    assert "[x]" in registry.handle(state, "/todo list completed")
    assert registry.handle(state, "/todo list active") == "No tasks."

    registry.handle(state, f"/todo edit {task.id[:8]} --desc pages 40 to 62")
    assert state.todos.get(task.id).description == "pages 40 to 62"

    registry.handle(state, f"/todo rm {task.id}")
    assert len(state.todos) == 0
    assert "Invalid input" in registry.handle(state, "/todo rm zzz")


def test_habit_commands(state) -> None:
    registry.handle(state, "/habit add Morning run --category Fitness")
    habit = state.habits.items[0]

    reply = registry.handle(state, f"/habit toggle {habit.id[:8]}")
    assert "done" in reply and "streak 1d" in reply
    assert state.habits.get(habit.id).is_completed_on(date.today())

    assert "Future days" in registry.handle(state, f"/habit toggle {habit.id[:8]} tomorrow")
    assert "Active habits: 1" in registry.handle(state, "/habit stats")
    assert "Morning run" in registry.handle(state, "/habit week")


def test_cal_commands(state) -> None:
    reply = registry.handle(state, "/cal add Biology exam --date 2024-05-20 --time 09:00 --category Exam")
    assert reply.startswith("Added:")

    assert "Biology exam" in registry.handle(state, "/cal day 2024-05-20")
    month = registry.handle(state, "/cal month 2024-05")
    assert "May 2024" in month
    assert len(month.splitlines()) == 8

    assert "required" in registry.handle(state, "/cal add Missing date")


def test_chat_commands(state) -> None:
    assert "No chats yet" in registry.handle(state, "/chat list")

    registry.handle(state, "/chat new")
    session = state.chat.current_session
    assert session is not None
    assert "(empty)" in registry.handle(state, "/chat show")

    registry.handle(state, "/chat new")
    registry.handle(state, f"/chat use {session.id[:8]}")
    assert state.chat.current_session_id == session.id

    registry.handle(state, f"/chat rm {session.id[:8]}")
    assert state.chat.get(session.id) is None


def test_timer_commands(state) -> None:
    assert "Focus Session: 25:00" in registry.handle(state, "/timer")
    assert "running" in registry.handle(state, "/timer start")
    assert "Short Break: 05:00" in registry.handle(state, "/timer short")
    assert "Usage" in registry.handle(state, "/timer set 1 2")


def test_status_and_help(state) -> None:
    assert "in-process" in registry.handle(state, "/status")
    help_text = registry.handle(state, "/help")
    for name in ("todo", "habit", "cal", "chat", "timer"):
        assert f"/{name}" in help_text


def test_cal_navigation_moves_from_the_shown_month(state) -> None:
    state.calendar_date = date(2024, 11, 15)

    assert "December 2024" in registry.handle(state, "/cal month next")
    assert "January 2025" in registry.handle(state, "/cal month next")
    assert "December 2024" in registry.handle(state, "/cal month prev")
    assert state.calendar_date == date(2024, 12, 1)

    week = registry.handle(state, "/cal week next")
    assert "2024-12-08" in week.splitlines()[0]
    assert "2024-12-15" in registry.handle(state, "/cal week next").splitlines()[0]
