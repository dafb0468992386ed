# src/studyflow/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, timedelta

from ..core.dates import WEEKDAY_NAMES
from ..core.state import AppState
from ..events.event_grid import month_grid, shift_month, shift_week
from ..habits.habit_analytics import calculate_streak, completion_rate, habit_overview, week_grid
from ..storage.collection import CollectionStore
from ..timer.focus_timer import SESSION_LABELS, SessionType
from ..todo.todo_models import Task

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

SHORT_ID = 8


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /todo, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except ValueError as e:
            # Bad enum value, bad date, etc. -> usage error, state untouched.
            return f"Invalid input: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


def _split_opts(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """
    Split "words --key value words --flag" into positional words and options.
    Option values may contain spaces (they run until the next --option).
    """
    positional: list[str] = []
    opts: dict[str, list[str]] = {}
    current: str | None = None
    for token in args:
        if token.startswith("--") and len(token) > 2:
            current = token[2:].lower()
            opts[current] = []
        elif current is None:
            positional.append(token)
        else:
            opts[current].append(token)
    return positional, {k: " ".join(v) for k, v in opts.items()}


def _parse_day(raw: str, today: date | None = None) -> date:
    today = today or date.today()
    s = raw.strip().lower()
    if s == "today":
        return today
    if s == "yesterday":
        return today - timedelta(days=1)
    if s == "tomorrow":
        return today + timedelta(days=1)
    return date.fromisoformat(s)


def _resolve(store: CollectionStore, prefix: str | None, what: str) -> str:
    item_id = store.resolve_id(prefix or "")
    if item_id is None:
        raise ValueError(f"no single {what} matches id {prefix!r}")
    return item_id


def _short(item_id: str) -> str:
    return item_id[:SHORT_ID]


# ---- /help, /status ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    relay_url = str(getattr(state.settings, "relay_url", "") or "")
    session = state.chat.current_session
    return (
        "Status:\n"
        f"  Tasks: {len(state.todos)}  Habits: {len(state.habits)}  Events: {len(state.events)}"
        f"  Chats: {len(state.chat)}\n"
        f"  Active chat: {session.title if session else '(none)'}\n"
        f"  Chat relay: {relay_url or 'in-process'}"
    )


# ---- /todo ----


def _format_task(t: Task) -> str:
    mark = "x" if t.completed else " "
    extra = [t.category.value, t.priority.value]
    if t.due_date is not None:
        extra.append(f"due {t.due_date.isoformat()}")
    line = f"[{mark}] {_short(t.id)} {t.title} ({', '.join(extra)})"
    if t.description:
        line += f"\n      {t.description}"
    return line


def cmd_todo(state: AppState, args: list[str]) -> str:
    """
    /todo [list [all|active|completed] [Category]]
    /todo add <title> [--desc ..] [--category ..] [--priority ..] [--due YYYY-MM-DD]
    /todo done <id> | /todo rm <id> | /todo stats
    /todo edit <id> [--title ..] [--desc ..] [--category ..] [--priority ..] [--due ..]
    """
    sub = args[0].lower() if args else "list"
    rest = args[1:]
    store = state.todos

    if sub == "list":
        status = rest[0] if rest else "all"
        category = rest[1] if len(rest) > 1 else "all"
        tasks = store.filtered(status, category)
        if not tasks:
            return "No tasks."
        return "\n".join(_format_task(t) for t in tasks)

    if sub == "add":
        words, opts = _split_opts(rest)
        due = opts.get("due")
        task = store.add(
            " ".join(words),
            description=opts.get("desc"),
            category=opts.get("category", "Study"),
            priority=opts.get("priority", "medium"),
            due_date=_parse_day(due) if due else None,
        )
        return "Task title is required." if task is None else f"Added: {_format_task(task)}"

    if sub == "edit":
        words, opts = _split_opts(rest)
        task_id = _resolve(store, words[0] if words else None, "task")
        fields: dict[str, object] = {}
        for opt, field_name in (("title", "title"), ("desc", "description"), ("category", "category"), ("priority", "priority")):
            if opt in opts:
                fields[field_name] = opts[opt]
        if "due" in opts:
            fields["due_date"] = _parse_day(opts["due"]) if opts["due"] else None
        task = store.update(task_id, **fields)
        return "Nothing changed." if task is None else f"Updated: {_format_task(task)}"

    if sub in ("done", "toggle"):
        task = store.toggle_complete(_resolve(store, rest[0] if rest else None, "task"))
        return f"Updated: {_format_task(task)}" if task else "Nothing changed."

    if sub in ("rm", "delete"):
        task_id = _resolve(store, rest[0] if rest else None, "task")
        store.delete(task_id)
        return f"Deleted task {_short(task_id)}."

    if sub == "stats":
        s = store.stats()
        return f"Progress: {s.completed}/{s.total} completed ({s.percentage}%)"

    return "Usage: /todo [list|add|edit|done|rm|stats]"


# ---- /habit ----


def cmd_habit(state: AppState, args: list[str]) -> str:
    """
    /habit [list]
    /habit add <name> [--desc ..] [--frequency daily|weekly] [--category ..] [--color ..]
    /habit toggle <id> [YYYY-MM-DD|today|yesterday]
    /habit week [offset] | /habit rm <id> | /habit stats
    """
    sub = args[0].lower() if args else "list"
    rest = args[1:]
    store = state.habits
    today = date.today()

    if sub == "list":
        if not len(store):
            return "No habits yet."
        lines = []
        for h in store.items:
            lines.append(
                f"{_short(h.id)} {h.name} [{h.category.value}, {h.frequency.value}] "
                f"streak {calculate_streak(h, today)}d, 30-day {completion_rate(h, 30, today)}%"
            )
        return "\n".join(lines)

    if sub == "add":
        words, opts = _split_opts(rest)
        habit = store.add(
            " ".join(words),
            description=opts.get("desc"),
            frequency=opts.get("frequency", "daily"),
            category=opts.get("category", "Health"),
            color=opts.get("color", "bg-blue-500"),
        )
        return "Habit name is required." if habit is None else f"Added habit {_short(habit.id)} {habit.name}"

    if sub == "toggle":
        habit_id = _resolve(store, rest[0] if rest else None, "habit")
        day = _parse_day(rest[1], today) if len(rest) > 1 else today
        if day > today:
            return "Future days cannot be checked off."
        habit = store.toggle_entry(habit_id, day)
        if habit is None:
            return "Nothing changed."
        state_str = "done" if habit.is_completed_on(day) else "not done"
        return f"{habit.name} on {day.isoformat()}: {state_str} (streak {calculate_streak(habit, today)}d)"

    if sub == "week":
        offset = int(rest[0]) if rest else 0
        if not len(store):
            return "No habits yet."
        lines = []
        for h in store.items:
            cells = week_grid(h, offset, today)
            if not lines:
                lines.append(" " * 22 + " ".join(c.weekday for c in cells))
            marks = " ".join(
                " - " if c.disabled else (" ✓ " if c.completed else " · ") for c in cells
            )
            lines.append(f"{h.name[:20]:<20}  {marks}")
        return "\n".join(lines)

    if sub in ("rm", "delete"):
        habit_id = _resolve(store, rest[0] if rest else None, "habit")
        store.delete(habit_id)
        return f"Deleted habit {_short(habit_id)}."

    if sub == "stats":
        o = habit_overview(store.items, today)
        return (
            f"Active habits: {o.active_habits}\n"
            f"Total streaks: {o.total_streaks}\n"
            f"Weekly average: {o.weekly_average}%\n"
            f"Total completions: {o.total_completions}"
        )

    return "Usage: /habit [list|add|toggle|week|rm|stats]"


# ---- /cal ----


def _format_event(e) -> str:
    when = e.date.isoformat() + (f" {e.time}" if e.time else "")
    dur = f", {e.duration} min" if e.duration else ""
    return f"{_short(e.id)} {when} {e.title} [{e.category.value}{dur}]"


def _render_month(state: AppState, reference: date) -> str:
    today = date.today()
    cells = month_grid(reference, state.events.items, today)
    lines = [reference.strftime("%B %Y").center(7 * 5), " ".join(f"{d:>4}" for d in WEEKDAY_NAMES)]
    for row in range(6):
        out = []
        for cell in cells[row * 7 : row * 7 + 7]:
            day = f"{cell.date.day}"
            if not cell.in_current_month:
                day = f"({day})"
            if cell.is_today:
                day = f"*{day}"
            if cell.events:
                day += "•"
            out.append(f"{day:>4}")
        lines.append(" ".join(out))
    return "\n".join(lines)


def cmd_cal(state: AppState, args: list[str]) -> str:
    """
    /cal [month [YYYY-MM|next|prev|today]] | /cal week [date|next|prev] | /cal day <date> | /cal upcoming
    /cal add <title> --date D [--time HH:MM] [--duration N] [--category ..] [--color ..] [--desc ..]
    /cal edit <id> [--title ..] [--date ..] [--time ..] ... | /cal rm <id>
    """
    sub = args[0].lower() if args else "month"
    rest = args[1:]
    store = state.events
    today = date.today()

    if sub == "month":
        reference = state.calendar_date
        if rest:
            if rest[0] in ("next", "prev"):
                reference = shift_month(reference, 1 if rest[0] == "next" else -1)
            elif rest[0] == "today":
                reference = today
            else:
                reference = date.fromisoformat(rest[0] + "-01")
        state.calendar_date = reference
        return _render_month(state, reference)

    if sub == "week":
        if rest and rest[0] in ("next", "prev"):
            reference = shift_week(state.calendar_date, 1 if rest[0] == "next" else -1)
        else:
            reference = _parse_day(rest[0], today) if rest else state.calendar_date
        state.calendar_date = reference
        lines = []
        for cell in store.week_grid(reference, today):
            marker = "*" if cell.is_today else " "
            titles = ", ".join(e.title for e in cell.events) or "-"
            lines.append(f"{marker}{cell.date.strftime('%a %Y-%m-%d')}: {titles}")
        return "\n".join(lines)

    if sub == "day":
        day = _parse_day(rest[0], today) if rest else today
        events = store.events_for(day)
        return "\n".join(_format_event(e) for e in events) if events else f"No events on {day.isoformat()}."

    if sub == "upcoming":
        events = store.upcoming(today)
        return "\n".join(_format_event(e) for e in events) if events else "No upcoming events"

    if sub == "add":
        words, opts = _split_opts(rest)
        raw_date = opts.get("date")
        event = store.add(
            " ".join(words),
            _parse_day(raw_date, today) if raw_date else None,
            description=opts.get("desc"),
            time=opts.get("time"),
            duration=int(opts["duration"]) if opts.get("duration") else 60,
            category=opts.get("category", "Study"),
            color=opts.get("color", "bg-blue-500"),
        )
        return "Event title and --date are required." if event is None else f"Added: {_format_event(event)}"

    if sub == "edit":
        words, opts = _split_opts(rest)
        event_id = _resolve(store, words[0] if words else None, "event")
        fields: dict[str, object] = {}
        for opt, field_name in (
            ("title", "title"),
            ("desc", "description"),
            ("time", "time"),
            ("category", "category"),
            ("color", "color"),
        ):
            if opt in opts:
                fields[field_name] = opts[opt]
        if "date" in opts:
            fields["date"] = _parse_day(opts["date"], today)
        if "duration" in opts:
            fields["duration"] = int(opts["duration"]) if opts["duration"] else None
        event = store.update(event_id, **fields)
        return "Nothing changed." if event is None else f"Updated: {_format_event(event)}"

    if sub in ("rm", "delete"):
        event_id = _resolve(store, rest[0] if rest else None, "event")
        store.delete(event_id)
        return f"Deleted event {_short(event_id)}."

    return "Usage: /cal [month|week|day|upcoming|add|edit|rm]"


# ---- /chat ----


def cmd_chat(state: AppState, args: list[str]) -> str:
    """
    /chat list | /chat new | /chat use <id> | /chat rm <id> | /chat show
    Plain text (no slash) is sent to the active chat.
    """
    sub = args[0].lower() if args else "list"
    rest = args[1:]
    store = state.chat

    if sub == "list":
        if not len(store):
            return "No chats yet. Type a message to start one."
        lines = []
        for s in store.items:
            marker = "*" if s.id == store.current_session_id else " "
            lines.append(f"{marker}{_short(s.id)} {s.title} ({len(s.messages)} messages)")
        return "\n".join(lines)

    if sub == "new":
        session = store.create_session()
        return f"Started chat {_short(session.id)}."

    if sub == "use":
        session = store.select_session(_resolve(store, rest[0] if rest else None, "chat"))
        return f"Switched to: {session.title}" if session else "Nothing changed."

    if sub in ("rm", "delete"):
        session_id = _resolve(store, rest[0] if rest else None, "chat")
        store.delete_session(session_id)
        return f"Deleted chat {_short(session_id)}."

    if sub == "show":
        session = store.current_session
        if session is None:
            return "No active chat."
        if not session.messages:
            return f"{session.title}: (empty)"
        lines = [f"{session.title}:"]
        for m in session.messages:
            who = "You" if m.role.value == "user" else "Assistant"
            lines.append(f"[{m.timestamp.astimezone().strftime('%H:%M')}] {who}: {m.content}")
        return "\n".join(lines)

    return "Usage: /chat [list|new|use|rm|show]"


# ---- /timer ----


def cmd_timer(state: AppState, args: list[str]) -> str:
    """
    /timer [status|start|pause|reset|focus|short|long]
    /timer set <focus> <short> <long>   (minutes)
    """
    timer = state.timer
    timer.sync()
    sub = args[0].lower() if args else "status"

    if sub == "start":
        timer.start()
    elif sub == "pause":
        timer.pause()
    elif sub == "reset":
        timer.reset()
    elif sub in ("focus", "short", "long"):
        timer.switch_session(
            {"focus": SessionType.FOCUS, "short": SessionType.SHORT_BREAK, "long": SessionType.LONG_BREAK}[sub]
        )
    elif sub == "set":
        if len(args) != 4:
            return "Usage: /timer set <focus> <short> <long>"
        timer.set_durations(int(args[1]), int(args[2]), int(args[3]))
    elif sub != "status":
        return "Usage: /timer [status|start|pause|reset|focus|short|long|set]"

    return (
        f"{SESSION_LABELS[timer.session_type]}: {timer.format_time()} "
        f"[{timer.state.value}, {timer.progress_percentage():.0f}%] "
        f"completed focus sessions: {timer.completed_sessions}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show store totals and relay mode.")
registry.register("todo", cmd_todo, help_text="Tasks: /todo list|add|edit|done|rm|stats.", aliases=["tasks"])
registry.register("habit", cmd_habit, help_text="Habits: /habit list|add|toggle|week|rm|stats.", aliases=["habits"])
registry.register("cal", cmd_cal, help_text="Calendar: /cal month|week|day|upcoming|add|edit|rm.", aliases=["calendar"])
registry.register("chat", cmd_chat, help_text="Chats: /chat list|new|use|rm|show.")
registry.register("timer", cmd_timer, help_text="Focus timer: /timer start|pause|reset|focus|short|long|set.")
