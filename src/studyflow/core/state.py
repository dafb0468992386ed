# src/studyflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from ..chat.chat_store import ChatStore
from ..events.event_store import EventStore
from ..habits.habit_store import HabitStore
from ..timer.focus_timer import FocusTimer
from ..todo.todo_store import TodoStore
from .ports import KeyValueStorage, RelayClient


@dataclass
class AppState:
    """
    Everything a front end needs, wired once in bootstrap.

    The stores are independent; they only share the storage backend.
    """

    settings: Any
    storage: KeyValueStorage

    todos: TodoStore
    habits: HabitStore
    events: EventStore
    chat: ChatStore
    timer: FocusTimer

    relay: RelayClient

    # Month/week the console calendar is showing; next/prev move from here.
    calendar_date: date = field(default_factory=date.today)
