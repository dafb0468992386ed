# src/studyflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage/stores/relay/timer).
"""

from __future__ import annotations

import logging

from ..chat.chat_store import ChatStore
from ..chat.relay_client import HttpRelayClient, InProcessRelayClient
from ..config import get_settings
from ..core.ports import KeyValueStorage, RelayClient
from ..core.state import AppState
from ..events.event_store import EventStore
from ..habits.habit_store import HabitStore
from ..relay.service import ChatRelay
from ..storage.local_storage import LocalStorage
from ..timer.focus_timer import FocusTimer
from ..todo.todo_store import TodoStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_relay_client(settings) -> RelayClient:
    """HTTP relay when a URL is configured, otherwise call the relay in-process."""
    relay_url = str(getattr(settings, "relay_url", "") or "").strip()
    if relay_url:
        logger.info("Chat relay: HTTP %s", relay_url)
        return HttpRelayClient(relay_url, timeout=float(getattr(settings, "relay_timeout_seconds", 60.0)))
    logger.info("Chat relay: in-process")
    return InProcessRelayClient(ChatRelay(settings))


def create_initial_state(
    *,
    settings=None,
    storage: KeyValueStorage | None = None,
    relay: RelayClient | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = LocalStorage(settings.storage_db_path)

    return AppState(
        settings=settings,
        storage=storage,
        todos=TodoStore(storage),
        habits=HabitStore(storage),
        events=EventStore(storage),
        chat=ChatStore(storage),
        timer=FocusTimer(
            focus_minutes=settings.focus_minutes,
            short_break_minutes=settings.short_break_minutes,
            long_break_minutes=settings.long_break_minutes,
        ),
        relay=relay or create_relay_client(settings),
    )
