# src/studyflow/timer/focus_timer.py

"""
Pomodoro-style focus timer.

The timer does not own a thread: callers either `tick()` explicitly or call
`sync()` to apply the wall-clock time elapsed since the last sync.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from enum import StrEnum

logger = logging.getLogger(__name__)

LONG_BREAK_EVERY = 4


class SessionType(StrEnum):
    FOCUS = "focus"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"


class TimerState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


SESSION_LABELS = {
    SessionType.FOCUS: "Focus Session",
    SessionType.SHORT_BREAK: "Short Break",
    SessionType.LONG_BREAK: "Long Break",
}


class FocusTimer:
    def __init__(
        self,
        *,
        focus_minutes: int = 25,
        short_break_minutes: int = 5,
        long_break_minutes: int = 15,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._minutes: dict[SessionType, int] = {}
        self.session_type = SessionType.FOCUS
        self.state = TimerState.IDLE
        self.time_left = 0
        self.completed_sessions = 0
        self._last_sync: float | None = None
        self.set_durations(focus_minutes, short_break_minutes, long_break_minutes)

    # ---- configuration ----

    def set_durations(self, focus: int, short_break: int, long_break: int) -> None:
        for label, value in (("focus", focus), ("short break", short_break), ("long break", long_break)):
            if int(value) <= 0:
                raise ValueError(f"{label} duration must be positive, got {value}")
        self._minutes = {
            SessionType.FOCUS: int(focus),
            SessionType.SHORT_BREAK: int(short_break),
            SessionType.LONG_BREAK: int(long_break),
        }
        # A running or paused countdown keeps its remaining time.
        if self.state is TimerState.IDLE:
            self.time_left = self.session_seconds(self.session_type)

    def session_seconds(self, session_type: SessionType) -> int:
        return self._minutes[session_type] * 60

    # ---- controls ----

    def start(self) -> None:
        if self.state is TimerState.RUNNING:
            return
        self.state = TimerState.RUNNING
        self._last_sync = self._clock()

    def pause(self) -> None:
        if self.state is not TimerState.RUNNING:
            return
        self.sync()
        if self.state is TimerState.RUNNING:
            self.state = TimerState.PAUSED
        self._last_sync = None

    def reset(self) -> None:
        self.state = TimerState.IDLE
        self.time_left = self.session_seconds(self.session_type)
        self._last_sync = None

    def switch_session(self, session_type: SessionType | str) -> None:
        self.session_type = SessionType(session_type)
        self.reset()

    # ---- countdown ----

    def sync(self) -> None:
        """Apply whole seconds elapsed on the clock since the last sync."""
        if self.state is not TimerState.RUNNING or self._last_sync is None:
            return
        elapsed = int(self._clock() - self._last_sync)
        if elapsed <= 0:
            return
        self._last_sync += elapsed
        self.tick(elapsed)

    def tick(self, seconds: int = 1) -> None:
        if self.state is not TimerState.RUNNING:
            return
        self.time_left = max(0, self.time_left - int(seconds))
        if self.time_left == 0:
            self._complete_session()

    def _complete_session(self) -> None:
        finished = self.session_type
        self.state = TimerState.IDLE
        self._last_sync = None

        if finished is SessionType.FOCUS:
            long_break = self.completed_sessions % LONG_BREAK_EVERY == LONG_BREAK_EVERY - 1
            self.completed_sessions += 1
            self.session_type = SessionType.LONG_BREAK if long_break else SessionType.SHORT_BREAK
        else:
            self.session_type = SessionType.FOCUS

        self.time_left = self.session_seconds(self.session_type)
        logger.info(
            "Timer: %s completed -> next %s (completed focus sessions=%s)",
            finished.value,
            self.session_type.value,
            self.completed_sessions,
        )

    # ---- display ----

    def format_time(self) -> str:
        mins, secs = divmod(self.time_left, 60)
        return f"{mins:02d}:{secs:02d}"

    def progress_percentage(self) -> float:
        total = self.session_seconds(self.session_type)
        return (total - self.time_left) / total * 100
