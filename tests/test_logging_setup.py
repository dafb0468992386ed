# tests/test_logging_setup.py

from __future__ import annotations

import logging

import pytest

from studyflow.logging_setup import _ConsoleNoiseFilter


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("studyflow.todo.todo_store", logging.DEBUG, True),
        ("uvicorn.error", logging.INFO, True),
        ("uvicorn.access", logging.INFO, False),
        ("uvicorn.access", logging.WARNING, True),
        ("httpx", logging.WARNING, False),
        ("py.warnings", logging.WARNING, False),
        ("openai", logging.ERROR, True),
    ],
)
def test_console_filter(name: str, level: int, shown: bool) -> None:
    assert _ConsoleNoiseFilter().filter(_record(name, level)) is shown
