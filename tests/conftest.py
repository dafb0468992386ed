# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from studyflow.cli.bootstrap import create_initial_state
from studyflow.core.state import AppState
from studyflow.storage.local_storage import LocalStorage

from .fakes import FakeRelayClient


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the relay.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's .env.
    """
    return SimpleNamespace(
        app_name="studyflow-test",
        log_level="DEBUG",
        # Paths (tmp per test run)
        data_dir=tmp_path,
        storage_db_path=tmp_path / "storage.sqlite3",
        # Relay: in-process, no credentials
        relay_url="",
        relay_timeout_seconds=5.0,
        gemini_api_key=None,
        openai_api_key=None,
        openrouter_api_key=None,
        huggingface_api_key=None,
        # Timer
        focus_minutes=25,
        short_break_minutes=5,
        long_break_minutes=15,
    )


@pytest.fixture()
def storage(settings: SimpleNamespace) -> LocalStorage:
    return LocalStorage(settings.storage_db_path)


@pytest.fixture()
def relay() -> FakeRelayClient:
    return FakeRelayClient(reply="Break it into 25-minute blocks.")


@pytest.fixture()
def state(settings: SimpleNamespace, storage: LocalStorage, relay: FakeRelayClient) -> AppState:
    """
    AppState wired with a fake relay.

    NOTE: We keep the real SQLite storage here because the JSON round-trip
    through it is part of what we want to test.
    """
    return create_initial_state(settings=settings, storage=storage, relay=relay)
