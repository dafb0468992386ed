# src/studyflow/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Provider credentials are accepted both with and without the project prefix
  (GEMINI_API_KEY and STUDYFLOW_GEMINI_API_KEY).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

ENV_PREFIX = "STUDYFLOW"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _credential(suffix: str) -> Optional[str]:
    raw = _first_env(_k(suffix), suffix, default=None)
    return raw.strip() if raw else None


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_db_path: Path

    # ---- Chat relay ----
    relay_host: str
    relay_port: int
    relay_url: str
    relay_timeout_seconds: float

    # ---- Providers (checked in this order) ----
    gemini_api_key: Optional[str]
    gemini_model: str
    gemini_base_url: str

    openai_api_key: Optional[str]
    openai_model: str

    openrouter_api_key: Optional[str]
    openrouter_base_url: str
    openrouter_model: str
    extra_headers: Dict[str, str]

    huggingface_api_key: Optional[str]
    huggingface_model: str
    huggingface_base_url: str

    # ---- Generation tuning ----
    llm_temperature: float
    llm_max_output_tokens: int
    llm_connect_timeout_seconds: float
    llm_read_timeout_seconds: float

    # ---- Focus timer defaults (minutes) ----
    focus_minutes: int
    short_break_minutes: int
    long_break_minutes: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "studyflow") or "studyflow"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/studyflow"))
        storage_db_path = _env_path(_k("STORAGE_DB_PATH"), data_dir / "storage.sqlite3")

        relay_host = _env(_k("RELAY_HOST"), "127.0.0.1")
        relay_port = _env_int(_k("RELAY_PORT"), 8000)
        # Empty relay URL -> the console calls the relay in-process.
        relay_url = _env(_k("RELAY_URL"), "").strip()
        relay_timeout_seconds = _env_float(_k("RELAY_TIMEOUT_SECONDS"), 60.0)

        gemini_api_key = _credential("GEMINI_API_KEY")
        gemini_model = _env(_k("GEMINI_MODEL"), "gemini-1.5-flash")
        gemini_base_url = _env(
            _k("GEMINI_BASE_URL"), "https://generativelanguage.googleapis.com/v1beta"
        )

        openai_api_key = _credential("OPENAI_API_KEY")
        openai_model = _env(_k("OPENAI_MODEL"), "gpt-4o-mini")

        openrouter_api_key = _credential("OPENROUTER_API_KEY")
        openrouter_base_url = _env(_k("OPENROUTER_BASE_URL"), "https://openrouter.ai/api/v1")
        openrouter_model = _env(_k("OPENROUTER_MODEL"), "qwen/qwen-2.5-72b-instruct:free")

        http_referer = _env(_k("HTTP_REFERER"), "https://example.com")
        # Use explicit title header if provided; else fall back to app_name
        title = _env(_k("APP_TITLE"), app_name)
        extra_headers = {
            "HTTP-Referer": http_referer,
            "X-Title": title,
        }

        huggingface_api_key = _credential("HUGGINGFACE_API_KEY")
        huggingface_model = _env(_k("HUGGINGFACE_MODEL"), "mistralai/Mistral-7B-Instruct-v0.2")
        huggingface_base_url = _env(
            _k("HUGGINGFACE_BASE_URL"), "https://api-inference.huggingface.co/models"
        )

        llm_temperature = _env_float(_k("LLM_TEMPERATURE"), 0.7)
        llm_max_output_tokens = _env_int(_k("LLM_MAX_OUTPUT_TOKENS"), 500)
        llm_connect_timeout_seconds = _env_float(_k("LLM_CONNECT_TIMEOUT_SECONDS"), 5.0)
        llm_read_timeout_seconds = _env_float(_k("LLM_READ_TIMEOUT_SECONDS"), 30.0)

        focus_minutes = _env_int(_k("FOCUS_MINUTES"), 25)
        short_break_minutes = _env_int(_k("SHORT_BREAK_MINUTES"), 5)
        long_break_minutes = _env_int(_k("LONG_BREAK_MINUTES"), 15)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_db_path=storage_db_path,
            relay_host=relay_host,
            relay_port=relay_port,
            relay_url=relay_url,
            relay_timeout_seconds=relay_timeout_seconds,
            gemini_api_key=gemini_api_key,
            gemini_model=gemini_model,
            gemini_base_url=gemini_base_url,
            openai_api_key=openai_api_key,
            openai_model=openai_model,
            openrouter_api_key=openrouter_api_key,
            openrouter_base_url=openrouter_base_url,
            openrouter_model=openrouter_model,
            extra_headers=extra_headers,
            huggingface_api_key=huggingface_api_key,
            huggingface_model=huggingface_model,
            huggingface_base_url=huggingface_base_url,
            llm_temperature=llm_temperature,
            llm_max_output_tokens=llm_max_output_tokens,
            llm_connect_timeout_seconds=llm_connect_timeout_seconds,
            llm_read_timeout_seconds=llm_read_timeout_seconds,
            focus_minutes=focus_minutes,
            short_break_minutes=short_break_minutes,
            long_break_minutes=long_break_minutes,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
