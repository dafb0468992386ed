# src/studyflow/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Loggers that are chatty at INFO/DEBUG (one line per HTTP request).
QUIET_LOGGERS = ("httpx", "httpcore", "openai")


class _ConsoleNoiseFilter(logging.Filter):
    """Console shows studyflow logs, uvicorn lifecycle lines and third-party errors only."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith("studyflow."):
            return True
        if name == "uvicorn.access":
            return record.levelno >= logging.WARNING
        if name.startswith("uvicorn"):
            return record.levelno >= logging.INFO
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/studyflow",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Install a filtered stderr handler and a full file log at <log_dir>/studyflow.log.

    Replaces any handlers already on the root logger, so it is safe to call
    from both entry points (console and relay).
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_dir / "studyflow.log"), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    # warnings.warn(...) -> 'py.warnings' logger (console: ERROR+ via the filter).
    logging.captureWarnings(True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
