"""Structured local logging and crash hook setup."""

from __future__ import annotations

import faulthandler
import json
import logging
import logging.handlers
import os
import platform
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TextIO


_LOGGER_NAME = "termwall"
_LOG_DIR_ENV = "TERMWALL_LOG_DIR"
_EXTRA_FIELDS = ("event", "stage", "source", "output", "crash_id")

# One id per process, so the lines of a single scheduled run can be grouped.
RUN_ID = uuid.uuid4().hex[:12]
_fault_file: TextIO | None = None


def _state_root() -> Path:
    system = platform.system()
    if system == "Windows":
        return Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local")) / "termwall"
    if system == "Darwin":
        return Path.home() / "Library" / "Logs" / "termwall"
    return Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state")) / "termwall"


def log_dir() -> Path:
    override = os.environ.get(_LOG_DIR_ENV)
    path = Path(override) if override else _state_root() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def _plain(value: Any) -> Any:
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


class JsonFormatter(logging.Formatter):
    """One JSON object per line; extras listed in ``_EXTRA_FIELDS`` are lifted to top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "run_id": RUN_ID,
            "msg": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            if hasattr(record, key):
                payload[key] = _plain(getattr(record, key))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def configure_logging(keep_files: int = 7, console: bool = True, verbose: bool = False) -> logging.Logger:
    """Attach the rotating JSON file handler (and optionally a console one) once per process."""
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(log_dir() / "termwall.log"),
        when="midnight",
        backupCount=max(2, keep_files),
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(logging.WARNING)
        stream_handler.setFormatter(logging.Formatter("termwall: %(levelname)s %(message)s"))
        logger.addHandler(stream_handler)

    logger.debug(f"logging configured run_id={RUN_ID}", extra={"event": "logging_configured"})
    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)


def install_crash_hooks() -> None:
    """Log uncaught exceptions with a crash id, then defer to the previous hook.

    Safe to call more than once: the hook is not stacked and the fault log
    is opened a single time per process.
    """
    global _fault_file
    logger = get_logger()
    previous = sys.excepthook

    def _log_uncaught(exc_type, exc_value, exc_tb) -> None:
        if not issubclass(exc_type, KeyboardInterrupt):
            crash_id = str(uuid.uuid4())
            logger.critical(
                f"uncaught exception crash_id={crash_id}",
                exc_info=(exc_type, exc_value, exc_tb),
                extra={"event": "uncaught_exception", "crash_id": crash_id},
            )
        previous(exc_type, exc_value, exc_tb)

    if getattr(sys.excepthook, "__name__", "") != _log_uncaught.__name__:
        sys.excepthook = _log_uncaught

    if _fault_file is None or _fault_file.closed:
        _fault_file = (log_dir() / "fault.log").open("a", encoding="utf-8")
        faulthandler.enable(file=_fault_file)
