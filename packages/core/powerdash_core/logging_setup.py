"""JSON-lines file logging for the dashboard, plus crash hooks."""

from __future__ import annotations

import faulthandler
import json
import logging
import logging.handlers
import sys
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import config_root

LOG_FILE_NAME = "powerdash.log"
FAULT_FILE_NAME = "fault.log"

_APP_LOGGER = "powerdash"
# every module logs via getLogger(__name__), so each package root gets the handlers
_LOGGER_ROOTS = (_APP_LOGGER, "powerdash_telemetry", "powerdash_renderer", "powerdash_core")
_RECORD_EXTRAS = ("event", "crash_id")


def log_dir() -> Path:
    path = config_root() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``event`` and ``crash_id`` extras are copied through."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        for key in _RECORD_EXTRAS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        return json.dumps(payload, ensure_ascii=True)


def _file_handler(keep_files: int) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(log_dir() / LOG_FILE_NAME),
        when="midnight",
        backupCount=max(2, keep_files),
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    return handler


def configure_logging(keep_files: int = 7, console: bool = False, level: int = logging.INFO) -> logging.Logger:
    """Attach the rotating JSON file handler to every PowerDash logger root.

    ``console`` is for tools that do not own the terminal; the live dashboard
    leaves it off.
    """
    app_logger = logging.getLogger(_APP_LOGGER)
    if app_logger.handlers:
        return app_logger

    handlers = [_file_handler(keep_files)]
    if console:
        stream = logging.StreamHandler()
        stream.setFormatter(logging.Formatter("%(levelname)s %(name)s %(message)s"))
        handlers.append(stream)

    for name in _LOGGER_ROOTS:
        root = logging.getLogger(name)
        root.setLevel(level)
        root.propagate = False
        for handler in handlers:
            root.addHandler(handler)

    app_logger.info("logging configured", extra={"event": "logging_configured"})
    return app_logger


def install_crash_hooks() -> None:
    """Log uncaught exceptions with a crash id; native faults go to ``fault.log``."""
    logger = logging.getLogger(_APP_LOGGER)

    def _log_crash(event: str, exc_info: tuple) -> None:
        crash_id = str(uuid.uuid4())
        logger.critical(
            "%s crash_id=%s",
            event.replace("_", " "),
            crash_id,
            exc_info=exc_info,
            extra={"event": event, "crash_id": crash_id},
        )

    sys.excepthook = lambda exc_type, exc_value, exc_tb: _log_crash(
        "uncaught_exception", (exc_type, exc_value, exc_tb)
    )
    threading.excepthook = lambda args: _log_crash(
        "thread_exception", (args.exc_type, args.exc_value, args.exc_traceback)
    )

    fault_file = (log_dir() / FAULT_FILE_NAME).open("a", encoding="utf-8")
    faulthandler.enable(file=fault_file, all_threads=True)
    logger.info("fault handler enabled", extra={"event": "fault_handler_enabled"})
