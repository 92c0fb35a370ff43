from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.logging import RichHandler

from .config import LoggingConfig


LOGGER_NAME = "feed_dedup"

# Emitted first, in this order; remaining extras follow sorted by name
_LEADING_FIELDS = ("timestamp", "level", "logger", "run_id", "event", "message")

_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}


def new_run_id() -> str:
    return uuid.uuid4().hex[:12]


class RunContextFilter(logging.Filter):
    """Stamps every record passing a handler with the current run id."""

    def __init__(self, run_id: str):
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id
        return True


def setup_logging(
    cfg: LoggingConfig,
    run_output_dir: Path | None,
    run_id: str | None = None,
) -> logging.Logger:
    """Configure the package logger for one dedup run.

    Records from feed_dedup.* loggers (the parser's warnings included) go
    to the Rich console and, when enabled, to the run's log file. Every
    record carries the run id.
    """
    level = _parse_level(cfg.level)
    run_filter = RunContextFilter(run_id or new_run_id())

    logger = logging.getLogger(LOGGER_NAME)
    close_logging(logger)
    logger.setLevel(level)
    logger.propagate = False

    handlers: list[logging.Handler] = []
    if cfg.console:
        console_handler = RichHandler(show_time=False, show_path=False, markup=False)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console_handler)

    if cfg.file and run_output_dir is not None:
        run_output_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(run_output_dir / cfg.filename, encoding="utf-8")
        if cfg.format == "jsonl":
            file_handler.setFormatter(JsonlFormatter())
        else:
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s [%(run_id)s] %(message)s")
            )
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
        handler.addFilter(run_filter)
        logger.addHandler(handler)

    return logger


def close_logging(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def log_event(logger: logging.Logger | None, message: str, level: int = logging.INFO, **fields: Any) -> None:
    if logger is None:
        return
    logger.log(level, message, extra=fields)


class JsonlFormatter(logging.Formatter):
    """One JSON object per record: leading fields in fixed order, then extras."""

    def format(self, record: logging.LogRecord) -> str:
        extras = {
            key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS
        }
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "run_id": extras.pop("run_id", None),
            "event": extras.pop("event", None),
            "message": record.getMessage(),
        }
        for key in sorted(extras):
            if key not in _LEADING_FIELDS:
                payload[key] = extras[key]
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO
