"""
CX Engine Logging
=================

One entry point, `setup_logging`, wires the root logger for the CLI and the API:

- human-readable lines on stderr (stdout stays clean for CLI JSON)
- or JSON lines carrying batch context (run_id, feedback_id, ...)
- optional size-rotated log file

Usage:
    from cxengine.orchestrator.logging_config import setup_logging

    setup_logging("DEBUG", json_output=True, log_file="logs/cxengine.log")
    logger.info("Batch done", extra={"run_id": run_id, "count": 42})
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


# Record attributes promoted to top-level JSON fields when present
EXTRA_KEYS = ("run_id", "stage", "feedback_id", "duration", "count")

HUMAN_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
HUMAN_DATEFMT = "%H:%M:%S"

ROTATE_BYTES = 5 * 1024 * 1024
ROTATE_BACKUPS = 3

# Third-party loggers too chatty at INFO
QUIET_LOGGERS = ("uvicorn.access", "httpx")


class JSONFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg, plus any EXTRA_KEYS set on the record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update({
            key: getattr(record, key)
            for key in EXTRA_KEYS
            if getattr(record, key, None) is not None
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _file_handler(path: str, max_bytes: int, backup_count: int) -> logging.Handler:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8",
    )


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
    max_bytes: int = ROTATE_BYTES,
    backup_count: int = ROTATE_BACKUPS,
) -> logging.Logger:
    """
    Replace the root logger's handlers.

    Args:
        level: Level name; unknown names fall back to INFO
        json_output: JSON lines instead of the human format
        log_file: Also write to this file, rotated at max_bytes
        max_bytes: Rotation size
        backup_count: Rotated files kept

    Returns:
        The configured root logger.
    """
    formatter = JSONFormatter() if json_output else logging.Formatter(HUMAN_FORMAT, HUMAN_DATEFMT)

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(_file_handler(log_file, max_bytes, backup_count))

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    numeric = getattr(logging, level.upper(), None)
    root.setLevel(numeric if isinstance(numeric, int) else logging.INFO)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.debug("Logging ready (level=%s, json=%s, file=%s)", level, json_output, log_file)
    return root


def setup_logging_from_settings(settings) -> logging.Logger:
    """Configure logging from `Settings.logging`."""
    cfg = settings.logging
    return setup_logging(level=cfg.level, json_output=cfg.json_logs, log_file=cfg.log_file)
