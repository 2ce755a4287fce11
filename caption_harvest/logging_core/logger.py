# caption_harvest/logging_core/logger.py
"""
Structured logging for caption-harvest.

Every record is one JSON line (stdout by default) with:
- timestamp (ISO, UTC)
- level
- message
- run_id
- stage_name (optional)
- event_type (start/attempt/candidate_failed/progress/success/failure)
- metadata (dict, optional)

Use get_logger(run_id) once per fetch or ingestion run and log_event() for
anything that should be machine-readable.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from datetime import datetime, timezone
from logging import Logger
from typing import Any, Dict, Optional, TextIO
from uuid import UUID

LOGGER_NAMESPACE = "caption_harvest.run"
EXTRA_FIELDS = ("stage_name", "event_type", "metadata")


class JSONFormatter(logging.Formatter):
    """Formats records as single JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if hasattr(record, "run_id"):
            log_record["run_id"] = str(record.run_id)

        for name in EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_record[name] = value

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class RunIdFilter(logging.Filter):
    """Stamps the owning run id on every record."""

    def __init__(self, run_id: str) -> None:
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id
        return True


# One logger per live run; released by the owner when the run ends
_loggers: Dict[str, Logger] = {}
_lock = threading.Lock()


def get_logger(run_id: UUID, level: int = logging.INFO, stream: Optional[TextIO] = None) -> Logger:
    """
    Return the logger for a run, creating it on first use.

    Idempotent per run_id; concurrent runs get independent loggers. Records
    go to stdout unless another stream is given when the logger is created.
    """
    run_id_str = str(run_id)

    with _lock:
        if run_id_str in _loggers:
            return _loggers[run_id_str]

        logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{run_id_str}")
        logger.setLevel(level)
        logger.propagate = False

        if not logger.handlers:
            handler = logging.StreamHandler(stream or sys.stdout)
            handler.setFormatter(JSONFormatter())
            logger.addHandler(handler)

        logger.addFilter(RunIdFilter(run_id_str))
        _loggers[run_id_str] = logger

    return logger


def release_logger(run_id: UUID) -> None:
    """Detach handlers and forget the logger of a finished run."""
    run_id_str = str(run_id)
    with _lock:
        logger = _loggers.pop(run_id_str, None)
    if logger is None:
        return
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for log_filter in list(logger.filters):
        logger.removeFilter(log_filter)
    logging.Logger.manager.loggerDict.pop(logger.name, None)


def log_event(
    logger: Logger,
    level: int,
    message: str,
    *,
    stage_name: str | None = None,
    event_type: str,
    metadata: Dict[str, Any] | None = None,
) -> None:
    """Log one structured event."""
    extra: Dict[str, Any] = {"event_type": event_type}
    if stage_name:
        extra["stage_name"] = stage_name
    if metadata:
        extra["metadata"] = metadata

    logger.log(level, message, extra=extra)
