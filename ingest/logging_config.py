"""Logging configuration for catalog ingestion.

Two outputs hang off the ``ingest`` logger:

- console: short human-readable lines, level name coloured on terminals,
  with the event type appended for structured import events
- audit file: one JSON object per line in ``logs/ingest_YYYYMMDD.jsonl``,
  so a batch (phases, created categories, skipped rows) can be reviewed
  after the operator has closed the import summary
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from ingest.config import LOG_DIR

__all__ = [
    "setup_logging",
    "get_logger",
    "log_import_event",
    "LOG_DIR",
]

ROOT_LOGGER = "ingest"


class JSONLineFormatter(logging.Formatter):
    """Render a record as a single JSON line, merging structured event data."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "event": getattr(record, "event_type", None),
            "msg": record.getMessage(),
        }
        payload.update(getattr(record, "event_data", None) or {})
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class DailyJSONLHandler(logging.Handler):
    """Append formatted records to ``<prefix>_<YYYYMMDD>.jsonl`` in ``log_dir``."""

    def __init__(self, log_dir: Path, prefix: str = ROOT_LOGGER):
        super().__init__()
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.prefix = prefix
        self.setFormatter(JSONLineFormatter())

    @property
    def current_file(self) -> Path:
        return self.log_dir / f"{self.prefix}_{datetime.now():%Y%m%d}.jsonl"

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            with self.current_file.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except Exception:
            self.handleError(record)


class ConsoleFormatter(logging.Formatter):
    """``HH:MM:SS [LEVEL] message (event)`` with optional ANSI colours."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = False):
        super().__init__(datefmt="%H:%M:%S")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.use_color and record.levelno in self.LEVEL_COLORS:
            level = f"{self.LEVEL_COLORS[record.levelno]}{level}{self.RESET}"

        line = f"{self.formatTime(record, self.datefmt)} [{level}] {record.getMessage()}"
        event_type = getattr(record, "event_type", None)
        if event_type:
            line += f" ({event_type})"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """Configure the ``ingest`` logger. Safe to call more than once.

    Args:
        level: Console level; the audit file always receives DEBUG
        log_to_file: Write the JSONL audit file
        log_to_console: Print to stdout
        log_dir: Audit file directory (default: project logs/)
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()

    handler_levels = []
    if log_to_console:
        stream = sys.stdout
        console = logging.StreamHandler(stream)
        console.setLevel(level)
        console.setFormatter(ConsoleFormatter(use_color=stream.isatty()))
        logger.addHandler(console)
        handler_levels.append(level)

    if log_to_file:
        audit = DailyJSONLHandler(log_dir or LOG_DIR)
        audit.setLevel(logging.DEBUG)
        logger.addHandler(audit)
        handler_levels.append(logging.DEBUG)

    logger.setLevel(min(handler_levels) if handler_levels else level)
    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Logger inside the ``ingest`` hierarchy.

    Accepts a module ``__name__`` (``"ingest.importer"``) or a bare suffix
    (``"importer"``).
    """
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def log_import_event(
    event_type: str,
    data: Dict[str, Any],
    level: int = logging.INFO,
    logger_name: str = ROOT_LOGGER,
) -> None:
    """Log a structured import event.

    ``data["message"]``, when present, becomes the log message; the other
    keys are written as fields of the JSONL entry.
    """
    fields = dict(data)
    message = fields.pop("message", event_type)
    get_logger(logger_name).log(
        level,
        message,
        extra={"event_type": event_type, "event_data": fields},
    )
