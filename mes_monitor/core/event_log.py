"""
Category and date partitioned log sink.

Every entry goes to ``<yyyy-MM-dd>_<suffix>.txt`` inside the configured log
directory, one line per entry formatted as ``[yyyy-MM-dd HH:mm:ss] message``.
Application events are echoed to stdout as well. The sink never raises: a
failed write is reported on the console and dropped.
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Dict, Literal, Protocol

LogCategory = Literal["PROCESS_INFO", "MEMORY_ALERT", "APP_EVENT"]

CATEGORY_SUFFIXES: Dict[str, str] = {
    "PROCESS_INFO": "process_info",
    "MEMORY_ALERT": "memory_alert",
    "APP_EVENT": "app_event",
}

DATE_FORMAT = "%Y-%m-%d"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_LINE_FORMAT = logging.Formatter("[%(asctime)s] %(message)s", datefmt=TIMESTAMP_FORMAT)


class LogSink(Protocol):
    def write(self, category: LogCategory, message: str) -> None:
        ...


def log_file_name(category: str, created: float) -> str:
    date_part = time.strftime(DATE_FORMAT, time.localtime(created))
    return f"{date_part}_{CATEGORY_SUFFIXES[category]}.txt"


class _ConsoleErrorMixin:
    def handleError(self, record: logging.LogRecord) -> None:
        exc = sys.exc_info()[1]
        print(f"log write failed: {exc}", file=sys.stdout)


class CategoryFileHandler(_ConsoleErrorMixin, logging.Handler):
    """Append each record to the file for its category and calendar day."""

    def __init__(self, log_dir: Path, category: str) -> None:
        super().__init__()
        self._log_dir = Path(log_dir)
        self._category = category
        self.setFormatter(_LINE_FORMAT)

    def path_for(self, created: float) -> Path:
        return self._log_dir / log_file_name(self._category, created)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            with open(self.path_for(record.created), "a", encoding="utf-8") as fh:
                fh.write(line + "\n")
                fh.flush()
        except Exception:
            self.handleError(record)


class _ConsoleEchoHandler(_ConsoleErrorMixin, logging.StreamHandler):
    def __init__(self) -> None:
        super().__init__(sys.stdout)
        self.setFormatter(_LINE_FORMAT)

    def emit(self, record: logging.LogRecord) -> None:
        # Resolve stdout at emit time so redirected streams are honoured.
        self.stream = sys.stdout
        super().emit(record)


class EventLog:
    """Log sink backed by one ``logging`` logger per category."""

    def __init__(self, log_dir: str | Path, logger_prefix: str = "mes_monitor.events") -> None:
        self._log_dir = Path(log_dir)
        self._loggers: Dict[str, logging.Logger] = {}
        for category, suffix in CATEGORY_SUFFIXES.items():
            logger = logging.getLogger(f"{logger_prefix}.{suffix}")
            for old in list(logger.handlers):
                logger.removeHandler(old)
                old.close()
            logger.setLevel(logging.INFO)
            logger.propagate = False
            logger.addHandler(CategoryFileHandler(self._log_dir, category))
            if category == "APP_EVENT":
                logger.addHandler(_ConsoleEchoHandler())
            self._loggers[category] = logger

    def ensure_dir(self) -> None:
        try:
            self._log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print(f"log write failed: cannot create {self._log_dir}: {e}", file=sys.stdout)

    def write(self, category: LogCategory, message: str) -> None:
        self._loggers[category].info(message)

    def close(self) -> None:
        for logger in self._loggers.values():
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()
