"""Logging for coordinate networks.

Console output is human readable; an optional log file receives JSON lines
so runs can be inspected afterwards. Library modules log through
:class:`StructuredLogger`, which carries a dict of structured fields along
with each message.
"""

import json
import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

PACKAGE_LOGGER = "coordnet"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines with their structured fields merged in."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": record.created,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(getattr(record, "extra_data", {}))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(log_path: Path | None = None, level: int = logging.INFO) -> logging.Logger:
    """Send ``coordnet`` records to stderr and optionally to a JSON lines file.

    Only the package logger is configured. Handlers from a previous call are
    closed and replaced. Stdout is left alone so commands printing JSON stay
    machine readable.

    Args:
        log_path: Optional path for JSON lines log file
        level: Logging level

    Returns:
        The package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    package_logger.addHandler(console)

    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        package_logger.addHandler(file_handler)

    return package_logger


def get_logger(name: str) -> "StructuredLogger":
    """Get a structured logger for a module (usually ``__name__``)."""
    return StructuredLogger(logging.getLogger(name))


class StructuredLogger:
    """Wrapper attaching structured fields to log records.

    Fields bound with :meth:`bind` go out with every message; fields given to
    a single call are merged on top of them.
    """

    def __init__(self, logger: logging.Logger, context: dict[str, Any] | None = None):
        self.logger = logger
        self.context = dict(context or {})

    def bind(self, **fields: Any) -> "StructuredLogger":
        """New logger sharing the underlying logger, with extra bound fields."""
        return StructuredLogger(self.logger, {**self.context, **fields})

    def is_enabled_for(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def _log(self, level: int, msg: str, data: dict[str, Any] | None = None) -> None:
        if not self.logger.isEnabledFor(level):
            return
        fields = {**self.context, **(data or {})}
        extra = {"extra_data": fields} if fields else {}
        self.logger.log(level, msg, extra=extra)

    def debug(self, msg: str, data: dict[str, Any] | None = None) -> None:
        self._log(logging.DEBUG, msg, data)

    def info(self, msg: str, data: dict[str, Any] | None = None) -> None:
        self._log(logging.INFO, msg, data)

    def warning(self, msg: str, data: dict[str, Any] | None = None) -> None:
        self._log(logging.WARNING, msg, data)

    def error(self, msg: str, data: dict[str, Any] | None = None) -> None:
        self._log(logging.ERROR, msg, data)

    @contextmanager
    def timed(
        self, msg: str, level: int = logging.DEBUG, data: dict[str, Any] | None = None
    ) -> Iterator[dict[str, Any]]:
        """Log ``msg`` with ``elapsed_ms`` once the block completes.

        Yields the field dict, so the block can add results to the record.
        Nothing is logged if the block raises.
        """
        fields = dict(data or {})
        start = time.perf_counter()
        yield fields
        fields["elapsed_ms"] = round((time.perf_counter() - start) * 1000.0, 3)
        self._log(level, msg, fields)


__all__ = [
    "setup_logging",
    "get_logger",
    "StructuredLogger",
    "JSONFormatter",
]
