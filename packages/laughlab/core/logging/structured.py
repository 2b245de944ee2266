"""Structured logger implementations.

Example:
    from laughlab.core.logging import StdlibStructuredLogger, LogContext

    events = StdlibStructuredLogger()
    events.info("Stage A completed", LogContext(request_id="req-1", receipt_count=12))
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager

from laughlab.core.logging.models import LogContext, LogEntry, LogLevel
from laughlab.core.logging.protocol import StructuredLogger

_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


class StdlibStructuredLogger:
    """Writes structured events through the standard logging module.

    Each record is rendered as ``<message> {<json context>}``.
    """

    def __init__(self, name: str = "laughlab.pipeline"):
        self._logger = logging.getLogger(name)

    def _log(self, level: LogLevel, message: str, context: LogContext | None) -> None:
        fields = context.to_fields() if context else {}
        if fields:
            self._logger.log(
                _LEVELS[level], "%s %s", message, json.dumps(fields, sort_keys=True, default=str)
            )
        else:
            self._logger.log(_LEVELS[level], "%s", message)

    def debug(self, message: str, context: LogContext | None = None) -> None:
        self._log(LogLevel.DEBUG, message, context)

    def info(self, message: str, context: LogContext | None = None) -> None:
        self._log(LogLevel.INFO, message, context)

    def warning(self, message: str, context: LogContext | None = None) -> None:
        self._log(LogLevel.WARNING, message, context)

    def error(self, message: str, context: LogContext | None = None) -> None:
        self._log(LogLevel.ERROR, message, context)


class NullStructuredLogger:
    """Logger that discards all events.

    Useful for:
    - Testing (avoid cluttering test output)
    - Dependency injection default
    """

    def debug(self, message: str, context: LogContext | None = None) -> None:
        """No-op."""

    def info(self, message: str, context: LogContext | None = None) -> None:
        """No-op."""

    def warning(self, message: str, context: LogContext | None = None) -> None:
        """No-op."""

    def error(self, message: str, context: LogContext | None = None) -> None:
        """No-op."""


class RecordingStructuredLogger:
    """Keeps events in memory as LogEntry objects."""

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []

    def _record(self, level: LogLevel, message: str, context: LogContext | None) -> None:
        self.entries.append(LogEntry(level=level, message=message, context=context or LogContext()))

    def debug(self, message: str, context: LogContext | None = None) -> None:
        self._record(LogLevel.DEBUG, message, context)

    def info(self, message: str, context: LogContext | None = None) -> None:
        self._record(LogLevel.INFO, message, context)

    def warning(self, message: str, context: LogContext | None = None) -> None:
        self._record(LogLevel.WARNING, message, context)

    def error(self, message: str, context: LogContext | None = None) -> None:
        self._record(LogLevel.ERROR, message, context)

    def messages(self, level: LogLevel | None = None) -> list[str]:
        return [e.message for e in self.entries if level is None or e.level == level]


@contextmanager
def timed(
    events: StructuredLogger, operation: str, context: LogContext | None = None
) -> Iterator[None]:
    """Log "<operation> started" and "<operation> completed" with duration_ms.

    The completion event is only logged when the block exits normally.
    """
    base = context or LogContext()
    events.info(f"{operation} started", base)
    start = time.perf_counter()
    yield
    duration_ms = round((time.perf_counter() - start) * 1000, 3)
    events.info(f"{operation} completed", base.model_copy(update={"duration_ms": duration_ms}))
