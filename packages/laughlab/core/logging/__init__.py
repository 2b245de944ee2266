"""Structured pipeline logging.

Pipeline components receive a StructuredLogger explicitly instead of using a
process-wide sink. Log calls accept only a LogContext, whose fields are an
allow-list of identifiers and metadata (never script text).

Example:
    from laughlab.core.logging import NullStructuredLogger, StdlibStructuredLogger

    # For production: route through the logging module
    events = StdlibStructuredLogger()

    # For testing: discard everything
    events = NullStructuredLogger()
"""

from .models import LogContext, LogEntry, LogLevel
from .protocol import StructuredLogger
from .structured import (
    NullStructuredLogger,
    RecordingStructuredLogger,
    StdlibStructuredLogger,
    timed,
)

__all__ = [
    # Protocol
    "StructuredLogger",
    # Implementations
    "StdlibStructuredLogger",
    "NullStructuredLogger",
    "RecordingStructuredLogger",
    "timed",
    # Models
    "LogContext",
    "LogEntry",
    "LogLevel",
]
