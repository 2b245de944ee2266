"""Protocol definition for structured pipeline logging."""

from typing import Protocol

from laughlab.core.logging.models import LogContext


class StructuredLogger(Protocol):
    """Protocol for structured logging implementations.

    Injected into the pipeline rather than looked up globally. Every method
    takes a fixed message plus a LogContext, which only admits allow-listed
    metadata fields.
    """

    def debug(self, message: str, context: LogContext | None = None) -> None:
        """Log debug message with structured context."""
        ...

    def info(self, message: str, context: LogContext | None = None) -> None:
        """Log info message with structured context."""
        ...

    def warning(self, message: str, context: LogContext | None = None) -> None:
        """Log warning message with structured context."""
        ...

    def error(self, message: str, context: LogContext | None = None) -> None:
        """Log error message with structured context."""
        ...
