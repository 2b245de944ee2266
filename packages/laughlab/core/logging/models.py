"""Data models for structured pipeline logging."""

import re
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

_CITED_RANGE = re.compile(r"^\[Lines? \d+–\d+\] →$")


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogContext(BaseModel):
    """Allow-listed metadata attached to a pipeline log event.

    Only identifiers, counts, flags, failure tags and normalized range
    citations are accepted. Unknown fields are rejected so no call site can
    attach free text such as script lines or provider error messages.
    """

    # Identification
    request_id: str | None = None
    stage: str | None = None
    attempt: int | None = None

    # Stage A
    receipt_count: int | None = None
    format_type: str | None = None

    # Outcome
    retry_count: int | None = None
    used_fallback: bool | None = None
    validation_passed: bool | None = None
    failure_reasons: list[str] = Field(default_factory=list)
    cited_ranges: list[str] = Field(default_factory=list)

    # Errors
    error_type: str | None = None

    # Timing
    duration_ms: float | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("cited_ranges")
    @classmethod
    def validate_cited_ranges(cls, v: list[str]) -> list[str]:
        for cited in v:
            if not _CITED_RANGE.match(cited):
                raise ValueError(f"cited_ranges entries must be normalized ranges, got {cited!r}")
        return v

    def to_fields(self) -> dict:
        """Return only the populated fields, JSON-ready."""
        return self.model_dump(mode="json", exclude_none=True, exclude_defaults=True)


class LogEntry(BaseModel):
    """Complete log entry with message and context."""

    level: LogLevel
    message: str
    context: LogContext
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = ConfigDict(frozen=True)
