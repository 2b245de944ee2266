"""Agent result model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AgentResult(BaseModel):
    """Generic agent result envelope.

    Standardized result format for all agent calls.
    """

    success: bool = Field(description="Whether agent succeeded")

    data: Any | None = Field(
        default=None,
        description="Response data (parsed and validated)",
    )

    error_message: str | None = Field(
        default=None,
        description="Error message if failed (never contains raw model output)",
    )

    error_type: str | None = Field(
        default=None,
        description="Failure category: 'provider_error', 'schema_validation' or 'execution_error'",
    )

    # Observability
    duration_seconds: float = Field(ge=0.0, description="Execution duration")

    tokens_used: int = Field(default=0, ge=0, description="Tokens consumed")

    model_config = ConfigDict(frozen=True)
