"""Agent specification model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AgentSpec(BaseModel):
    """Agent specification (configuration).

    Data-only configuration for one LLM call. AsyncAgentRunner uses this spec
    to execute agents without separate classes.
    """

    # Identity
    name: str = Field(description="Agent name (for logging)")

    # Prompt configuration
    prompt_pack: str = Field(description="Name of prompt pack directory (system.j2, user.j2)")

    # Response configuration
    response_model: type[Any] = Field(
        description="Pydantic model for response validation (or dict for unstructured)"
    )

    # LLM settings
    model: str = Field(default="gpt-4-turbo", description="LLM model identifier")

    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")

    default_variables: dict[str, Any] = Field(
        default_factory=dict,
        description="Default variables for prompt rendering",
    )

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
