"""Configuration models for laughlab."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class AgentConfig(BaseModel):
    """Per-stage LLM configuration."""

    model: str = Field(default="gpt-4-turbo", description="LLM model name")

    temperature: float = Field(
        default=0.7, ge=0.0, le=2.0, description="LLM temperature (0=deterministic, 2=creative)"
    )


class EvidenceLockConfig(BaseModel):
    """Evidence-Lock pipeline configuration."""

    stage_a: AgentConfig = Field(
        default_factory=lambda: AgentConfig(temperature=0.2),
        description="Receipt extraction call",
    )

    stage_b: AgentConfig = Field(
        default_factory=lambda: AgentConfig(temperature=0.7),
        description="Grounded summary call",
    )

    prompt_base_path: str | None = Field(
        default=None, description="Override directory for prompt packs (defaults to bundled packs)"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON log lines")
    filename: str | None = Field(default=None, description="Log file (stdout if None)")


class AppConfig(BaseModel):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")

    llm_provider: str = Field(default="openai", description="LLM provider name")
    llm_api_key: str | None = Field(default=None, description="API key (env if None)")
    llm_base_url: str | None = Field(default=None, description="Custom API base URL")
    llm_timeout_seconds: float = Field(default=120.0, gt=0, description="Per-call timeout")

    logging: LoggingConfig = LoggingConfig()
    evidence_lock: EvidenceLockConfig = EvidenceLockConfig()

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("config.json")
