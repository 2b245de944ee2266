"""Provider factory for LLM provider dispatch."""

from __future__ import annotations

from laughlab.core.agents.providers.base import LLMProvider
from laughlab.core.agents.providers.openai import OpenAIProvider
from laughlab.core.config.models import AppConfig


def create_llm_provider(app_config: AppConfig) -> LLMProvider:
    """Create the configured LLM provider."""
    provider_name = app_config.llm_provider.lower().strip()

    if provider_name == "openai":
        return OpenAIProvider(
            api_key=app_config.llm_api_key,
            base_url=app_config.llm_base_url,
            timeout=app_config.llm_timeout_seconds,
        )

    raise ValueError(f"Unknown LLM provider configured: {app_config.llm_provider}")
