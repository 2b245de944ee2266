"""LLM provider abstraction for agents."""

from laughlab.core.agents.providers.base import (
    LLMProvider,
    LLMResponse,
    ProviderType,
    ResponseMetadata,
    TokenUsage,
)
from laughlab.core.agents.providers.errors import LLMProviderError
from laughlab.core.agents.providers.factory import create_llm_provider
from laughlab.core.agents.providers.openai import OpenAIProvider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "ProviderType",
    "ResponseMetadata",
    "TokenUsage",
    "LLMProviderError",
    "OpenAIProvider",
    "create_llm_provider",
]
