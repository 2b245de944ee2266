"""Provider-neutral types for JSON-mode LLM calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


class ProviderType(str, Enum):
    OPENAI = "openai"


@dataclass(frozen=True)
class TokenUsage:
    """Token counts for one call, or a running total."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: TokenUsage) -> TokenUsage:
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )

    def since(self, earlier: TokenUsage) -> int:
        """Total tokens spent between an earlier snapshot and this one."""
        return max(self.total_tokens - earlier.total_tokens, 0)


@dataclass(frozen=True)
class ResponseMetadata:
    """What the API reported about a call, besides its content."""

    response_id: str | None = None
    token_usage: TokenUsage = field(default_factory=TokenUsage)
    model: str | None = None
    finish_reason: str | None = None


@dataclass(frozen=True)
class LLMResponse:
    """A decoded JSON-mode completion.

    ``content`` is the parsed JSON document. Schema validation happens in the
    agent runner, not here.
    """

    content: Any
    metadata: ResponseMetadata


class LLMProvider(Protocol):
    """The single call interface the Evidence-Lock stages depend on.

    Each call is an independent request with no shared conversation state,
    so calling again with the same messages is a fresh generation.
    """

    @property
    def provider_type(self) -> ProviderType: ...

    async def generate_json_async(
        self,
        messages: list[dict[str, str]],
        model: str,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Send chat messages and return the parsed JSON reply.

        Raises:
            LLMProviderError: Transport failure, timeout, empty content or
                content that is not valid JSON
        """
        ...

    def get_token_usage(self) -> TokenUsage:
        """Running token total for this provider instance."""
        ...
