"""OpenAI provider implementation."""

from __future__ import annotations

import json
import logging
import threading
from typing import Any

from openai import AsyncOpenAI

from laughlab.core.agents.providers.base import (
    LLMResponse,
    ProviderType,
    ResponseMetadata,
    TokenUsage,
)
from laughlab.core.agents.providers.errors import LLMProviderError

logger = logging.getLogger(__name__)

# Per-call timeout; long scripts can take a while to process
DEFAULT_TIMEOUT_SECONDS = 120.0


class OpenAIProvider:
    """OpenAI provider using the async chat completions API in JSON mode.

    Responsibilities:
    - Async LLM API calls
    - Convert responses to standard format
    - Thread-safe token tracking
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key (uses env var if not provided)
            base_url: Optional API base URL
            timeout: Request timeout in seconds
        """
        self._async_client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        self.timeout = timeout

        self._token_lock = threading.Lock()
        self._total_tokens = TokenUsage()

    @property
    def provider_type(self) -> ProviderType:
        """Provider type identifier."""
        return ProviderType.OPENAI

    def get_token_usage(self) -> TokenUsage:
        """Get cumulative token usage (thread-safe)."""
        with self._token_lock:
            return self._total_tokens

    def reset_token_tracking(self) -> None:
        """Reset token tracking (thread-safe)."""
        with self._token_lock:
            self._total_tokens = TokenUsage()

    def _update_token_usage(self, usage: TokenUsage) -> None:
        with self._token_lock:
            self._total_tokens = self._total_tokens + usage

    async def generate_json_async(
        self,
        messages: list[dict[str, str]],
        model: str,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate JSON response asynchronously.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Model identifier
            temperature: Sampling temperature
            **kwargs: Extra chat completion parameters

        Returns:
            LLMResponse with parsed JSON content and metadata

        Raises:
            LLMProviderError: On unrecoverable errors
        """
        try:
            request_params: dict[str, Any] = {
                "model": model,
                "messages": messages,
                "response_format": {"type": "json_object"},
                **kwargs,
            }
            if temperature is not None:
                request_params["temperature"] = temperature

            response = await self._async_client.chat.completions.create(**request_params)

            choice = response.choices[0] if response.choices else None
            content = choice.message.content if choice else None
            if not content:
                raise LLMProviderError("Empty response from OpenAI API")

            try:
                response_data = json.loads(content)
            except json.JSONDecodeError as e:
                logger.error(f"Failed to parse JSON response: {e.msg} at position {e.pos}")
                raise LLMProviderError(f"Failed to parse JSON response: {e.msg}") from e

            token_usage = TokenUsage()
            if getattr(response, "usage", None):
                token_usage = TokenUsage(
                    prompt_tokens=getattr(response.usage, "prompt_tokens", 0) or 0,
                    completion_tokens=getattr(response.usage, "completion_tokens", 0) or 0,
                    total_tokens=getattr(response.usage, "total_tokens", 0) or 0,
                )
                self._update_token_usage(token_usage)

            return LLMResponse(
                content=response_data,
                metadata=ResponseMetadata(
                    response_id=getattr(response, "id", None),
                    token_usage=token_usage,
                    model=model,
                    finish_reason=getattr(choice, "finish_reason", None),
                ),
            )

        except LLMProviderError:
            raise
        except Exception as e:
            logger.error(f"Async OpenAI provider error: {type(e).__name__}")
            raise LLMProviderError(f"Provider error: {e}") from e
