"""Provider error types."""


class LLMProviderError(Exception):
    """Raised when an LLM call fails (network, timeout, empty or unparseable response)."""

    pass
