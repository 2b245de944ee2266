"""Async agent runner - execution engine for single LLM calls."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from laughlab.core.agents.prompts import PromptPackLoader
from laughlab.core.agents.providers.base import LLMProvider
from laughlab.core.agents.providers.errors import LLMProviderError
from laughlab.core.agents.result import AgentResult
from laughlab.core.agents.spec import AgentSpec

logger = logging.getLogger(__name__)


class AsyncAgentRunner:
    """Async agent execution engine.

    Responsibilities:
    - Load and render prompts
    - Call LLM provider (async)
    - Validate responses against the AgentSpec response model
    - Return standardized results

    One run is one provider call. There is no schema repair loop: whether a
    failed call is retried is the caller's decision.

    Example:
        runner = AsyncAgentRunner(provider, prompts_path)
        result = await runner.run(spec, variables)
    """

    def __init__(self, provider: LLMProvider, prompt_base_path: str | Path):
        """Initialize async agent runner.

        Args:
            provider: LLM provider
            prompt_base_path: Base directory for prompt packs
        """
        self.provider = provider
        self.prompt_loader = PromptPackLoader(base_path=prompt_base_path)

        logger.debug(f"AsyncAgentRunner initialized with {provider.provider_type.value} provider")

    def build_messages(self, spec: AgentSpec, variables: dict[str, Any]) -> list[dict[str, str]]:
        """Render the AgentSpec prompt pack into a message list.

        Raises:
            LoadError: If the prompt pack cannot be loaded
            RenderError: If a template cannot be rendered
        """
        merged_vars = {**spec.default_variables, **variables}
        return self.prompt_loader.load_and_render(spec.prompt_pack, merged_vars).to_messages()

    async def run(self, spec: AgentSpec, variables: dict[str, Any]) -> AgentResult:
        """Render prompts and execute one call."""
        start_time = time.time()
        try:
            messages = self.build_messages(spec, variables)
        except Exception as e:
            logger.error(f"Prompt preparation failed for {spec.name}: {e}")
            return AgentResult(
                success=False,
                error_message=f"Prompt error: {e}",
                error_type="execution_error",
                duration_seconds=time.time() - start_time,
            )
        return await self.run_messages(spec, messages)

    async def run_messages(self, spec: AgentSpec, messages: list[dict[str, str]]) -> AgentResult:
        """Execute one call with already-built messages.

        Args:
            spec: Agent specification
            messages: Messages for LLM (not modified)

        Returns:
            AgentResult with execution outcome
        """
        start_time = time.time()
        start_usage = self.provider.get_token_usage()

        def finish(**fields: Any) -> AgentResult:
            end_usage = self.provider.get_token_usage()
            return AgentResult(
                duration_seconds=time.time() - start_time,
                tokens_used=end_usage.since(start_usage),
                **fields,
            )

        try:
            response = await self.provider.generate_json_async(
                messages=list(messages),
                model=spec.model,
                temperature=spec.temperature,
            )

            if spec.response_model is dict:
                return finish(success=True, data=response.content)

            validated = spec.response_model.model_validate(response.content)
            logger.debug(f"Agent {spec.name} succeeded")
            return finish(success=True, data=validated)

        except LLMProviderError as e:
            logger.error(f"Provider error in {spec.name}: {e}")
            return finish(
                success=False,
                error_message=f"Provider error: {e}",
                error_type="provider_error",
            )

        except ValidationError as e:
            error_details = self._format_validation_error(e)
            logger.warning(f"Agent {spec.name} schema validation failed:\n{error_details}")
            return finish(
                success=False,
                error_message=f"Schema validation failed:\n{error_details}",
                error_type="schema_validation",
            )

        except Exception as e:
            logger.error(f"Unexpected error in {spec.name}: {type(e).__name__}: {e}")
            return finish(
                success=False,
                error_message=f"Execution error: {e}",
                error_type="execution_error",
            )

    def _format_validation_error(self, error: ValidationError) -> str:
        """Format validation error as 'loc: msg' lines.

        Input values are left out so model output never reaches the logs.
        """
        error_lines = []
        for err in error.errors():
            loc = ".".join(str(loc_part) for loc_part in err["loc"])
            error_lines.append(f"- {loc}: {err['msg']}")

        return "\n".join(error_lines)
