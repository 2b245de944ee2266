"""Evidence-Lock runner - facade for EvidenceLockOrchestrator."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from laughlab.core.agents.evidence_lock.models import EvidenceLockResult
from laughlab.core.agents.evidence_lock.orchestrator import EvidenceLockOrchestrator
from laughlab.core.agents.providers.base import LLMProvider
from laughlab.core.analysis.models import PromptAOutput
from laughlab.core.config.models import EvidenceLockConfig
from laughlab.core.logging import StructuredLogger


async def run_evidence_lock_pipeline(
    script_text: str,
    prompt_a_output: PromptAOutput | Mapping[str, Any],
    provider: LLMProvider,
    *,
    request_id: str | None = None,
    event_logger: StructuredLogger | None = None,
    config: EvidenceLockConfig | None = None,
    prompt_base_path: str | Path | None = None,
) -> EvidenceLockResult:
    """Run the Evidence-Lock pipeline for one script.

    This is the primary async entry point. It handles:
    1. Receipt extraction (Stage A)
    2. Grounded summary with validation and one blind retry (Stage B)
    3. Deterministic fallback when Stage B cannot produce a valid summary

    Args:
        script_text: Raw script text
        prompt_a_output: Upstream extraction output (model or parsed JSON)
        provider: LLM provider
        request_id: Optional identifier attached to every pipeline event
        event_logger: Structured logger for pipeline events
        config: Stage models and temperatures (defaults to EvidenceLockConfig())
        prompt_base_path: Base path for prompt packs (defaults to bundled packs)

    Returns:
        EvidenceLockResult

    Raises:
        StageAError: If Stage A fails
    """
    config = config or EvidenceLockConfig()
    orchestrator = EvidenceLockOrchestrator(
        provider,
        event_logger=event_logger,
        stage_a_model=config.stage_a.model,
        stage_a_temperature=config.stage_a.temperature,
        stage_b_model=config.stage_b.model,
        stage_b_temperature=config.stage_b.temperature,
        prompt_base_path=prompt_base_path or config.prompt_base_path,
    )
    return await orchestrator.run(script_text, prompt_a_output, request_id=request_id)


def run_evidence_lock_pipeline_sync(
    script_text: str,
    prompt_a_output: PromptAOutput | Mapping[str, Any],
    provider: LLMProvider,
    **kwargs: Any,
) -> EvidenceLockResult:
    """Synchronous wrapper around run_evidence_lock_pipeline.

    Must not be called from inside a running event loop.
    """
    return asyncio.run(run_evidence_lock_pipeline(script_text, prompt_a_output, provider, **kwargs))
