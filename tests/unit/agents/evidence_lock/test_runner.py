"""Unit tests for the Evidence-Lock runner facade."""

import pytest

from laughlab.core.agents.evidence_lock import (
    StageAError,
    run_evidence_lock_pipeline,
    run_evidence_lock_pipeline_sync,
)
from laughlab.core.agents.providers.errors import LLMProviderError
from laughlab.core.config.models import AgentConfig, EvidenceLockConfig

SCRIPT = "INT. OFFICE - DAY\n\nDEV\nI alphabetized the snacks."


@pytest.mark.asyncio
async def test_run_pipeline_async(make_provider, stage_a_payload, valid_summary, prompt_a_output):
    """Test the async entry point returns a validated result."""
    provider = make_provider(stage_a_payload, {"summary": valid_summary})

    result = await run_evidence_lock_pipeline(SCRIPT, prompt_a_output, provider, request_id="r-1")

    assert result.validation_passed is True
    assert result.used_fallback is False


@pytest.mark.asyncio
async def test_run_pipeline_uses_config(
    make_provider, stage_a_payload, valid_summary, prompt_a_output
):
    """Test stage models and temperatures come from EvidenceLockConfig."""
    provider = make_provider(stage_a_payload, {"summary": valid_summary})
    config = EvidenceLockConfig(
        stage_a=AgentConfig(model="extract-model", temperature=0.0),
        stage_b=AgentConfig(model="summary-model", temperature=1.0),
    )

    await run_evidence_lock_pipeline(SCRIPT, prompt_a_output, provider, config=config)

    stage_a_call, stage_b_call = provider.generate_json_async.call_args_list
    assert stage_a_call.kwargs["model"] == "extract-model"
    assert stage_a_call.kwargs["temperature"] == 0.0
    assert stage_b_call.kwargs["model"] == "summary-model"
    assert stage_b_call.kwargs["temperature"] == 1.0


def test_run_pipeline_sync(make_provider, stage_a_payload, prompt_a_dict):
    """Test the sync wrapper runs the full pipeline."""
    provider = make_provider(stage_a_payload, LLMProviderError("timeout"))

    result = run_evidence_lock_pipeline_sync(SCRIPT, prompt_a_dict, provider)

    assert result.used_fallback is True
    assert result.validation_passed is True


def test_run_pipeline_sync_propagates_stage_a_error(make_provider, prompt_a_dict):
    """Test Stage A failures surface through the sync wrapper."""
    provider = make_provider(LLMProviderError("unauthorized"))

    with pytest.raises(StageAError):
        run_evidence_lock_pipeline_sync(SCRIPT, prompt_a_dict, provider)
