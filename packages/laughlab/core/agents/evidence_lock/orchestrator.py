"""Orchestrator for the Evidence-Lock pipeline.

Stage A extracts receipts, Stage B writes a summary that may only cite them,
and a deterministic validator decides whether the summary is accepted. An
invalid first summary gets one blind re-roll; anything that still fails is
replaced by the deterministic fallback summary.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from laughlab.core.agents.async_runner import AsyncAgentRunner
from laughlab.core.agents.evidence_lock.context import (
    build_stage_b_input,
    shape_stage_a_input,
    shape_stage_a_variables,
    shape_stage_b_variables,
)
from laughlab.core.agents.evidence_lock.fallback import generate_fallback_summary
from laughlab.core.agents.evidence_lock.models import (
    EvidenceLockResult,
    PipelineState,
    StageAOutput,
    StageBOutput,
    SummaryValidationResult,
)
from laughlab.core.agents.evidence_lock.specs import get_stage_a_spec, get_stage_b_spec
from laughlab.core.agents.evidence_lock.validation import validate_summary
from laughlab.core.agents.prompts import LoadError, RenderError
from laughlab.core.agents.providers.base import LLMProvider
from laughlab.core.analysis.models import PromptAOutput
from laughlab.core.logging import LogContext, NullStructuredLogger, StructuredLogger, timed

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_BASE_PATH = Path(__file__).parent / "prompts"


class EvidenceLockError(Exception):
    """Base error for the Evidence-Lock pipeline."""

    pass


class StageAError(EvidenceLockError):
    """Raised when receipt extraction fails; the pipeline cannot continue."""

    def __init__(self, message: str, error_type: str | None = None):
        super().__init__(message)
        self.error_type = error_type


class _RunTrace:
    """Per-run state history. Never stored on the orchestrator."""

    def __init__(self, events: StructuredLogger, request_id: str | None):
        self.events = events
        self.request_id = request_id
        self.history: list[PipelineState] = []

    def enter(self, state: PipelineState) -> None:
        self.history.append(state)
        self.events.debug(
            "Pipeline state changed", LogContext(request_id=self.request_id, stage=state.value)
        )


class EvidenceLockOrchestrator:
    """Runs Stage A, Stage B with validation and one retry, and the fallback.

    The instance holds configuration only, so one orchestrator can serve
    concurrent runs.

    Attributes:
        provider: LLM provider
        events: Structured logger receiving pipeline events
        stage_a_model: Model used for receipt extraction
        stage_a_temperature: Sampling temperature for receipt extraction
        stage_b_model: Model used for the summary
        stage_b_temperature: Sampling temperature for the summary
        prompt_base_path: Prompt pack base path
    """

    def __init__(
        self,
        provider: LLMProvider,
        *,
        event_logger: StructuredLogger | None = None,
        stage_a_model: str = "gpt-4-turbo",
        stage_a_temperature: float = 0.2,
        stage_b_model: str = "gpt-4-turbo",
        stage_b_temperature: float = 0.7,
        prompt_base_path: str | Path | None = None,
    ):
        """Initialize Evidence-Lock orchestrator.

        Args:
            provider: LLM provider for both stages
            event_logger: Structured logger (uses NullStructuredLogger if None)
            stage_a_model: Model identifier for Stage A (default: gpt-4-turbo)
            stage_a_temperature: Stage A temperature (default: 0.2)
            stage_b_model: Model identifier for Stage B (default: gpt-4-turbo)
            stage_b_temperature: Stage B temperature (default: 0.7)
            prompt_base_path: Optional prompt pack base path
        """
        self.provider = provider
        self.events = event_logger or NullStructuredLogger()
        self.stage_a_model = stage_a_model
        self.stage_a_temperature = stage_a_temperature
        self.stage_b_model = stage_b_model
        self.stage_b_temperature = stage_b_temperature
        self.prompt_base_path = Path(prompt_base_path or DEFAULT_PROMPT_BASE_PATH)

        logger.debug(
            f"EvidenceLockOrchestrator initialized "
            f"(stage_a={stage_a_model}, stage_b={stage_b_model})"
        )

    def get_cache_key(
        self, script_text: str, prompt_a_output: PromptAOutput | Mapping[str, Any]
    ) -> str:
        """Generate a SHA256 cache key over every input that affects the result."""
        if isinstance(prompt_a_output, PromptAOutput):
            prompt_a_data: Any = prompt_a_output.model_dump(mode="json")
        else:
            prompt_a_data = dict(prompt_a_output)

        key_data = {
            "script_text": script_text,
            "prompt_a_output": prompt_a_data,
            "stage_a": [self.stage_a_model, self.stage_a_temperature],
            "stage_b": [self.stage_b_model, self.stage_b_temperature],
        }
        canonical = json.dumps(
            key_data,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            default=str,
        )
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    async def run(
        self,
        script_text: str,
        prompt_a_output: PromptAOutput | Mapping[str, Any],
        request_id: str | None = None,
    ) -> EvidenceLockResult:
        """Run the full pipeline for one script.

        Args:
            script_text: Raw script text
            prompt_a_output: Upstream extraction (classification, metrics, issues)
            request_id: Optional identifier attached to every event

        Returns:
            EvidenceLockResult. A fallback summary that fails validation is
            reported through ``validation``, never raised.

        Raises:
            StageAError: If Stage A fails (provider error or schema failure)
        """
        trace = _RunTrace(self.events, request_id)
        runner = AsyncAgentRunner(self.provider, self.prompt_base_path)

        self.events.info("Evidence-Lock pipeline started", LogContext(request_id=request_id))

        stage_a = await self._run_stage_a(runner, trace, script_text, prompt_a_output)

        summary, validation, retry_count = await self._run_stage_b(runner, trace, stage_a)

        used_fallback = summary is None
        if summary is None or validation is None:
            summary, validation = self._run_fallback(trace, stage_a, retry_count)

        trace.enter(PipelineState.DONE)
        result = EvidenceLockResult(
            stage_a=stage_a,
            stage_b=StageBOutput(summary=summary),
            validation=validation,
            retry_count=retry_count,
            used_fallback=used_fallback,
            states=trace.history,
        )

        self.events.info(
            "Evidence-Lock pipeline completed",
            LogContext(
                request_id=request_id,
                retry_count=retry_count,
                used_fallback=used_fallback,
                validation_passed=validation.valid,
                receipt_count=len(stage_a.receipts),
            ),
        )
        return result

    async def _run_stage_a(
        self,
        runner: AsyncAgentRunner,
        trace: _RunTrace,
        script_text: str,
        prompt_a_output: PromptAOutput | Mapping[str, Any],
    ) -> StageAOutput:
        trace.enter(PipelineState.STAGE_A_RUNNING)
        context = LogContext(request_id=trace.request_id, stage="stage_a")

        try:
            stage_a_input = shape_stage_a_input(script_text, prompt_a_output)
        except ValueError as e:
            self.events.error(
                "Stage A failed", context.model_copy(update={"error_type": type(e).__name__})
            )
            raise StageAError(f"Invalid Stage A input: {e}", "input_error") from e

        spec = get_stage_a_spec(model=self.stage_a_model, temperature=self.stage_a_temperature)

        with timed(self.events, "Stage A", context):
            result = await runner.run(spec, shape_stage_a_variables(stage_a_input))
            if not result.success or not isinstance(result.data, StageAOutput):
                self.events.error(
                    "Stage A failed",
                    context.model_copy(update={"error_type": result.error_type}),
                )
                raise StageAError(
                    result.error_message or "Stage A returned no output", result.error_type
                )

        # Metrics are a pass-through of the input snapshot, whatever the model echoed
        stage_a = result.data
        if stage_a.metrics != stage_a_input.metrics_snapshot:
            self.events.warning(
                "Stage A metrics replaced with input snapshot",
                context.model_copy(update={"error_type": "metrics_mismatch"}),
            )
            stage_a = stage_a.model_copy(update={"metrics": stage_a_input.metrics_snapshot})
        trace.enter(PipelineState.STAGE_A_DONE)
        self.events.info(
            "Stage A produced receipts",
            context.model_copy(
                update={
                    "receipt_count": len(stage_a.receipts),
                    "format_type": stage_a.format_type.value,
                }
            ),
        )
        return stage_a

    async def _run_stage_b(
        self, runner: AsyncAgentRunner, trace: _RunTrace, stage_a: StageAOutput
    ) -> tuple[str | None, SummaryValidationResult | None, int]:
        """Run up to two Stage B attempts.

        Returns:
            (summary, validation, retry_count). summary is None when the
            pipeline must fall back.
        """
        spec = get_stage_b_spec(model=self.stage_b_model, temperature=self.stage_b_temperature)

        try:
            # Built once; the retry re-sends these exact messages
            messages = runner.build_messages(
                spec, shape_stage_b_variables(build_stage_b_input(stage_a))
            )
        except (LoadError, RenderError) as e:
            self.events.error(
                "Stage B prompt preparation failed",
                LogContext(
                    request_id=trace.request_id,
                    stage="stage_b",
                    error_type=type(e).__name__,
                ),
            )
            return None, None, 0

        retry_count = 0
        for attempt, state in enumerate(
            (PipelineState.STAGE_B_ATTEMPT_1, PipelineState.STAGE_B_ATTEMPT_2), start=1
        ):
            trace.enter(state)
            context = LogContext(request_id=trace.request_id, stage="stage_b", attempt=attempt)

            with timed(self.events, f"Stage B attempt {attempt}", context):
                result = await runner.run_messages(spec, messages)

            if not result.success or not isinstance(result.data, StageBOutput):
                self.events.warning(
                    "Stage B attempt failed",
                    context.model_copy(update={"error_type": result.error_type}),
                )
                return None, None, retry_count

            summary = result.data.summary
            validation = validate_summary(summary, stage_a.receipts)
            if validation.valid:
                trace.enter(PipelineState.VALID)
                self.events.info(
                    "Stage B summary passed validation",
                    context.model_copy(update={"validation_passed": True}),
                )
                return summary, validation, retry_count

            trace.enter(PipelineState.INVALID)
            self.events.warning(
                "Stage B summary failed validation",
                context.model_copy(
                    update={
                        "validation_passed": False,
                        "failure_reasons": [r.value for r in validation.reasons],
                        "cited_ranges": _unapproved_ranges(validation),
                    }
                ),
            )
            if attempt == 1:
                retry_count = 1

        return None, None, retry_count

    def _run_fallback(
        self, trace: _RunTrace, stage_a: StageAOutput, retry_count: int
    ) -> tuple[str, SummaryValidationResult]:
        summary = generate_fallback_summary(stage_a.metrics, stage_a.receipts)
        trace.enter(PipelineState.FALLBACK_GENERATED)

        validation = validate_summary(summary, stage_a.receipts)
        context = LogContext(
            request_id=trace.request_id,
            stage="fallback",
            retry_count=retry_count,
            used_fallback=True,
            validation_passed=validation.valid,
        )
        if validation.valid:
            self.events.info("Fallback summary generated", context)
        else:
            self.events.error(
                "Fallback summary failed validation",
                context.model_copy(
                    update={
                        "failure_reasons": [r.value for r in validation.reasons],
                        "cited_ranges": _unapproved_ranges(validation),
                    }
                ),
            )
        return summary, validation


def _unapproved_ranges(validation: SummaryValidationResult) -> list[str]:
    return [f.cited_range for f in validation.failures if f.cited_range]
