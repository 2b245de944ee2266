"""Evidence-Lock agent: receipt extraction and grounded executive summary."""

from laughlab.core.agents.evidence_lock.context import shape_stage_a_input
from laughlab.core.agents.evidence_lock.fallback import generate_fallback_summary
from laughlab.core.agents.evidence_lock.models import (
    EvidenceLockResult,
    FormatType,
    PipelineState,
    Receipt,
    ReceiptSeverity,
    StageAInput,
    StageAOutput,
    StageBInput,
    StageBOutput,
    SummaryValidationResult,
    ValidationFailure,
    ValidationFailureReason,
    normalize_range,
)
from laughlab.core.agents.evidence_lock.orchestrator import (
    EvidenceLockError,
    EvidenceLockOrchestrator,
    StageAError,
)
from laughlab.core.agents.evidence_lock.runner import (
    run_evidence_lock_pipeline,
    run_evidence_lock_pipeline_sync,
)
from laughlab.core.agents.evidence_lock.specs import get_stage_a_spec, get_stage_b_spec
from laughlab.core.agents.evidence_lock.validation import CLOSING_LINE, validate_summary

__all__ = [
    "CLOSING_LINE",
    "EvidenceLockError",
    "EvidenceLockOrchestrator",
    "EvidenceLockResult",
    "FormatType",
    "PipelineState",
    "Receipt",
    "ReceiptSeverity",
    "StageAError",
    "StageAInput",
    "StageAOutput",
    "StageBInput",
    "StageBOutput",
    "SummaryValidationResult",
    "ValidationFailure",
    "ValidationFailureReason",
    "generate_fallback_summary",
    "get_stage_a_spec",
    "get_stage_b_spec",
    "normalize_range",
    "run_evidence_lock_pipeline",
    "run_evidence_lock_pipeline_sync",
    "shape_stage_a_input",
    "validate_summary",
]
