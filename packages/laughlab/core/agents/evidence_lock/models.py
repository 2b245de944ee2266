"""Pydantic models for the Evidence-Lock pipeline."""

from __future__ import annotations

import re
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from laughlab.core.analysis.models import MetricsSnapshot

EN_DASH = "–"

# "[Lines X–Y] →" or "[Line X–Y] →" with EN DASH, hyphen or minus sign
RANGE_PATTERN = r"\[(Lines?)\s+(\d+)\s*[–−-]\s*(\d+)\]\s*→"

_RANGE_EXACT = re.compile(rf"^{RANGE_PATTERN}$")
_RANGE_ANYWHERE = re.compile(RANGE_PATTERN)
_DASH_VARIANTS = re.compile(r"[−-]")
_RECEIPT_ID = re.compile(r"^r(0[1-9]|1[0-5])$")


def normalize_range(text: str) -> str:
    """Normalize a receipt range citation to ``[Lines X–Y] →``.

    Whitespace is collapsed and every dash variant becomes an EN DASH, so
    ``[Lines 45-67]→`` and ``[Lines 45−67] →`` compare equal to
    ``[Lines 45–67] →``. Text that is not a citation is still collapsed and
    dash-unified rather than rejected.
    """
    match = _RANGE_ANYWHERE.fullmatch(text.strip())
    if match:
        word, start, end = match.groups()
        return f"[{word} {start}{EN_DASH}{end}] →"
    return _DASH_VARIANTS.sub(EN_DASH, " ".join(text.split()))


class FormatType(str, Enum):
    """Script format inferred by Stage A."""

    SITCOM = "sitcom"
    SKETCH = "sketch"
    STANDUP = "standup"
    FEATURE = "feature"


class ReceiptSeverity(str, Enum):
    """Receipt severity levels."""

    LOW = "low"
    MED = "med"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"low": 1, "med": 2, "high": 3}[self.value]


class Receipt(BaseModel):
    """Evidence-locked observation extracted by Stage A.

    Receipts are immutable: Stage B and the validator only read them.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(description="Receipt ID, 'r01' through 'r15'")

    range: str = Field(description="Line citation, exact format '[Lines X–Y] →'")

    quote: str | None = Field(default=None, description="Optional excerpt, <=20 words")

    note: str = Field(description="Plain factual observation, 8-20 words, no adjectives")

    tags: list[str] = Field(min_length=1, description="Category labels (e.g. 'gap', 'pacing')")

    severity: ReceiptSeverity

    metric_refs: list[str] = Field(
        default_factory=list, description="Metric keys this receipt is evidence for"
    )

    confidence: float = Field(ge=0.0, le=1.0, description="Extraction confidence (0-1)")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not _RECEIPT_ID.match(v):
            raise ValueError(f"Receipt ID must be r01 through r15, got '{v}'")
        return v

    @field_validator("range")
    @classmethod
    def validate_range(cls, v: str) -> str:
        """Validate the citation format and that X <= Y."""
        match = _RANGE_EXACT.match(v)
        if not match:
            raise ValueError('Range must match format "[Lines X–Y] →"')
        start, end = int(match.group(2)), int(match.group(3))
        if start < 1:
            raise ValueError("Range start line must be positive")
        if end < start:
            raise ValueError(f"Range end line {end} is before start line {start}")
        return v

    @field_validator("quote")
    @classmethod
    def validate_quote(cls, v: str | None) -> str | None:
        if v and len(v.split()) > 20:
            raise ValueError("Quote must be <=20 words")
        return v

    @field_validator("note")
    @classmethod
    def validate_note(cls, v: str) -> str:
        word_count = len(v.split())
        if word_count < 8 or word_count > 20:
            raise ValueError(f"Note must be 8-20 words, got {word_count}")
        return v

    @property
    def normalized_range(self) -> str:
        return normalize_range(self.range)


class StageAInput(BaseModel):
    """Input for Stage A receipt extraction."""

    model_config = ConfigDict(frozen=True)

    script_text: str = Field(min_length=1)
    jokes_by_line: list[int] = Field(default_factory=list)
    characters: list[str] = Field(default_factory=list)
    metrics_snapshot: MetricsSnapshot


class StageAOutput(BaseModel):
    """Output from Stage A: format, pass-through metrics and 10-15 receipts."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    format_type: FormatType = Field(alias="formatType")

    metrics: MetricsSnapshot = Field(description="Pass-through of metrics_snapshot")

    receipts: list[Receipt] = Field(min_length=10, max_length=15)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> StageAOutput:
        ids = [r.id for r in self.receipts]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Receipt IDs must be unique, duplicated: {duplicates}")
        return self


class StageBInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    format_type: FormatType
    metrics: MetricsSnapshot
    receipts: list[Receipt]


class StageBOutput(BaseModel):
    """Output from Stage B: the grounded summary text."""

    model_config = ConfigDict(frozen=True)

    summary: str = Field(min_length=1)


class ValidationFailureReason(str, Enum):
    """Closed set of summary validation failure tags."""

    PARAGRAPH_COUNT = "paragraph_count"
    WORD_COUNT = "word_count"
    FORMATTING_VIOLATION = "formatting_violation"
    UNAPPROVED_RECEIPT_RANGE = "unapproved_receipt_range"
    MISSING_METRIC_P1 = "missing_metric_p1"
    MISSING_METRIC_P2 = "missing_metric_p2"
    MISSING_METRIC_P3 = "missing_metric_p3"
    MISSING_RECEIPT_P1 = "missing_receipt_p1"
    MISSING_RECEIPT_P2 = "missing_receipt_p2"
    MISSING_RECEIPT_P3 = "missing_receipt_p3"
    MISSING_CLOSING_LINE = "missing_closing_line"


class ValidationFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: ValidationFailureReason
    details: str | None = None
    cited_range: str | None = Field(
        default=None, description="Normalized range for unapproved_receipt_range failures"
    )


class SummaryValidationResult(BaseModel):
    """Validator verdict. Valid iff no failures were recorded."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    failures: list[ValidationFailure] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_consistency(self) -> SummaryValidationResult:
        if self.valid != (len(self.failures) == 0):
            raise ValueError("valid must be True exactly when failures is empty")
        return self

    @property
    def reasons(self) -> list[ValidationFailureReason]:
        return [f.reason for f in self.failures]


class PipelineState(str, Enum):
    """Pipeline states, in the order a run can visit them."""

    STAGE_A_RUNNING = "stage_a_running"
    STAGE_A_DONE = "stage_a_done"
    STAGE_B_ATTEMPT_1 = "stage_b_attempt_1"
    STAGE_B_ATTEMPT_2 = "stage_b_attempt_2"
    VALID = "valid"
    INVALID = "invalid"
    FALLBACK_GENERATED = "fallback_generated"
    DONE = "done"


class EvidenceLockResult(BaseModel):
    """Final, frozen result of one pipeline run."""

    model_config = ConfigDict(frozen=True)

    stage_a: StageAOutput
    stage_b: StageBOutput
    validation: SummaryValidationResult
    retry_count: int = Field(ge=0, le=1)
    used_fallback: bool
    states: list[PipelineState] = Field(
        default_factory=list, description="States visited by the run, in order"
    )

    @property
    def validation_passed(self) -> bool:
        return self.validation.valid


RECEIPT_TAG_CATEGORIES: dict[str, tuple[str, ...]] = {
    "positive": ("strength", "working", "effective", "strong", "callback-hit"),
    "constraint": ("gap", "pacing", "soft-spot", "constraint"),
    "character": ("character", "ensemble", "underutilized", "balance", "distribution"),
    "revision": ("punch-up", "revision", "leverage", "roi", "opportunity"),
    "callback": ("callback", "callback-miss", "callback-chain"),
}


def categorize_receipt(receipt: Receipt) -> Literal["working", "opportunity"]:
    """Group a receipt for display: low-severity positive receipts are 'working'."""
    has_positive = any(
        positive in tag.lower()
        for tag in receipt.tags
        for positive in RECEIPT_TAG_CATEGORIES["positive"]
    )
    if has_positive and receipt.severity == ReceiptSeverity.LOW:
        return "working"
    return "opportunity"
