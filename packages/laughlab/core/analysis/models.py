"""Pydantic models for the upstream script extraction (Prompt A) contract.

These are produced before the Evidence-Lock pipeline runs. The pipeline only
reads them: metrics are passed through Stage A untouched and issue candidates
seed the joke line hints.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

_FIRST_INT = re.compile(r"\d+")


class RetentionRiskLevel(str, Enum):
    """Overall audience retention risk."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class IssueSeverity(str, Enum):
    """Severity of an upstream issue or retention indicator."""

    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"


class LocationType(str, Enum):
    LINE_RANGE = "line_range"
    TIMECODE_RANGE = "timecode_range"
    SCENE = "scene"


class InferredFormat(str, Enum):
    SCENE = "scene"
    HALF_HOUR = "half_hour"
    HOUR = "hour"
    FEATURE = "feature"


class TierCompatibility(str, Enum):
    OK = "ok"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    UNSUPPORTED_FORMAT = "unsupported_format"


class PeakReasonTag(str, Enum):
    SETUP_PAYOFF = "setup_payoff"
    SURPRISE = "surprise"
    CHARACTER = "character"
    ESCALATION = "escalation"
    BUTTON = "button"
    OTHER = "other"


class RetentionIndicatorType(str, Enum):
    GAP_CLUSTER = "gap_cluster"
    LATE_SOFT_END = "late_soft_end"
    REPEAT_ESCALATION = "repeat_escalation"
    LOW_SURPRISE_RUN = "low_surprise_run"


class IssueType(str, Enum):
    PACING_SOFT_SPOT = "pacing_soft_spot"
    ESCALATION_REPEAT = "escalation_repeat"
    SURPRISE_DECAY = "surprise_decay"
    BUTTON_WEAKNESS = "button_weakness"
    CHARACTER_UNDERUTILIZATION = "character_underutilization"
    OTHER = "other"


class IssueLocation(BaseModel):
    """Where in the script an observation applies."""

    model_config = ConfigDict(frozen=True)

    type: LocationType = Field(description="Location kind")
    value: str = Field(description="Location value (e.g. 'Lines 45-67')")


class PeakMoment(BaseModel):
    model_config = ConfigDict(frozen=True)

    moment_id: str
    label: str
    location: IssueLocation
    reason_tag: PeakReasonTag


class CharacterBalanceEntry(BaseModel):
    """Joke and line share for a single character."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Character name")
    joke_share: float = Field(ge=0.0, le=1.0, description="Share of jokes (0-1)")
    line_share: float = Field(ge=0.0, le=1.0, description="Share of lines (0-1)")
    underutilized: bool = Field(default=False, description="Flagged as underutilized")


class CharacterBalance(BaseModel):
    model_config = ConfigDict(frozen=True)

    ensemble_balance: float = Field(ge=0.0, le=1.0, description="Ensemble balance (0-1)")
    dominant_character: str = Field(default="", description="Character with most jokes")
    characters: list[CharacterBalanceEntry] = Field(default_factory=list)


class RetentionRiskIndicator(BaseModel):
    model_config = ConfigDict(frozen=True)

    indicator_id: str
    type: RetentionIndicatorType
    location: IssueLocation
    severity: IssueSeverity


class RetentionRisk(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_risk: RetentionRiskLevel = Field(description="Overall retention risk level")
    indicators: list[RetentionRiskIndicator] = Field(default_factory=list)


class MetricsSnapshot(BaseModel):
    """Numeric and structural summary computed by the scoring engine.

    Passed through Stage A unchanged and never recomputed by the pipeline.
    """

    model_config = ConfigDict(frozen=True)

    overall_score: float = Field(ge=0.0, le=100.0, description="Overall score (0-100)")
    lpm_intermediate_plus: float = Field(
        ge=0.0, description="Laughs per minute, intermediate complexity and above"
    )
    lines_per_joke: float = Field(ge=0.0, description="Average lines between jokes")
    peak_moments: list[PeakMoment] = Field(default_factory=list)
    character_balance: CharacterBalance
    retention_risk: RetentionRisk


class IssueEvidence(BaseModel):
    model_config = ConfigDict(frozen=True)

    quote_snippet: str = Field(max_length=140)
    metric_refs: list[str] = Field(default_factory=list)


class IssueCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    issue_id: str
    type: IssueType
    location: IssueLocation
    severity: IssueSeverity
    tags: list[str] = Field(default_factory=list)
    evidence: IssueEvidence


class Classification(BaseModel):
    model_config = ConfigDict(frozen=True)

    inferred_format: InferredFormat
    word_count: int = Field(ge=0)
    estimated_pages: float = Field(ge=0.0)
    tier_compatibility: TierCompatibility


class PromptAOutput(BaseModel):
    """Upstream extraction output consumed by the Evidence-Lock pipeline."""

    model_config = ConfigDict(frozen=True)

    classification: Classification
    metrics: MetricsSnapshot
    issue_candidates: list[IssueCandidate] = Field(default_factory=list)

    def joke_lines(self) -> list[int]:
        """Return the first line number of each issue candidate (0 if none)."""
        lines: list[int] = []
        for candidate in self.issue_candidates:
            match = _FIRST_INT.search(candidate.location.value)
            lines.append(int(match.group(0)) if match else 0)
        return lines

    def character_names(self) -> list[str]:
        return [c.name for c in self.metrics.character_balance.characters]
