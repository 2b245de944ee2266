"""Shared pytest fixtures for laughlab tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from laughlab.core.agents.evidence_lock.models import Receipt, StageAOutput
from laughlab.core.agents.evidence_lock.validation import CLOSING_LINE
from laughlab.core.agents.providers.base import (
    LLMResponse,
    ProviderType,
    ResponseMetadata,
    TokenUsage,
)
from laughlab.core.analysis.models import PromptAOutput

FILLER = "The scene keeps its comic engine turning with clear setups and payoffs."

# ============================================================================
# Metrics / Prompt A Fixtures
# ============================================================================


@pytest.fixture
def metrics_dict() -> dict[str, Any]:
    """Metrics snapshot as produced by the upstream extraction."""
    return {
        "overall_score": 72,
        "lpm_intermediate_plus": 2.4,
        "lines_per_joke": 8.5,
        "peak_moments": [
            {
                "moment_id": "pm1",
                "label": "Diner reveal",
                "location": {"type": "line_range", "value": "Lines 210-214"},
                "reason_tag": "setup_payoff",
            }
        ],
        "character_balance": {
            "ensemble_balance": 0.65,
            "dominant_character": "MAYA",
            "characters": [
                {"name": "MAYA", "joke_share": 0.45, "line_share": 0.38},
                {"name": "DEV", "joke_share": 0.35, "line_share": 0.32},
                {"name": "PRIYA", "joke_share": 0.2, "line_share": 0.3, "underutilized": True},
            ],
        },
        "retention_risk": {
            "overall_risk": "medium",
            "indicators": [
                {
                    "indicator_id": "rr1",
                    "type": "gap_cluster",
                    "location": {"type": "line_range", "value": "Lines 45-67"},
                    "severity": "major",
                }
            ],
        },
    }


@pytest.fixture
def prompt_a_dict(metrics_dict) -> dict[str, Any]:
    """Full upstream extraction payload."""
    return {
        "classification": {
            "inferred_format": "half_hour",
            "word_count": 5200,
            "estimated_pages": 28.5,
            "tier_compatibility": "ok",
        },
        "metrics": metrics_dict,
        "issue_candidates": [
            {
                "issue_id": "i1",
                "type": "pacing_soft_spot",
                "location": {"type": "line_range", "value": "Lines 45-67"},
                "severity": "major",
                "tags": ["gap"],
                "evidence": {"quote_snippet": "So anyway.", "metric_refs": ["lines_per_joke"]},
            },
            {
                "issue_id": "i2",
                "type": "character_underutilization",
                "location": {"type": "scene", "value": "Scene 4"},
                "severity": "moderate",
                "evidence": {"quote_snippet": "Right."},
            },
        ],
    }


@pytest.fixture
def prompt_a_output(prompt_a_dict) -> PromptAOutput:
    return PromptAOutput.model_validate(prompt_a_dict)


# ============================================================================
# Receipt Fixtures
# ============================================================================


@pytest.fixture
def receipt_dicts() -> list[dict[str, Any]]:
    """Twelve valid receipts in Stage A's wire format."""
    return [
        {
            "id": "r01",
            "range": "[Lines 12–20] →",
            "note": "cold open lands three jokes in eight lines with a clean button",
            "tags": ["strength", "tone"],
            "severity": "low",
            "metric_refs": ["lpm_intermediate_plus"],
            "confidence": 0.88,
        },
        {
            "id": "r02",
            "range": "[Lines 45–67] →",
            "note": "gap of 22 lines between jokes during the act one setup scene",
            "tags": ["gap", "pacing", "retention"],
            "severity": "high",
            "metric_refs": ["retention_risk", "lines_per_joke"],
            "confidence": 0.92,
        },
        {
            "id": "r03",
            "range": "[Lines 89–112] →",
            "note": "exposition scene runs 23 lines with one joke near the end",
            "tags": ["gap", "pacing"],
            "severity": "med",
            "metric_refs": ["lines_per_joke"],
            "confidence": 0.81,
        },
        {
            "id": "r04",
            "range": "[Lines 134–156] →",
            "note": "Priya has two lines in this scene while Maya carries every joke",
            "tags": ["character", "underutilized"],
            "severity": "med",
            "metric_refs": ["character_balance"],
            "confidence": 0.77,
        },
        {
            "id": "r05",
            "range": "[Lines 160–171] →",
            "note": "the waffle iron runner from the opening pays off here as a callback",
            "tags": ["callback", "strength"],
            "severity": "low",
            "metric_refs": ["lpm_intermediate_plus"],
            "confidence": 0.7,
        },
        {
            "id": "r06",
            "range": "[Lines 180–199] →",
            "note": "argument escalates with the same insult pattern three times in a row",
            "tags": ["pacing", "revision"],
            "severity": "med",
            "metric_refs": ["retention_risk"],
            "confidence": 0.66,
        },
        {
            "id": "r07",
            "range": "[Lines 210–214] →",
            "note": "the diner reveal turns the scene with a surprise and an immediate laugh",
            "tags": ["strength"],
            "severity": "low",
            "metric_refs": ["lpm_intermediate_plus"],
            "confidence": 0.9,
        },
        {
            "id": "r08",
            "range": "[Lines 230–251] →",
            "note": "scene ends on information rather than a button before the act break",
            "tags": ["soft-spot", "retention"],
            "severity": "high",
            "metric_refs": ["retention_risk"],
            "confidence": 0.74,
        },
        {
            "id": "r09",
            "range": "[Lines 260–270] →",
            "note": "Dev reacts to the news with a line that repeats his earlier joke",
            "tags": ["character", "callback-miss"],
            "severity": "med",
            "metric_refs": ["character_balance"],
            "confidence": 0.6,
        },
        {
            "id": "r10",
            "range": "[Lines 280–301] →",
            "note": "tag scene introduces a new runner that could close the episode instead",
            "tags": ["punch-up", "leverage"],
            "severity": "med",
            "metric_refs": ["overall_score"],
            "confidence": 0.58,
        },
        {
            "id": "r11",
            "range": "[Lines 305–318] →",
            "note": "the final montage has no dialogue jokes across fourteen lines of action",
            "tags": ["gap"],
            "severity": "high",
            "metric_refs": ["lpm_intermediate_plus", "retention_risk"],
            "confidence": 0.55,
        },
        {
            "id": "r12",
            "range": "[Line 320–322] →",
            "note": "closing exchange between Maya and Priya lands a warm final laugh",
            "tags": ["strength", "ensemble"],
            "severity": "low",
            "metric_refs": ["character_balance"],
            "confidence": 0.63,
        },
    ]


@pytest.fixture
def receipts(receipt_dicts) -> list[Receipt]:
    return [Receipt.model_validate(r) for r in receipt_dicts]


@pytest.fixture
def stage_a_payload(metrics_dict, receipt_dicts) -> dict[str, Any]:
    """Raw Stage A JSON as the model would return it."""
    return {"formatType": "sitcom", "metrics": metrics_dict, "receipts": receipt_dicts}


@pytest.fixture
def stage_a_output(stage_a_payload) -> StageAOutput:
    return StageAOutput.model_validate(stage_a_payload)


# ============================================================================
# Summary Fixtures
# ============================================================================


@pytest.fixture
def make_paragraph() -> Callable[[str, int], str]:
    """Build a single-line paragraph: a lead sentence followed by filler."""

    def _make(lead: str, filler_count: int = 15) -> str:
        return " ".join([lead] + [FILLER] * filler_count)

    return _make


@pytest.fixture
def valid_summary(make_paragraph) -> str:
    """A summary that satisfies every validation rule for the receipts fixture."""
    p1 = make_paragraph(
        "The overall_score of 72 reflects a solid draft, and the cold open at "
        "[Lines 12–20] → shows the engine working."
    )
    p2 = make_paragraph(
        "Pacing is the main constraint: an LPM of 2.40 slows down badly at "
        "[Lines 45–67] → where the setup runs long."
    )
    p3 = make_paragraph(
        "Revision should target retention_risk first, starting with the soft act break "
        "at [Lines 230–251] → before anything else."
    )
    return "\n\n".join([p1, p2, p3, CLOSING_LINE])


# ============================================================================
# Provider Fixtures
# ============================================================================


def llm_response(content: Any) -> LLMResponse:
    return LLMResponse(
        content=content,
        metadata=ResponseMetadata(
            token_usage=TokenUsage(prompt_tokens=100, completion_tokens=50, total_tokens=150),
            model="gpt-4-turbo",
        ),
    )


@pytest.fixture
def make_provider() -> Callable[..., MagicMock]:
    """Build a mock provider that returns (or raises) the given items in order.

    Dict/list items are wrapped in LLMResponse; exceptions are raised.
    """

    def _make(*items: Any) -> MagicMock:
        provider = MagicMock()
        provider.provider_type = ProviderType.OPENAI
        provider.get_token_usage.return_value = TokenUsage()
        provider.generate_json_async = AsyncMock(
            side_effect=[item if isinstance(item, Exception) else llm_response(item) for item in items]
        )
        return provider

    return _make
