"""Context shaping for the Evidence-Lock stages.

Transforms the upstream extraction output into Stage A input, and Stage A/B
inputs into the variables their prompt packs render.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from laughlab.core.agents.evidence_lock.models import (
    Receipt,
    StageAInput,
    StageAOutput,
    StageBInput,
)
from laughlab.core.agents.evidence_lock.validation import (
    APPROVED_METRIC_SUBSTRINGS,
    CLOSING_LINE,
    MIN_WORD_COUNT,
    REQUIRED_PARAGRAPHS,
)
from laughlab.core.analysis.models import PromptAOutput


def shape_stage_a_input(
    script_text: str, prompt_a_output: PromptAOutput | Mapping[str, Any]
) -> StageAInput:
    """Build Stage A input from the script and the upstream extraction.

    Joke line hints are the first line number of each issue candidate's
    location; character names come from the character balance metrics.
    """
    if not isinstance(prompt_a_output, PromptAOutput):
        prompt_a_output = PromptAOutput.model_validate(prompt_a_output)

    return StageAInput(
        script_text=script_text,
        jokes_by_line=prompt_a_output.joke_lines(),
        characters=prompt_a_output.character_names(),
        metrics_snapshot=prompt_a_output.metrics,
    )


def shape_stage_a_variables(stage_a_input: StageAInput) -> dict[str, Any]:
    """Shape Stage A input for the receipt extraction prompt.

    Returns:
        Dict containing the script, line hints, characters and the metrics
        snapshot serialized for verbatim pass-through
    """
    return {
        "script_text": stage_a_input.script_text,
        "jokes_by_line": json.dumps(stage_a_input.jokes_by_line),
        "characters": json.dumps(stage_a_input.characters, ensure_ascii=False),
        "has_jokes_by_line": bool(stage_a_input.jokes_by_line),
        "has_characters": bool(stage_a_input.characters),
        "metrics_snapshot_json": json.dumps(
            stage_a_input.metrics_snapshot.model_dump(mode="json"), indent=2
        ),
    }


def build_stage_b_input(stage_a_output: StageAOutput) -> StageBInput:
    return StageBInput(
        format_type=stage_a_output.format_type,
        metrics=stage_a_output.metrics,
        receipts=stage_a_output.receipts,
    )


def format_receipt_line(receipt: Receipt) -> str:
    """Render one approved receipt for the Stage B prompt."""
    return (
        f"{receipt.id}: {receipt.range} {receipt.note} "
        f"[{', '.join(receipt.tags)}] (severity: {receipt.severity.value})"
    )


def shape_stage_b_variables(stage_b_input: StageBInput) -> dict[str, Any]:
    """Shape Stage B input for the grounded summary prompt."""
    metrics = stage_b_input.metrics
    return {
        "format_type": stage_b_input.format_type.value,
        "overall_score": f"{metrics.overall_score:g}",
        "lpm": f"{metrics.lpm_intermediate_plus:.2f}",
        "lines_per_joke": f"{metrics.lines_per_joke:.2f}",
        "ensemble_balance": f"{metrics.character_balance.ensemble_balance:.2f}",
        "retention_risk": metrics.retention_risk.overall_risk.value,
        "receipt_lines": [format_receipt_line(r) for r in stage_b_input.receipts],
        "example_range": stage_b_input.receipts[0].range if stage_b_input.receipts else "",
        "metric_keys": list(APPROVED_METRIC_SUBSTRINGS),
        "closing_line": CLOSING_LINE,
        "min_word_count": MIN_WORD_COUNT,
        "paragraph_count": REQUIRED_PARAGRAPHS,
    }
