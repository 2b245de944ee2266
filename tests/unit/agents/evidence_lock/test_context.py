"""Unit tests for Evidence-Lock context shaping."""

import json

from pydantic import ValidationError
import pytest

from laughlab.core.agents.evidence_lock.context import (
    build_stage_b_input,
    format_receipt_line,
    shape_stage_a_input,
    shape_stage_a_variables,
    shape_stage_b_variables,
)
from laughlab.core.agents.evidence_lock.models import FormatType
from laughlab.core.agents.evidence_lock.validation import CLOSING_LINE, MIN_WORD_COUNT

SCRIPT = "INT. DINER - NIGHT\n\nMAYA\nYou ordered waffles. At a steakhouse."


class TestShapeStageAInput:
    """Test shape_stage_a_input function."""

    def test_from_model(self, prompt_a_output):
        stage_a_input = shape_stage_a_input(SCRIPT, prompt_a_output)

        assert stage_a_input.script_text == SCRIPT
        assert stage_a_input.jokes_by_line == [45, 4]
        assert stage_a_input.characters == ["MAYA", "DEV", "PRIYA"]
        assert stage_a_input.metrics_snapshot == prompt_a_output.metrics

    def test_from_mapping(self, prompt_a_dict, prompt_a_output):
        assert shape_stage_a_input(SCRIPT, prompt_a_dict) == shape_stage_a_input(
            SCRIPT, prompt_a_output
        )

    def test_invalid_mapping_raises(self, prompt_a_dict):
        with pytest.raises(ValidationError):
            shape_stage_a_input(SCRIPT, {**prompt_a_dict, "metrics": {}})

    def test_empty_script_rejected(self, prompt_a_output):
        with pytest.raises(ValidationError):
            shape_stage_a_input("", prompt_a_output)


class TestShapeStageAVariables:
    """Test shape_stage_a_variables function."""

    def test_variables(self, prompt_a_output):
        variables = shape_stage_a_variables(shape_stage_a_input(SCRIPT, prompt_a_output))

        assert variables["script_text"] == SCRIPT
        assert json.loads(variables["jokes_by_line"]) == [45, 4]
        assert json.loads(variables["characters"]) == ["MAYA", "DEV", "PRIYA"]
        assert variables["has_jokes_by_line"] is True
        assert variables["has_characters"] is True

    def test_metrics_snapshot_round_trips(self, prompt_a_output):
        variables = shape_stage_a_variables(shape_stage_a_input(SCRIPT, prompt_a_output))
        snapshot = json.loads(variables["metrics_snapshot_json"])

        assert snapshot["overall_score"] == 72
        assert snapshot["retention_risk"]["overall_risk"] == "medium"

    def test_no_issue_candidates(self, prompt_a_dict):
        data = {**prompt_a_dict, "issue_candidates": []}
        variables = shape_stage_a_variables(shape_stage_a_input(SCRIPT, data))

        assert variables["has_jokes_by_line"] is False
        assert variables["jokes_by_line"] == "[]"


class TestShapeStageBVariables:
    """Test Stage B input and variable shaping."""

    def test_build_stage_b_input(self, stage_a_output):
        stage_b_input = build_stage_b_input(stage_a_output)

        assert stage_b_input.format_type == FormatType.SITCOM
        assert stage_b_input.metrics == stage_a_output.metrics
        assert stage_b_input.receipts == stage_a_output.receipts

    def test_format_receipt_line(self, receipts):
        assert format_receipt_line(receipts[1]) == (
            "r02: [Lines 45–67] → gap of 22 lines between jokes during the act one "
            "setup scene [gap, pacing, retention] (severity: high)"
        )

    def test_variables(self, stage_a_output):
        variables = shape_stage_b_variables(build_stage_b_input(stage_a_output))

        assert variables["format_type"] == "sitcom"
        assert variables["overall_score"] == "72"
        assert variables["lpm"] == "2.40"
        assert variables["lines_per_joke"] == "8.50"
        assert variables["ensemble_balance"] == "0.65"
        assert variables["retention_risk"] == "medium"
        assert len(variables["receipt_lines"]) == 12
        assert variables["receipt_lines"][0].startswith("r01: [Lines 12–20] →")
        assert variables["example_range"] == "[Lines 12–20] →"
        assert variables["closing_line"] == CLOSING_LINE
        assert variables["min_word_count"] == MIN_WORD_COUNT
        assert "overall_score" in variables["metric_keys"]
