"""Unit tests for Evidence-Lock agent specs."""

from laughlab.core.agents.evidence_lock.models import StageAOutput, StageBOutput
from laughlab.core.agents.evidence_lock.orchestrator import DEFAULT_PROMPT_BASE_PATH
from laughlab.core.agents.evidence_lock.specs import get_stage_a_spec, get_stage_b_spec
from laughlab.core.agents.prompts import PromptPackLoader


def test_stage_a_spec_defaults():
    """Test Stage A spec has correct default values."""
    spec = get_stage_a_spec()
    assert spec.name == "stage_a_receipts"
    assert spec.response_model is StageAOutput
    assert spec.model == "gpt-4-turbo"
    assert spec.temperature == 0.2


def test_stage_b_spec_defaults():
    """Test Stage B spec has correct default values."""
    spec = get_stage_b_spec()
    assert spec.name == "stage_b_summary"
    assert spec.response_model is StageBOutput
    assert spec.temperature == 0.7


def test_spec_overrides():
    spec = get_stage_b_spec(model="gpt-4o", temperature=0.9)
    assert (spec.model, spec.temperature) == ("gpt-4o", 0.9)


def test_bundled_prompt_packs_exist():
    """Test both prompt packs ship system and user templates."""
    loader = PromptPackLoader(DEFAULT_PROMPT_BASE_PATH)
    for spec in (get_stage_a_spec(), get_stage_b_spec()):
        pack = loader.load(spec.prompt_pack)
        assert pack.system
        assert pack.user is not None
