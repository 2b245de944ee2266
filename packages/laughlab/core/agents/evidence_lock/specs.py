"""Agent specifications for the Evidence-Lock stages."""

from laughlab.core.agents.evidence_lock.models import StageAOutput, StageBOutput
from laughlab.core.agents.spec import AgentSpec

STAGE_A_PROMPT_PACK = "stage_a_receipts"
STAGE_B_PROMPT_PACK = "stage_b_summary"


def get_stage_a_spec(model: str = "gpt-4-turbo", temperature: float = 0.2) -> AgentSpec:
    """Get agent specification for Stage A (receipt extraction).

    Args:
        model: LLM model to use (default: gpt-4-turbo)
        temperature: LLM temperature (default: 0.2, extraction should be stable)

    Returns:
        AgentSpec for Stage A
    """
    return AgentSpec(
        name="stage_a_receipts",
        prompt_pack=STAGE_A_PROMPT_PACK,
        response_model=StageAOutput,
        model=model,
        temperature=temperature,
    )


def get_stage_b_spec(model: str = "gpt-4-turbo", temperature: float = 0.7) -> AgentSpec:
    """Get agent specification for Stage B (grounded summary).

    Args:
        model: LLM model to use (default: gpt-4-turbo)
        temperature: LLM temperature (default: 0.7, so a retry is a real re-roll)

    Returns:
        AgentSpec for Stage B
    """
    return AgentSpec(
        name="stage_b_summary",
        prompt_pack=STAGE_B_PROMPT_PACK,
        response_model=StageBOutput,
        model=model,
        temperature=temperature,
    )
