"""Agent orchestration system."""

from laughlab.core.agents.async_runner import AsyncAgentRunner
from laughlab.core.agents.result import AgentResult
from laughlab.core.agents.spec import AgentSpec

__all__ = [
    "AgentResult",
    "AgentSpec",
    "AsyncAgentRunner",
]
