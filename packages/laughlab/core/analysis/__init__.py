"""Upstream script extraction contract."""

from laughlab.core.analysis.models import (
    CharacterBalance,
    CharacterBalanceEntry,
    MetricsSnapshot,
    PromptAOutput,
    RetentionRisk,
    RetentionRiskLevel,
)

__all__ = [
    "CharacterBalance",
    "CharacterBalanceEntry",
    "MetricsSnapshot",
    "PromptAOutput",
    "RetentionRisk",
    "RetentionRiskLevel",
]
