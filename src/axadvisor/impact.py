"""
Impact evaluation for recommendations.

Computes a composite impact score, an implementation risk estimate and an
implementation timeframe per recommendation, given the current system state.

Impact score = priority weight x confidence x effort adjustment
- Priority weight: Critical 4, High 3, Medium 2, Low 1
- Effort adjustment: Low 1.2, Medium 1.0, High 0.8

Implementation risk starts at 0.5 and is capped at 0.9.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from axadvisor.inputs import MetricsSnapshot
from axadvisor.recommendations.models import (
    PRIORITY_RANK,
    Category,
    Effort,
    Recommendation,
)

EFFORT_ADJUSTMENT: dict[Effort, float] = {
    Effort.LOW: 1.2,
    Effort.MEDIUM: 1.0,
    Effort.HIGH: 0.8,
}

BASE_RISK = 0.5
MAX_RISK = 0.9

CATEGORY_RISK: dict[Category, float] = {
    Category.CONFIGURATION: 0.2,
    Category.PERFORMANCE: 0.1,
    Category.OPERATIONS: 0.0,
}

EFFORT_RISK: dict[Effort, float] = {
    Effort.HIGH: 0.3,
    Effort.MEDIUM: 0.15,
    Effort.LOW: 0.05,
}

# Added when the system is already under heavy load
STRESSED_SYSTEM_RISK = 0.1
STRESS_THRESHOLD_PCT = 90.0

TIMEFRAMES: dict[Effort, str] = {
    Effort.LOW: "1-3 days",
    Effort.MEDIUM: "3-14 days",
    Effort.HIGH: "2-8 weeks",
}

# Configuration changes go through approval cycles
CONFIGURATION_TIMEFRAMES: dict[Effort, str] = {
    Effort.LOW: "3-7 days",
    Effort.MEDIUM: "1-3 weeks",
    Effort.HIGH: "4-12 weeks",
}


@dataclass(frozen=True)
class ImpactAssessment:
    """A recommendation enriched with impact, risk and timeframe."""

    recommendation: Recommendation
    impact_score: float
    implementation_risk: float  # 0..0.9
    implementation_timeframe: str

    @property
    def id(self) -> str:
        return self.recommendation.id

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.recommendation.to_dict(),
            "impact_score": round(self.impact_score, 2),
            "implementation_risk": round(self.implementation_risk, 2),
            "implementation_timeframe": self.implementation_timeframe,
        }


def impact_score(rec: Recommendation) -> float:
    return PRIORITY_RANK[rec.priority] * rec.confidence * EFFORT_ADJUSTMENT[rec.effort]


def implementation_risk(rec: Recommendation, state: MetricsSnapshot | None = None) -> float:
    risk = BASE_RISK + CATEGORY_RISK.get(rec.category, 0.0) + EFFORT_RISK[rec.effort]
    if state is not None and _is_stressed(state):
        risk += STRESSED_SYSTEM_RISK
    return max(0.0, min(MAX_RISK, risk))


def implementation_timeframe(rec: Recommendation) -> str:
    if rec.category == Category.CONFIGURATION:
        return CONFIGURATION_TIMEFRAMES[rec.effort]
    return TIMEFRAMES[rec.effort]


def _is_stressed(state: MetricsSnapshot) -> bool:
    cpu = state.cpu_avg
    memory = state.memory_avg
    return (cpu is not None and cpu > STRESS_THRESHOLD_PCT) or (
        memory is not None and memory > STRESS_THRESHOLD_PCT
    )


class ImpactEvaluator:
    """Scores recommendations and orders them by impact, highest first."""

    def evaluate(
        self,
        recommendations: Sequence[Recommendation],
        system_state: MetricsSnapshot | None = None,
    ) -> list[ImpactAssessment]:
        assessments = [
            ImpactAssessment(
                recommendation=rec,
                impact_score=impact_score(rec),
                implementation_risk=implementation_risk(rec, system_state),
                implementation_timeframe=implementation_timeframe(rec),
            )
            for rec in recommendations
        ]
        assessments.sort(key=lambda a: a.impact_score, reverse=True)
        return assessments
