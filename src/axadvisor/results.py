"""Result envelopes returned by the public engine operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Iterable

from axadvisor.impact import ImpactAssessment
from axadvisor.planning.planner import ActionPlan, ActionPlanItem, TimelinePhase
from axadvisor.recommendations.models import Recommendation
from axadvisor.recommendations.prioritizer import PrioritySummary


class ResultStatus(StrEnum):
    """Outcome of an engine call."""

    SUCCESS = "Success"
    ERROR = "Error"


def mean_confidence(confidences: Iterable[float]) -> float:
    """Average confidence; 1.0 when there is nothing to average."""
    values = list(confidences)
    if not values:
        return 1.0
    return sum(values) / len(values)


@dataclass
class EngineResult:
    """Common envelope fields."""

    status: ResultStatus
    message: str
    confidence_score: float  # 0..1, 0 on error

    @property
    def success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @classmethod
    def failure(cls, message: str) -> Any:
        return cls(status=ResultStatus.ERROR, message=message, confidence_score=0.0)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "status": self.status.value,
            "message": self.message,
            "confidence_score": round(self.confidence_score, 2),
        }
        if self.success:
            data.update(self._payload())
        return data

    def _payload(self) -> dict[str, Any]:
        return {}


@dataclass
class EvaluationResult(EngineResult):
    """Envelope for recommendation generation."""

    recommendations: list[Recommendation] = field(default_factory=list)
    priority_recommendations: list[Recommendation] = field(default_factory=list)
    summary: PrioritySummary | None = None
    diagnostics: list[str] = field(default_factory=list)

    def _payload(self) -> dict[str, Any]:
        return {
            "recommendations": [r.to_dict() for r in self.recommendations],
            "priority_recommendations": [r.to_dict() for r in self.priority_recommendations],
            "summary": self.summary.to_dict() if self.summary else None,
            "diagnostics": list(self.diagnostics),
        }


@dataclass
class ImpactResult(EngineResult):
    """Envelope for impact evaluation."""

    assessments: list[ImpactAssessment] = field(default_factory=list)

    def _payload(self) -> dict[str, Any]:
        return {"assessments": [a.to_dict() for a in self.assessments]}


@dataclass
class PlanningResult(EngineResult):
    """Envelope for action planning."""

    action_plan: ActionPlan | None = None

    @property
    def items(self) -> list[ActionPlanItem]:
        return self.action_plan.items if self.action_plan else []

    @property
    def timeline(self) -> list[TimelinePhase]:
        return self.action_plan.timeline if self.action_plan else []

    def _payload(self) -> dict[str, Any]:
        if self.action_plan is None:
            return {"action_plan": [], "timeline": [], "warnings": []}
        plan = self.action_plan.to_dict()
        return {
            "created_at": plan["created_at"],
            "action_plan": plan["items"],
            "timeline": plan["timeline"],
            "warnings": plan["warnings"],
        }


@dataclass
class PipelineResult:
    """Results of a full evaluate -> assess -> plan run."""

    evaluation: EvaluationResult
    impact: ImpactResult | None = None
    planning: PlanningResult | None = None

    @property
    def status(self) -> ResultStatus:
        results = [r for r in (self.evaluation, self.impact, self.planning) if r is not None]
        if all(r.success for r in results):
            return ResultStatus.SUCCESS
        return ResultStatus.ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "evaluation": self.evaluation.to_dict(),
            "impact": self.impact.to_dict() if self.impact else None,
            "planning": self.planning.to_dict() if self.planning else None,
        }
