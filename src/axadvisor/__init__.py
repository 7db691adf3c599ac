"""
AX Advisor - recommendation and planning engine for AX application servers.

Turns metrics snapshots, historical series and configuration facts into
ranked, explainable recommendations and a dependency-ordered action plan.
"""

from axadvisor.engine import RecommendationEngine
from axadvisor.impact import ImpactAssessment, ImpactEvaluator
from axadvisor.inputs import (
    BusinessConstraints,
    BusinessContext,
    ConfigurationSnapshot,
    HistoricalPoint,
    MetricsSnapshot,
    PeakWindow,
)
from axadvisor.planning import ActionPlan, ActionPlanItem, ActionPlanner, TimelinePhase
from axadvisor.recommendations import (
    BusinessContextAdjuster,
    Category,
    Effort,
    MetricKind,
    Priority,
    Prioritizer,
    Recommendation,
    RuleEvaluator,
    TrendAnalyzer,
)
from axadvisor.results import (
    EvaluationResult,
    ImpactResult,
    PipelineResult,
    PlanningResult,
    ResultStatus,
)

__version__ = "0.1.0"

__all__ = [
    "RecommendationEngine",
    # Inputs
    "MetricsSnapshot",
    "HistoricalPoint",
    "ConfigurationSnapshot",
    "BusinessContext",
    "BusinessConstraints",
    "PeakWindow",
    # Recommendations
    "Recommendation",
    "Category",
    "Priority",
    "Effort",
    "MetricKind",
    "RuleEvaluator",
    "TrendAnalyzer",
    "BusinessContextAdjuster",
    "Prioritizer",
    # Impact
    "ImpactEvaluator",
    "ImpactAssessment",
    # Planning
    "ActionPlanner",
    "ActionPlan",
    "ActionPlanItem",
    "TimelinePhase",
    # Results
    "ResultStatus",
    "EvaluationResult",
    "ImpactResult",
    "PlanningResult",
    "PipelineResult",
]
