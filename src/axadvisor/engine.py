"""
Recommendation & planning engine.

Public entry points. Each call is independent, synchronous and returns a
result envelope; no call raises past this module.

Example usage:
    from axadvisor import RecommendationEngine

    engine = RecommendationEngine()
    evaluation = engine.generate_recommendations(
        metrics={"cpu_avg": 92.5, "batch_backlog": 31},
        configuration={"database": {"autoUpdateStatistics": False}},
        history=series,
        context={"peakWindow": {"start": "08:00", "end": "18:00"}, "currentTime": "10:15"},
    )
    plan = engine.build_action_plan(evaluation.recommendations)
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, Mapping, Sequence

import structlog

from axadvisor.config.loader import load_engine_config
from axadvisor.config.settings import Settings, get_settings
from axadvisor.config.thresholds import EngineConfig
from axadvisor.core.errors import ComputationError, ValidationError, guarded
from axadvisor.impact import ImpactAssessment, ImpactEvaluator
from axadvisor.inputs import (
    BusinessConstraints,
    BusinessContext,
    ConfigurationSnapshot,
    HistoricalPoint,
    MetricsSnapshot,
    parse_series,
)
from axadvisor.logging import bind_context
from axadvisor.planning.planner import ActionPlanner
from axadvisor.recommendations.context import BusinessContextAdjuster
from axadvisor.recommendations.evaluator import RuleEvaluator
from axadvisor.recommendations.models import Recommendation
from axadvisor.recommendations.prioritizer import Prioritizer
from axadvisor.recommendations.trends import TrendAnalyzer
from axadvisor.results import (
    EvaluationResult,
    ImpactResult,
    PipelineResult,
    PlanningResult,
    ResultStatus,
    mean_confidence,
)

logger = structlog.get_logger()

RecommendationInput = Sequence[Recommendation | ImpactAssessment]


@contextmanager
def _stage(name: str) -> Iterator[None]:
    """Convert unexpected numeric/type failures inside a stage to ComputationError."""
    logger.debug("stage_started", stage=name)
    try:
        yield
    except (TypeError, ValueError, ArithmeticError) as e:
        raise ComputationError(f"{name} failed: {e}", details={"stage": name}) from e
    logger.debug("stage_completed", stage=name)


def _unwrap(recommendations: RecommendationInput | None) -> list[Recommendation]:
    out: list[Recommendation] = []
    for index, item in enumerate(recommendations or []):
        if isinstance(item, ImpactAssessment):
            out.append(item.recommendation)
        elif isinstance(item, Recommendation):
            out.append(item)
        else:
            raise ValidationError(
                f"Item {index} is not a recommendation",
                field=f"recommendations[{index}]",
                details={"type": type(item).__name__},
            )
    return out


class RecommendationEngine:
    """Runs rule evaluation, trend analysis, prioritization, impact and planning."""

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig.default()
        self.evaluator = RuleEvaluator(self.config.rules)
        self.trend_analyzer = TrendAnalyzer(self.config.trends)
        self.context_adjuster = BusinessContextAdjuster()
        self.prioritizer = Prioritizer(top_n=self.config.planning.top_n)
        self.impact_evaluator = ImpactEvaluator()
        self.planner = ActionPlanner(phase_interval_days=self.config.planning.phase_interval_days)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> RecommendationEngine:
        """Create an engine from environment settings and the threshold file."""
        return cls(load_engine_config(settings or get_settings()))

    @guarded(EvaluationResult, "generate_recommendations")
    def generate_recommendations(
        self,
        metrics: Mapping[str, Any] | MetricsSnapshot | None,
        configuration: Mapping[str, Any] | ConfigurationSnapshot | None = None,
        history: Sequence[Mapping[str, Any] | HistoricalPoint] | None = None,
        context: Mapping[str, Any] | BusinessContext | None = None,
    ) -> EvaluationResult:
        """
        Evaluate rules and trends, apply business context and rank the result.

        Args:
            metrics: Current metrics snapshot
            configuration: Configuration facts per subsystem
            history: Historical series of {timestamp, values} entries
            context: Optional business context (peak window, current time)

        Returns:
            EvaluationResult with all recommendations (ranked), the top
            recommendations and a summary
        """
        log = bind_context(run_id=uuid.uuid4().hex, operation="generate_recommendations")
        diagnostics: list[str] = []

        if isinstance(metrics, MetricsSnapshot):
            snapshot = metrics
        else:
            snapshot = MetricsSnapshot.from_mapping(metrics, diagnostics)

        if isinstance(configuration, ConfigurationSnapshot):
            config_snapshot = configuration
        else:
            config_snapshot = ConfigurationSnapshot.from_mapping(configuration)

        series = parse_series(history, diagnostics)

        try:
            business = BusinessContext.from_mapping(context)
        except ValidationError as e:
            log.warning("business_context_ignored", field=e.field, error=e.message)
            diagnostics.append(f"context ignored: {e.message}")
            business = BusinessContext()

        with _stage("rule_evaluation"):
            recommendations, notes = self.evaluator.evaluate_with_diagnostics(snapshot, config_snapshot)
            diagnostics.extend(notes)

        with _stage("trend_analysis"):
            recommendations.extend(self.trend_analyzer.analyze(series))

        recommendations = self.context_adjuster.apply(recommendations, business)

        with _stage("prioritization"):
            prioritized = self.prioritizer.prioritize(recommendations)

        log.info(
            "recommendations_generated",
            total=prioritized.summary.total,
            critical_high=prioritized.summary.critical_high,
            diagnostics=len(diagnostics),
        )

        return EvaluationResult(
            status=ResultStatus.SUCCESS,
            message=f"Generated {prioritized.summary.total} recommendation(s)",
            confidence_score=mean_confidence(r.confidence for r in prioritized.recommendations),
            recommendations=prioritized.recommendations,
            priority_recommendations=prioritized.top,
            summary=prioritized.summary,
            diagnostics=diagnostics,
        )

    @guarded(ImpactResult, "evaluate_impact")
    def evaluate_impact(
        self,
        recommendations: RecommendationInput,
        system_state: Mapping[str, Any] | MetricsSnapshot | None = None,
    ) -> ImpactResult:
        """Score recommendations by impact, risk and timeframe."""
        log = bind_context(run_id=uuid.uuid4().hex, operation="evaluate_impact")
        recs = _unwrap(recommendations)

        if isinstance(system_state, MetricsSnapshot) or system_state is None:
            state = system_state
        else:
            state = MetricsSnapshot.from_mapping(system_state)

        with _stage("impact_evaluation"):
            assessments = self.impact_evaluator.evaluate(recs, state)

        log.info("impact_evaluated", assessed=len(assessments))
        return ImpactResult(
            status=ResultStatus.SUCCESS,
            message=f"Assessed {len(assessments)} recommendation(s)",
            confidence_score=mean_confidence(a.recommendation.confidence for a in assessments),
            assessments=assessments,
        )

    @guarded(PlanningResult, "build_action_plan")
    def build_action_plan(
        self,
        recommendations: RecommendationInput,
        constraints: Mapping[str, Any] | BusinessConstraints | None = None,
        now: datetime | None = None,
    ) -> PlanningResult:
        """
        Build a dependency-ordered action plan.

        Args:
            recommendations: Recommendations (or impact assessments) to plan
            constraints: Optional scheduling constraints
            now: Run timestamp; defaults to the current UTC time, read once

        Returns:
            PlanningResult with the ordered plan and its timeline
        """
        now = now or datetime.now(timezone.utc)
        log = bind_context(run_id=uuid.uuid4().hex, operation="build_action_plan")
        recs = _unwrap(recommendations)
        business_constraints = BusinessConstraints.from_mapping(constraints)

        with _stage("action_planning"):
            plan = self.planner.build_plan(recs, business_constraints, now=now)

        log.info(
            "action_plan_built",
            items=len(plan),
            phases=len(plan.timeline),
            cycles=len(plan.warnings),
        )

        message = f"Planned {len(plan)} action(s) in {len(plan.timeline)} phase(s)"
        if plan.warnings:
            message += f"; {len(plan.warnings)} dependency cycle(s) broken"

        return PlanningResult(
            status=ResultStatus.SUCCESS,
            message=message,
            confidence_score=mean_confidence(item.recommendation.confidence for item in plan),
            action_plan=plan,
        )

    def run(
        self,
        metrics: Mapping[str, Any] | MetricsSnapshot | None,
        configuration: Mapping[str, Any] | ConfigurationSnapshot | None = None,
        history: Sequence[Mapping[str, Any] | HistoricalPoint] | None = None,
        context: Mapping[str, Any] | BusinessContext | None = None,
        constraints: Mapping[str, Any] | BusinessConstraints | None = None,
        now: datetime | None = None,
    ) -> PipelineResult:
        """Evaluate, assess impact and plan in one call."""
        now = now or datetime.now(timezone.utc)
        evaluation = self.generate_recommendations(metrics, configuration, history, context)
        if not evaluation.success:
            return PipelineResult(evaluation=evaluation)

        impact = self.evaluate_impact(evaluation.recommendations, metrics)
        planning = self.build_action_plan(evaluation.recommendations, constraints, now=now)
        return PipelineResult(evaluation=evaluation, impact=impact, planning=planning)
