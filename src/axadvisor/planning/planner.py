"""
Action planning.

Turns prioritized recommendations into a dependency-ordered implementation
plan. Configuration fixes come before performance judgements: a non-Critical
CPU, memory or database performance item depends on every High priority
configuration item in the same batch.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterator, Sequence

import structlog

from axadvisor.core.errors import CycleWarning
from axadvisor.inputs import BusinessConstraints
from axadvisor.planning.graph import topological_sort
from axadvisor.planning.steps import implementation_steps, suggested_window
from axadvisor.recommendations.models import (
    Category,
    MetricKind,
    Priority,
    Recommendation,
)

logger = structlog.get_logger()

ACTIONABLE_PRIORITIES: frozenset[Priority] = frozenset({Priority.CRITICAL, Priority.HIGH, Priority.MEDIUM})

PERFORMANCE_SENSITIVE_KINDS: frozenset[MetricKind] = frozenset(
    {MetricKind.CPU, MetricKind.MEMORY, MetricKind.DATABASE_RESPONSE}
)


@dataclass(frozen=True)
class ActionPlanItem:
    """One scheduled recommendation."""

    recommendation: Recommendation
    dependencies: tuple[str, ...] = ()
    suggested_window: str = ""
    implementation_steps: tuple[str, ...] = ()

    @property
    def id(self) -> str:
        return self.recommendation.id

    @property
    def can_start_immediately(self) -> bool:
        return not self.dependencies

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.recommendation.title,
            "category": self.recommendation.category.value,
            "priority": self.recommendation.priority.value,
            "dependencies": list(self.dependencies),
            "can_start_immediately": self.can_start_immediately,
            "suggested_window": self.suggested_window,
            "implementation_steps": list(self.implementation_steps),
        }


@dataclass(frozen=True)
class TimelinePhase:
    """Items that can start together once earlier phases are complete."""

    phase: int
    start_date: date
    item_ids: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "start_date": self.start_date.isoformat(),
            "items": list(self.item_ids),
        }


@dataclass
class ActionPlan:
    """Plan items in dependency order, plus the derived timeline."""

    items: list[ActionPlanItem]
    created_at: datetime
    timeline: list[TimelinePhase] = field(default_factory=list)
    warnings: list[CycleWarning] = field(default_factory=list)

    def __iter__(self) -> Iterator[ActionPlanItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def ids(self) -> list[str]:
        return [item.id for item in self.items]

    def to_dict(self) -> dict[str, Any]:
        return {
            "created_at": self.created_at.isoformat(),
            "items": [item.to_dict() for item in self.items],
            "timeline": [phase.to_dict() for phase in self.timeline],
            "warnings": [w.message for w in self.warnings],
        }


def derive_dependencies(recommendations: Sequence[Recommendation]) -> dict[str, tuple[str, ...]]:
    """Map each recommendation id to the ids it must wait for."""
    config_ids = tuple(
        r.id for r in recommendations if r.category == Category.CONFIGURATION and r.priority == Priority.HIGH
    )

    dependencies: dict[str, tuple[str, ...]] = {}
    for rec in recommendations:
        if rec.kind in PERFORMANCE_SENSITIVE_KINDS and rec.priority != Priority.CRITICAL:
            dependencies[rec.id] = config_ids
        else:
            dependencies[rec.id] = ()
    return dependencies


class ActionPlanner:
    """Builds dependency-ordered action plans."""

    def __init__(self, phase_interval_days: int = 7):
        self.phase_interval_days = phase_interval_days

    def build_plan(
        self,
        recommendations: Sequence[Recommendation],
        constraints: BusinessConstraints | None = None,
        now: datetime | None = None,
    ) -> ActionPlan:
        """
        Build a plan from Critical, High and Medium recommendations.

        Args:
            recommendations: Prioritized recommendations
            constraints: Reserved for scheduling constraints; no keys are required
            now: Run timestamp, captured once and used for every scheduled date

        Returns:
            ActionPlan in dependency order
        """
        now = now or datetime.now(timezone.utc)
        actionable = [r for r in recommendations if r.priority in ACTIONABLE_PRIORITIES]
        dependencies = derive_dependencies(actionable)

        items = [
            ActionPlanItem(
                recommendation=rec,
                dependencies=dependencies[rec.id],
                suggested_window=suggested_window(rec),
                implementation_steps=tuple(implementation_steps(rec)),
            )
            for rec in actionable
        ]
        logger.debug(
            "plan_items_built",
            items=len(items),
            skipped=len(recommendations) - len(actionable),
            constraints=sorted((constraints.model_extra or {}).keys()) if constraints else [],
        )
        return self.order(items, now)

    def order(self, items: Sequence[ActionPlanItem], now: datetime) -> ActionPlan:
        """Order items topologically, dropping dependencies that close a cycle."""
        by_id = {item.id: item for item in items}

        result = topological_sort(
            [item.id for item in items],
            {item.id: item.dependencies for item in items},
        )

        dropped: dict[str, set[str]] = {}
        for node, dep in result.dropped_edges:
            dropped.setdefault(node, set()).add(dep)

        warnings: list[CycleWarning] = []
        for cycle in result.cycles:
            warning = CycleWarning(cycle)
            logger.warning("dependency_cycle_detected", cycle=cycle)
            warnings.append(warning)

        ordered: list[ActionPlanItem] = []
        for item_id in result.order:
            item = by_id[item_id]
            kept = tuple(d for d in item.dependencies if d in by_id and d not in dropped.get(item_id, ()))
            if len(kept) != len(item.dependencies):
                item = replace(item, dependencies=kept)
            ordered.append(item)

        return ActionPlan(
            items=ordered,
            created_at=now,
            timeline=self.build_timeline(ordered, now.date()),
            warnings=warnings,
        )

    def build_timeline(self, ordered: Sequence[ActionPlanItem], start: date) -> list[TimelinePhase]:
        """Group ordered items by dependency depth into dated phases."""
        depth: dict[str, int] = {}
        for item in ordered:
            depth[item.id] = 1 + max((depth[d] for d in item.dependencies if d in depth), default=0)

        phases: dict[int, list[str]] = {}
        for item in ordered:
            phases.setdefault(depth[item.id], []).append(item.id)

        return [
            TimelinePhase(
                phase=phase,
                start_date=start + timedelta(days=(phase - 1) * self.phase_interval_days),
                item_ids=tuple(ids),
            )
            for phase, ids in sorted(phases.items())
        ]
