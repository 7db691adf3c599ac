"""
Action planning.

Builds dependency-ordered implementation plans from prioritized
recommendations, with scheduling windows, checklists and a phased timeline.
"""

from axadvisor.planning.graph import Mark, SortResult, topological_sort
from axadvisor.planning.planner import (
    ACTIONABLE_PRIORITIES,
    PERFORMANCE_SENSITIVE_KINDS,
    ActionPlan,
    ActionPlanItem,
    ActionPlanner,
    TimelinePhase,
    derive_dependencies,
)
from axadvisor.planning.steps import (
    IMPLEMENTATION_STEPS,
    implementation_steps,
    suggested_window,
)

__all__ = [
    # Planner
    "ActionPlanner",
    "ActionPlan",
    "ActionPlanItem",
    "TimelinePhase",
    "derive_dependencies",
    "ACTIONABLE_PRIORITIES",
    "PERFORMANCE_SENSITIVE_KINDS",
    # Ordering
    "topological_sort",
    "SortResult",
    "Mark",
    # Windows and steps
    "suggested_window",
    "implementation_steps",
    "IMPLEMENTATION_STEPS",
]
