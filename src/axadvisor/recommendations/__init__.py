"""
Recommendation generation.

Rules and trend analysis produce recommendations; the context adjuster and
prioritizer refine and rank them.
"""

from axadvisor.recommendations.context import BusinessContextAdjuster
from axadvisor.recommendations.evaluator import RuleEvaluator
from axadvisor.recommendations.models import (
    PRIORITY_RANK,
    Category,
    Effort,
    MetricKind,
    Priority,
    Recommendation,
)
from axadvisor.recommendations.prioritizer import (
    PrioritizationResult,
    Prioritizer,
    PrioritySummary,
    summarize,
)
from axadvisor.recommendations.rules import (
    CONFIGURATION_RULES,
    DEFAULT_RULES,
    METRIC_RULES,
    Rule,
)
from axadvisor.recommendations.trends import TrendAnalyzer, TrendWindow, change_percent

__all__ = [
    # Models
    "Category",
    "Effort",
    "MetricKind",
    "Priority",
    "PRIORITY_RANK",
    "Recommendation",
    # Rules
    "Rule",
    "METRIC_RULES",
    "CONFIGURATION_RULES",
    "DEFAULT_RULES",
    "RuleEvaluator",
    # Trends
    "TrendAnalyzer",
    "TrendWindow",
    "change_percent",
    # Context
    "BusinessContextAdjuster",
    # Prioritization
    "Prioritizer",
    "PrioritizationResult",
    "PrioritySummary",
    "summarize",
]
