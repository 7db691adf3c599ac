"""
Deterministic prioritization and summary statistics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from axadvisor.recommendations.models import Priority, Recommendation


@dataclass(frozen=True)
class PrioritySummary:
    """Counts over a recommendation set."""

    total: int
    critical_high: int
    medium: int
    low: int
    categories: dict[str, int] = field(default_factory=dict)  # insertion order = first appearance

    @property
    def category_breakdown(self) -> str:
        return ", ".join(f"{name}: {count}" for name, count in self.categories.items())

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "critical_high": self.critical_high,
            "medium": self.medium,
            "low": self.low,
            "categories": self.category_breakdown,
        }


@dataclass(frozen=True)
class PrioritizationResult:
    """Sorted recommendations, the top entries and a summary."""

    recommendations: list[Recommendation]
    top: list[Recommendation]
    summary: PrioritySummary


def sort_key(rec: Recommendation) -> tuple[int, float]:
    return (-rec.priority.rank, -rec.confidence)


class Prioritizer:
    """Sorts by priority rank then confidence, both descending. Ties keep input order."""

    def __init__(self, top_n: int = 5):
        self.top_n = top_n

    def prioritize(self, recommendations: Sequence[Recommendation]) -> PrioritizationResult:
        ordered = sorted(recommendations, key=sort_key)
        return PrioritizationResult(
            recommendations=ordered,
            top=ordered[: self.top_n],
            summary=summarize(ordered),
        )


def summarize(recommendations: Sequence[Recommendation]) -> PrioritySummary:
    categories: dict[str, int] = {}
    for rec in recommendations:
        categories[rec.category.value] = categories.get(rec.category.value, 0) + 1

    return PrioritySummary(
        total=len(recommendations),
        critical_high=sum(1 for r in recommendations if r.priority in (Priority.CRITICAL, Priority.HIGH)),
        medium=sum(1 for r in recommendations if r.priority == Priority.MEDIUM),
        low=sum(1 for r in recommendations if r.priority == Priority.LOW),
        categories=categories,
    )
