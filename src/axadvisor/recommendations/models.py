"""
Recommendation data models.

A Recommendation is immutable once a rule creates it. Later stages derive new
instances with ``dataclasses.replace`` (the id is preserved) or wrap it in
their own enrichment records.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class Category(StrEnum):
    """Recommendation category."""

    PERFORMANCE = "Performance"
    OPERATIONS = "Operations"
    CONFIGURATION = "Configuration"


class Priority(StrEnum):
    """Recommendation priority, highest first."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self]


class Effort(StrEnum):
    """Estimated implementation effort."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class MetricKind(StrEnum):
    """What a recommendation is about. Set by the rule that created it."""

    CPU = "cpu"
    MEMORY = "memory"
    BATCH_BACKLOG = "batch_backlog"
    SESSIONS = "sessions"
    DATABASE_RESPONSE = "database_response"
    AOS_CONNECTIONS = "aos_connections"
    COM_PLUS_RECYCLE = "com_plus_recycle"
    STATISTICS = "statistics"
    BACKUP = "backup"
    BATCH_THREADS = "batch_threads"


PRIORITY_RANK: dict[Priority, int] = {
    Priority.CRITICAL: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Recommendation:
    """A single scored, explainable recommendation."""

    category: Category
    priority: Priority
    kind: MetricKind
    title: str
    description: str
    recommendation_text: str
    impact_text: str
    rationale: str
    confidence: float  # 0..1
    effort: Effort

    # Set only by the business context adjuster when it overrides priority
    priority_adjustment_reason: str | None = None

    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the outbound contract."""
        data: dict[str, Any] = {
            "id": self.id,
            "category": self.category.value,
            "priority": self.priority.value,
            "kind": self.kind.value,
            "title": self.title,
            "description": self.description,
            "recommendation": self.recommendation_text,
            "impact": self.impact_text,
            "rationale": self.rationale,
            "confidence": self.confidence,
            "effort": self.effort.value,
        }
        if self.priority_adjustment_reason is not None:
            data["reason_for_priority_adjustment"] = self.priority_adjustment_reason
        return data
