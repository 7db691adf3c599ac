"""Root test configuration."""

import logging
from datetime import datetime, timedelta, timezone

import pytest
import structlog
from axadvisor.recommendations.models import (
    Category,
    Effort,
    MetricKind,
    Priority,
    Recommendation,
)


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def build_recommendation(
    title: str = "Test Recommendation",
    category: Category = Category.PERFORMANCE,
    priority: Priority = Priority.MEDIUM,
    kind: MetricKind = MetricKind.SESSIONS,
    confidence: float = 0.8,
    effort: Effort = Effort.MEDIUM,
) -> Recommendation:
    return Recommendation(
        category=category,
        priority=priority,
        kind=kind,
        title=title,
        description=f"{title} description",
        recommendation_text=f"Fix {title}",
        impact_text=f"{title} impact",
        rationale=f"{title} rationale",
        confidence=confidence,
        effort=effort,
    )


@pytest.fixture
def make_recommendation():
    """Factory for recommendations with sensible defaults."""
    return build_recommendation


@pytest.fixture
def make_series():
    """Factory for historical series from per-metric value lists."""

    def _make(start: datetime | None = None, **metrics: list[float | None]) -> list[dict]:
        start = start or datetime(2024, 5, 1, tzinfo=timezone.utc)
        length = max((len(v) for v in metrics.values()), default=0)
        series = []
        for i in range(length):
            values = {name: vals[i] for name, vals in metrics.items() if i < len(vals)}
            series.append(
                {
                    "timestamp": (start + timedelta(hours=i)).isoformat(),
                    "values": values,
                }
            )
        return series

    return _make


@pytest.fixture
def run_time() -> datetime:
    return datetime(2024, 6, 3, 22, 0, tzinfo=timezone.utc)
