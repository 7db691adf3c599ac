"""
Two-window trend analysis over a historical series.

For each tracked metric the average of the earliest readings is compared
with the average of the most recent readings. A recommendation is emitted when
the relative change exceeds the metric's threshold.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import structlog

from axadvisor.config.thresholds import TrendThresholds
from axadvisor.inputs import HistoricalPoint, MetricName
from axadvisor.recommendations.models import (
    Category,
    Effort,
    MetricKind,
    Priority,
    Recommendation,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class TrendWindow:
    """Earlier/recent window comparison for one metric."""

    metric: str
    earlier_avg: float
    recent_avg: float
    change_percent: float


def change_percent(earlier_avg: float, recent_avg: float) -> float:
    """Relative change in percent. Zero when the earlier average is zero."""
    if earlier_avg == 0:
        return 0.0
    return (recent_avg - earlier_avg) / earlier_avg * 100


class TrendAnalyzer:
    """Detects directional drift in CPU, memory and batch backlog."""

    def __init__(self, thresholds: TrendThresholds | None = None):
        self.thresholds = thresholds or TrendThresholds()

    def compare_windows(self, series: Sequence[HistoricalPoint], metric: str) -> TrendWindow | None:
        """
        Compare the earliest and latest windows for a metric.

        Returns None when fewer than ``min_points`` readings exist for it.
        """
        ordered = sorted(series, key=lambda p: p.timestamp)
        values = [v for v in (p.value(metric) for p in ordered) if v is not None]
        if len(values) < self.thresholds.min_points:
            return None

        size = self.thresholds.window_size
        earlier = values[:size]
        recent = values[-size:]
        earlier_avg = sum(earlier) / len(earlier)
        recent_avg = sum(recent) / len(recent)
        return TrendWindow(
            metric=metric,
            earlier_avg=earlier_avg,
            recent_avg=recent_avg,
            change_percent=change_percent(earlier_avg, recent_avg),
        )

    def analyze(self, series: Sequence[HistoricalPoint]) -> list[Recommendation]:
        """Analyze a series. Series shorter than ``min_points`` yield nothing."""
        if len(series) < self.thresholds.min_points:
            logger.debug("trend_analysis_skipped", points=len(series), required=self.thresholds.min_points)
            return []

        recommendations: list[Recommendation] = []

        cpu = self.compare_windows(series, MetricName.CPU_AVG)
        if cpu is not None and cpu.change_percent > self.thresholds.cpu_change_pct:
            recommendations.append(self._cpu_trend(cpu))

        memory = self.compare_windows(series, MetricName.MEMORY_AVG)
        if memory is not None and memory.change_percent > self.thresholds.memory_change_pct:
            recommendations.append(self._memory_trend(memory))

        backlog = self.compare_windows(series, MetricName.BATCH_BACKLOG)
        if backlog is not None and backlog.change_percent > self.thresholds.batch_backlog_change_pct:
            recommendations.append(self._backlog_trend(backlog))

        return recommendations

    def _cpu_trend(self, trend: TrendWindow) -> Recommendation:
        return Recommendation(
            category=Category.PERFORMANCE,
            priority=Priority.MEDIUM,
            kind=MetricKind.CPU,
            title="Rising CPU Utilization Trend",
            description=(
                f"CPU utilization rose {trend.change_percent:.2f}% "
                f"(from {trend.earlier_avg:.2f}% to {trend.recent_avg:.2f}%)."
            ),
            recommendation_text="Plan AOS capacity ahead of demand and review recently added workloads.",
            impact_text="Continued growth will reach saturation and slow transactions.",
            rationale=f"CPU change {trend.change_percent:.2f}% > {self.thresholds.cpu_change_pct:g}%",
            confidence=0.75,
            effort=Effort.MEDIUM,
        )

    def _memory_trend(self, trend: TrendWindow) -> Recommendation:
        return Recommendation(
            category=Category.PERFORMANCE,
            priority=Priority.MEDIUM,
            kind=MetricKind.MEMORY,
            title="Rising Memory Utilization Trend",
            description=(
                f"Memory utilization rose {trend.change_percent:.2f}% "
                f"(from {trend.earlier_avg:.2f}% to {trend.recent_avg:.2f}%)."
            ),
            recommendation_text="Investigate memory growth for leaks and plan capacity if growth is organic.",
            impact_text="Unchecked memory growth leads to paging and AOS instability.",
            rationale=f"Memory change {trend.change_percent:.2f}% > {self.thresholds.memory_change_pct:g}%",
            confidence=0.70,
            effort=Effort.MEDIUM,
        )

    def _backlog_trend(self, trend: TrendWindow) -> Recommendation:
        return Recommendation(
            category=Category.OPERATIONS,
            priority=Priority.HIGH,
            kind=MetricKind.BATCH_BACKLOG,
            title="Growing Batch Job Backlog",
            description=(
                f"The batch backlog grew {trend.change_percent:.2f}% "
                f"(from {trend.earlier_avg:.2f} to {trend.recent_avg:.2f} jobs)."
            ),
            recommendation_text="Review batch scheduling and throughput before the backlog becomes critical.",
            impact_text="A growing backlog delays dependent business processes.",
            rationale=(
                f"Batch backlog change {trend.change_percent:.2f}% > "
                f"{self.thresholds.batch_backlog_change_pct:g}%"
            ),
            confidence=0.80,
            effort=Effort.MEDIUM,
        )
