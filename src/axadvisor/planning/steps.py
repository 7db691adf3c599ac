"""
Scheduling windows and implementation checklists.

Both are selected from the recommendation's category and metric kind.
"""

from __future__ import annotations

from axadvisor.recommendations.models import Category, MetricKind, Recommendation

APPROVED_CHANGE_WINDOW = "approved change window"
LOW_BATCH_ACTIVITY = "low batch activity period"
DATABASE_MAINTENANCE_WINDOW = "database maintenance window"
AFTER_HOURS = "after hours or weekends"

BATCH_KINDS: frozenset[MetricKind] = frozenset({MetricKind.BATCH_BACKLOG, MetricKind.BATCH_THREADS})
DATABASE_KINDS: frozenset[MetricKind] = frozenset(
    {MetricKind.DATABASE_RESPONSE, MetricKind.STATISTICS, MetricKind.BACKUP}
)

IMPLEMENTATION_STEPS: dict[tuple[Category, MetricKind], tuple[str, ...]] = {
    (Category.PERFORMANCE, MetricKind.CPU): (
        "Capture a CPU baseline per AOS instance",
        "Identify the top CPU-consuming processes and batch jobs",
        "Move heavy batch groups off peak hours or onto dedicated AOS instances",
        "Add AOS capacity if load remains above threshold",
        "Monitor CPU utilization for one week after the change",
    ),
    (Category.PERFORMANCE, MetricKind.MEMORY): (
        "Capture a memory baseline per AOS instance",
        "Check AOS and COM+ processes for memory growth between restarts",
        "Review cache sizes and recycle settings",
        "Plan a memory upgrade if growth is organic",
        "Monitor memory utilization for one week after the change",
    ),
    (Category.OPERATIONS, MetricKind.BATCH_BACKLOG): (
        "List waiting and executing batch jobs by batch group",
        "Cancel or restart stuck jobs",
        "Rebalance batch groups across batch servers",
        "Reschedule non-urgent jobs to low activity periods",
        "Confirm the backlog drains below threshold",
    ),
    (Category.CONFIGURATION, MetricKind.STATISTICS): (
        "Confirm the current database setting with the DBA",
        "Raise a change request for the approved change window",
        "Enable AUTO_UPDATE_STATISTICS on the application database",
        "Run a full statistics update once after enabling",
        "Monitor query plans and response times for regressions",
    ),
}


def suggested_window(rec: Recommendation) -> str:
    """Pick the scheduling window for a recommendation."""
    if rec.category == Category.CONFIGURATION:
        return APPROVED_CHANGE_WINDOW
    if rec.kind in BATCH_KINDS:
        return LOW_BATCH_ACTIVITY
    if rec.kind in DATABASE_KINDS:
        return DATABASE_MAINTENANCE_WINDOW
    return AFTER_HOURS


def implementation_steps(rec: Recommendation) -> list[str]:
    """Ordered checklist for a recommendation; empty when none is defined."""
    return list(IMPLEMENTATION_STEPS.get((rec.category, rec.kind), ()))
