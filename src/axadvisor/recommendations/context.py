"""
Business context adjustment.

Batch job recommendations are downgraded to Low while the business peak window
is in progress: batch schedules should not be touched while batch is
business-critical.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

import structlog

from axadvisor.inputs import BusinessContext
from axadvisor.recommendations.models import MetricKind, Priority, Recommendation

logger = structlog.get_logger()

BATCH_JOB_KINDS: frozenset[MetricKind] = frozenset({MetricKind.BATCH_BACKLOG})


class BusinessContextAdjuster:
    """Reprioritizes recommendations from business context facts."""

    def apply(
        self,
        recommendations: Sequence[Recommendation],
        context: BusinessContext | None,
    ) -> list[Recommendation]:
        """
        Return recommendations adjusted for the context.

        The input sequence is left untouched. Adjusted entries are new
        instances sharing the original id.
        """
        if context is None or not context.is_active:
            return list(recommendations)

        window = context.peak_window
        moment = context.time_of_day()
        if window is None or moment is None or not window.contains(moment):
            return list(recommendations)

        reason = (
            f"Downgraded to Low: current time {moment.strftime('%H:%M')} is within the peak window "
            f"{window.start.strftime('%H:%M')}-{window.end.strftime('%H:%M')}; "
            "batch schedules must not change during peak business hours."
        )

        adjusted: list[Recommendation] = []
        for rec in recommendations:
            if rec.kind in BATCH_JOB_KINDS and rec.priority != Priority.LOW:
                logger.info("priority_adjusted", id=rec.id, title=rec.title, previous=rec.priority.value)
                rec = replace(rec, priority=Priority.LOW, priority_adjustment_reason=reason)
            adjusted.append(rec)
        return adjusted
