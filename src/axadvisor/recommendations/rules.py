"""
Rule catalog.

Each rule is a pure function of the metrics snapshot, the configuration
snapshot and the thresholds. It returns one Recommendation or None. A rule
whose input is absent is not applicable and returns None.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from axadvisor.config.thresholds import RuleThresholds
from axadvisor.inputs import ConfigurationSnapshot, MetricsSnapshot
from axadvisor.recommendations.models import (
    Category,
    Effort,
    MetricKind,
    Priority,
    Recommendation,
)

RuleFunc = Callable[[MetricsSnapshot, ConfigurationSnapshot, RuleThresholds], Recommendation | None]


@dataclass(frozen=True)
class Rule:
    """A named entry in the rule catalog."""

    name: str
    source: str  # "metrics" or a configuration subsystem name
    func: RuleFunc

    def __call__(
        self,
        metrics: MetricsSnapshot,
        config: ConfigurationSnapshot,
        thresholds: RuleThresholds,
    ) -> Recommendation | None:
        return self.func(metrics, config, thresholds)


# Metric rules


def high_cpu(metrics: MetricsSnapshot, config: ConfigurationSnapshot, t: RuleThresholds) -> Recommendation | None:
    cpu = metrics.cpu_avg
    if cpu is None or cpu <= t.cpu_avg:
        return None
    return Recommendation(
        category=Category.PERFORMANCE,
        priority=Priority.HIGH,
        kind=MetricKind.CPU,
        title="High CPU Utilization",
        description=f"Average CPU utilization is {cpu:.2f}%, above the {t.cpu_avg:g}% threshold.",
        recommendation_text=(
            "Identify the top CPU-consuming processes and batch jobs, then consider "
            "adding AOS capacity or redistributing load across AOS instances."
        ),
        impact_text="Sustained CPU saturation slows user transactions and batch throughput.",
        rationale=f"CPU average {cpu:.2f}% > {t.cpu_avg:g}%",
        confidence=0.90,
        effort=Effort.MEDIUM,
    )


def high_memory(metrics: MetricsSnapshot, config: ConfigurationSnapshot, t: RuleThresholds) -> Recommendation | None:
    memory = metrics.memory_avg
    if memory is None or memory <= t.memory_avg:
        return None
    return Recommendation(
        category=Category.PERFORMANCE,
        priority=Priority.HIGH,
        kind=MetricKind.MEMORY,
        title="High Memory Utilization",
        description=f"Average memory utilization is {memory:.2f}%, above the {t.memory_avg:g}% threshold.",
        recommendation_text=(
            "Review AOS memory consumption, check for cache growth or leaks, and "
            "plan a memory increase if usage is organic."
        ),
        impact_text="Memory pressure causes paging and can crash AOS instances.",
        rationale=f"Memory average {memory:.2f}% > {t.memory_avg:g}%",
        confidence=0.85,
        effort=Effort.MEDIUM,
    )


def batch_backlog(metrics: MetricsSnapshot, config: ConfigurationSnapshot, t: RuleThresholds) -> Recommendation | None:
    backlog = metrics.batch_backlog
    if backlog is None or backlog <= t.batch_backlog:
        return None
    return Recommendation(
        category=Category.OPERATIONS,
        priority=Priority.HIGH,
        kind=MetricKind.BATCH_BACKLOG,
        title="High Batch Job Backlog",
        description=f"{backlog:g} batch jobs are waiting, above the {t.batch_backlog:g} job threshold.",
        recommendation_text=(
            "Review stuck or long-running batch jobs, rebalance batch groups across "
            "servers and reschedule non-urgent jobs."
        ),
        impact_text="A growing backlog delays business processes that depend on batch output.",
        rationale=f"Batch backlog {backlog:g} > {t.batch_backlog:g}",
        confidence=0.80,
        effort=Effort.LOW,
    )


def high_sessions(metrics: MetricsSnapshot, config: ConfigurationSnapshot, t: RuleThresholds) -> Recommendation | None:
    sessions = metrics.active_sessions
    if sessions is None or sessions <= t.active_sessions:
        return None
    return Recommendation(
        category=Category.OPERATIONS,
        priority=Priority.MEDIUM,
        kind=MetricKind.SESSIONS,
        title="High Active Session Count",
        description=f"{sessions:g} sessions are active, above the {t.active_sessions:g} session threshold.",
        recommendation_text=(
            "Clean up idle sessions, review session timeout settings and consider "
            "load balancing users across AOS instances."
        ),
        impact_text="High session counts increase contention for AOS resources.",
        rationale=f"Active sessions {sessions:g} > {t.active_sessions:g}",
        confidence=0.70,
        effort=Effort.LOW,
    )


def slow_database(metrics: MetricsSnapshot, config: ConfigurationSnapshot, t: RuleThresholds) -> Recommendation | None:
    response = metrics.db_response_avg_ms
    if response is None or response <= t.db_response_avg_ms:
        return None
    return Recommendation(
        category=Category.PERFORMANCE,
        priority=Priority.HIGH,
        kind=MetricKind.DATABASE_RESPONSE,
        title="Slow Database Performance",
        description=(
            f"Average database response time is {response:.2f} ms, above the "
            f"{t.db_response_avg_ms:g} ms threshold."
        ),
        recommendation_text=(
            "Analyse expensive queries, check for blocking and missing indexes, and "
            "review index fragmentation."
        ),
        impact_text="Slow database responses degrade every AOS operation.",
        rationale=f"DB average response {response:.2f} ms > {t.db_response_avg_ms:g} ms",
        confidence=0.85,
        effort=Effort.HIGH,
    )


# Configuration rules


def aos_connections(metrics: MetricsSnapshot, config: ConfigurationSnapshot, t: RuleThresholds) -> Recommendation | None:
    if config.aos is None or config.aos.max_connections is None:
        return None
    current = config.aos.max_connections
    if current >= t.aos_min_connections:
        return None
    return Recommendation(
        category=Category.CONFIGURATION,
        priority=Priority.MEDIUM,
        kind=MetricKind.AOS_CONNECTIONS,
        title="Low AOS Max Connections",
        description=f"AOS max connections is {current}, below the recommended minimum of {t.aos_min_connections}.",
        recommendation_text=f"Raise the AOS max connections setting to at least {t.aos_min_connections}.",
        impact_text="A low connection ceiling queues user and batch requests during load peaks.",
        rationale=f"AOS max connections {current} < {t.aos_min_connections}",
        confidence=0.75,
        effort=Effort.LOW,
    )


def com_plus_recycle(metrics: MetricsSnapshot, config: ConfigurationSnapshot, t: RuleThresholds) -> Recommendation | None:
    if config.aos is None or config.aos.com_plus is None:
        return None
    interval = config.aos.com_plus.recycle_interval_minutes
    if interval is None or interval <= t.com_plus_max_recycle_minutes:
        return None
    return Recommendation(
        category=Category.CONFIGURATION,
        priority=Priority.LOW,
        kind=MetricKind.COM_PLUS_RECYCLE,
        title="Long COM+ Recycle Interval",
        description=(
            f"COM+ applications recycle every {interval:g} minutes, longer than "
            f"{t.com_plus_max_recycle_minutes} minutes."
        ),
        recommendation_text=f"Shorten the COM+ recycle interval to {t.com_plus_max_recycle_minutes} minutes or less.",
        impact_text="Long-lived COM+ processes accumulate memory and handle leaks.",
        rationale=f"COM+ recycle interval {interval:g} min > {t.com_plus_max_recycle_minutes} min",
        confidence=0.60,
        effort=Effort.LOW,
    )


def auto_update_statistics(
    metrics: MetricsSnapshot, config: ConfigurationSnapshot, t: RuleThresholds
) -> Recommendation | None:
    if config.database is None or config.database.auto_update_statistics is not False:
        return None
    return Recommendation(
        category=Category.CONFIGURATION,
        priority=Priority.HIGH,
        kind=MetricKind.STATISTICS,
        title="Database Auto-Update-Statistics Disabled",
        description="Automatic statistics updates are disabled on the application database.",
        recommendation_text="Enable AUTO_UPDATE_STATISTICS on the application database.",
        impact_text="Stale statistics lead to poor query plans and unpredictable response times.",
        rationale="auto_update_statistics is disabled",
        confidence=0.90,
        effort=Effort.LOW,
    )


def backup_frequency(metrics: MetricsSnapshot, config: ConfigurationSnapshot, t: RuleThresholds) -> Recommendation | None:
    if config.database is None or config.database.backup_frequency_hours is None:
        return None
    hours = config.database.backup_frequency_hours
    if hours <= t.backup_max_frequency_hours:
        return None
    return Recommendation(
        category=Category.CONFIGURATION,
        priority=Priority.MEDIUM,
        kind=MetricKind.BACKUP,
        title="Infrequent Database Backups",
        description=f"Database backups run every {hours:g} hours, less often than every {t.backup_max_frequency_hours} hours.",
        recommendation_text=f"Schedule full or differential backups at least every {t.backup_max_frequency_hours} hours.",
        impact_text="Infrequent backups widen the data loss window after a failure.",
        rationale=f"Backup frequency {hours:g} h > {t.backup_max_frequency_hours} h",
        confidence=0.80,
        effort=Effort.MEDIUM,
    )


def batch_threads(metrics: MetricsSnapshot, config: ConfigurationSnapshot, t: RuleThresholds) -> Recommendation | None:
    if config.batch is None or config.batch.max_threads is None:
        return None
    threads = config.batch.max_threads
    if threads >= t.batch_min_threads:
        return None
    return Recommendation(
        category=Category.CONFIGURATION,
        priority=Priority.MEDIUM,
        kind=MetricKind.BATCH_THREADS,
        title="Low Batch Max Threads",
        description=f"Batch servers allow {threads} threads, below the recommended minimum of {t.batch_min_threads}.",
        recommendation_text=f"Increase batch server max threads to at least {t.batch_min_threads}.",
        impact_text="Too few batch threads limit parallel job execution.",
        rationale=f"Batch max threads {threads} < {t.batch_min_threads}",
        confidence=0.70,
        effort=Effort.LOW,
    )


METRIC_RULES: tuple[Rule, ...] = (
    Rule("high_cpu", "metrics", high_cpu),
    Rule("high_memory", "metrics", high_memory),
    Rule("batch_backlog", "metrics", batch_backlog),
    Rule("high_sessions", "metrics", high_sessions),
    Rule("slow_database", "metrics", slow_database),
)

CONFIGURATION_RULES: tuple[Rule, ...] = (
    Rule("aos_connections", "aos", aos_connections),
    Rule("com_plus_recycle", "aos", com_plus_recycle),
    Rule("auto_update_statistics", "database", auto_update_statistics),
    Rule("backup_frequency", "database", backup_frequency),
    Rule("batch_threads", "batch", batch_threads),
)

DEFAULT_RULES: tuple[Rule, ...] = METRIC_RULES + CONFIGURATION_RULES
