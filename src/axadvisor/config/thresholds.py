"""
Threshold configuration for rule evaluation, trend analysis and planning.

All comparisons against these thresholds are exclusive: a rule fires when the
observed value is strictly beyond the threshold.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any


@dataclass(frozen=True)
class RuleThresholds:
    """Point-in-time rule thresholds."""

    cpu_avg: float = 80.0  # percent
    memory_avg: float = 85.0  # percent
    batch_backlog: float = 20.0  # queued jobs
    active_sessions: float = 75.0
    db_response_avg_ms: float = 1000.0

    aos_min_connections: int = 100
    com_plus_max_recycle_minutes: int = 1440
    backup_max_frequency_hours: int = 24
    batch_min_threads: int = 4


@dataclass(frozen=True)
class TrendThresholds:
    """Two-window trend comparison settings."""

    min_points: int = 5
    window_size: int = 3

    # Percent change between the earlier and recent window averages
    cpu_change_pct: float = 15.0
    memory_change_pct: float = 10.0
    batch_backlog_change_pct: float = 20.0


@dataclass(frozen=True)
class PlanningDefaults:
    """Planner and prioritizer defaults."""

    top_n: int = 5
    phase_interval_days: int = 7


@dataclass(frozen=True)
class EngineConfig:
    """Complete engine configuration."""

    rules: RuleThresholds = field(default_factory=RuleThresholds)
    trends: TrendThresholds = field(default_factory=TrendThresholds)
    planning: PlanningDefaults = field(default_factory=PlanningDefaults)

    @classmethod
    def default(cls) -> EngineConfig:
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineConfig:
        """Build config from a parsed YAML mapping. Unknown keys are ignored."""
        return cls(
            rules=_overlay(RuleThresholds(), data.get("rules") or {}),
            trends=_overlay(TrendThresholds(), data.get("trends") or {}),
            planning=_overlay(PlanningDefaults(), data.get("planning") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "rules": _as_dict(self.rules),
            "trends": _as_dict(self.trends),
            "planning": _as_dict(self.planning),
        }


def _overlay(base: Any, overrides: dict[str, Any]) -> Any:
    """Return ``base`` with known keys replaced, coerced to the field's type."""
    known = {f.name: type(getattr(base, f.name)) for f in fields(base)}
    changes = {k: known[k](v) for k, v in overrides.items() if k in known}
    return replace(base, **changes)


def _as_dict(obj: Any) -> dict[str, Any]:
    return {f.name: getattr(obj, f.name) for f in fields(obj)}
