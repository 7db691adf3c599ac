"""
Input contracts supplied by the monitoring pipeline.

Raw mappings are normalised (key aliases, per-subsystem parsing) and
validated with Pydantic. Validation problems never abort a whole evaluation:
offending values or sections are dropped and reported as diagnostic notes.
"""

from __future__ import annotations

from datetime import datetime, time, timezone
from enum import StrEnum
from typing import Annotated, Any, Iterable, Mapping

import structlog
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictBool, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from axadvisor.core.errors import ValidationError

logger = structlog.get_logger()


class MetricName(StrEnum):
    """Canonical metric names."""

    CPU_AVG = "cpu_avg"
    MEMORY_AVG = "memory_avg"
    BATCH_BACKLOG = "batch_backlog"
    ACTIVE_SESSIONS = "active_sessions"
    DB_RESPONSE_AVG_MS = "db_response_avg_ms"


METRIC_ALIASES: dict[str, str] = {
    "cpuAvg": "cpu_avg",
    "cpu_average": "cpu_avg",
    "memoryAvg": "memory_avg",
    "memory_average": "memory_avg",
    "batchBacklog": "batch_backlog",
    "activeSessions": "active_sessions",
    "dbResponseAvgMs": "db_response_avg_ms",
    "dbResponseTimeAvg": "db_response_avg_ms",
    "db_response_time_avg": "db_response_avg_ms",
}

SUBSYSTEM_ALIASES: dict[str, str] = {
    "aos": "aos",
    "application-server": "aos",
    "applicationServer": "aos",
    "application_server": "aos",
    "database": "database",
    "sql": "database",
    "batch": "batch",
    "batch-processor": "batch",
    "batchProcessor": "batch",
    "batch_processor": "batch",
}


def canonical_metric(name: str) -> str:
    """Map a metric key to its canonical name (unknown keys pass through)."""
    return METRIC_ALIASES.get(name, name)


def _normalise_metrics(values: Mapping[str, Any]) -> dict[str, Any]:
    known = {m.value for m in MetricName}
    out: dict[str, Any] = {}
    for key, value in values.items():
        name = canonical_metric(key)
        if name in known:
            out[name] = value
    return out


def _validate_dropping_invalid(
    model: type[BaseModel],
    data: dict[str, Any],
    label: str,
    diagnostics: list[str] | None,
) -> Any:
    """Validate ``data``; fields that fail validation are dropped and noted."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        cleaned = dict(data)
        for err in e.errors():
            if not err["loc"]:
                raise
            field = str(err["loc"][0])
            cleaned.pop(field, None)
            note = f"{label}: dropped invalid value for '{field}' ({err['msg']})"
            logger.warning("input_value_dropped", source=label, field=field, error=err["msg"])
            if diagnostics is not None:
                diagnostics.append(note)
        return model.model_validate(cleaned)


class MetricsSnapshot(BaseModel):
    """Point-in-time metric readings. Absent readings are None."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    cpu_avg: float | None = Field(None, description="Average CPU utilisation (%)")
    memory_avg: float | None = Field(None, description="Average memory utilisation (%)")
    batch_backlog: float | None = Field(None, description="Queued but unprocessed batch jobs")
    active_sessions: float | None = Field(None, description="Active user sessions")
    db_response_avg_ms: float | None = Field(None, description="Average database response time (ms)")

    @classmethod
    def from_mapping(
        cls,
        values: Mapping[str, Any] | None,
        diagnostics: list[str] | None = None,
    ) -> MetricsSnapshot:
        """Parse a raw snapshot, dropping values that are not numeric."""
        if values is None:
            return cls()
        if not isinstance(values, Mapping):
            raise ValidationError("Metrics snapshot must be a mapping", field="metrics")
        return _validate_dropping_invalid(cls, _normalise_metrics(values), "metrics", diagnostics)

    def get(self, metric: MetricName | str) -> float | None:
        return getattr(self, canonical_metric(str(metric)), None)


class HistoricalPoint(BaseModel):
    """One timestamped set of metric readings."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    timestamp: datetime
    values: dict[str, float | None] = Field(default_factory=dict, alias="metricValues")

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # Naive stamps are UTC so that mixed series stay comparable
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def value(self, metric: MetricName | str) -> float | None:
        return self.values.get(str(metric))

    @classmethod
    def from_mapping(cls, entry: Mapping[str, Any]) -> HistoricalPoint:
        """Parse one series entry. Raises ValidationError when malformed."""
        if not isinstance(entry, Mapping):
            raise ValidationError("Historical entry must be a mapping", field="history")
        if entry.get("timestamp") is None:
            raise ValidationError("Historical entry is missing a timestamp", field="timestamp")
        raw_values = entry.get("values", entry.get("metricValues")) or {}
        if not isinstance(raw_values, Mapping):
            raise ValidationError("Historical entry values must be a mapping", field="values")
        values = {canonical_metric(k): v for k, v in raw_values.items()}
        try:
            return cls.model_validate({"timestamp": entry["timestamp"], "values": values})
        except PydanticValidationError as e:
            raise ValidationError(
                "Historical entry is malformed",
                field=".".join(str(p) for p in e.errors()[0]["loc"]),
                details={"error": e.errors()[0]["msg"]},
            ) from e


def parse_series(
    entries: Iterable[Mapping[str, Any] | HistoricalPoint] | None,
    diagnostics: list[str] | None = None,
) -> list[HistoricalPoint]:
    """Parse a historical series, skipping malformed entries."""
    points: list[HistoricalPoint] = []
    for index, entry in enumerate(entries or []):
        if isinstance(entry, HistoricalPoint):
            points.append(entry)
            continue
        try:
            points.append(HistoricalPoint.from_mapping(entry))
        except ValidationError as e:
            logger.warning("history_entry_skipped", index=index, field=e.field, error=e.message)
            if diagnostics is not None:
                diagnostics.append(f"history[{index}]: {e.message}")
    return points


def _number(value: Any) -> Any:
    # Booleans and numeric strings are rejected, not coerced
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("Input should be a number")
    return value


def _whole_number(value: Any) -> Any:
    value = _number(value)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("Input should be a whole number")
        return int(value)
    return value


Count = Annotated[int, BeforeValidator(_whole_number)]
Duration = Annotated[float, BeforeValidator(_number)]


class _SubsystemModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ComPlusSettings(_SubsystemModel):
    recycle_interval_minutes: Duration | None = None


class AosSettings(_SubsystemModel):
    max_connections: Count | None = None
    com_plus: ComPlusSettings | None = None


class DatabaseSettings(_SubsystemModel):
    auto_update_statistics: StrictBool | None = None
    backup_frequency_hours: Duration | None = None


class BatchSettings(_SubsystemModel):
    max_threads: Count | None = None


_SUBSYSTEM_MODELS: dict[str, type[_SubsystemModel]] = {
    "aos": AosSettings,
    "database": DatabaseSettings,
    "batch": BatchSettings,
}

# Settings that are themselves nested sections, keyed by owning model
_NESTED_SECTIONS: dict[type[_SubsystemModel], dict[str, type[_SubsystemModel]]] = {
    AosSettings: {"comPlus": ComPlusSettings, "com_plus": ComPlusSettings},
}


def _parse_section(
    model: type[_SubsystemModel],
    raw: Any,
    path: str,
    invalid: dict[str, str],
) -> _SubsystemModel | None:
    """
    Parse one configuration section key by key.

    A key whose value fails validation is dropped and recorded in ``invalid``
    under its dotted path; the remaining keys are kept.
    """
    if not isinstance(raw, Mapping):
        invalid[path] = f"expected a mapping, got {type(raw).__name__}"
        logger.warning("config_value_dropped", path=path, error=invalid[path])
        return None

    nested = _NESTED_SECTIONS.get(model, {})
    cleaned: dict[str, Any] = {}
    for key, value in raw.items():
        key_path = f"{path}.{key}"
        if key in nested:
            section = _parse_section(nested[key], value, key_path, invalid)
            if section is not None:
                cleaned[key] = section
            continue
        try:
            model.model_validate({key: value})
        except PydanticValidationError as e:
            invalid[key_path] = e.errors()[0]["msg"]
            logger.warning("config_value_dropped", path=key_path, error=invalid[key_path])
            continue
        cleaned[key] = value
    return model.model_validate(cleaned)


class ConfigurationSnapshot(BaseModel):
    """
    Typed configuration facts per subsystem.

    Each setting is tri-state: absent (None and not listed in ``invalid``),
    present but invalid (None and listed in ``invalid`` under its dotted path,
    e.g. ``database.backupFrequencyHours``), or a parsed value. An invalid
    setting never hides its valid siblings.
    """

    model_config = ConfigDict(frozen=True)

    aos: AosSettings | None = None
    database: DatabaseSettings | None = None
    batch: BatchSettings | None = None
    invalid: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any] | None) -> ConfigurationSnapshot:
        if config is None:
            return cls()
        if not isinstance(config, Mapping):
            raise ValidationError("Configuration snapshot must be a mapping", field="configuration")

        sections: dict[str, Any] = {}
        invalid: dict[str, str] = {}
        for key, value in config.items():
            name = SUBSYSTEM_ALIASES.get(key)
            if name is None:
                continue
            section = _parse_section(_SUBSYSTEM_MODELS[name], value, name, invalid)
            if section is not None:
                sections[name] = section
        return cls(invalid=invalid, **sections)


class PeakWindow(BaseModel):
    """Time-of-day bounds of the business peak, inclusive."""

    model_config = ConfigDict(frozen=True)

    start: time
    end: time

    @field_validator("start", "end")
    @classmethod
    def strip_offset(cls, value: time) -> time:
        return value.replace(tzinfo=None)

    def contains(self, moment: time) -> bool:
        if self.start <= self.end:
            return self.start <= moment <= self.end
        # Window wraps past midnight
        return moment >= self.start or moment <= self.end


class BusinessContext(BaseModel):
    """Optional business facts used to reprioritise recommendations."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    peak_window: PeakWindow | None = Field(None, alias="peakWindow")
    current_time: datetime | time | None = Field(None, alias="currentTime")

    @field_validator("current_time")
    @classmethod
    def strip_offset(cls, value: datetime | time | None) -> datetime | time | None:
        # Peak windows are local wall-clock bounds; offsets are not compared
        if isinstance(value, time):
            return value.replace(tzinfo=None)
        return value

    @property
    def is_active(self) -> bool:
        return self.peak_window is not None and self.current_time is not None

    def time_of_day(self) -> time | None:
        if isinstance(self.current_time, datetime):
            return self.current_time.time()
        return self.current_time

    @classmethod
    def from_mapping(cls, context: Mapping[str, Any] | BusinessContext | None) -> BusinessContext:
        if context is None:
            return cls()
        if isinstance(context, BusinessContext):
            return context
        try:
            return cls.model_validate(context)
        except PydanticValidationError as e:
            err = e.errors()[0]
            raise ValidationError(
                "Business context is malformed",
                field=".".join(str(p) for p in err["loc"]),
                details={"error": err["msg"]},
            ) from e


class BusinessConstraints(BaseModel):
    """Free-form scheduling constraints for the planner. No keys are required."""

    model_config = ConfigDict(frozen=True, extra="allow")

    @classmethod
    def from_mapping(cls, constraints: Mapping[str, Any] | BusinessConstraints | None) -> BusinessConstraints:
        if constraints is None:
            return cls()
        if isinstance(constraints, BusinessConstraints):
            return constraints
        return cls.model_validate(dict(constraints))
