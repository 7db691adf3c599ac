"""Engine configuration: environment settings and threshold files."""

from axadvisor.config.loader import ConfigLoader, get_config_path, load_engine_config
from axadvisor.config.settings import Settings, get_settings
from axadvisor.config.thresholds import (
    EngineConfig,
    PlanningDefaults,
    RuleThresholds,
    TrendThresholds,
)

__all__ = [
    "Settings",
    "get_settings",
    "ConfigLoader",
    "get_config_path",
    "load_engine_config",
    "EngineConfig",
    "RuleThresholds",
    "TrendThresholds",
    "PlanningDefaults",
]
