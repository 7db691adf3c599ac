"""
Threshold file loading.

Search order:
1. Explicit path (settings.config_path)
2. .axadvisor/config.yaml (working directory)
3. ~/.axadvisor/config.yaml (user home)
4. Default thresholds
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import structlog
import yaml

from axadvisor.config.settings import Settings
from axadvisor.config.thresholds import EngineConfig

logger = structlog.get_logger()


def get_config_path(explicit_path: str | Path | None = None) -> Path | None:
    """
    Find the threshold file to use.

    Returns:
        Path to config file or None if not found
    """
    if explicit_path:
        path = Path(explicit_path)
        if path.exists():
            return path
        return None

    cwd_config = Path.cwd() / ".axadvisor" / "config.yaml"
    if cwd_config.exists():
        return cwd_config

    home_config = Path.home() / ".axadvisor" / "config.yaml"
    if home_config.exists():
        return home_config

    return None


class ConfigLoader:
    """Loads engine thresholds from YAML and applies settings overrides."""

    def __init__(self, config_path: Path | None = None):
        self.config_path = config_path or get_config_path()

    @classmethod
    def from_settings(cls, settings: Settings) -> ConfigLoader:
        return cls(get_config_path(settings.config_path))

    def load(self) -> EngineConfig:
        """Load configuration from file or return defaults."""
        if self.config_path and self.config_path.exists():
            return self._load_from_file(self.config_path)
        return EngineConfig.default()

    def _load_from_file(self, path: Path) -> EngineConfig:
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise TypeError(f"expected a mapping, got {type(data).__name__}")
            config = EngineConfig.from_dict(data)
            logger.debug("loaded_config", path=str(path))
            return config
        except (OSError, TypeError, ValueError, yaml.YAMLError) as e:
            logger.warning("failed_to_load_config", path=str(path), error=str(e))
            return EngineConfig.default()


def load_engine_config(settings: Settings) -> EngineConfig:
    """Resolve thresholds from file, then apply environment overrides."""
    config = ConfigLoader.from_settings(settings).load()

    planning = config.planning
    if settings.top_n is not None:
        planning = replace(planning, top_n=settings.top_n)
    if settings.phase_interval_days is not None:
        planning = replace(planning, phase_interval_days=settings.phase_interval_days)
    return replace(config, planning=planning)
