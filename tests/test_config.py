"""
Tests for settings, threshold dataclasses and the YAML threshold loader.
"""

from __future__ import annotations

import pytest
from axadvisor.config import (
    ConfigLoader,
    EngineConfig,
    RuleThresholds,
    Settings,
    get_config_path,
    load_engine_config,
)


@pytest.fixture
def isolated(monkeypatch, tmp_path):
    """Run with an empty working directory and home, and no AXADVISOR_ env."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for name in ("CONFIG_PATH", "TOP_N", "PHASE_INTERVAL_DAYS", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(f"AXADVISOR_{name}", raising=False)
    return tmp_path


class TestEngineConfig:
    """Tests for threshold dataclasses."""

    def test_defaults(self):
        config = EngineConfig.default()

        assert config.rules.cpu_avg == 80.0
        assert config.rules.memory_avg == 85.0
        assert config.rules.batch_backlog == 20.0
        assert config.rules.active_sessions == 75.0
        assert config.rules.db_response_avg_ms == 1000.0
        assert config.trends.min_points == 5
        assert config.trends.window_size == 3
        assert config.planning.top_n == 5
        assert config.planning.phase_interval_days == 7

    def test_from_dict_overlays_known_keys(self):
        config = EngineConfig.from_dict(
            {
                "rules": {"cpu_avg": 70, "unknown": 1},
                "trends": {"cpu_change_pct": "12.5"},
                "other": {"ignored": True},
            }
        )

        assert config.rules.cpu_avg == 70.0
        assert isinstance(config.rules.cpu_avg, float)
        assert config.rules.memory_avg == 85.0
        assert config.trends.cpu_change_pct == 12.5

    def test_from_dict_rejects_bad_values(self):
        with pytest.raises(ValueError):
            EngineConfig.from_dict({"rules": {"cpu_avg": "high"}})

    def test_to_dict(self):
        data = EngineConfig(rules=RuleThresholds(cpu_avg=70.0)).to_dict()

        assert data["rules"]["cpu_avg"] == 70.0
        assert data["planning"] == {"top_n": 5, "phase_interval_days": 7}


class TestConfigLoader:
    """Tests for YAML threshold loading."""

    def test_no_file_returns_defaults(self, isolated):
        assert get_config_path() is None
        assert ConfigLoader().load() == EngineConfig.default()

    def test_explicit_path(self, isolated):
        path = isolated / "thresholds.yaml"
        path.write_text("rules:\n  cpu_avg: 65\nplanning:\n  top_n: 3\n")

        config = ConfigLoader(path).load()

        assert config.rules.cpu_avg == 65.0
        assert config.planning.top_n == 3

    def test_missing_explicit_path(self, isolated):
        assert get_config_path(isolated / "nope.yaml") is None

    def test_working_directory_file(self, isolated):
        config_dir = isolated / ".axadvisor"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("trends:\n  min_points: 8\n")

        assert get_config_path().resolve() == (config_dir / "config.yaml").resolve()
        assert ConfigLoader().load().trends.min_points == 8

    def test_home_file(self, isolated):
        config_dir = isolated / "home" / ".axadvisor"
        config_dir.mkdir(parents=True)
        (config_dir / "config.yaml").write_text("rules:\n  batch_backlog: 50\n")

        assert ConfigLoader().load().rules.batch_backlog == 50.0

    @pytest.mark.parametrize(
        "content",
        ["rules: [unclosed", "- just\n- a list\n", "rules:\n  cpu_avg: lots\n"],
    )
    def test_malformed_file_falls_back(self, isolated, content):
        path = isolated / "bad.yaml"
        path.write_text(content)

        assert ConfigLoader(path).load() == EngineConfig.default()

    def test_empty_file(self, isolated):
        path = isolated / "empty.yaml"
        path.write_text("")

        assert ConfigLoader(path).load() == EngineConfig.default()


class TestSettings:
    """Tests for environment settings."""

    def test_defaults(self, isolated):
        settings = Settings()

        assert settings.log_level == "INFO"
        assert settings.log_format == "json"
        assert settings.config_path is None
        assert settings.top_n is None

    def test_env_prefix(self, isolated, monkeypatch):
        monkeypatch.setenv("AXADVISOR_LOG_FORMAT", "console")
        monkeypatch.setenv("AXADVISOR_PHASE_INTERVAL_DAYS", "14")

        settings = Settings()

        assert settings.log_format == "console"
        assert settings.phase_interval_days == 14

    def test_load_engine_config_applies_overrides(self, isolated, monkeypatch):
        path = isolated / "thresholds.yaml"
        path.write_text("planning:\n  top_n: 3\n  phase_interval_days: 10\n")
        monkeypatch.setenv("AXADVISOR_CONFIG_PATH", str(path))
        monkeypatch.setenv("AXADVISOR_TOP_N", "8")

        config = load_engine_config(Settings())

        assert config.planning.top_n == 8
        assert config.planning.phase_interval_days == 10
