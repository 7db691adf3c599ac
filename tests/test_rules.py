"""
Tests for the rule catalog and rule evaluator.
"""

from __future__ import annotations

import pytest
from axadvisor.config.thresholds import RuleThresholds
from axadvisor.inputs import ConfigurationSnapshot, MetricsSnapshot
from axadvisor.recommendations import (
    Category,
    MetricKind,
    Priority,
    Rule,
    RuleEvaluator,
)
from axadvisor.recommendations.rules import CONFIGURATION_RULES, DEFAULT_RULES, METRIC_RULES


def by_title(recommendations):
    return {r.title: r for r in recommendations}


class TestMetricRules:
    """Tests for point-in-time metric rules."""

    @pytest.mark.parametrize("cpu", [80.01, 85.0, 99.9, 100.0])
    def test_high_cpu_fires_exactly_once(self, cpu):
        recs = RuleEvaluator().evaluate(MetricsSnapshot(cpu_avg=cpu))

        cpu_recs = [r for r in recs if r.title == "High CPU Utilization"]
        assert len(cpu_recs) == 1
        rec = cpu_recs[0]
        assert rec.category == Category.PERFORMANCE
        assert rec.priority == Priority.HIGH
        assert rec.confidence == 0.90
        assert rec.kind == MetricKind.CPU

    def test_threshold_is_exclusive(self):
        recs = RuleEvaluator().evaluate(
            MetricsSnapshot(
                cpu_avg=80,
                memory_avg=85,
                batch_backlog=20,
                active_sessions=75,
                db_response_avg_ms=1000,
            )
        )

        assert recs == []

    def test_all_metric_rules_fire(self):
        recs = RuleEvaluator().evaluate(
            MetricsSnapshot(
                cpu_avg=95,
                memory_avg=90,
                batch_backlog=40,
                active_sessions=120,
                db_response_avg_ms=2500,
            )
        )
        found = by_title(recs)

        assert set(found) == {
            "High CPU Utilization",
            "High Memory Utilization",
            "High Batch Job Backlog",
            "High Active Session Count",
            "Slow Database Performance",
        }
        assert found["High Memory Utilization"].confidence == 0.85
        assert found["High Memory Utilization"].priority == Priority.HIGH
        assert found["High Batch Job Backlog"].category == Category.OPERATIONS
        assert found["High Batch Job Backlog"].confidence == 0.80
        assert found["High Active Session Count"].priority == Priority.MEDIUM
        assert found["High Active Session Count"].confidence == 0.70
        assert found["Slow Database Performance"].category == Category.PERFORMANCE
        assert found["Slow Database Performance"].confidence == 0.85

    def test_missing_metrics_not_applicable(self):
        recs = RuleEvaluator().evaluate(MetricsSnapshot(memory_avg=99))

        assert [r.title for r in recs] == ["High Memory Utilization"]

    def test_custom_thresholds(self):
        evaluator = RuleEvaluator(RuleThresholds(cpu_avg=50))

        recs = evaluator.evaluate(MetricsSnapshot(cpu_avg=60))

        assert [r.title for r in recs] == ["High CPU Utilization"]

    def test_rationale_renders_two_decimals(self):
        recs = RuleEvaluator().evaluate(MetricsSnapshot(cpu_avg=91.23456))

        assert "91.23%" in recs[0].rationale


class TestConfigurationRules:
    """Tests for configuration rules."""

    def test_all_configuration_rules_fire(self):
        config = ConfigurationSnapshot.from_mapping(
            {
                "aos": {"maxConnections": 50, "comPlus": {"recycleIntervalMinutes": 2880}},
                "database": {"autoUpdateStatistics": False, "backupFrequencyHours": 48},
                "batch": {"maxThreads": 2},
            }
        )

        found = by_title(RuleEvaluator().evaluate(MetricsSnapshot(), config))

        assert found["Low AOS Max Connections"].priority == Priority.MEDIUM
        assert found["Low AOS Max Connections"].confidence == 0.75
        assert found["Long COM+ Recycle Interval"].priority == Priority.LOW
        assert found["Long COM+ Recycle Interval"].confidence == 0.60
        assert found["Database Auto-Update-Statistics Disabled"].priority == Priority.HIGH
        assert found["Database Auto-Update-Statistics Disabled"].confidence == 0.90
        assert found["Infrequent Database Backups"].priority == Priority.MEDIUM
        assert found["Infrequent Database Backups"].confidence == 0.80
        assert found["Low Batch Max Threads"].priority == Priority.MEDIUM
        assert found["Low Batch Max Threads"].confidence == 0.70
        assert all(r.category == Category.CONFIGURATION for r in found.values())

    def test_healthy_configuration(self):
        config = ConfigurationSnapshot.from_mapping(
            {
                "aos": {"maxConnections": 100, "comPlus": {"recycleIntervalMinutes": 1440}},
                "database": {"autoUpdateStatistics": True, "backupFrequencyHours": 24},
                "batch": {"maxThreads": 4},
            }
        )

        assert RuleEvaluator().evaluate(MetricsSnapshot(), config) == []

    def test_missing_keys_not_applicable(self):
        config = ConfigurationSnapshot.from_mapping({"aos": {}, "database": {"backupFrequencyHours": 12}})

        assert RuleEvaluator().evaluate(MetricsSnapshot(), config) == []

    def test_no_configuration(self):
        assert RuleEvaluator().evaluate(MetricsSnapshot(), None) == []

    def test_invalid_setting_noted(self):
        config = ConfigurationSnapshot.from_mapping(
            {"database": {"autoUpdateStatistics": "off"}, "batch": {"maxThreads": 1}}
        )

        recs, diagnostics = RuleEvaluator().evaluate_with_diagnostics(MetricsSnapshot(), config)

        assert [r.title for r in recs] == ["Low Batch Max Threads"]
        assert any(d.startswith("configuration.database.autoUpdateStatistics ignored") for d in diagnostics)

    def test_bad_sibling_does_not_hide_rule(self):
        config = ConfigurationSnapshot.from_mapping(
            {"database": {"autoUpdateStatistics": False, "backupFrequencyHours": "nightly"}}
        )

        recs, diagnostics = RuleEvaluator().evaluate_with_diagnostics(MetricsSnapshot(), config)

        assert [r.title for r in recs] == ["Database Auto-Update-Statistics Disabled"]
        assert len(diagnostics) == 1
        assert diagnostics[0].startswith("configuration.database.backupFrequencyHours ignored")

    def test_fractional_backup_frequency(self):
        config = ConfigurationSnapshot.from_mapping({"database": {"backupFrequencyHours": 36.5}})

        recs = RuleEvaluator().evaluate(MetricsSnapshot(), config)

        assert [r.title for r in recs] == ["Infrequent Database Backups"]
        assert recs[0].rationale == "Backup frequency 36.5 h > 24 h"


class TestRuleIsolation:
    """A failing rule never aborts its siblings."""

    def test_failing_rule_skipped(self):
        def broken(metrics, config, thresholds):
            raise ValueError("bad input")

        rules = (Rule("broken", "metrics", broken),) + METRIC_RULES
        evaluator = RuleEvaluator(rules=rules)

        recs, diagnostics = evaluator.evaluate_with_diagnostics(MetricsSnapshot(cpu_avg=95))

        assert [r.title for r in recs] == ["High CPU Utilization"]
        assert diagnostics == ["rule 'broken' skipped: bad input"]

    def test_rule_order_does_not_matter(self):
        metrics = MetricsSnapshot(cpu_avg=95, memory_avg=95, batch_backlog=30)

        forward = RuleEvaluator(rules=DEFAULT_RULES).evaluate(metrics)
        backward = RuleEvaluator(rules=tuple(reversed(DEFAULT_RULES))).evaluate(metrics)

        assert sorted(r.title for r in forward) == sorted(r.title for r in backward)

    def test_catalog_composition(self):
        assert len(METRIC_RULES) == 5
        assert len(CONFIGURATION_RULES) == 5
        assert {r.source for r in CONFIGURATION_RULES} == {"aos", "database", "batch"}

    def test_ids_are_unique(self):
        metrics = MetricsSnapshot(cpu_avg=95, memory_avg=95, batch_backlog=30, active_sessions=90)

        recs = RuleEvaluator().evaluate(metrics)

        assert len({r.id for r in recs}) == len(recs)
