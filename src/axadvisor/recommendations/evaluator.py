"""
Rule evaluation over a metrics snapshot and a configuration snapshot.

Rules are independent: one rule failing is logged, noted as a diagnostic and
skipped. It never prevents the remaining rules from running.
"""

from __future__ import annotations

from typing import Sequence

import structlog

from axadvisor.config.thresholds import RuleThresholds
from axadvisor.core.errors import ValidationError
from axadvisor.inputs import ConfigurationSnapshot, MetricsSnapshot
from axadvisor.recommendations.models import Recommendation
from axadvisor.recommendations.rules import DEFAULT_RULES, Rule

logger = structlog.get_logger()


class RuleEvaluator:
    """Applies the rule catalog to point-in-time inputs."""

    def __init__(
        self,
        thresholds: RuleThresholds | None = None,
        rules: Sequence[Rule] = DEFAULT_RULES,
    ):
        self.thresholds = thresholds or RuleThresholds()
        self.rules = tuple(rules)

    def evaluate(
        self,
        metrics: MetricsSnapshot,
        config: ConfigurationSnapshot | None = None,
    ) -> list[Recommendation]:
        """Evaluate every rule and return the recommendations that fired."""
        recommendations, _ = self.evaluate_with_diagnostics(metrics, config)
        return recommendations

    def evaluate_with_diagnostics(
        self,
        metrics: MetricsSnapshot,
        config: ConfigurationSnapshot | None = None,
    ) -> tuple[list[Recommendation], list[str]]:
        """
        Evaluate every rule.

        Returns:
            Tuple of (recommendations, diagnostic notes for skipped rules)
        """
        config = config or ConfigurationSnapshot()
        recommendations: list[Recommendation] = []
        diagnostics: list[str] = []

        for path, error in config.invalid.items():
            diagnostics.append(f"configuration.{path} ignored: {error}")

        for rule in self.rules:
            try:
                recommendation = rule(metrics, config, self.thresholds)
            except (ValidationError, TypeError, ValueError, AttributeError) as e:
                logger.warning("rule_skipped", rule=rule.name, error_type=type(e).__name__, error=str(e))
                diagnostics.append(f"rule '{rule.name}' skipped: {e}")
                continue
            if recommendation is not None:
                logger.debug("rule_fired", rule=rule.name, title=recommendation.title)
                recommendations.append(recommendation)

        return recommendations, diagnostics
