"""
Tests for prioritization and summary statistics.
"""

from __future__ import annotations

from axadvisor.recommendations import Category, Priority, Prioritizer, summarize


class TestPrioritizer:
    """Tests for Prioritizer."""

    def test_sort_by_priority_then_confidence(self, make_recommendation):
        low = make_recommendation(title="low", priority=Priority.LOW, confidence=0.9)
        high_weak = make_recommendation(title="high-weak", priority=Priority.HIGH, confidence=0.5)
        high_strong = make_recommendation(title="high-strong", priority=Priority.HIGH, confidence=0.9)

        result = Prioritizer().prioritize([low, high_weak, high_strong])

        assert [r.title for r in result.recommendations] == ["high-strong", "high-weak", "low"]

    def test_ties_keep_input_order(self, make_recommendation):
        recs = [make_recommendation(title=f"r{i}", priority=Priority.MEDIUM, confidence=0.7) for i in range(4)]

        result = Prioritizer().prioritize(recs)

        assert [r.title for r in result.recommendations] == ["r0", "r1", "r2", "r3"]

    def test_critical_first(self, make_recommendation):
        recs = [
            make_recommendation(title="medium", priority=Priority.MEDIUM, confidence=1.0),
            make_recommendation(title="critical", priority=Priority.CRITICAL, confidence=0.1),
        ]

        result = Prioritizer().prioritize(recs)

        assert result.recommendations[0].title == "critical"

    def test_top_five(self, make_recommendation):
        recs = [make_recommendation(title=f"r{i}", confidence=0.1 * (i + 1)) for i in range(8)]

        result = Prioritizer().prioritize(recs)

        assert len(result.top) == 5
        assert result.top == result.recommendations[:5]

    def test_top_fewer_than_five(self, make_recommendation):
        recs = [make_recommendation(title="only")]

        assert len(Prioritizer().prioritize(recs).top) == 1

    def test_empty(self):
        result = Prioritizer().prioritize([])

        assert result.recommendations == []
        assert result.top == []
        assert result.summary.total == 0
        assert result.summary.category_breakdown == ""

    def test_idempotent(self, make_recommendation):
        recs = [
            make_recommendation(title="a", priority=Priority.LOW, confidence=0.4),
            make_recommendation(title="b", priority=Priority.HIGH, confidence=0.6),
            make_recommendation(title="c", priority=Priority.HIGH, confidence=0.6),
            make_recommendation(title="d", priority=Priority.MEDIUM, confidence=0.9),
        ]
        prioritizer = Prioritizer()

        first = prioritizer.prioritize(recs)
        second = prioritizer.prioritize(recs)

        assert [r.id for r in first.recommendations] == [r.id for r in second.recommendations]
        assert first.summary == second.summary

    def test_input_not_reordered(self, make_recommendation):
        recs = [
            make_recommendation(title="a", priority=Priority.LOW),
            make_recommendation(title="b", priority=Priority.HIGH),
        ]

        Prioritizer().prioritize(recs)

        assert [r.title for r in recs] == ["a", "b"]


class TestSummary:
    """Tests for summary statistics."""

    def test_counts(self, make_recommendation):
        recs = [
            make_recommendation(priority=Priority.CRITICAL, category=Category.PERFORMANCE),
            make_recommendation(priority=Priority.HIGH, category=Category.CONFIGURATION),
            make_recommendation(priority=Priority.MEDIUM, category=Category.PERFORMANCE),
            make_recommendation(priority=Priority.LOW, category=Category.OPERATIONS),
            make_recommendation(priority=Priority.LOW, category=Category.PERFORMANCE),
        ]

        summary = summarize(recs)

        assert summary.total == 5
        assert summary.critical_high == 2
        assert summary.medium == 1
        assert summary.low == 2
        assert summary.category_breakdown == "Performance: 3, Configuration: 1, Operations: 1"

    def test_to_dict(self, make_recommendation):
        summary = summarize([make_recommendation(category=Category.OPERATIONS)])

        assert summary.to_dict() == {
            "total": 1,
            "critical_high": 0,
            "medium": 1,
            "low": 0,
            "categories": "Operations: 1",
        }
