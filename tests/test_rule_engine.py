"""Tests for the rule engine and recommendation rule tables."""

from report_verdict.models import RecommendationPriority
from report_verdict.rules import DIAGNOSTIC_RULES, INTEGRITY_RULES, RecommendationRule, select_recommendations


def _make_rule(condition: str, priority: RecommendationPriority, applies=lambda f: True) -> RecommendationRule:
    return RecommendationRule(
        condition=condition,
        priority=priority,
        message=f"{condition} seen {{count}} times",
        applies=applies,
    )


def _diagnostic_facts(**overrides) -> dict:
    facts = {
        "integrity_status": "healthy",
        "structure_error": False,
        "validation_errors": 0,
        "validation_warnings": 0,
        "setup_failures": 0,
        "teardown_failures": 0,
        "unknown_statuses": 0,
        "execution_error_features": 0,
        "comparison_confidence": None,
        "methods_consistent": None,
    }
    facts.update(overrides)
    return facts


class TestRuleTables:
    """Tests for INTEGRITY_RULES and DIAGNOSTIC_RULES."""

    def test_conditions_are_unique(self):
        """Test that each table names every condition once."""
        for rules in (INTEGRITY_RULES, DIAGNOSTIC_RULES):
            conditions = [rule.condition for rule in rules]
            assert len(conditions) == len(set(conditions))

    def test_rules_are_recommendation_rule_instances(self):
        """Test that every table entry is a RecommendationRule."""
        for rule in INTEGRITY_RULES + DIAGNOSTIC_RULES:
            assert isinstance(rule, RecommendationRule)
            assert rule.message

    def test_quiet_facts_select_nothing(self):
        """Test that a clean diagnostic selects no recommendations."""
        assert select_recommendations(_diagnostic_facts(), DIAGNOSTIC_RULES) == []

    def test_high_warning_count_is_low_priority(self):
        """Test that many validation warnings map to one low-priority recommendation."""
        selected = select_recommendations(_diagnostic_facts(validation_warnings=12), DIAGNOSTIC_RULES)

        assert [(r.condition, r.priority) for r in selected] == [
            ("high_warning_count", RecommendationPriority.LOW),
        ]
        assert selected[0].message.startswith("12 validation warnings")


class TestSelectRecommendations:
    """Tests for select_recommendations."""

    def test_duplicate_conditions_yield_one_recommendation(self):
        """Test that recommendations are deduplicated by condition."""
        rules = [
            _make_rule("setup", RecommendationPriority.HIGH),
            _make_rule("setup", RecommendationPriority.HIGH),
        ]

        selected = select_recommendations({"count": 3}, rules)

        assert len(selected) == 1
        assert selected[0].message == "setup seen 3 times"

    def test_sorted_by_priority_tier_then_rule_order(self):
        """Test that output is ordered critical, high, medium, low, info."""
        rules = [
            _make_rule("info-a", RecommendationPriority.INFO),
            _make_rule("low", RecommendationPriority.LOW),
            _make_rule("critical", RecommendationPriority.CRITICAL),
            _make_rule("info-b", RecommendationPriority.INFO),
            _make_rule("medium", RecommendationPriority.MEDIUM),
        ]

        selected = select_recommendations({"count": 1}, rules)

        assert [r.condition for r in selected] == ["critical", "medium", "low", "info-a", "info-b"]

    def test_rules_that_do_not_apply_are_skipped(self):
        """Test that a false predicate selects nothing."""
        rules = [_make_rule("never", RecommendationPriority.HIGH, applies=lambda f: False)]

        assert select_recommendations({"count": 0}, rules) == []
