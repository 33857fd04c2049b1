"""Recommendation rules and rule selection engine."""

from report_verdict.rules.recommendation_rules import DIAGNOSTIC_RULES, INTEGRITY_RULES
from report_verdict.rules.rule_engine import RecommendationRule, select_recommendations

__all__ = [
    "DIAGNOSTIC_RULES",
    "INTEGRITY_RULES",
    "RecommendationRule",
    "select_recommendations",
]
