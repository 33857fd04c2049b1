"""Recommendation rules for integrity checks and diagnostics."""

from report_verdict.models.integrity_models import RecommendationPriority
from report_verdict.rules.rule_engine import RecommendationRule

HIGH_WARNING_THRESHOLD = 5
SIGNIFICANT_SCENARIO_DIFFERENCE = 5

# Facts: critical_count, warning_count, cross_validation_failed,
#        max_scenario_difference, failed_excess
INTEGRITY_RULES = [
    RecommendationRule(
        condition="integrity_critical",
        priority=RecommendationPriority.CRITICAL,
        message=(
            "Critical data integrity issues detected. "
            "Manual verification recommended before using results."
        ),
        action="Do not trust displayed pass/fail counts until the critical issues are resolved",
        applies=lambda f: f["critical_count"] > 0,
    ),
    RecommendationRule(
        condition="scenario_count_discrepancy",
        priority=RecommendationPriority.CRITICAL,
        message="Significant scenario count discrepancy detected ({max_scenario_difference} scenarios).",
        action="Verify test execution completeness",
        applies=lambda f: f["max_scenario_difference"] > SIGNIFICANT_SCENARIO_DIFFERENCE,
    ),
    RecommendationRule(
        condition="failure_count_excess",
        priority=RecommendationPriority.HIGH,
        message="More failures detected in resolved data than in the independent counts.",
        action="Check for setup/teardown failures",
        applies=lambda f: f["failed_excess"],
    ),
    RecommendationRule(
        condition="integrity_warnings",
        priority=RecommendationPriority.MEDIUM,
        message="Multiple data quality warnings detected ({warning_count}).",
        action="Consider improving test data consistency",
        applies=lambda f: f["warning_count"] > HIGH_WARNING_THRESHOLD,
    ),
    RecommendationRule(
        condition="cross_validation_discrepancy",
        priority=RecommendationPriority.INFO,
        message="Cross-validation discrepancies found.",
        action="Review parsing logic for accuracy improvements",
        applies=lambda f: f["cross_validation_failed"],
    ),
]

# Facts: integrity_status, structure_error, validation_errors, validation_warnings,
#        setup_failures, teardown_failures, unknown_statuses,
#        execution_error_features, comparison_confidence, methods_consistent
DIAGNOSTIC_RULES = [
    RecommendationRule(
        condition="structure_error",
        priority=RecommendationPriority.CRITICAL,
        message="Report is not an array of features",
        action="Check the report loader; no result in this report can be trusted",
        applies=lambda f: f["structure_error"],
    ),
    RecommendationRule(
        condition="integrity_critical",
        priority=RecommendationPriority.CRITICAL,
        message="Critical data integrity issues detected",
        action="Manual verification required before using results",
        applies=lambda f: f["integrity_status"] == "critical",
    ),
    RecommendationRule(
        condition="setup_failures",
        priority=RecommendationPriority.HIGH,
        message="{setup_failures} setup failures detected",
        action="Verify that setup failures are being counted as test failures",
        applies=lambda f: f["setup_failures"] > 0,
    ),
    RecommendationRule(
        condition="execution_error_features",
        priority=RecommendationPriority.HIGH,
        message="{execution_error_features} framework execution error feature(s) detected",
        action="Fix the test runner configuration; these features are not test results",
        applies=lambda f: f["execution_error_features"] > 0,
    ),
    RecommendationRule(
        condition="validation_errors",
        priority=RecommendationPriority.HIGH,
        message="Fix critical validation errors before processing reports",
        action="Review and correct JSON structure issues",
        applies=lambda f: f["validation_errors"] > 0 and not f["structure_error"],
    ),
    RecommendationRule(
        condition="teardown_failures",
        priority=RecommendationPriority.MEDIUM,
        message="{teardown_failures} teardown failures detected",
        action="Check after hooks; teardown failures are counted as test failures",
        applies=lambda f: f["teardown_failures"] > 0,
    ),
    RecommendationRule(
        condition="low_comparison_confidence",
        priority=RecommendationPriority.MEDIUM,
        message="Low confidence in result accuracy",
        action="Review parsing logic and validation rules",
        applies=lambda f: f["comparison_confidence"] == "low",
    ),
    RecommendationRule(
        condition="unknown_statuses",
        priority=RecommendationPriority.LOW,
        message="{unknown_statuses} scenarios could not be classified",
        action="Ensure all test steps have result objects with status",
        applies=lambda f: f["unknown_statuses"] > 0,
    ),
    RecommendationRule(
        condition="high_warning_count",
        priority=RecommendationPriority.LOW,
        message="{validation_warnings} validation warnings raised while sanitizing",
        action="Consider improving test data quality to reduce warnings",
        applies=lambda f: f["validation_warnings"] > HIGH_WARNING_THRESHOLD,
    ),
    RecommendationRule(
        condition="method_inconsistency",
        priority=RecommendationPriority.INFO,
        message="Direct and resolved counting disagree",
        action="Look for hook failures and mixed step results hidden by step-only counting",
        applies=lambda f: f["methods_consistent"] is False,
    ),
]
