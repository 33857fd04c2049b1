"""Integrity Checker: reconciles aggregate counts against independent sources."""

import math
from typing import Any

from report_verdict.config import PipelineConfig
from report_verdict.core.exceptions import IntegrityCheckError
from report_verdict.core.execution_errors import ExecutionErrorDetector
from report_verdict.logger_config import get_logger
from report_verdict.models.integrity_models import (
    Counts,
    CountValidationResult,
    CrossValidationResult,
    Discrepancy,
    DiscrepancyKind,
    FieldComparison,
    IntegrityReport,
    IntegrityStatus,
    Severity,
    ValidationRecord,
)
from report_verdict.rules import INTEGRITY_RULES, select_recommendations
from report_verdict.core.counting import count_raw
from report_verdict.utils.external_counts import coerce_counts

_log = get_logger("integrity_checker")

CROSS_VALIDATION_FIELDS = ("features", "scenarios", "steps", "passed", "failed", "skipped")
SUMMARY_FIELDS = ("scenarios", "passed", "failed", "skipped")
NON_NEGATIVE_FIELDS = (
    "features", "scenarios", "steps", "passed", "failed", "skipped",
    "errors", "execution_errors", "duration",
)
MAX_SCENARIOS_PER_FEATURE = 1000
MAX_AVERAGE_SCENARIO_SECONDS = 3600
MISMATCH_CRITICAL_RATIO = 0.1
SIGNIFICANT_SCENARIO_DIFFERENCE = 5
HISTORY_LIMIT = 20


def tolerance_for(value_a: int, value_b: int, tolerance_percentage: float) -> int:
    """Allowed absolute difference: a percentage of the larger value, at least 1."""
    return max(1, math.floor(max(value_a, value_b) * tolerance_percentage / 100))


class IntegrityChecker:
    """Detects count mismatches, out-of-tolerance drift and impossible states."""

    def __init__(
        self,
        config: PipelineConfig | None = None,
        detector: ExecutionErrorDetector | None = None,
    ) -> None:
        self._config: PipelineConfig = config if config is not None else PipelineConfig()
        self._detector: ExecutionErrorDetector = (
            detector if detector is not None else ExecutionErrorDetector()
        )
        self._history: list[ValidationRecord] = []

    @property
    def detector(self) -> ExecutionErrorDetector:
        return self._detector

    @property
    def history(self) -> list[ValidationRecord]:
        return list(self._history)

    def validate_counts(self, summary: Any, raw_report: Any = None) -> CountValidationResult:
        """Check a provided summary for internal consistency and, when a raw
        report is given, against counts taken directly from it.

        Raises:
            IntegrityCheckError: If ``summary`` cannot be read as counts.
        """
        counts = coerce_counts(summary)
        if counts is None:
            raise IntegrityCheckError(f"Unreadable count summary: {type(summary).__name__}")

        discrepancies = self._check_total(counts, counts.status_total(), "provided_summary")
        calculated: Counts | None = None

        if isinstance(raw_report, list):
            calculated = count_raw(raw_report, self._detector)
            discrepancies.extend(self._check_total(counts, calculated.scenarios, "raw_report"))
            cross = self.cross_validate(
                counts,
                calculated,
                fields=SUMMARY_FIELDS,
                comparison_type="provided_vs_raw",
            )
            discrepancies.extend(cross.discrepancies)

        result = CountValidationResult(
            is_valid=not discrepancies,
            summary=counts,
            calculated_summary=calculated,
            discrepancies=discrepancies,
        )
        self._record(result.is_valid, len(discrepancies))
        return result

    def cross_validate(
        self,
        computed: Any,
        independent: Any,
        tolerance_percentage: float | None = None,
        fields: tuple[str, ...] = CROSS_VALIDATION_FIELDS,
        comparison_type: str = "computed_vs_independent",
        kind: DiscrepancyKind = DiscrepancyKind.CROSS_VALIDATION_MISMATCH,
    ) -> CrossValidationResult:
        """Compare two count sets field by field under a tolerance band.

        A field is consistent when |a - b| <= max(1, floor(max(a, b) * pct / 100)).

        Raises:
            IntegrityCheckError: If either side cannot be read as counts.
        """
        counts_a = coerce_counts(computed)
        counts_b = coerce_counts(independent)
        if counts_a is None or counts_b is None:
            raise IntegrityCheckError("Both count sets are required for cross-validation")
        pct = self._config.tolerance_percentage if tolerance_percentage is None else tolerance_percentage

        comparisons: list[FieldComparison] = []
        discrepancies: list[Discrepancy] = []
        for field in fields:
            value_a = int(getattr(counts_a, field))
            value_b = int(getattr(counts_b, field))
            tolerance = tolerance_for(value_a, value_b, pct)
            difference = value_b - value_a
            consistent = abs(difference) <= tolerance
            comparisons.append(FieldComparison(
                field=field,
                expected=value_a,
                actual=value_b,
                difference=difference,
                tolerance=tolerance,
                is_consistent=consistent,
            ))
            if consistent:
                continue

            severity = Severity.WARNING
            if field == "scenarios" and abs(difference) > SIGNIFICANT_SCENARIO_DIFFERENCE:
                severity = Severity.CRITICAL
            discrepancies.append(Discrepancy(
                kind=kind,
                field=field,
                expected=value_a,
                actual=value_b,
                difference=difference,
                tolerance=tolerance,
                severity=severity,
                message=(
                    f"{field} differs by {difference} ({value_a} vs {value_b}), "
                    f"beyond tolerance {tolerance}"
                ),
                source=comparison_type,
            ))
            _log.warning(f"Cross-validation discrepancy ({comparison_type}): {field} {value_a} vs {value_b}")

        return CrossValidationResult(
            comparison_type=comparison_type,
            is_valid=not discrepancies,
            tolerance_percentage=pct,
            comparisons=comparisons,
            discrepancies=discrepancies,
        )

    def detect_inconsistencies(self, counts: Counts) -> list[Discrepancy]:
        """Flag structurally impossible or implausible states, regardless of tolerance."""
        found: list[Discrepancy] = []

        for field in NON_NEGATIVE_FIELDS:
            value = getattr(counts, field)
            if value < 0:
                found.append(Discrepancy(
                    kind=DiscrepancyKind.NEGATIVE_VALUE,
                    field=field,
                    actual=value,
                    severity=Severity.CRITICAL,
                    message=f"Field '{field}' has negative value: {value}",
                ))

        for field in ("passed", "failed", "skipped"):
            value = getattr(counts, field)
            if value > counts.scenarios:
                found.append(Discrepancy(
                    kind=DiscrepancyKind.IMPOSSIBLE_COUNT,
                    field=field,
                    expected=counts.scenarios,
                    actual=value,
                    difference=value - counts.scenarios,
                    severity=Severity.CRITICAL,
                    message=f"{field} ({value}) exceeds total scenarios ({counts.scenarios})",
                ))

        if counts.features > 0 and counts.scenarios > 0:
            ratio = counts.scenarios / counts.features
            if ratio > MAX_SCENARIOS_PER_FEATURE:
                found.append(Discrepancy(
                    kind=DiscrepancyKind.UNLIKELY_RATIO,
                    field="scenarios",
                    actual=round(ratio, 2),
                    severity=Severity.WARNING,
                    message=f"Very high scenario-to-feature ratio: {ratio:.2f}",
                ))

        if counts.scenarios > 0 and counts.duration > 0:
            average = counts.duration / counts.scenarios
            if average > MAX_AVERAGE_SCENARIO_SECONDS:
                found.append(Discrepancy(
                    kind=DiscrepancyKind.UNUSUAL_DURATION,
                    field="duration",
                    actual=round(average, 2),
                    severity=Severity.WARNING,
                    message=f"Very high average duration per scenario: {average / 60:.2f} minutes",
                ))

        for item in found:
            if item.severity == Severity.CRITICAL:
                _log.error(f"Data inconsistency: {item.message}")
            else:
                _log.warning(f"Data inconsistency: {item.message}")
        return found

    def check_integrity(
        self,
        counts_a: Any,
        counts_b: Any = None,
        external_counts: Any = None,
        tolerance_percentage: float | None = None,
    ) -> IntegrityReport:
        """Run every check and classify overall health.

        Never raises: an internal failure yields overall_status=error.
        """
        try:
            primary = coerce_counts(counts_a)
            if primary is None:
                raise IntegrityCheckError(f"Unreadable primary counts: {type(counts_a).__name__}")

            discrepancies = self._check_total(primary, primary.status_total(), "primary_counts")
            discrepancies.extend(self.detect_inconsistencies(primary))
            comparisons: list[CrossValidationResult] = []

            if counts_b is not None:
                cross = self.cross_validate(primary, counts_b, tolerance_percentage)
                comparisons.append(cross)
                discrepancies.extend(cross.discrepancies)

            if external_counts is not None:
                external = coerce_counts(external_counts)
                if external is None:
                    _log.warning("External counts could not be parsed; skipping external comparison")
                else:
                    cross = self.cross_validate(
                        primary,
                        external,
                        tolerance_percentage,
                        fields=SUMMARY_FIELDS,
                        comparison_type="computed_vs_external",
                        kind=DiscrepancyKind.EXTERNAL_MISMATCH,
                    )
                    comparisons.append(cross)
                    discrepancies.extend(cross.discrepancies)

            critical_count = sum(1 for d in discrepancies if d.severity == Severity.CRITICAL)
            warning_count = sum(1 for d in discrepancies if d.severity == Severity.WARNING)
            if critical_count > 0:
                overall = IntegrityStatus.CRITICAL
            elif warning_count > 0:
                overall = IntegrityStatus.WARNING
            else:
                overall = IntegrityStatus.HEALTHY

            facts = {
                "critical_count": critical_count,
                "warning_count": warning_count,
                "cross_validation_failed": any(not c.is_valid for c in comparisons),
                "max_scenario_difference": int(max(
                    (abs(d.difference or 0) for d in discrepancies
                     if d.field == "scenarios" and d.kind != DiscrepancyKind.UNLIKELY_RATIO),
                    default=0,
                )),
                "failed_excess": any(
                    d.field == "failed" and (d.difference or 0) < 0
                    for c in comparisons for d in c.discrepancies
                ),
            }
            self._record(overall == IntegrityStatus.HEALTHY, len(discrepancies))

            return IntegrityReport(
                overall_status=overall,
                discrepancies=discrepancies,
                recommendations=select_recommendations(facts, INTEGRITY_RULES),
                comparisons=comparisons,
                critical_count=critical_count,
                warning_count=warning_count,
            )
        except Exception as exc:
            _log.exception("Integrity check failed")
            return IntegrityReport(
                overall_status=IntegrityStatus.ERROR,
                critical_count=1,
                error=f"Integrity check failed: {exc}",
            )

    def _check_total(self, counts: Counts, actual_total: int, source: str) -> list[Discrepancy]:
        """passed + failed + skipped + errors must equal the scenario total."""
        expected = counts.scenarios
        if actual_total == expected:
            return []
        difference = actual_total - expected
        severity = Severity.WARNING
        if abs(difference) > expected * MISMATCH_CRITICAL_RATIO:
            severity = Severity.CRITICAL
        _log.warning(
            f"Data inconsistency detected ({source}): total scenario count mismatch. "
            f"Expected: {expected}, Actual: {actual_total}"
        )
        return [Discrepancy(
            kind=DiscrepancyKind.COUNT_MISMATCH,
            field="total_scenarios",
            expected=expected,
            actual=actual_total,
            difference=difference,
            severity=severity,
            message=f"Total scenario count mismatch: expected {expected}, found {actual_total}",
            source=source,
        )]

    def _record(self, is_valid: bool, discrepancy_count: int) -> None:
        self._history.append(ValidationRecord(is_valid=is_valid, discrepancy_count=discrepancy_count))
        if len(self._history) > HISTORY_LIMIT:
            self._history = self._history[-HISTORY_LIMIT:]
