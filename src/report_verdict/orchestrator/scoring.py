"""Pure scoring helpers for count comparisons.

No classes, no I/O; consumed by the diagnostics orchestrator.
"""

from report_verdict.models.diagnostic_models import (
    Confidence,
    DiscrepancyLevel,
    MetricDiscrepancy,
)
from report_verdict.models.integrity_models import Counts

COMPARED_METRICS = ("scenarios", "passed", "failed", "skipped")
LOW_DISCREPANCY_PERCENT = 5
MEDIUM_DISCREPANCY_PERCENT = 15
MEDIUM_CONFIDENCE_PERCENT = 75


def discrepancy_level(difference: int, reference: int) -> DiscrepancyLevel:
    """Grade a difference relative to the reference value.

    A non-zero difference against a zero reference is always ``high``.
    """
    if difference == 0:
        return DiscrepancyLevel.NONE
    if reference <= 0:
        return DiscrepancyLevel.HIGH
    percent = abs(difference) / reference * 100
    if percent <= LOW_DISCREPANCY_PERCENT:
        return DiscrepancyLevel.LOW
    if percent <= MEDIUM_DISCREPANCY_PERCENT:
        return DiscrepancyLevel.MEDIUM
    return DiscrepancyLevel.HIGH


def confidence_for(match_percentage: float) -> Confidence:
    """100% of fields matching is high, at least 75% is medium, else low."""
    if match_percentage >= 100:
        return Confidence.HIGH
    if match_percentage >= MEDIUM_CONFIDENCE_PERCENT:
        return Confidence.MEDIUM
    return Confidence.LOW


def compare_metrics(
    computed: Counts,
    reference: Counts,
    metrics: tuple[str, ...] = COMPARED_METRICS,
) -> tuple[dict[str, int], list[MetricDiscrepancy], float]:
    """Compare two count sets metric by metric.

    Returns:
        (matches, discrepancies, match_percentage) where ``matches`` maps
        each agreeing metric to its value and every discrepancy carries
        ``difference = computed - reference``.
    """
    matches: dict[str, int] = {}
    discrepancies: list[MetricDiscrepancy] = []
    for metric in metrics:
        computed_value = int(getattr(computed, metric))
        reference_value = int(getattr(reference, metric))
        difference = computed_value - reference_value
        if difference == 0:
            matches[metric] = computed_value
            continue
        discrepancies.append(MetricDiscrepancy(
            metric=metric,
            external_value=reference_value,
            computed_value=computed_value,
            difference=difference,
            level=discrepancy_level(difference, reference_value),
        ))

    match_percentage = round(len(matches) / len(metrics) * 100, 2) if metrics else 100.0
    return matches, discrepancies, match_percentage
