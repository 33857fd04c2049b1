"""Aggregate count extraction along two independent paths.

``count_raw`` reads the raw JSON directly with naive step-only rules;
``count_resolved`` uses the Status Resolver on sanitized features. Comparing
the two surfaces classification gaps such as setup failures hidden behind
skipped steps.
"""

from typing import Any

from report_verdict.core.execution_errors import ExecutionErrorDetector
from report_verdict.core.status_resolver import StatusResolver
from report_verdict.models.integrity_models import Counts
from report_verdict.models.report_models import Feature
from report_verdict.models.status_models import Verdict

NANOSECONDS_PER_SECOND = 1_000_000_000


def _raw_status(step: Any) -> Any:
    if not isinstance(step, dict):
        return None
    result = step.get("result")
    if isinstance(result, dict):
        return result.get("status")
    return step.get("status")


def _raw_duration(entry: Any) -> float:
    if not isinstance(entry, dict):
        return 0.0
    result = entry.get("result")
    value = result.get("duration") if isinstance(result, dict) else entry.get("duration")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        return 0.0
    return float(value)


def count_raw(report: Any, detector: ExecutionErrorDetector | None = None) -> Counts:
    """Count a raw report without sanitization or phase-aware resolution.

    A scenario is failed if any step failed, passed if any step passed,
    otherwise skipped; a scenario without a steps list counts as an error.
    Non-object entries are ignored. Durations include hooks.
    """
    detector = detector if detector is not None else ExecutionErrorDetector()
    counts = Counts()
    if not isinstance(report, list):
        return counts

    duration_ns = 0.0
    for feature in report:
        if not isinstance(feature, dict):
            continue
        if detector.is_execution_error_feature(feature):
            counts.execution_errors += 1
            continue
        counts.features += 1

        elements = feature.get("elements", feature.get("scenarios")) or []
        if not isinstance(elements, list):
            continue
        for scenario in elements:
            if not isinstance(scenario, dict) or scenario.get("type") == "background":
                continue
            counts.scenarios += 1

            steps = scenario.get("steps")
            if not isinstance(steps, list):
                counts.errors += 1
                continue
            counts.steps += len(steps)
            duration_ns += sum(_raw_duration(step) for step in steps)
            for hook_key in ("before", "after"):
                hooks = scenario.get(hook_key)
                if isinstance(hooks, list):
                    duration_ns += sum(_raw_duration(hook) for hook in hooks)

            statuses = [_raw_status(step) for step in steps]
            if "failed" in statuses:
                counts.failed += 1
            elif "passed" in statuses:
                counts.passed += 1
            else:
                counts.skipped += 1

    counts.duration = duration_ns / NANOSECONDS_PER_SECOND
    return counts


def count_resolved(features: list[Feature], resolver: StatusResolver) -> Counts:
    """Count sanitized features using phase-aware scenario verdicts.

    Execution-error features are tallied separately and their scenarios
    excluded. Durations include hooks.
    """
    counts = Counts()
    duration_ns = 0
    for feature in features:
        if feature.is_execution_error:
            counts.execution_errors += 1
            continue
        counts.features += 1

        for scenario in feature.executable_scenarios():
            counts.scenarios += 1
            counts.steps += len(scenario.steps)
            duration_ns += sum(step.result.duration for step in scenario.steps)
            duration_ns += sum(hook.result.duration for hook in scenario.before + scenario.after)

            status = resolver.resolve_scenario(scenario).status
            if status == Verdict.PASSED:
                counts.passed += 1
            elif status == Verdict.FAILED:
                counts.failed += 1
            elif status == Verdict.SKIPPED:
                counts.skipped += 1
            else:
                counts.errors += 1

    counts.duration = duration_ns / NANOSECONDS_PER_SECOND
    return counts
