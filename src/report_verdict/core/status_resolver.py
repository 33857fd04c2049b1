"""Status Resolver: one verdict per scenario and feature."""

from typing import Any

from report_verdict.config import PipelineConfig
from report_verdict.core.cache import PipelineCache, content_key
from report_verdict.core.exceptions import EntryError
from report_verdict.core.execution_errors import ExecutionErrorDetector, classify_error
from report_verdict.core.sanitizer import Sanitizer
from report_verdict.logger_config import get_logger
from report_verdict.models.report_models import Feature, Hook, Result, Scenario, Step, StepStatus
from report_verdict.models.status_models import (
    FeatureStatusResult,
    FeatureVerdict,
    HookFailureSummary,
    PhaseDetails,
    PhaseResult,
    PhaseStatus,
    ScenarioVerdict,
    StatusCounts,
    StatusResult,
    Verdict,
)

_log = get_logger("status_resolver")

MAX_ERROR_MESSAGE_LENGTH = 500
TRUNCATION_SUFFIX = "... (truncated)"


def sanitize_error_message(message: Any) -> str | None:
    """Trim a failure message and cap it for display."""
    if message is None:
        return None
    if not isinstance(message, str):
        message = str(message)
    message = message.strip()
    if not message:
        return None
    if len(message) > MAX_ERROR_MESSAGE_LENGTH:
        return message[:MAX_ERROR_MESSAGE_LENGTH] + TRUNCATION_SUFFIX
    return message


def extract_error_message(result: Result) -> str | None:
    return sanitize_error_message(result.error_message)


class StatusResolver:
    """Computes scenario and feature verdicts from setup, execution and
    teardown phases under a fixed precedence policy.

    Never raises on bad input: a malformed scenario or feature resolves to
    an ``error`` verdict with a description of the problem.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        cache: PipelineCache | None = None,
        detector: ExecutionErrorDetector | None = None,
    ) -> None:
        self._config: PipelineConfig = config if config is not None else PipelineConfig()
        self._cache: PipelineCache = cache if cache is not None else PipelineCache()
        self._detector: ExecutionErrorDetector = (
            detector if detector is not None else ExecutionErrorDetector(cache=self._cache)
        )
        self._normalizer = Sanitizer(self._config, self._detector)

    # ------------------------------------------------------------------
    # Scenarios
    # ------------------------------------------------------------------

    def resolve_scenario(self, scenario: Any) -> StatusResult:
        """Resolve one scenario; first matching rule wins.

        1. failed before hook (when setup failures count)  -> failed
        2. failed after hook (when teardown failures count) -> failed
        3. any failed step -> failed; passed+skipped mix -> failed;
           all passed -> passed; all skipped -> skipped;
           no steps but hooks present -> skipped
        4. no steps and no hooks, or no classifiable step -> unknown
        """
        try:
            canonical = self._coerce_scenario(scenario)
        except EntryError as exc:
            return StatusResult(status=Verdict.ERROR, reason=str(exc))

        try:
            setup = self.analyze_hook_phase(canonical.before)
            execution = self.analyze_execution_phase(canonical.steps)
            teardown = self.analyze_hook_phase(canonical.after)
            status, reason, failure_message = self.determine_overall_status(setup, execution, teardown)
        except Exception as exc:
            _log.exception(f"Status calculation failed for scenario '{canonical.name}'")
            return StatusResult(status=Verdict.ERROR, reason=f"Status calculation error: {exc}")

        _log.debug(f"Scenario '{canonical.name}': {status.value} ({reason})")
        return StatusResult(
            status=status,
            reason=reason,
            details=PhaseDetails(
                setup_status=setup.status,
                execution_status=execution.status,
                teardown_status=teardown.status,
                has_steps=execution.present,
                has_setup=setup.present,
                has_teardown=teardown.present,
            ),
            error_category=classify_error(failure_message) if status == Verdict.FAILED else None,
        )

    def analyze_hook_phase(self, hooks: list[Hook]) -> PhaseResult:
        """Setup or teardown phase: the first failed hook decides."""
        result = PhaseResult(present=len(hooks) > 0)
        for hook in hooks:
            if hook.result.status == StepStatus.FAILED:
                result.status = PhaseStatus.FAILED
                result.failure_reason = extract_error_message(hook.result)
                return result
            if hook.result.status == StepStatus.PASSED:
                result.status = PhaseStatus.PASSED
        return result

    def analyze_execution_phase(self, steps: list[Step]) -> PhaseResult:
        result = PhaseResult(present=len(steps) > 0)
        has_passed = has_failed = has_skipped = False

        for step in steps:
            status = step.result.status
            if status == StepStatus.PASSED:
                has_passed = True
            elif status == StepStatus.FAILED:
                if not has_failed:
                    result.failure_reason = extract_error_message(step.result)
                has_failed = True
            elif status == StepStatus.SKIPPED:
                has_skipped = True

        if has_failed:
            result.status = PhaseStatus.FAILED
        elif has_passed and has_skipped:
            result.status = PhaseStatus.MIXED
        elif has_passed:
            result.status = PhaseStatus.PASSED
        elif has_skipped:
            result.status = PhaseStatus.SKIPPED
        return result

    def determine_overall_status(
        self,
        setup: PhaseResult,
        execution: PhaseResult,
        teardown: PhaseResult,
    ) -> tuple[Verdict, str, str | None]:
        """Return (verdict, reason, failure message) for the three phases."""
        if self._config.treat_setup_failures_as_failed and setup.status == PhaseStatus.FAILED:
            return (
                Verdict.FAILED,
                f"Setup failed: {setup.failure_reason or 'Before hook failed'}",
                setup.failure_reason,
            )

        if self._config.treat_teardown_failures_as_failed and teardown.status == PhaseStatus.FAILED:
            return (
                Verdict.FAILED,
                f"Teardown failed: {teardown.failure_reason or 'After hook failed'}",
                teardown.failure_reason,
            )

        if execution.status == PhaseStatus.FAILED:
            return (
                Verdict.FAILED,
                f"Test execution failed: {execution.failure_reason or 'Step failed'}",
                execution.failure_reason,
            )
        if execution.status == PhaseStatus.MIXED:
            # A skipped step after a passed one means the scenario stopped early.
            return Verdict.FAILED, "Some steps passed and some were skipped", None
        if execution.status == PhaseStatus.PASSED:
            return Verdict.PASSED, "All steps passed successfully", None
        if execution.status == PhaseStatus.SKIPPED:
            return Verdict.SKIPPED, "Test steps were skipped", None

        if not execution.present:
            if setup.present or teardown.present:
                return Verdict.SKIPPED, "No executable steps found", None
            return Verdict.UNKNOWN, "Scenario has no steps and no hooks", None
        return Verdict.UNKNOWN, "Steps present but execution status unclear", None

    def handle_hook_failures(self, before: list[Hook], after: list[Hook]) -> HookFailureSummary:
        """Summarize hook failures and whether policy fails the test for them."""
        summary = HookFailureSummary()
        setup = self.analyze_hook_phase(before)
        teardown = self.analyze_hook_phase(after)

        if setup.status == PhaseStatus.FAILED:
            summary.setup_failed = True
            summary.setup_error = setup.failure_reason
            if self._config.treat_setup_failures_as_failed:
                summary.should_fail_test = True
        if teardown.status == PhaseStatus.FAILED:
            summary.teardown_failed = True
            summary.teardown_error = teardown.failure_reason
            if self._config.treat_teardown_failures_as_failed:
                summary.should_fail_test = True
        return summary

    # ------------------------------------------------------------------
    # Features
    # ------------------------------------------------------------------

    def resolve_feature(self, feature: Any) -> FeatureStatusResult:
        """Aggregate scenario verdicts (backgrounds excluded).

        Conservation: passed + failed + skipped + errors == total.
        Results are memoized per feature content for this resolver's cache.
        """
        try:
            canonical = self._coerce_feature(feature)
        except EntryError as exc:
            return FeatureStatusResult(status=Verdict.ERROR, reason=str(exc))

        try:
            result = self._cache.get_or_compute(
                "feature_status",
                content_key(canonical),
                lambda: self._compute_feature_status(canonical),
            )
        except Exception as exc:
            _log.exception(f"Status calculation failed for feature '{canonical.name}'")
            return FeatureStatusResult(status=Verdict.ERROR, reason=f"Status calculation error: {exc}")
        return result.model_copy(deep=True)

    def _compute_feature_status(self, feature: Feature) -> FeatureStatusResult:
        scenarios = feature.executable_scenarios()
        counts = StatusCounts(total=len(scenarios))
        for scenario in scenarios:
            status = self.resolve_scenario(scenario).status
            if status == Verdict.PASSED:
                counts.passed += 1
            elif status == Verdict.FAILED:
                counts.failed += 1
            elif status == Verdict.SKIPPED:
                counts.skipped += 1
            else:
                counts.errors += 1

        if self._detector.is_execution_error_feature(feature):
            guidance = self._detector.guidance_for(feature)
            return FeatureStatusResult(
                status=Verdict.ERROR,
                reason=f"Framework execution error ({guidance.error_category.value}): {guidance.issue}",
                counts=counts,
                is_execution_error=True,
            )

        total = counts.total
        if total == 0:
            status, reason = Verdict.UNKNOWN, "No executable scenarios found"
        elif counts.errors > 0:
            status, reason = Verdict.ERROR, f"{counts.errors} scenarios have errors"
        elif counts.failed > 0:
            status, reason = Verdict.FAILED, f"{counts.failed} of {total} scenarios failed"
        elif counts.skipped == total:
            status, reason = Verdict.SKIPPED, "All scenarios were skipped"
        elif counts.passed == total:
            status, reason = Verdict.PASSED, "All scenarios passed"
        else:
            status = Verdict.MIXED
            reason = f"{counts.passed} passed, {counts.failed} failed, {counts.skipped} skipped"

        return FeatureStatusResult(status=status, reason=reason, counts=counts)

    def annotate(self, features: list[Feature]) -> list[FeatureVerdict]:
        """Pair every feature and scenario with its verdict, leaving input untouched."""
        annotated: list[FeatureVerdict] = []
        for feature_index, feature in enumerate(features):
            location = f"Feature {feature_index}"
            scenario_verdicts = [
                ScenarioVerdict(
                    scenario_id=scenario.id,
                    name=scenario.name,
                    location=f"{location}, Scenario {scenario_index}",
                    is_background=scenario.is_background,
                    result=self.resolve_scenario(scenario),
                )
                for scenario_index, scenario in enumerate(feature.elements)
            ]
            annotated.append(FeatureVerdict(
                name=feature.name,
                uri=feature.uri,
                location=location,
                result=self.resolve_feature(feature),
                scenarios=scenario_verdicts,
            ))
        return annotated

    def classify(self, data: Any) -> StatusResult | FeatureStatusResult:
        """Resolve either a feature or a scenario, judged by its shape."""
        if data is None:
            return StatusResult(status=Verdict.ERROR, reason="No test data provided")
        if isinstance(data, Feature) or (isinstance(data, dict) and "elements" in data):
            return self.resolve_feature(data)
        if isinstance(data, Scenario) or (
            isinstance(data, dict) and any(key in data for key in ("steps", "before", "after"))
        ):
            return self.resolve_scenario(data)
        return StatusResult(status=Verdict.UNKNOWN, reason="Unrecognized test data format")

    # ------------------------------------------------------------------
    # Input coercion
    # ------------------------------------------------------------------

    def _coerce_scenario(self, scenario: Any) -> Scenario:
        if isinstance(scenario, Scenario):
            return scenario
        if isinstance(scenario, dict):
            return self._normalizer.normalize_scenario(scenario)
        raise EntryError(f"Scenario must be an object, got {type(scenario).__name__}")

    def _coerce_feature(self, feature: Any) -> Feature:
        if isinstance(feature, Feature):
            return feature
        if isinstance(feature, dict):
            return self._normalizer.normalize_feature(feature)
        raise EntryError(f"Feature must be an object, got {type(feature).__name__}")
