"""Diagnostics Orchestrator: composes the pipeline stages into one report.

Runs sanitization, status resolution and integrity checking over a report,
optionally compares the result against externally supplied counts, and
condenses everything into a DiagnosticReport with a health verdict and
prioritized recommendations.
"""

import time
import uuid
from typing import Any

from pydantic import BaseModel

from report_verdict.config import PipelineConfig
from report_verdict.core.cache import PipelineCache
from report_verdict.core.counting import count_raw, count_resolved
from report_verdict.core.execution_errors import ExecutionErrorDetector
from report_verdict.core.integrity_checker import IntegrityChecker
from report_verdict.core.sanitizer import Sanitizer
from report_verdict.core.status_resolver import StatusResolver
from report_verdict.logger_config import get_logger
from report_verdict.models.diagnostic_models import (
    Confidence,
    ContentAnalysis,
    DiagnosticReport,
    ExternalComparison,
    MethodConsistency,
    OverallHealth,
    StatusAnalysis,
    StructureAnalysis,
    UnknownStatusIssue,
    ValidationAnalysis,
)
from report_verdict.models.integrity_models import Counts, IntegrityReport, IntegrityStatus
from report_verdict.models.report_models import Feature
from report_verdict.models.status_models import PhaseStatus, Verdict
from report_verdict.models.validation_models import SanitizationResult
from report_verdict.orchestrator.exceptions import DiagnosticsError
from report_verdict.orchestrator.scoring import compare_metrics, confidence_for
from report_verdict.rules import DIAGNOSTIC_RULES, select_recommendations
from report_verdict.utils.external_counts import coerce_counts

_log = get_logger("diagnostics")


def _as_dict(entry: Any) -> dict[str, Any] | None:
    if isinstance(entry, BaseModel):
        return entry.model_dump()
    if isinstance(entry, dict):
        return entry
    return None


def _list_of(entry: dict[str, Any], *keys: str) -> list[Any]:
    for key in keys:
        value = entry.get(key)
        if isinstance(value, list):
            return value
    return []


class DiagnosticsOrchestrator:
    """Produces a single DiagnosticReport per analysed report.

    Components default to fresh instances sharing one cache; a
    ReportPipeline passes its own so memoized verdicts are reused.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        sanitizer: Sanitizer | None = None,
        resolver: StatusResolver | None = None,
        checker: IntegrityChecker | None = None,
    ) -> None:
        self._config: PipelineConfig = config if config is not None else PipelineConfig()
        cache = PipelineCache()
        detector = ExecutionErrorDetector(cache=cache)
        self._sanitizer = sanitizer if sanitizer is not None else Sanitizer(self._config, detector)
        self._resolver = (
            resolver if resolver is not None else StatusResolver(self._config, cache, detector)
        )
        self._checker = checker if checker is not None else IntegrityChecker(self._config, detector)

    def analyze(
        self,
        report: Any,
        original_raw: Any = None,
        external_counts: Any = None,
        source_id: str = "unknown",
    ) -> DiagnosticReport:
        """Run every diagnostic stage over ``report``.

        Never raises: an unexpected failure yields overall_health=error with
        the message in ``error``.

        Args:
            report: Report to diagnose (raw dicts or Feature models).
            original_raw: The unsanitized report, used for direct counting.
            external_counts: Counts, a mapping, or pasted runner output.
            source_id: Label recorded on the validation analysis.
        """
        started = time.perf_counter()
        diagnostic = DiagnosticReport(report_id=f"diag-{uuid.uuid4().hex[:12]}")
        _log.info(f"Starting diagnostic {diagnostic.report_id} for {source_id}")

        try:
            sanitization = self._sanitizer.validate(report, source_id)
            diagnostic.validation = self._analyze_validation(report, sanitization)
            features = sanitization.sanitized_report

            if features is not None:
                diagnostic.status_analysis = self._analyze_statuses(features)
                diagnostic.computed_counts = count_resolved(features, self._resolver)

                direct_counts = None
                if isinstance(original_raw, list):
                    diagnostic.method_consistency = self.compare_methods(features, original_raw)
                    direct_counts = diagnostic.method_consistency.direct_counts
                elif original_raw is not None:
                    _log.warning(
                        f"Original report is {type(original_raw).__name__}, not a list; "
                        "skipping method comparison"
                    )

                diagnostic.integrity = self._checker.check_integrity(
                    diagnostic.computed_counts,
                    direct_counts,
                    external_counts,
                    self._config.tolerance_percentage,
                )

                if external_counts is not None:
                    external = coerce_counts(external_counts)
                    if external is None:
                        _log.warning("External counts could not be parsed; no comparison produced")
                    else:
                        diagnostic.comparison = self.compare_with_external(
                            diagnostic.computed_counts, external,
                        )

            diagnostic.recommendations = select_recommendations(
                self._collect_facts(diagnostic, sanitization), DIAGNOSTIC_RULES,
            )
            diagnostic.overall_health = self._determine_health(diagnostic)
        except Exception as exc:
            _log.exception(f"Diagnostic {diagnostic.report_id} failed")
            diagnostic.overall_health = OverallHealth.ERROR
            diagnostic.error = str(exc)

        diagnostic.processing_time_ms = round((time.perf_counter() - started) * 1000, 3)
        _log.info(
            f"Diagnostic {diagnostic.report_id} complete: {diagnostic.overall_health.value} "
            f"in {diagnostic.processing_time_ms}ms"
        )
        return diagnostic

    def compare_with_external(self, computed: Counts, external: Counts) -> ExternalComparison:
        """Compare computed counts with counts reported by the test runner."""
        matches, discrepancies, match_percentage = compare_metrics(computed, external)
        confidence = confidence_for(match_percentage)

        possible_causes: list[str] = []
        if computed.failed > external.failed:
            possible_causes.append(
                "Setup/teardown hook failures are counted as test failures here "
                "but not by the test runner"
            )
        if computed.skipped < external.skipped:
            possible_causes.append("Skipped tests are represented differently by the test runner")
        if computed.scenarios != external.scenarios:
            possible_causes.append(
                "Background scenarios or framework execution errors are counted differently"
            )

        suggestions: list[str] = []
        if discrepancies:
            suggestions.append("Review scenarios with hook failures and their step results")
        if confidence == Confidence.LOW:
            suggestions.append("Verify the external summary belongs to the same test run")

        return ExternalComparison(
            external_counts=external,
            computed_counts=computed,
            matches=matches,
            discrepancies=discrepancies,
            match_percentage=match_percentage,
            confidence=confidence,
            possible_causes=possible_causes,
            suggestions=suggestions,
        )

    def compare_methods(self, features: list[Feature], raw: Any) -> MethodConsistency:
        """Compare naive direct counting of ``raw`` with resolved counting.

        Raises:
            DiagnosticsError: If ``raw`` is not a list of features.
        """
        if not isinstance(raw, list):
            raise DiagnosticsError(f"Raw report must be a list, got {type(raw).__name__}")

        direct = count_raw(raw, self._checker.detector)
        resolved = count_resolved(features, self._resolver)
        _, discrepancies, match_percentage = compare_metrics(resolved, direct)
        return MethodConsistency(
            direct_counts=direct,
            resolved_counts=resolved,
            consistency=confidence_for(match_percentage),
            discrepancies=discrepancies,
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _analyze_validation(self, report: Any, sanitization: SanitizationResult) -> ValidationAnalysis:
        return ValidationAnalysis(
            source_id=sanitization.source_id,
            is_valid=sanitization.is_valid,
            critical_issues=sanitization.error_count,
            warnings=sanitization.warning_count,
            skipped_entries=len(sanitization.skipped_entries),
            summary=self._sanitizer.summarize(sanitization),
            structure=self._analyze_structure(report),
            content=self._analyze_content(report),
        )

    def _analyze_structure(self, report: Any) -> StructureAnalysis:
        analysis = StructureAnalysis(is_array=isinstance(report, list))
        if not analysis.is_array:
            return analysis

        analysis.feature_count = len(report)
        for raw_feature in report:
            feature = _as_dict(raw_feature)
            if feature is None:
                continue
            scenarios = _list_of(feature, "elements", "scenarios")
            if scenarios:
                analysis.has_elements = True
            for raw_scenario in scenarios:
                scenario = _as_dict(raw_scenario)
                if scenario is None:
                    continue
                if _list_of(scenario, "steps"):
                    analysis.has_steps = True
                if _list_of(scenario, "before") or _list_of(scenario, "after"):
                    analysis.has_hooks = True

        if analysis.has_elements:
            analysis.structure = "cucumber_json"
        return analysis

    def _analyze_content(self, report: Any) -> ContentAnalysis:
        analysis = ContentAnalysis()
        if not isinstance(report, list):
            return analysis

        def check_name(entry: dict[str, Any]) -> None:
            name = entry.get("name")
            if name is None:
                analysis.null_names += 1
            elif isinstance(name, str) and not name.strip():
                analysis.empty_names += 1

        for raw_feature in report:
            feature = _as_dict(raw_feature)
            if feature is None:
                continue
            check_name(feature)
            for raw_scenario in _list_of(feature, "elements", "scenarios"):
                scenario = _as_dict(raw_scenario)
                if scenario is None:
                    continue
                analysis.total_elements += 1
                check_name(scenario)
                for raw_step in _list_of(scenario, "steps"):
                    step = _as_dict(raw_step)
                    if step is not None and step.get("result") is None and "status" not in step:
                        analysis.missing_results += 1
        return analysis

    def _analyze_statuses(self, features: list[Feature]) -> StatusAnalysis:
        analysis = StatusAnalysis(features=self._resolver.annotate(features))

        for feature in analysis.features:
            if feature.result.is_execution_error:
                analysis.execution_error_features += 1
                continue
            for scenario in feature.scenarios:
                if scenario.is_background:
                    continue
                result = scenario.result
                analysis.total_scenarios += 1
                key = result.status.value
                analysis.status_breakdown[key] = analysis.status_breakdown.get(key, 0) + 1

                if result.details.setup_status == PhaseStatus.FAILED:
                    analysis.setup_failures += 1
                if result.details.teardown_status == PhaseStatus.FAILED:
                    analysis.teardown_failures += 1
                if result.error_category is not None:
                    category = result.error_category.value
                    analysis.error_categories[category] = analysis.error_categories.get(category, 0) + 1
                if result.status == Verdict.UNKNOWN:
                    analysis.issues.append(UnknownStatusIssue(
                        location=scenario.location,
                        scenario_name=scenario.name,
                        reason=result.reason,
                    ))
        return analysis

    # ------------------------------------------------------------------
    # Verdict
    # ------------------------------------------------------------------

    def _collect_facts(self, diagnostic: DiagnosticReport, sanitization: SanitizationResult) -> dict[str, Any]:
        status = diagnostic.status_analysis or StatusAnalysis()
        integrity: IntegrityReport | None = diagnostic.integrity
        comparison = diagnostic.comparison
        methods = diagnostic.method_consistency
        return {
            "integrity_status": integrity.overall_status.value if integrity else "unknown",
            "structure_error": sanitization.has_structure_error,
            "validation_errors": sanitization.error_count,
            "validation_warnings": sanitization.warning_count,
            "setup_failures": status.setup_failures,
            "teardown_failures": status.teardown_failures,
            "unknown_statuses": len(status.issues),
            "execution_error_features": status.execution_error_features,
            "comparison_confidence": comparison.confidence.value if comparison else None,
            "methods_consistent": (
                methods.consistency == Confidence.HIGH if methods and methods.consistency else None
            ),
        }

    def _determine_health(self, diagnostic: DiagnosticReport) -> OverallHealth:
        """error > critical > poor > fair > good."""
        integrity = diagnostic.integrity
        if integrity is not None and integrity.overall_status == IntegrityStatus.ERROR:
            diagnostic.error = integrity.error
            return OverallHealth.ERROR
        if integrity is not None and integrity.overall_status == IntegrityStatus.CRITICAL:
            return OverallHealth.CRITICAL
        if diagnostic.validation is not None and diagnostic.validation.critical_issues > 0:
            return OverallHealth.POOR
        if diagnostic.status_analysis is not None and diagnostic.status_analysis.issues:
            return OverallHealth.FAIR
        return OverallHealth.GOOD