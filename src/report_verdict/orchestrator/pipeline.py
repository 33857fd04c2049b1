"""ReportPipeline: one set of components and one cache per report session."""

from typing import Any

from report_verdict.config import PipelineConfig
from report_verdict.core.cache import PipelineCache
from report_verdict.core.execution_errors import ExecutionErrorDetector
from report_verdict.core.integrity_checker import IntegrityChecker
from report_verdict.core.sanitizer import Sanitizer
from report_verdict.core.status_resolver import StatusResolver
from report_verdict.models.diagnostic_models import DiagnosticReport
from report_verdict.models.integrity_models import IntegrityReport
from report_verdict.models.status_models import FeatureStatusResult, StatusResult
from report_verdict.models.validation_models import SanitizationResult
from report_verdict.orchestrator.diagnostics import DiagnosticsOrchestrator


class ReportPipeline:
    """Wires Sanitizer, StatusResolver, IntegrityChecker and the
    DiagnosticsOrchestrator around a shared PipelineCache.

    Instances hold no state beyond that cache and the integrity history, so
    independent reports can be processed in parallel with one pipeline each.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        execution_error_patterns: list[str] | None = None,
    ) -> None:
        self.config: PipelineConfig = config if config is not None else PipelineConfig()
        self.cache = PipelineCache()
        self.detector = ExecutionErrorDetector(execution_error_patterns, self.cache)
        self.sanitizer = Sanitizer(self.config, self.detector)
        self.resolver = StatusResolver(self.config, self.cache, self.detector)
        self.checker = IntegrityChecker(self.config, self.detector)
        self.diagnostics = DiagnosticsOrchestrator(
            self.config, self.sanitizer, self.resolver, self.checker,
        )

    def sanitize(self, raw_report: Any, source_label: str = "unknown") -> SanitizationResult:
        return self.sanitizer.validate(raw_report, source_label)

    def resolve_scenario_status(self, scenario: Any) -> StatusResult:
        return self.resolver.resolve_scenario(scenario)

    def resolve_feature_status(self, feature: Any) -> FeatureStatusResult:
        return self.resolver.resolve_feature(feature)

    def check_integrity(
        self,
        counts_a: Any,
        counts_b: Any = None,
        external_counts: Any = None,
        tolerance_percent: float | None = None,
    ) -> IntegrityReport:
        return self.checker.check_integrity(counts_a, counts_b, external_counts, tolerance_percent)

    def diagnose(
        self,
        report: Any,
        raw_original: Any = None,
        external_counts: Any = None,
        source_label: str = "unknown",
    ) -> DiagnosticReport:
        return self.diagnostics.analyze(report, raw_original, external_counts, source_label)

    def reset(self) -> None:
        """Drop every memoized value held by this pipeline."""
        self.cache.reset()
