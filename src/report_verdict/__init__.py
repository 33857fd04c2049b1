"""Report verdicts for Cucumber JSON test reports.

Module-level functions build a fresh ReportPipeline per call; hold a
ReportPipeline directly to reuse memoized verdicts across calls.
"""

from typing import Any

from report_verdict.config import PipelineConfig
from report_verdict.core import (
    EntryError,
    ExecutionErrorDetector,
    IntegrityCheckError,
    IntegrityChecker,
    PipelineCache,
    Sanitizer,
    StatusResolver,
    StructureError,
    VerdictError,
)
from report_verdict.logger_config import setup_logger
from report_verdict.models import (
    Counts,
    DiagnosticReport,
    FeatureStatusResult,
    IntegrityReport,
    SanitizationResult,
    StatusResult,
)
from report_verdict.orchestrator import DiagnosticsError, DiagnosticsOrchestrator, ReportPipeline
from report_verdict.utils import parse_external_summary

__version__ = "0.1.0"


def sanitize(
    raw_report: Any,
    source_label: str = "unknown",
    config: PipelineConfig | None = None,
) -> SanitizationResult:
    return ReportPipeline(config).sanitize(raw_report, source_label)


def resolve_scenario_status(scenario: Any, config: PipelineConfig | None = None) -> StatusResult:
    return ReportPipeline(config).resolve_scenario_status(scenario)


def resolve_feature_status(feature: Any, config: PipelineConfig | None = None) -> FeatureStatusResult:
    return ReportPipeline(config).resolve_feature_status(feature)


def check_integrity(
    counts_a: Any,
    counts_b: Any = None,
    external_counts: Any = None,
    tolerance_percent: float | None = None,
    config: PipelineConfig | None = None,
) -> IntegrityReport:
    return ReportPipeline(config).check_integrity(counts_a, counts_b, external_counts, tolerance_percent)


def diagnose(
    report: Any,
    raw_original: Any = None,
    external_counts: Any = None,
    config: PipelineConfig | None = None,
) -> DiagnosticReport:
    """Full diagnostic pass; never raises."""
    return ReportPipeline(config).diagnose(report, raw_original, external_counts)


__all__ = [
    "Counts",
    "DiagnosticReport",
    "DiagnosticsError",
    "DiagnosticsOrchestrator",
    "EntryError",
    "ExecutionErrorDetector",
    "FeatureStatusResult",
    "IntegrityCheckError",
    "IntegrityChecker",
    "IntegrityReport",
    "PipelineCache",
    "PipelineConfig",
    "ReportPipeline",
    "SanitizationResult",
    "Sanitizer",
    "StatusResolver",
    "StatusResult",
    "StructureError",
    "VerdictError",
    "check_integrity",
    "diagnose",
    "parse_external_summary",
    "resolve_feature_status",
    "resolve_scenario_status",
    "sanitize",
    "setup_logger",
]
