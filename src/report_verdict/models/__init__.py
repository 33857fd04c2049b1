"""Data models for report verdicts."""

from report_verdict.models.diagnostic_models import (
    Confidence,
    ContentAnalysis,
    DiagnosticReport,
    DiscrepancyLevel,
    ExecutionErrorGuidance,
    ExternalComparison,
    MethodConsistency,
    MetricDiscrepancy,
    OverallHealth,
    StatusAnalysis,
    StructureAnalysis,
    UnknownStatusIssue,
    ValidationAnalysis,
)
from report_verdict.models.integrity_models import (
    Counts,
    CountValidationResult,
    CrossValidationResult,
    Discrepancy,
    DiscrepancyKind,
    FieldComparison,
    IntegrityReport,
    IntegrityStatus,
    Recommendation,
    RecommendationPriority,
    Severity,
)
from report_verdict.models.report_models import (
    Feature,
    Hook,
    HookMatch,
    Result,
    Scenario,
    ScenarioType,
    Step,
    StepStatus,
)
from report_verdict.models.status_models import (
    ErrorCategory,
    FeatureStatusResult,
    FeatureVerdict,
    HookFailureSummary,
    PhaseDetails,
    PhaseStatus,
    ScenarioVerdict,
    StatusCounts,
    StatusResult,
    Verdict,
)
from report_verdict.models.validation_models import (
    IssueCategory,
    SanitizationResult,
    SkippedEntry,
    ValidationIssue,
    ValidationSummary,
)

__all__ = [
    "Confidence",
    "ContentAnalysis",
    "Counts",
    "CountValidationResult",
    "CrossValidationResult",
    "DiagnosticReport",
    "Discrepancy",
    "DiscrepancyKind",
    "DiscrepancyLevel",
    "ErrorCategory",
    "ExecutionErrorGuidance",
    "ExternalComparison",
    "Feature",
    "FeatureStatusResult",
    "FeatureVerdict",
    "FieldComparison",
    "Hook",
    "HookFailureSummary",
    "HookMatch",
    "IntegrityReport",
    "IntegrityStatus",
    "IssueCategory",
    "MethodConsistency",
    "MetricDiscrepancy",
    "OverallHealth",
    "PhaseDetails",
    "PhaseStatus",
    "Recommendation",
    "RecommendationPriority",
    "Result",
    "SanitizationResult",
    "Scenario",
    "ScenarioType",
    "ScenarioVerdict",
    "Severity",
    "SkippedEntry",
    "StatusAnalysis",
    "StatusCounts",
    "StatusResult",
    "Step",
    "StepStatus",
    "StructureAnalysis",
    "UnknownStatusIssue",
    "ValidationAnalysis",
    "ValidationIssue",
    "ValidationSummary",
    "Verdict",
]
