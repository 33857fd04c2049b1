"""Diagnostic report models produced by the orchestrator."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from report_verdict.models.integrity_models import Counts, IntegrityReport, Recommendation
from report_verdict.models.status_models import ErrorCategory, FeatureVerdict
from report_verdict.models.validation_models import ValidationSummary


class OverallHealth(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    CRITICAL = "critical"
    ERROR = "error"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DiscrepancyLevel(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ExecutionErrorGuidance(BaseModel):
    """Remediation advice for a framework-level execution error feature."""

    model_config = ConfigDict(frozen=False)

    issue: str
    solution: str
    action: str
    priority: str                  # "critical" | "high"
    category: str                  # "framework" | "configuration" | "dependencies" | "step-definitions"
    error_category: ErrorCategory = ErrorCategory.UNCLASSIFIED
    resolution_steps: list[str] = Field(default_factory=list)


class UnknownStatusIssue(BaseModel):
    model_config = ConfigDict(frozen=False)

    location: str
    scenario_name: str
    reason: str


class StatusAnalysis(BaseModel):
    model_config = ConfigDict(frozen=False)

    total_scenarios: int = 0
    status_breakdown: dict[str, int] = Field(default_factory=dict)
    setup_failures: int = 0
    teardown_failures: int = 0
    execution_error_features: int = 0
    error_categories: dict[str, int] = Field(default_factory=dict)
    issues: list[UnknownStatusIssue] = Field(default_factory=list)
    features: list[FeatureVerdict] = Field(default_factory=list)


class StructureAnalysis(BaseModel):
    model_config = ConfigDict(frozen=False)

    is_array: bool = False
    feature_count: int = 0
    has_elements: bool = False
    has_steps: bool = False
    has_hooks: bool = False
    structure: str = "unknown"     # "cucumber_json" when recognised


class ContentAnalysis(BaseModel):
    model_config = ConfigDict(frozen=False)

    null_names: int = 0
    empty_names: int = 0
    missing_results: int = 0
    total_elements: int = 0


class ValidationAnalysis(BaseModel):
    model_config = ConfigDict(frozen=False)

    source_id: str
    is_valid: bool
    critical_issues: int = 0
    warnings: int = 0
    skipped_entries: int = 0
    summary: ValidationSummary = Field(default_factory=ValidationSummary)
    structure: StructureAnalysis = Field(default_factory=StructureAnalysis)
    content: ContentAnalysis = Field(default_factory=ContentAnalysis)


class MetricDiscrepancy(BaseModel):
    model_config = ConfigDict(frozen=False)

    metric: str
    external_value: int
    computed_value: int
    difference: int                # computed - external
    level: DiscrepancyLevel


class ExternalComparison(BaseModel):
    model_config = ConfigDict(frozen=False)

    source: str = "external"
    external_counts: Counts
    computed_counts: Counts
    matches: dict[str, int] = Field(default_factory=dict)
    discrepancies: list[MetricDiscrepancy] = Field(default_factory=list)
    match_percentage: float = 0.0
    confidence: Confidence = Confidence.LOW
    possible_causes: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class MethodConsistency(BaseModel):
    """Agreement between direct raw counting and resolved counting."""

    model_config = ConfigDict(frozen=False)

    direct_counts: Counts | None = None
    resolved_counts: Counts | None = None
    consistency: Confidence | None = None
    discrepancies: list[MetricDiscrepancy] = Field(default_factory=list)


class DiagnosticReport(BaseModel):
    model_config = ConfigDict(frozen=False)

    report_id: str
    overall_health: OverallHealth = OverallHealth.GOOD
    validation: ValidationAnalysis | None = None
    status_analysis: StatusAnalysis | None = None
    computed_counts: Counts | None = None
    integrity: IntegrityReport | None = None
    comparison: ExternalComparison | None = None
    method_consistency: MethodConsistency | None = None
    recommendations: list[Recommendation] = Field(default_factory=list)
    processing_time_ms: float | None = None
    error: str | None = None
    generated_at: datetime = Field(default_factory=datetime.now)
