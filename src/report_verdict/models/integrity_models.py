"""Count sets, discrepancies and integrity report models."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class DiscrepancyKind(str, Enum):
    COUNT_MISMATCH = "count_mismatch"
    CROSS_VALIDATION_MISMATCH = "cross_validation_mismatch"
    EXTERNAL_MISMATCH = "external_mismatch"
    NEGATIVE_VALUE = "negative_value"
    IMPOSSIBLE_COUNT = "impossible_count"
    UNLIKELY_RATIO = "unlikely_ratio"
    UNUSUAL_DURATION = "unusual_duration"


class IntegrityStatus(str, Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"
    ERROR = "error"


class RecommendationPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


PRIORITY_ORDER: dict[RecommendationPriority, int] = {
    RecommendationPriority.CRITICAL: 0,
    RecommendationPriority.HIGH: 1,
    RecommendationPriority.MEDIUM: 2,
    RecommendationPriority.LOW: 3,
    RecommendationPriority.INFO: 4,
}


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class Counts(BaseModel):
    """Aggregate counts for one report, from any source.

    Accepts the camelCase "total*" spellings that external summaries use.
    """

    model_config = ConfigDict(frozen=False, populate_by_name=True)

    features: int = Field(default=0, validation_alias=_alias(
        "features", "totalFeatures", "total_features"))
    scenarios: int = Field(default=0, validation_alias=_alias(
        "scenarios", "totalScenarios", "total_scenarios", "totalTests", "total"))
    steps: int = Field(default=0, validation_alias=_alias(
        "steps", "totalSteps", "total_steps"))
    passed: int = Field(default=0, validation_alias=_alias("passed", "totalPassed"))
    failed: int = Field(default=0, validation_alias=_alias("failed", "totalFailed"))
    skipped: int = Field(default=0, validation_alias=_alias("skipped", "totalSkipped"))
    errors: int = Field(default=0, validation_alias=_alias("errors", "totalErrors"))
    execution_errors: int = Field(default=0, validation_alias=_alias(
        "execution_errors", "executionErrors"))
    duration: float = 0.0          # seconds

    @field_validator(
        "features", "scenarios", "steps", "passed", "failed", "skipped",
        "errors", "execution_errors", "duration",
        mode="before",
    )
    @classmethod
    def _none_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    def status_total(self) -> int:
        return self.passed + self.failed + self.skipped + self.errors


class Discrepancy(BaseModel):
    model_config = ConfigDict(frozen=False)

    kind: DiscrepancyKind
    field: str
    expected: float | None = None
    actual: float | None = None
    difference: float | None = None    # actual - expected
    tolerance: int | None = None
    severity: Severity
    message: str
    source: str | None = None          # which comparison produced it


class FieldComparison(BaseModel):
    model_config = ConfigDict(frozen=False)

    field: str
    expected: int
    actual: int
    difference: int                     # actual - expected
    tolerance: int
    is_consistent: bool


class CrossValidationResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    comparison_type: str = "computed_vs_independent"
    is_valid: bool
    tolerance_percentage: float
    comparisons: list[FieldComparison] = Field(default_factory=list)
    discrepancies: list[Discrepancy] = Field(default_factory=list)


class CountValidationResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    is_valid: bool
    summary: Counts
    calculated_summary: Counts | None = None
    discrepancies: list[Discrepancy] = Field(default_factory=list)


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=False)

    condition: str                 # stable key the recommendation is deduplicated on
    priority: RecommendationPriority
    message: str
    action: str | None = None


class ValidationRecord(BaseModel):
    model_config = ConfigDict(frozen=False)

    is_valid: bool
    discrepancy_count: int
    recorded_at: datetime = Field(default_factory=datetime.now)


class IntegrityReport(BaseModel):
    model_config = ConfigDict(frozen=False)

    overall_status: IntegrityStatus
    discrepancies: list[Discrepancy] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)
    comparisons: list[CrossValidationResult] = Field(default_factory=list)
    critical_count: int = 0
    warning_count: int = 0
    error: str | None = None
    checked_at: datetime = Field(default_factory=datetime.now)
