"""Models describing what the sanitizer found and changed."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from report_verdict.models.report_models import Feature


class IssueCategory(str, Enum):
    STRUCTURE_ERROR = "structure_error"   # top-level input unusable
    ENTRY_ERROR = "entry_error"           # one feature/scenario/step skipped
    FIELD_WARNING = "field_warning"       # repaired with a placeholder/default
    INTERNAL_ERROR = "internal_error"     # unexpected exception, entry skipped


class ValidationIssue(BaseModel):
    model_config = ConfigDict(frozen=False)

    category: IssueCategory
    location: str                  # "Feature 0, Scenario 2, Step 1"
    message: str
    context: dict[str, Any] = Field(default_factory=dict)


class SkippedEntry(BaseModel):
    model_config = ConfigDict(frozen=False)

    entry_type: str                # "feature" | "scenario" | "step"
    location: str
    reason: str


class SanitizationResult(BaseModel):
    """Outcome of one sanitizer pass over a report."""

    model_config = ConfigDict(frozen=False)

    is_valid: bool
    source_id: str = "unknown"
    sanitized_report: list[Feature] | None = None
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)
    error_count: int = 0           # uncapped; len(errors) stops at max_errors
    warning_count: int = 0         # uncapped; len(warnings) stops at max_errors
    original_entry_count: int = 0
    processed_entry_count: int = 0
    skipped_entries: list[SkippedEntry] = Field(default_factory=list)
    validated_at: datetime = Field(default_factory=datetime.now)

    @property
    def has_structure_error(self) -> bool:
        return any(e.category == IssueCategory.STRUCTURE_ERROR for e in self.errors)


class ValidationSummary(BaseModel):
    model_config = ConfigDict(frozen=False)

    total_errors: int = 0
    total_warnings: int = 0
    processed_entries: int = 0
    skipped_entries: int = 0
    success_rate: float = 0.0      # percent
    recommendations: list[str] = Field(default_factory=list)
