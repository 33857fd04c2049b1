"""Status verdict models for scenarios and features."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Verdict(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    UNKNOWN = "unknown"
    MIXED = "mixed"
    ERROR = "error"


class PhaseStatus(str, Enum):
    NOT_EXECUTED = "not_executed"
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    MIXED = "mixed"


class ErrorCategory(str, Enum):
    """Closed set of failure-message classes recognised by classify_error."""

    EMPTY_TEST_NAME = "empty_test_name"
    ILLEGAL_ARGUMENT = "illegal_argument"
    MISSING_DEPENDENCY = "missing_dependency"
    MISSING_STEP_DEFINITION = "missing_step_definition"
    ELEMENT_NOT_INTERACTABLE = "element_not_interactable"
    UNCLASSIFIED = "unclassified"


class PhaseDetails(BaseModel):
    model_config = ConfigDict(frozen=False)

    setup_status: PhaseStatus = PhaseStatus.NOT_EXECUTED
    execution_status: PhaseStatus = PhaseStatus.NOT_EXECUTED
    teardown_status: PhaseStatus = PhaseStatus.NOT_EXECUTED
    has_steps: bool = False
    has_setup: bool = False
    has_teardown: bool = False


class PhaseResult(BaseModel):
    """Outcome of analysing a single phase (setup, execution or teardown)."""

    model_config = ConfigDict(frozen=False)

    status: PhaseStatus = PhaseStatus.NOT_EXECUTED
    present: bool = False          # hooks or steps exist for this phase
    failure_reason: str | None = None


class StatusResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    status: Verdict
    reason: str
    details: PhaseDetails = Field(default_factory=PhaseDetails)
    error_category: ErrorCategory | None = None


class StatusCounts(BaseModel):
    model_config = ConfigDict(frozen=False)

    passed: int = 0
    failed: int = 0
    skipped: int = 0
    errors: int = 0
    total: int = 0


class FeatureStatusResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    status: Verdict
    reason: str
    counts: StatusCounts = Field(default_factory=StatusCounts)
    is_execution_error: bool = False


class HookFailureSummary(BaseModel):
    model_config = ConfigDict(frozen=False)

    setup_failed: bool = False
    teardown_failed: bool = False
    setup_error: str | None = None
    teardown_error: str | None = None
    should_fail_test: bool = False


class ScenarioVerdict(BaseModel):
    """A scenario's identity paired with its resolved status."""

    model_config = ConfigDict(frozen=False)

    scenario_id: str
    name: str
    location: str
    is_background: bool = False
    result: StatusResult


class FeatureVerdict(BaseModel):
    model_config = ConfigDict(frozen=False)

    name: str
    uri: str | None = None
    location: str
    result: FeatureStatusResult
    scenarios: list[ScenarioVerdict] = Field(default_factory=list)
