"""Canonical Cucumber report models produced by the sanitizer."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class StepStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    UNDEFINED = "undefined"
    UNKNOWN = "unknown"


class ScenarioType(str, Enum):
    SCENARIO = "scenario"
    BACKGROUND = "background"


class Result(BaseModel):
    """The single result shape shared by steps and hooks."""

    model_config = ConfigDict(frozen=False)

    status: StepStatus = StepStatus.UNKNOWN
    duration: int = Field(default=0, ge=0)     # nanoseconds
    error_message: str | None = None


class HookMatch(BaseModel):
    model_config = ConfigDict(frozen=False, extra="allow")

    location: str


class Hook(BaseModel):
    """A before/after hook attached to a scenario."""

    model_config = ConfigDict(frozen=False, extra="allow")

    result: Result = Field(default_factory=Result)
    match: HookMatch


class Step(BaseModel):
    model_config = ConfigDict(frozen=False, extra="allow")

    name: str
    keyword: str = "Given "
    result: Result = Field(default_factory=Result)


class Scenario(BaseModel):
    model_config = ConfigDict(frozen=False, extra="allow")

    name: str
    id: str
    type: ScenarioType = ScenarioType.SCENARIO
    tags: list[str] = Field(default_factory=list)
    steps: list[Step] = Field(default_factory=list)
    before: list[Hook] = Field(default_factory=list)
    after: list[Hook] = Field(default_factory=list)

    @property
    def is_background(self) -> bool:
        return self.type == ScenarioType.BACKGROUND


class Feature(BaseModel):
    model_config = ConfigDict(frozen=False, extra="allow")

    name: str
    uri: str | None = None
    tags: list[str] = Field(default_factory=list)
    elements: list[Scenario] = Field(default_factory=list)
    is_execution_error: bool = False  # synthetic framework-failure feature

    def executable_scenarios(self) -> list[Scenario]:
        """Scenarios that count towards status aggregation (no backgrounds)."""
        return [s for s in self.elements if not s.is_background]
