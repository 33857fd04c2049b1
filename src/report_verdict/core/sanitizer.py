"""Sanitizer: validates report structure and repairs identifying fields."""

import math
import re
from typing import Any

from pydantic import BaseModel, ValidationError

from report_verdict.config import PipelineConfig
from report_verdict.core.exceptions import EntryError, StructureError
from report_verdict.core.execution_errors import ExecutionErrorDetector
from report_verdict.logger_config import get_logger
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
from report_verdict.models.validation_models import (
    IssueCategory,
    SanitizationResult,
    SkippedEntry,
    ValidationIssue,
    ValidationSummary,
)

_log = get_logger("sanitizer")

DEFAULT_STEP_KEYWORD = "Given "
PLACEHOLDER_SUFFIX = " (auto-generated)"
ID_SLUG_RE = re.compile(r"[^a-z0-9]")
KNOWN_STATUSES = {status.value for status in StepStatus}
# Top-level step keys that stand in for a missing result object.
FLAT_RESULT_KEYS = ("status", "duration", "error_message", "errorMessage")


def generate_scenario_id(name: str | None, feature_index: int, scenario_index: int) -> str:
    """Deterministic scenario id: same (name, indices) always yields the same id."""
    base_name = name or f"scenario-{scenario_index}"
    slug = ID_SLUG_RE.sub("-", base_name.lower())
    return f"feature-{feature_index}-{slug}-{scenario_index}"


def placeholder_name(fallback: str) -> str:
    return f"{fallback}{PLACEHOLDER_SUFFIX}"


class Sanitizer:
    """Validates the shape of a Cucumber report and produces a canonical copy.

    Malformed features, scenarios and steps are skipped and recorded; missing
    names, ids and results are repaired with deterministic placeholders.
    The input is never mutated.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        detector: ExecutionErrorDetector | None = None,
    ) -> None:
        self._config: PipelineConfig = config if config is not None else PipelineConfig()
        self._detector: ExecutionErrorDetector = (
            detector if detector is not None else ExecutionErrorDetector()
        )
        self._reset()

    def _reset(self) -> None:
        self._errors: list[ValidationIssue] = []
        self._warnings: list[ValidationIssue] = []
        self._error_count: int = 0
        self._warning_count: int = 0
        self._skipped: list[SkippedEntry] = []
        self._seen_ids: set[str] = set()

    def validate(self, report: Any, source_id: str = "unknown") -> SanitizationResult:
        """Sanitize a whole report.

        Returns a SanitizationResult; a non-array report yields
        is_valid=False, a structure_error issue and no sanitized_report.
        """
        self._reset()

        try:
            raw_features = self._check_structure(report)
        except StructureError as exc:
            self._add_error(
                IssueCategory.STRUCTURE_ERROR,
                "Root",
                str(exc),
                {"expected_type": "array", "actual_type": type(report).__name__},
            )
            return SanitizationResult(
                is_valid=False,
                source_id=source_id,
                sanitized_report=None,
                errors=list(self._errors),
                error_count=self._error_count,
            )

        original_entry_count = self._count_original_entries(raw_features)
        sanitized: list[Feature] = []

        for feature_index, raw_feature in enumerate(raw_features):
            location = f"Feature {feature_index}"
            try:
                sanitized.append(self._sanitize_feature(raw_feature, feature_index))
            except EntryError as exc:
                self._skip_entry("feature", location, str(exc))
            except Exception as exc:
                _log.exception(f"Unexpected error sanitizing {location} of {source_id}")
                self._add_error(
                    IssueCategory.INTERNAL_ERROR,
                    location,
                    f"Unexpected error during sanitization: {exc}",
                    {"source_id": source_id},
                )
                self._skipped.append(SkippedEntry(
                    entry_type="feature", location=location, reason=str(exc),
                ))

        _log.info(
            f"Validation complete for {source_id}: "
            f"{len(sanitized)}/{len(raw_features)} features processed, "
            f"{self._error_count} errors, {self._warning_count} warnings"
        )

        return SanitizationResult(
            is_valid=self._error_count == 0,
            source_id=source_id,
            sanitized_report=sanitized,
            errors=list(self._errors),
            warnings=list(self._warnings),
            error_count=self._error_count,
            warning_count=self._warning_count,
            original_entry_count=original_entry_count,
            processed_entry_count=len(sanitized),
            skipped_entries=list(self._skipped),
        )

    def normalize_feature(self, raw: Any, feature_index: int = 0) -> Feature:
        """Canonicalize one feature outside a full report pass.

        Raises:
            EntryError: If ``raw`` is not an object.
        """
        self._reset()
        return self._sanitize_feature(raw, feature_index)

    def normalize_scenario(self, raw: Any, feature_index: int = 0, scenario_index: int = 0) -> Scenario:
        """Canonicalize one scenario outside a full report pass.

        Raises:
            EntryError: If ``raw`` is not an object.
        """
        self._reset()
        return self._sanitize_scenario(raw, feature_index, scenario_index)

    def summarize(self, result: SanitizationResult) -> ValidationSummary:
        """Condense a SanitizationResult into totals and recommendations."""
        processed = result.processed_entry_count
        skipped = len(result.skipped_entries)
        success_rate = 0.0
        if processed > 0:
            success_rate = round(processed / (processed + skipped) * 100, 2)

        recommendations: list[str] = []
        if result.error_count > 0:
            recommendations.append("Fix critical validation errors before processing reports")
        if result.warning_count > 5:
            recommendations.append("Consider improving test data quality to reduce warnings")
        if skipped > processed * 0.1:
            recommendations.append(
                "High number of skipped entries detected - review test execution"
            )

        return ValidationSummary(
            total_errors=result.error_count,
            total_warnings=result.warning_count,
            processed_entries=processed,
            skipped_entries=skipped,
            success_rate=success_rate,
            recommendations=recommendations,
        )

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def _check_structure(self, report: Any) -> list[Any]:
        if not isinstance(report, list):
            raise StructureError(
                f"Cucumber JSON must be an array of features, got {type(report).__name__}"
            )
        if not report:
            self._add_warning("Root", "Empty features array")
        return report

    def _count_original_entries(self, raw_features: list[Any]) -> int:
        count = 0
        for feature in raw_features:
            count += 1
            data = self._as_mapping(feature)
            if data is None:
                continue
            elements = data.get("elements", data.get("scenarios"))
            if isinstance(elements, list):
                count += len(elements)
        return count

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def _sanitize_feature(self, raw: Any, feature_index: int) -> Feature:
        location = f"Feature {feature_index}"
        data = self._as_mapping(raw)
        if data is None:
            raise EntryError(f"Feature must be an object, got {type(raw).__name__}")

        raw_elements = data.pop("elements", None)
        legacy_elements = data.pop("scenarios", None)
        if raw_elements is None:
            raw_elements = legacy_elements
        if raw_elements is None:
            raw_elements = []
        elif not isinstance(raw_elements, list):
            self._add_warning(
                location,
                f"Feature elements is not a list ({type(raw_elements).__name__}), treating as empty",
            )
            raw_elements = []

        scenarios: list[Scenario] = []
        for scenario_index, raw_scenario in enumerate(raw_elements):
            try:
                scenarios.append(self._sanitize_scenario(raw_scenario, feature_index, scenario_index))
            except EntryError as exc:
                self._skip_entry("scenario", f"{location}, Scenario {scenario_index}", str(exc))

        uri = data.get("uri") if isinstance(data.get("uri"), str) else None
        data.update(
            name=self._sanitize_name(data.get("name"), f"Feature {feature_index}", "feature", location),
            uri=uri,
            tags=self._normalize_tags(data.get("tags"), location),
            elements=scenarios,
            is_execution_error=self._detector.is_execution_error_uri(uri),
        )
        return Feature.model_validate(data)

    def _sanitize_scenario(self, raw: Any, feature_index: int, scenario_index: int) -> Scenario:
        location = f"Feature {feature_index}, Scenario {scenario_index}"
        data = self._as_mapping(raw)
        if data is None:
            raise EntryError(f"Scenario must be an object, got {type(raw).__name__}")

        raw_name = data.get("name")
        name = self._sanitize_name(raw_name, f"Scenario {scenario_index}", "scenario", location)

        scenario_id = data.get("id")
        if not isinstance(scenario_id, str) or not scenario_id.strip():
            clean_name = raw_name.strip() if isinstance(raw_name, str) else None
            scenario_id = generate_scenario_id(clean_name, feature_index, scenario_index)
        if scenario_id in self._seen_ids:
            unique_id = self._unique_id(f"{scenario_id}-{feature_index}-{scenario_index}")
            self._add_warning(
                location,
                f"Duplicate scenario id '{scenario_id}' renamed to '{unique_id}'",
                {"original_id": scenario_id},
            )
            scenario_id = unique_id
        self._seen_ids.add(scenario_id)

        raw_type = data.get("type")
        is_background = isinstance(raw_type, str) and raw_type.strip().lower() == ScenarioType.BACKGROUND.value

        raw_steps = data.get("steps")
        if raw_steps is None:
            raw_steps = []
        elif not isinstance(raw_steps, list):
            self._add_warning(location, "Scenario steps is not a list, treating as empty")
            raw_steps = []

        steps: list[Step] = []
        for step_index, raw_step in enumerate(raw_steps):
            try:
                steps.append(self._sanitize_step(raw_step, f"{location}, Step {step_index}", step_index))
            except EntryError as exc:
                self._skip_entry("step", f"{location}, Step {step_index}", str(exc))

        data.update(
            name=name,
            id=scenario_id,
            type=ScenarioType.BACKGROUND if is_background else ScenarioType.SCENARIO,
            tags=self._normalize_tags(data.get("tags"), location),
            steps=steps,
            before=self._sanitize_hooks(data.get("before"), "before", location),
            after=self._sanitize_hooks(data.get("after"), "after", location),
        )
        try:
            return Scenario.model_validate(data)
        except ValidationError as exc:
            raise EntryError(f"Scenario could not be normalized: {exc.error_count()} invalid field(s)") from exc

    def _sanitize_step(self, raw: Any, location: str, step_index: int) -> Step:
        data = self._as_mapping(raw)
        if data is None:
            raise EntryError(f"Step must be an object, got {type(raw).__name__}")

        keyword = data.get("keyword")
        if not isinstance(keyword, str) or not keyword.strip():
            keyword = DEFAULT_STEP_KEYWORD

        data.update(
            name=self._sanitize_name(data.get("name"), f"Step {step_index}", "step", location),
            keyword=keyword,
            result=self._normalize_result(data, location),
        )
        try:
            return Step.model_validate(data)
        except ValidationError as exc:
            raise EntryError(f"Step could not be normalized: {exc.error_count()} invalid field(s)") from exc

    def _sanitize_hooks(self, raw_hooks: Any, kind: str, location: str) -> list[Hook]:
        if raw_hooks is None:
            return []
        if not isinstance(raw_hooks, list):
            self._add_warning(location, f"Scenario {kind} hooks is not a list, treating as empty")
            return []

        hooks: list[Hook] = []
        for hook_index, raw_hook in enumerate(raw_hooks):
            hook_location = f"{location}, {kind.capitalize()} hook {hook_index}"
            data = self._as_mapping(raw_hook)
            if data is None:
                self._add_warning(
                    hook_location,
                    f"Hook must be an object, got {type(raw_hook).__name__}; replaced with unknown result",
                )
                hooks.append(Hook(match=HookMatch(location=f"unknown {kind} hook")))
                continue

            raw_match = data.get("match")
            if isinstance(raw_match, dict) and isinstance(raw_match.get("location"), str):
                match = raw_match
            else:
                match = {"location": f"{kind} hook"}

            data.update(result=self._normalize_result(data, hook_location), match=match)
            try:
                hooks.append(Hook.model_validate(data))
            except ValidationError:
                self._add_warning(hook_location, "Hook could not be normalized; replaced with unknown result")
                hooks.append(Hook(match=HookMatch(location=f"unknown {kind} hook")))
        return hooks

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def _normalize_result(self, data: dict[str, Any], location: str) -> Result:
        """Collapse the accepted result shapes into one canonical Result.

        Accepts a nested ``result`` object, a bare status string, or flat
        ``status``/``duration``/``error_message`` keys on the entry itself.
        Consumed flat keys are removed from ``data``.
        """
        raw_result = data.get("result")
        if isinstance(raw_result, BaseModel):
            raw_result = raw_result.model_dump()

        if isinstance(raw_result, dict):
            source = raw_result
        elif isinstance(raw_result, str):
            source = {"status": raw_result}
        elif "status" in data:
            source = {key: data.pop(key) for key in FLAT_RESULT_KEYS if key in data}
        else:
            self._add_warning(location, "Missing result/status, defaulting to unknown")
            return Result()

        message = source.get("error_message", source.get("errorMessage"))
        if message is not None and not isinstance(message, str):
            message = str(message)

        return Result(
            status=self._normalize_status(source.get("status"), location),
            duration=self._normalize_duration(source.get("duration"), location),
            error_message=message,
        )

    def _normalize_status(self, value: Any, location: str) -> StepStatus:
        if isinstance(value, StepStatus):
            return value
        if isinstance(value, str):
            status = value.strip().lower()
            if status in KNOWN_STATUSES:
                return StepStatus(status)
        self._add_warning(
            location,
            f"Unrecognized result status {value!r}, defaulting to unknown",
            {"original_status": repr(value)},
        )
        return StepStatus.UNKNOWN

    def _normalize_duration(self, value: Any, location: str) -> int:
        if value is None:
            return 0
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            self._add_warning(location, f"Non-numeric duration {value!r}, defaulting to 0")
            return 0
        if not math.isfinite(value):
            self._add_warning(location, f"Non-finite duration {value!r}, defaulting to 0")
            return 0
        if value < 0:
            self._add_warning(location, f"Negative duration {value}, defaulting to 0")
            return 0
        return int(value)

    def _sanitize_name(self, value: Any, fallback: str, kind: str, location: str) -> str:
        if isinstance(value, str) and value.strip():
            return value.strip()

        if self._config.generate_placeholders:
            placeholder = placeholder_name(fallback)
            self._add_warning(
                location,
                f"Empty {kind} name replaced with placeholder: {placeholder}",
                {"original_name": value, "placeholder": placeholder},
            )
            return placeholder

        self._add_error(
            IssueCategory.ENTRY_ERROR,
            location,
            f"{kind.capitalize()} name is null or empty",
            {"original_name": value},
        )
        return fallback

    def _normalize_tags(self, raw_tags: Any, location: str) -> list[str]:
        if raw_tags is None:
            return []
        if not isinstance(raw_tags, (list, set, tuple)):
            self._add_warning(location, "Tags is not a list, ignoring")
            return []

        tags: list[str] = []
        for tag in raw_tags:
            name = tag.get("name") if isinstance(tag, dict) else tag
            if not isinstance(name, str) or not name.strip():
                self._add_warning(location, f"Ignoring malformed tag {tag!r}")
                continue
            if name.strip() not in tags:
                tags.append(name.strip())
        return tags

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    @staticmethod
    def _as_mapping(raw: Any) -> dict[str, Any] | None:
        """Return a shallow dict copy of an entry, or None if it is not an object."""
        if isinstance(raw, BaseModel):
            return raw.model_dump()
        if isinstance(raw, dict):
            return dict(raw)
        return None

    def _unique_id(self, candidate: str) -> str:
        unique_id = candidate
        suffix = 1
        while unique_id in self._seen_ids:
            unique_id = f"{candidate}-{suffix}"
            suffix += 1
        return unique_id

    def _skip_entry(self, entry_type: str, location: str, reason: str) -> None:
        self._add_error(IssueCategory.ENTRY_ERROR, location, reason, {"entry_type": entry_type})
        self._skipped.append(SkippedEntry(entry_type=entry_type, location=location, reason=reason))

    def _add_error(
        self,
        category: IssueCategory,
        location: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self._error_count += 1
        if len(self._errors) >= self._config.max_errors:
            return
        self._errors.append(ValidationIssue(
            category=category, location=location, message=message, context=context or {},
        ))
        _log.error(f"[{location}] {message}")

    def _add_warning(self, location: str, message: str, context: dict[str, Any] | None = None) -> None:
        self._warning_count += 1
        if len(self._warnings) >= self._config.max_errors:
            return
        self._warnings.append(ValidationIssue(
            category=IssueCategory.FIELD_WARNING, location=location, message=message, context=context or {},
        ))
        _log.warning(f"[{location}] {message}")
