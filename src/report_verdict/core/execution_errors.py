"""Framework execution-error features and failure-message classification."""

from typing import Any

from report_verdict.core.cache import PipelineCache, content_key
from report_verdict.models.diagnostic_models import ExecutionErrorGuidance
from report_verdict.models.report_models import Feature, StepStatus
from report_verdict.models.status_models import ErrorCategory


DEFAULT_EXECUTION_ERROR_PATTERNS: tuple[str, ...] = (
    "classpath:io/cucumber/core/failure.feature",
    "failure.feature",
    "execution-error",
)

# Ordered: the first matching entry wins. Every needle in a tuple must be present.
ERROR_SIGNATURES: list[tuple[ErrorCategory, tuple[str, ...]]] = [
    (ErrorCategory.EMPTY_TEST_NAME,          ("Test name must not be null or empty",)),
    (ErrorCategory.ILLEGAL_ARGUMENT,         ("IllegalArgumentException",)),
    (ErrorCategory.MISSING_DEPENDENCY,       ("ClassNotFoundException",)),
    (ErrorCategory.MISSING_STEP_DEFINITION,  ("NoSuchMethodException",)),
    (ErrorCategory.ELEMENT_NOT_INTERACTABLE, ("ElementNotInteractableException",)),
    (ErrorCategory.ELEMENT_NOT_INTERACTABLE, ("element not interactable",)),
]


def classify_error(message: str | None) -> ErrorCategory:
    """Map a free-text failure message onto an ErrorCategory."""
    if not message:
        return ErrorCategory.UNCLASSIFIED
    for category, needles in ERROR_SIGNATURES:
        if all(needle in message for needle in needles):
            return category
    return ErrorCategory.UNCLASSIFIED


GUIDANCE_TABLE: dict[ErrorCategory, dict[str, Any]] = {
    ErrorCategory.EMPTY_TEST_NAME: {
        "issue": "Empty test names detected",
        "solution": "Ensure all scenarios have meaningful names in your feature files",
        "action": "Review your Cucumber feature files and add names to all scenarios",
        "priority": "critical",
        "category": "configuration",
        "resolution_steps": [
            "Open your feature files (.feature)",
            "Check for scenarios without names or with empty names",
            "Add descriptive names to all scenarios",
            "Re-run your tests to verify the fix",
        ],
    },
    ErrorCategory.ILLEGAL_ARGUMENT: {
        "issue": "Invalid test configuration detected",
        "solution": "Check your test runner configuration and step definitions",
        "action": "Review test setup and ensure all required parameters are provided",
        "priority": "high",
        "category": "configuration",
        "resolution_steps": [
            "Check your test runner configuration",
            "Verify all step definitions have proper parameters",
            "Ensure feature files are properly formatted",
            "Validate test data and parameter bindings",
        ],
    },
    ErrorCategory.MISSING_DEPENDENCY: {
        "issue": "Missing test dependencies or classes",
        "solution": "Check your classpath and ensure all required dependencies are available",
        "action": "Verify test dependencies and class availability",
        "priority": "high",
        "category": "dependencies",
        "resolution_steps": [
            "Check your project dependencies",
            "Verify classpath configuration",
            "Check for missing step definition classes",
            "Rebuild your project to resolve dependencies",
        ],
    },
    ErrorCategory.MISSING_STEP_DEFINITION: {
        "issue": "Missing or incompatible step definitions",
        "solution": "Check your step definitions and method signatures",
        "action": "Verify step definition methods match feature file steps",
        "priority": "high",
        "category": "step-definitions",
        "resolution_steps": [
            "Review your step definition files",
            "Check method signatures match step patterns",
            "Verify parameter types and counts",
            "Check for typos in step patterns",
        ],
    },
}

DEFAULT_GUIDANCE: dict[str, Any] = {
    "issue": "Test execution framework error",
    "solution": "Check Cucumber configuration and test setup",
    "action": "Review logs and test runner configuration for detailed error information",
    "priority": "high",
    "category": "framework",
    "resolution_steps": [],
}


class ExecutionErrorDetector:
    """Recognises synthetic framework-failure features by their uri."""

    def __init__(
        self,
        patterns: list[str] | None = None,
        cache: PipelineCache | None = None,
    ) -> None:
        self._patterns: list[str] = (
            list(patterns) if patterns is not None else list(DEFAULT_EXECUTION_ERROR_PATTERNS)
        )
        self._cache: PipelineCache = cache if cache is not None else PipelineCache()

    @property
    def patterns(self) -> list[str]:
        return list(self._patterns)

    def add_pattern(self, pattern: str) -> None:
        if pattern not in self._patterns:
            self._patterns.append(pattern)

    def remove_pattern(self, pattern: str) -> None:
        if pattern in self._patterns:
            self._patterns.remove(pattern)

    def is_execution_error_uri(self, uri: Any) -> bool:
        if not isinstance(uri, str) or not uri:
            return False
        return any(pattern in uri for pattern in self._patterns)

    def is_execution_error_feature(self, feature: Feature | dict) -> bool:
        if isinstance(feature, Feature):
            return feature.is_execution_error or self.is_execution_error_uri(feature.uri)
        if isinstance(feature, dict):
            return self.is_execution_error_uri(feature.get("uri"))
        return False

    def first_error_message(self, feature: Feature) -> str | None:
        """Return the error message of the first failed step in the feature."""
        for scenario in feature.elements:
            for step in scenario.steps:
                if step.result.status == StepStatus.FAILED and step.result.error_message:
                    return step.result.error_message
        return None

    def detect_error_category(self, feature: Feature) -> ErrorCategory:
        messages = [
            step.result.error_message
            for scenario in feature.elements
            for step in scenario.steps
            if step.result.error_message
        ]
        return classify_error(" ".join(messages))

    def guidance_for(self, feature: Feature) -> ExecutionErrorGuidance:
        """Return remediation guidance, memoized per feature content."""
        return self._cache.get_or_compute(
            "execution_error_guidance",
            content_key(feature),
            lambda: self._build_guidance(feature),
        )

    def _build_guidance(self, feature: Feature) -> ExecutionErrorGuidance:
        category = classify_error(self.first_error_message(feature))
        fields = GUIDANCE_TABLE.get(category, DEFAULT_GUIDANCE)
        return ExecutionErrorGuidance(error_category=category, **fields)
