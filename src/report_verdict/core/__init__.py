"""Core pipeline components for report verdicts."""

from report_verdict.core.exceptions import (
    EntryError,
    IntegrityCheckError,
    StructureError,
    VerdictError,
)
from report_verdict.core.cache import PipelineCache, content_key
from report_verdict.core.execution_errors import ExecutionErrorDetector, classify_error
from report_verdict.core.sanitizer import Sanitizer, generate_scenario_id
from report_verdict.core.status_resolver import StatusResolver, sanitize_error_message
from report_verdict.core.counting import count_raw, count_resolved
from report_verdict.core.integrity_checker import IntegrityChecker, tolerance_for

__all__ = [
    "EntryError",
    "ExecutionErrorDetector",
    "IntegrityCheckError",
    "IntegrityChecker",
    "PipelineCache",
    "Sanitizer",
    "StatusResolver",
    "StructureError",
    "VerdictError",
    "classify_error",
    "content_key",
    "count_raw",
    "count_resolved",
    "generate_scenario_id",
    "sanitize_error_message",
    "tolerance_for",
]
