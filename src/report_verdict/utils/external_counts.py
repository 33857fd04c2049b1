"""Parsing of free-form test-runner summaries into Counts."""

import re
from typing import Any

from pydantic import ValidationError

from report_verdict.models.integrity_models import Counts

JUNIT_SUMMARY_RE = re.compile(
    r'Tests\s+run:\s*(\d+),\s*Failures:\s*(\d+),\s*Errors:\s*(\d+),\s*Skipped:\s*(\d+)',
    re.IGNORECASE,
)
TESTS_FAILURES_RE = re.compile(
    r'(\d+)\s+tests?,\s*(\d+)\s+failures?(?:,\s*(\d+)\s+errors?)?(?:,\s*(\d+)\s+skipped)?',
    re.IGNORECASE,
)
CUCUMBER_SUMMARY_RE = re.compile(r'(\d+)\s+scenarios?\s*\(([^)]*)\)', re.IGNORECASE)
CUCUMBER_PART_RE = re.compile(r'(\d+)\s+(passed|failed|skipped|undefined|pending|ambiguous)', re.IGNORECASE)
NUMBER_RE = re.compile(r'\d+')


def _build_counts(total: int, failed: int, errors: int, skipped: int) -> Counts:
    passed = max(0, total - failed - errors - skipped)
    return Counts(scenarios=total, passed=passed, failed=failed, errors=errors, skipped=skipped)


def parse_external_summary(text: str) -> Counts | None:
    """Parse a pasted runner summary.

    Recognised forms, tried in order:
      "Tests run: 52, Failures: 2, Errors: 0, Skipped: 0"
      "52 tests, 2 failures, 1 skipped" (", E errors" and skipped optional)
      "12 Scenarios (2 failed, 1 skipped, 9 passed)"
    Otherwise the first three numbers are read as total, failed, skipped.

    Returns:
        Counts with passed = total - failed - errors - skipped (floored at 0),
        or None when fewer than three numbers are present.
    """
    if not text:
        return None

    match = JUNIT_SUMMARY_RE.search(text)
    if match:
        total, failed, errors, skipped = (int(g) for g in match.groups())
        return _build_counts(total, failed, errors, skipped)

    match = TESTS_FAILURES_RE.search(text)
    if match:
        total = int(match.group(1))
        failed = int(match.group(2))
        errors = int(match.group(3) or 0)
        skipped = int(match.group(4) or 0)
        return _build_counts(total, failed, errors, skipped)

    match = CUCUMBER_SUMMARY_RE.search(text)
    if match:
        parts = {name.lower(): int(value) for value, name in CUCUMBER_PART_RE.findall(match.group(2))}
        total = int(match.group(1))
        # undefined/pending/ambiguous are reported as errors
        errors = sum(parts.get(name, 0) for name in ("undefined", "pending", "ambiguous"))
        return _build_counts(total, parts.get("failed", 0), errors, parts.get("skipped", 0))

    numbers = [int(n) for n in NUMBER_RE.findall(text)]
    if len(numbers) < 3:
        return None
    total, failed, skipped = numbers[:3]
    return _build_counts(total, failed, 0, skipped)


def coerce_counts(value: Any) -> Counts | None:
    """Accept Counts, a mapping, or summary text; None if unusable."""
    if value is None:
        return None
    if isinstance(value, Counts):
        return value
    if isinstance(value, str):
        return parse_external_summary(value)
    if isinstance(value, dict):
        try:
            return Counts.model_validate(value)
        except ValidationError:
            return None
    return None
