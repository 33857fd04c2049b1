"""Tests for external summary parsing."""

from report_verdict.models import Counts
from report_verdict.utils.external_counts import coerce_counts, parse_external_summary


def _as_tuple(counts: Counts) -> tuple[int, int, int, int, int]:
    return (counts.scenarios, counts.passed, counts.failed, counts.errors, counts.skipped)


def test_junit_summary():
    counts = parse_external_summary("Tests run: 52, Failures: 2, Errors: 0, Skipped: 0")

    assert _as_tuple(counts) == (52, 50, 2, 0, 0)


def test_junit_summary_inside_build_log():
    text = "[INFO] Results:\n[ERROR] tests run: 10, failures: 1, errors: 2, skipped: 3\n[INFO] BUILD FAILURE"

    assert _as_tuple(parse_external_summary(text)) == (10, 4, 1, 2, 3)


def test_tests_failures_skipped_form():
    assert _as_tuple(parse_external_summary("12 tests, 2 failures, 1 skipped")) == (12, 9, 2, 0, 1)


def test_tests_failures_errors_skipped_form():
    assert _as_tuple(parse_external_summary("10 tests, 1 failure, 2 errors, 1 skipped")) == (10, 6, 1, 2, 1)


def test_cucumber_console_summary():
    counts = parse_external_summary("12 Scenarios (2 failed, 1 skipped, 9 passed)\n40 Steps (40 passed)")

    assert _as_tuple(counts) == (12, 9, 2, 0, 1)


def test_cucumber_undefined_counts_as_error():
    counts = parse_external_summary("5 scenarios (1 failed, 1 undefined, 3 passed)")

    assert counts.errors == 1
    assert counts.passed == 3


def test_positional_fallback():
    assert _as_tuple(parse_external_summary("total 20 / 3 / 2")) == (20, 15, 3, 0, 2)


def test_passed_is_clamped_at_zero():
    assert parse_external_summary("5 9 1").passed == 0


def test_too_few_numbers_yield_none():
    assert parse_external_summary("Only 1 and 2") is None
    assert parse_external_summary("") is None


def test_coerce_counts_shapes():
    existing = Counts(scenarios=1)

    assert coerce_counts(existing) is existing
    assert coerce_counts({"totalScenarios": 4, "totalPassed": 4}).passed == 4
    assert coerce_counts({"scenarios": None}).scenarios == 0
    assert coerce_counts({"scenarios": "many"}) is None
    assert coerce_counts(3.5) is None
    assert coerce_counts(None) is None
