"""Tests for the StatusResolver."""

from report_verdict import ReportPipeline, resolve_feature_status, resolve_scenario_status, sanitize
from report_verdict.config import PipelineConfig
from report_verdict.core.cache import PipelineCache
from report_verdict.core.status_resolver import (
    MAX_ERROR_MESSAGE_LENGTH,
    TRUNCATION_SUFFIX,
    StatusResolver,
    sanitize_error_message,
)
from report_verdict.models import (
    ErrorCategory,
    FeatureStatusResult,
    Hook,
    HookMatch,
    PhaseStatus,
    Result,
    StatusResult,
    StepStatus,
    Verdict,
)


def _step(status: str, error: str | None = None) -> dict:
    result = {"status": status}
    if error:
        result["error_message"] = error
    return {"name": f"{status} step", "result": result}


def _hook(status: str, error: str | None = None) -> dict:
    return {"result": _step(status, error)["result"], "match": {"location": "hooks.py:1"}}


def _make_scenario(steps=(), before=(), after=(), name: str = "S") -> dict:
    return {
        "name": name,
        "type": "scenario",
        "steps": [_step(*s) if isinstance(s, tuple) else _step(s) for s in steps],
        "before": [_hook(*h) if isinstance(h, tuple) else _hook(h) for h in before],
        "after": [_hook(*h) if isinstance(h, tuple) else _hook(h) for h in after],
    }


def _make_feature(*scenarios: dict, name: str = "F", uri: str = "features/f.feature") -> dict:
    return {"name": name, "uri": uri, "elements": list(scenarios)}


def _make_hook(status: StepStatus, error: str | None = None) -> Hook:
    return Hook(result=Result(status=status, error_message=error), match=HookMatch(location="hooks.py:1"))


# ---------------------------------------------------------------------------
# Scenario verdicts
# ---------------------------------------------------------------------------

class TestScenarioPrecedence:
    """Tests for the first-match-wins scenario rules."""

    def test_setup_failure_fails_passing_scenario(self):
        """Test that a failed before hook fails a scenario whose steps all passed."""
        result = resolve_scenario_status(_make_scenario(steps=["passed", "passed"], before=["failed"]))

        assert result.status == Verdict.FAILED
        assert result.reason.startswith("Setup failed")
        assert result.details.setup_status == PhaseStatus.FAILED
        assert result.details.execution_status == PhaseStatus.PASSED

    def test_setup_failure_reason_cites_hook_message(self):
        """Test that the setup reason carries the hook's error message."""
        result = resolve_scenario_status(
            _make_scenario(steps=["passed"], before=[("failed", "database unreachable")])
        )

        assert result.reason == "Setup failed: database unreachable"

    def test_setup_precedes_teardown_and_steps(self):
        """Test that setup failure wins over teardown and step failures."""
        result = resolve_scenario_status(
            _make_scenario(steps=["failed"], before=["failed"], after=["failed"])
        )

        assert result.reason.startswith("Setup failed")

    def test_teardown_failure_fails_passing_scenario(self):
        """Test that a failed after hook fails an otherwise passing scenario."""
        result = resolve_scenario_status(_make_scenario(steps=["passed"], after=[("failed", "cleanup error")]))

        assert result.status == Verdict.FAILED
        assert result.reason == "Teardown failed: cleanup error"

    def test_failed_step(self):
        """Test that a failed step fails the scenario with its message."""
        result = resolve_scenario_status(
            _make_scenario(steps=["passed", ("failed", "expected 1 got 2"), "skipped"])
        )

        assert result.status == Verdict.FAILED
        assert result.reason == "Test execution failed: expected 1 got 2"

    def test_passed_and_skipped_mix_is_failed(self):
        """Test that passed+skipped steps resolve to failed, not passed or skipped."""
        result = resolve_scenario_status(_make_scenario(steps=["passed", "skipped"]))

        assert result.status == Verdict.FAILED
        assert result.reason == "Some steps passed and some were skipped"
        assert result.details.execution_status == PhaseStatus.MIXED

    def test_all_passed(self):
        """Test that all passed steps resolve to passed."""
        result = resolve_scenario_status(_make_scenario(steps=["passed", "passed"], after=["passed"]))

        assert result.status == Verdict.PASSED
        assert result.error_category is None

    def test_all_skipped(self):
        """Test that all skipped steps resolve to skipped."""
        result = resolve_scenario_status(_make_scenario(steps=["skipped", "skipped"]))

        assert result.status == Verdict.SKIPPED

    def test_no_steps_with_hooks_is_skipped(self):
        """Test that a scenario with hooks but no steps resolves to skipped."""
        result = resolve_scenario_status(_make_scenario(before=["passed"]))

        assert result.status == Verdict.SKIPPED
        assert result.reason == "No executable steps found"

    def test_no_steps_no_hooks_is_unknown(self):
        """Test that an empty scenario resolves to unknown."""
        result = resolve_scenario_status(_make_scenario())

        assert result.status == Verdict.UNKNOWN
        assert result.reason == "Scenario has no steps and no hooks"

    def test_unclassifiable_steps_are_unknown(self):
        """Test that undefined/unknown steps alone resolve to unknown."""
        result = resolve_scenario_status(_make_scenario(steps=["undefined", "unknown"]))

        assert result.status == Verdict.UNKNOWN
        assert result.reason == "Steps present but execution status unclear"


def test_setup_failures_can_be_ignored_by_policy():
    resolver = StatusResolver(PipelineConfig(treat_setup_failures_as_failed=False))

    result = resolver.resolve_scenario(_make_scenario(steps=["passed"], before=["failed"]))

    assert result.status == Verdict.PASSED


def test_teardown_failures_can_be_ignored_by_policy():
    resolver = StatusResolver(PipelineConfig(treat_teardown_failures_as_failed=False))

    result = resolver.resolve_scenario(_make_scenario(steps=["passed"], after=["failed"]))

    assert result.status == Verdict.PASSED


def test_non_object_scenario_is_error():
    result = resolve_scenario_status(42)

    assert result.status == Verdict.ERROR
    assert "int" in result.reason


def test_failure_message_is_classified():
    result = resolve_scenario_status(
        _make_scenario(steps=[("failed", "java.lang.ClassNotFoundException: com.acme.Steps")])
    )

    assert result.error_category == ErrorCategory.MISSING_DEPENDENCY


def test_unrecognized_failure_message_is_unclassified():
    result = resolve_scenario_status(_make_scenario(steps=[("failed", "boom")]))

    assert result.error_category == ErrorCategory.UNCLASSIFIED


def test_long_failure_message_is_truncated():
    result = resolve_scenario_status(_make_scenario(steps=[("failed", "x" * 600)]))

    assert result.reason.endswith(TRUNCATION_SUFFIX)
    assert sanitize_error_message("x" * 600) == "x" * MAX_ERROR_MESSAGE_LENGTH + TRUNCATION_SUFFIX
    assert sanitize_error_message("   ") is None


# ---------------------------------------------------------------------------
# Hook summaries
# ---------------------------------------------------------------------------

def test_handle_hook_failures_reports_both_phases():
    resolver = StatusResolver()

    summary = resolver.handle_hook_failures(
        [_make_hook(StepStatus.FAILED, "boom")],
        [_make_hook(StepStatus.PASSED)],
    )

    assert summary.setup_failed is True
    assert summary.setup_error == "boom"
    assert summary.teardown_failed is False
    assert summary.should_fail_test is True


def test_handle_hook_failures_respects_policy():
    resolver = StatusResolver(PipelineConfig(
        treat_setup_failures_as_failed=False,
        treat_teardown_failures_as_failed=False,
    ))

    summary = resolver.handle_hook_failures(
        [_make_hook(StepStatus.FAILED)],
        [_make_hook(StepStatus.FAILED)],
    )

    assert summary.setup_failed and summary.teardown_failed
    assert summary.should_fail_test is False


# ---------------------------------------------------------------------------
# Feature verdicts
# ---------------------------------------------------------------------------

def test_feature_counts_are_conserved(mixed_report):
    for feature in sanitize(mixed_report).sanitized_report:
        counts = resolve_feature_status(feature).counts
        assert counts.passed + counts.failed + counts.skipped + counts.errors == counts.total


def test_feature_with_failures(mixed_report):
    result = resolve_feature_status(mixed_report[0])

    assert result.status == Verdict.FAILED
    assert result.reason == "2 of 4 scenarios failed"
    assert (result.counts.passed, result.counts.failed, result.counts.skipped) == (1, 2, 1)


def test_feature_with_unknown_scenario_is_error(mixed_report):
    result = resolve_feature_status(mixed_report[1])

    assert result.status == Verdict.ERROR
    assert result.counts.errors == 1


def test_feature_all_passed_and_all_skipped():
    passed = resolve_feature_status(_make_feature(_make_scenario(steps=["passed"]), _make_scenario(steps=["passed"])))
    skipped = resolve_feature_status(_make_feature(_make_scenario(steps=["skipped"])))

    assert passed.status == Verdict.PASSED
    assert skipped.status == Verdict.SKIPPED


def test_feature_with_only_background_is_unknown():
    background = _make_scenario(steps=["passed"], name="Background")
    background["type"] = "background"

    result = resolve_feature_status(_make_feature(background))

    assert result.status == Verdict.UNKNOWN
    assert result.counts.total == 0


def test_execution_error_feature_resolves_to_error(execution_error_report):
    result = resolve_feature_status(execution_error_report[0])

    assert result.status == Verdict.ERROR
    assert result.is_execution_error is True
    assert result.reason.startswith("Framework execution error (empty_test_name)")


def test_non_object_feature_is_error():
    assert resolve_feature_status("nope").status == Verdict.ERROR


# ---------------------------------------------------------------------------
# Caching
# ---------------------------------------------------------------------------

def test_feature_verdicts_are_memoized_per_content(mixed_report):
    cache = PipelineCache()
    resolver = StatusResolver(cache=cache)

    first = resolver.resolve_feature(mixed_report[0])
    first.reason = "mutated by caller"
    second = resolver.resolve_feature(mixed_report[0])

    assert cache.size("feature_status") == 1
    assert cache.hits == 1
    assert second.reason == "2 of 4 scenarios failed"


def test_colliding_ids_do_not_share_cache_entries():
    pipeline = ReportPipeline()
    passing = {"id": "same", "name": "F", "elements": [_make_scenario(steps=["passed"])]}
    failing = {"id": "same", "name": "F", "elements": [_make_scenario(steps=["failed"])]}

    assert pipeline.resolve_feature_status(passing).status == Verdict.PASSED
    assert pipeline.resolve_feature_status(failing).status == Verdict.FAILED


def test_reset_clears_cache(mixed_report):
    pipeline = ReportPipeline()
    pipeline.resolve_feature_status(mixed_report[0])

    pipeline.reset()

    assert pipeline.cache.size() == 0


# ---------------------------------------------------------------------------
# Annotation and dispatch
# ---------------------------------------------------------------------------

def test_annotate_pairs_every_entry_with_a_verdict(mixed_report):
    features = sanitize(mixed_report).sanitized_report
    before = [f.model_dump() for f in features]

    annotated = StatusResolver().annotate(features)

    assert [f.model_dump() for f in features] == before
    assert len(annotated) == 2
    checkout = annotated[0]
    assert checkout.result.status == Verdict.FAILED
    assert checkout.scenarios[0].is_background is True
    assert checkout.scenarios[3].location == "Feature 0, Scenario 3"
    assert checkout.scenarios[3].result.reason == "Setup failed: java.lang.IllegalArgumentException: bad config"


def test_classify_dispatches_by_shape():
    resolver = StatusResolver()

    assert isinstance(resolver.classify(_make_feature(_make_scenario(steps=["passed"]))), FeatureStatusResult)
    assert isinstance(resolver.classify(_make_scenario(steps=["passed"])), StatusResult)
    assert resolver.classify(None).status == Verdict.ERROR
    assert resolver.classify({"foo": 1}).status == Verdict.UNKNOWN
