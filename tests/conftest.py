import copy

import pytest
from loguru import logger


def _step(status: str, name: str | None = None, error: str | None = None, duration: int | None = None) -> dict:
    result: dict = {"status": status}
    if error is not None:
        result["error_message"] = error
    if duration is not None:
        result["duration"] = duration
    return {"keyword": "Given ", "name": name or f"a {status} step", "result": result}


def _hook(status: str, error: str | None = None, duration: int | None = None) -> dict:
    hook = _step(status, error=error, duration=duration)
    return {"result": hook["result"]}


PASSING_REPORT = [
    {
        "name": "Login",
        "uri": "features/login.feature",
        "id": "login",
        "tags": [{"name": "@smoke", "line": 1}],
        "elements": [
            {
                "name": "Valid credentials",
                "id": "login;valid-credentials",
                "type": "scenario",
                "steps": [_step("passed"), _step("passed")],
            },
            {
                "name": "Remember me",
                "id": "login;remember-me",
                "type": "scenario",
                "steps": [_step("passed")],
            },
        ],
    }
]

# Resolved: 2 passed, 2 failed (one by setup hook), 1 skipped, 1 unknown.
# Direct step-only counting: 3 passed, 1 failed, 2 skipped.
MIXED_REPORT = [
    {
        "name": "Checkout",
        "uri": "features/checkout.feature",
        "elements": [
            {
                "name": "Background",
                "type": "background",
                "steps": [_step("passed", "a logged in user")],
            },
            {
                "name": "Pay with card",
                "type": "scenario",
                "steps": [_step("passed", duration=1_500_000_000), _step("passed")],
            },
            {
                "name": "Pay with voucher",
                "type": "scenario",
                "steps": [
                    _step("passed"),
                    _step("failed", error="AssertionError: expected 200 but was 500"),
                ],
            },
            {
                "name": "Guest checkout",
                "type": "scenario",
                "before": [_hook("failed", error="java.lang.IllegalArgumentException: bad config")],
                "steps": [_step("passed")],
            },
            {
                "name": "Saved cart",
                "type": "scenario",
                "steps": [_step("skipped"), _step("skipped")],
            },
        ],
    },
    {
        "name": "Search",
        "uri": "features/search.feature",
        "elements": [
            {
                "name": "Search by name",
                "type": "scenario",
                "steps": [_step("passed")],
                "after": [_hook("passed", duration=500_000_000)],
            },
            {
                "name": "Empty search",
                "type": "scenario",
                "steps": [],
            },
        ],
    },
]

EXECUTION_ERROR_REPORT = [
    {
        "name": "Could not execute Cucumber Scenario",
        "uri": "classpath:io/cucumber/core/failure.feature",
        "elements": [
            {
                "name": "Could not execute Cucumber Scenario",
                "type": "scenario",
                "steps": [
                    _step(
                        "failed",
                        error="java.lang.IllegalArgumentException: Test name must not be null or empty",
                    )
                ],
            }
        ],
    },
    {
        "name": "Profile",
        "uri": "features/profile.feature",
        "elements": [
            {"name": "Edit profile", "type": "scenario", "steps": [_step("passed")]},
        ],
    },
]


@pytest.fixture
def passing_report():
    return copy.deepcopy(PASSING_REPORT)


@pytest.fixture
def mixed_report():
    return copy.deepcopy(MIXED_REPORT)


@pytest.fixture
def execution_error_report():
    return copy.deepcopy(EXECUTION_ERROR_REPORT)


@pytest.fixture
def log_records():
    """Collect formatted loguru records as '<component>|<level>|<message>'."""
    records: list[str] = []
    handler_id = logger.add(
        records.append,
        level="DEBUG",
        format="{extra[component]}|{level}|{message}",
    )
    yield records
    logger.remove(handler_id)
