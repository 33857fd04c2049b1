"""Rule engine mapping detected conditions to recommendations."""

from typing import Any, Callable

from pydantic import BaseModel

from report_verdict.models.integrity_models import (
    PRIORITY_ORDER,
    Recommendation,
    RecommendationPriority,
)


class RecommendationRule(BaseModel):
    """One condition and the single recommendation it produces.

    ``message`` and ``action`` are format strings over the facts mapping.
    """

    condition: str
    priority: RecommendationPriority
    message: str
    action: str | None = None
    applies: Callable[[dict[str, Any]], bool]


def select_recommendations(
    facts: dict[str, Any],
    rules: list[RecommendationRule],
) -> list[Recommendation]:
    """Evaluate rules against facts.

    Each condition yields at most one recommendation no matter how many
    instances of it were found. Output is ordered by priority tier, then by
    rule order.

    Args:
        facts: Named values describing what an analysis found.
        rules: Rules to evaluate, in declaration order.

    Returns:
        List of Recommendation objects.
    """
    seen: set[str] = set()
    selected: list[Recommendation] = []
    for rule in rules:
        if rule.condition in seen or not rule.applies(facts):
            continue
        seen.add(rule.condition)
        selected.append(Recommendation(
            condition=rule.condition,
            priority=rule.priority,
            message=rule.message.format(**facts),
            action=rule.action.format(**facts) if rule.action else None,
        ))
    return sorted(selected, key=lambda rec: PRIORITY_ORDER[rec.priority])
