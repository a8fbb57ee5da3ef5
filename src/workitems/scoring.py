"""Business value score computed from a five-axis category selection."""

from decimal import ROUND_HALF_UP, Decimal

from src.workitems.types import CategorySelection

SCORE_WEIGHTS: dict[str, Decimal] = {
    "gov_type": Decimal("0.20"),
    "impact": Decimal("0.30"),
    "cost_savings": Decimal("0.30"),
    "effort": Decimal("0.10"),
    "complexity": Decimal("0.10"),
}

MIN_WEIGHTED = Decimal("1")
MAX_WEIGHTED = Decimal("5")
MAX_SCORE = 100


def compute_score(
    gov_type: int | None,
    impact: int | None,
    cost_savings: int | None,
    effort_category: int | None,
    complexity: int | None,
) -> int:
    """
    Compress five category codes into a 0-100 business value.

    Lower codes mean higher priority and give a higher score. Effort is
    inverted (4 - code) so high-effort items weigh in more. Rounding is
    half-up.

    Returns:
        Integer score, or 0 when any input is missing.
    """
    inputs = (gov_type, impact, cost_savings, effort_category, complexity)
    if any(value is None for value in inputs):
        return 0
    weighted = (
        SCORE_WEIGHTS["gov_type"] * gov_type
        + SCORE_WEIGHTS["impact"] * impact
        + SCORE_WEIGHTS["cost_savings"] * cost_savings
        + SCORE_WEIGHTS["effort"] * (4 - effort_category)
        + SCORE_WEIGHTS["complexity"] * complexity
    )
    span = MAX_WEIGHTED - MIN_WEIGHTED
    raw = MAX_SCORE - ((weighted - MIN_WEIGHTED) / span) * MAX_SCORE
    score = int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(0, min(MAX_SCORE, score))


def score_selection(selection: CategorySelection) -> int:
    """Score a CategorySelection."""
    return compute_score(
        selection.gov_type,
        selection.impact,
        selection.cost_savings,
        selection.effort_category,
        selection.complexity,
    )
