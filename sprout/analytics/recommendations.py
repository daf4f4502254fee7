"""
Budget recommendations using the 50/30/20 rule.

50% of monthly income goes to needs, 30% to wants and 20% to savings.
Each bucket picks its categories by keyword match on the name, so a
category whose name matches keywords of several buckets is recommended
once per bucket. A bucket's share is split evenly across its categories.
"""

import math
from typing import Iterable, Mapping, Optional

from sprout.models.analytics import BudgetRecommendation
from sprout.models.finance import Category


NEEDS_SHARE = 0.5
WANTS_SHARE = 0.3
SAVINGS_SHARE = 0.2

NEEDS_KEYWORDS = ("groceries", "housing", "utilities", "transportation", "healthcare")
WANTS_KEYWORDS = ("dining", "entertainment", "shopping", "hobbies", "subscriptions")
SAVINGS_KEYWORDS = ("savings", "investments", "emergency fund")

BUCKETS = (
    ("needs", NEEDS_SHARE, NEEDS_KEYWORDS),
    ("wants", WANTS_SHARE, WANTS_KEYWORDS),
    ("savings", SAVINGS_SHARE, SAVINGS_KEYWORDS),
)

# Spending above this multiple of the recommendation replaces it
OVERSPEND_FACTOR = 1.5
OVERSPEND_BUFFER = 1.1


def round_half_up(value: float) -> float:
    """Round to a whole amount, halves away from zero for positive values."""
    return float(math.floor(value + 0.5))


def _matches(name: str, keywords: Iterable[str]) -> bool:
    lowered = name.lower()
    return any(keyword in lowered for keyword in keywords)


def classify_category(name: str) -> Optional[str]:
    """First bucket (needs, wants, savings) whose keywords match, or None."""
    for bucket, _, keywords in BUCKETS:
        if _matches(name, keywords):
            return bucket
    return None


def get_budget_recommendations(
    monthly_income: float,
    categories: Iterable[Category],
) -> list[BudgetRecommendation]:
    """
    Suggested monthly limits for the given categories.

    Categories of any type are considered. Returns an empty list when
    income is not positive.
    """
    if monthly_income <= 0:
        return []

    categories = list(categories)
    recommendations = []
    for bucket, share, keywords in BUCKETS:
        members = [c for c in categories if _matches(c.name, keywords)]
        if not members:
            continue
        per_category = monthly_income * share / len(members)
        for category in members:
            recommendations.append(
                BudgetRecommendation(
                    category_id=category.id,
                    category_name=category.name,
                    recommended_amount=round_half_up(per_category),
                    percentage=share * 100 / len(members),
                    bucket=bucket,
                )
            )
    return recommendations


def get_single_category_recommendation(monthly_income: float, category_name: str) -> float:
    """
    Suggested limit for one category without knowing the others.

    Assumes five typical needs and wants categories and two savings
    categories. Unmatched categories get a share of a 10% discretionary
    slice split three ways.
    """
    bucket = classify_category(category_name)
    if bucket == "needs":
        return round_half_up(monthly_income * NEEDS_SHARE / 5)
    if bucket == "wants":
        return round_half_up(monthly_income * WANTS_SHARE / 5)
    if bucket == "savings":
        return round_half_up(monthly_income * SAVINGS_SHARE / 2)
    return round_half_up(monthly_income * 0.1 / 3)


def get_adjusted_recommendations(
    recommendations: Iterable[BudgetRecommendation],
    actual_spending: Mapping[str, float],
) -> list[BudgetRecommendation]:
    """
    Move recommendations toward what is actually spent.

    `actual_spending` maps category_id to the amount spent. When spending
    exceeds 1.5x the recommendation, the recommendation becomes the actual
    amount plus 10%. Everything else is returned unchanged.
    """
    adjusted = []
    for rec in recommendations:
        actual = actual_spending.get(rec.category_id, 0.0)
        if actual > rec.recommended_amount * OVERSPEND_FACTOR:
            rec = rec.model_copy(
                update={"recommended_amount": round_half_up(actual * OVERSPEND_BUFFER)}
            )
        adjusted.append(rec)
    return adjusted
