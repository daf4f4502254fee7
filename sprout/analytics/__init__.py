"""Derived analytics package."""

from sprout.analytics.aggregator import AggregationEngine
from sprout.analytics.insights import (
    calculate_budget_health_score,
    generate_insights,
    predict_month_end_spending,
)
from sprout.analytics.periods import month_bounds, previous_period, trailing_periods
from sprout.analytics.recommendations import (
    get_adjusted_recommendations,
    get_budget_recommendations,
    get_single_category_recommendation,
)

__all__ = [
    "AggregationEngine",
    "calculate_budget_health_score",
    "generate_insights",
    "get_adjusted_recommendations",
    "get_budget_recommendations",
    "get_single_category_recommendation",
    "month_bounds",
    "predict_month_end_spending",
    "previous_period",
    "trailing_periods",
]
