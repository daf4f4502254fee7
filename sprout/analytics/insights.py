"""
Spending insights.

Pure functions over transactions and budgets already fetched for a
period. Nothing here touches the database; callers pass in what the
repositories return (e.g. `transactions.get_by_month` and
`budgets.get_by_month_year`).

DESIGN DECISION: "today" is an explicit, optional argument. Daily
averages and month-end projections depend on how far into the month we
are, and tests pin it instead of depending on the wall clock.
"""

import calendar
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, Sequence

from sprout.analytics.recommendations import round_half_up
from sprout.models.analytics import InsightType, SpendingInsight
from sprout.models.finance import (
    BudgetWithCategory,
    TransactionType,
    TransactionWithCategory,
)


TREND_THRESHOLD_PERCENT = 20
GOOD_SAVINGS_RATE_PERCENT = 20
HIGH_FREQUENCY_COUNT = 50


def _expenses(transactions: Iterable[TransactionWithCategory]) -> list[TransactionWithCategory]:
    return [tx for tx in transactions if tx.type == TransactionType.EXPENSE]


def _total(transactions: Iterable[TransactionWithCategory], type: TransactionType) -> float:
    return sum(tx.amount for tx in transactions if tx.type == type)


def generate_insights(
    current_month: Sequence[TransactionWithCategory],
    previous_month: Sequence[TransactionWithCategory],
    budgets: Sequence[BudgetWithCategory],
    today: Optional[date] = None,
) -> list[SpendingInsight]:
    """
    Observations about the current month, in a fixed order:

    1. spending trend vs the previous month (only past +/-20%)
    2. average daily spending so far
    3. budget health (any budget over its limit, or all within)
    4. savings rate (above 20%, or negative)
    5. top spending category
    6. high transaction frequency (more than 50 expenses)
    """
    today = today or date.today()
    insights: list[SpendingInsight] = []

    current_expenses = _total(current_month, TransactionType.EXPENSE)
    previous_expenses = _total(previous_month, TransactionType.EXPENSE)
    current_income = _total(current_month, TransactionType.INCOME)

    if previous_expenses > 0:
        change = (current_expenses - previous_expenses) / previous_expenses * 100
        if change > TREND_THRESHOLD_PERCENT:
            insights.append(SpendingInsight(
                id="trend-up",
                type=InsightType.WARNING,
                title="Spending increased",
                message=f"You spent {abs(change):.0f}% more than last month",
                icon="📈",
            ))
        elif change < -TREND_THRESHOLD_PERCENT:
            insights.append(SpendingInsight(
                id="trend-down",
                type=InsightType.SUCCESS,
                title="Great savings!",
                message=f"You spent {abs(change):.0f}% less than last month",
                icon="📉",
            ))

    average = current_expenses / today.day
    insights.append(SpendingInsight(
        id="avg-daily",
        type=InsightType.INFO,
        title="Daily average",
        message=f"You're spending {average:.2f} per day on average",
        icon="📊",
    ))

    over_limit = [b for b in budgets if b.is_over_budget]
    if over_limit:
        verb = "budget is" if len(over_limit) == 1 else "budgets are"
        insights.append(SpendingInsight(
            id="budget-warning",
            type=InsightType.WARNING,
            title="Budget alert",
            message=f"{len(over_limit)} {verb} over limit",
            icon="⚠️",
        ))
    elif budgets:
        insights.append(SpendingInsight(
            id="budget-success",
            type=InsightType.SUCCESS,
            title="On track!",
            message="All budgets are within limits",
            icon="✅",
        ))

    if current_income > 0:
        savings_rate = (current_income - current_expenses) / current_income * 100
        if savings_rate > GOOD_SAVINGS_RATE_PERCENT:
            insights.append(SpendingInsight(
                id="savings-great",
                type=InsightType.SUCCESS,
                title="Excellent savings!",
                message=f"You're saving {savings_rate:.0f}% of your income",
                icon="💰",
            ))
        elif savings_rate < 0:
            insights.append(SpendingInsight(
                id="savings-negative",
                type=InsightType.WARNING,
                title="Spending more than earning",
                message="Consider reducing expenses",
                icon="💸",
            ))

    expenses = _expenses(current_month)
    by_category: dict[str, float] = defaultdict(float)
    names: dict[str, str] = {}
    for tx in expenses:
        by_category[tx.category_id] += tx.amount
        names.setdefault(tx.category_id, tx.category_name or "Unknown")

    if by_category and current_expenses > 0:
        top_id = max(by_category, key=by_category.get)
        share = by_category[top_id] / current_expenses * 100
        insights.append(SpendingInsight(
            id="top-category",
            type=InsightType.INFO,
            title="Top spending category",
            message=f"{names[top_id]} accounts for {share:.0f}% of expenses",
            icon="🎯",
        ))

    if len(expenses) > HIGH_FREQUENCY_COUNT:
        insights.append(SpendingInsight(
            id="high-frequency",
            type=InsightType.INFO,
            title="Frequent transactions",
            message=f"You've made {len(expenses)} transactions this month",
            icon="🔄",
        ))

    return insights


def predict_month_end_spending(
    current_month: Sequence[TransactionWithCategory],
    today: Optional[date] = None,
) -> float:
    """Linear projection of this month's expenses to the last day of the month."""
    today = today or date.today()
    days_in_month = calendar.monthrange(today.year, today.month)[1]
    spent = _total(current_month, TransactionType.EXPENSE)
    return spent / today.day * days_in_month


def calculate_budget_health_score(budgets: Sequence[BudgetWithCategory]) -> int:
    """
    Average health of a period's budgets, 0-100.

    Each budget scores 100 up to 80% used, 80 up to 100%, 50 up to 120%
    and 20 beyond that. No budgets scores 100.
    """
    if not budgets:
        return 100

    scores = []
    for budget in budgets:
        used = budget.spent / budget.limit_amount * 100
        if used <= 80:
            scores.append(100)
        elif used <= 100:
            scores.append(80)
        elif used <= 120:
            scores.append(50)
        else:
            scores.append(20)
    return int(round_half_up(sum(scores) / len(scores)))
