"""
Tests for spending insights

Test strategy:
1. Each insight appears exactly when its threshold is crossed
2. Projections use the real month length
3. Health score buckets and rounding
"""

from datetime import date

import pytest

from sprout.analytics import (
    calculate_budget_health_score,
    generate_insights,
    predict_month_end_spending,
)
from sprout.models import BudgetWithCategory, InsightType, TransactionWithCategory


def tx(type, amount, category_id="c-1", category_name="Groceries"):
    return TransactionWithCategory(
        id=f"{type}-{amount}",
        type=type,
        amount=amount,
        category_id=category_id,
        date="2024-03-01",
        payment_method_id="pm-1",
        created_at="t",
        updated_at="t",
        category_name=category_name,
    )


def budget(limit, spent):
    return BudgetWithCategory(
        id="b",
        month=3,
        year=2024,
        category_id="c-1",
        limit_amount=limit,
        created_at="t",
        updated_at="t",
        spent=spent,
    )


def ids(insights):
    return [i.id for i in insights]


TODAY = date(2024, 3, 10)


class TestGenerateInsights:
    """Tests for the insight list."""
    
    def test_spending_increase(self):
        insights = generate_insights(
            [tx("expense", 150)], [tx("expense", 100)], [], today=TODAY
        )
        
        trend = insights[0]
        assert trend.id == "trend-up"
        assert trend.type == InsightType.WARNING
        assert trend.message == "You spent 50% more than last month"
    
    def test_spending_decrease(self):
        insights = generate_insights(
            [tx("expense", 50)], [tx("expense", 100)], [], today=TODAY
        )
        
        assert insights[0].id == "trend-down"
        assert insights[0].message == "You spent 50% less than last month"
    
    def test_small_change_has_no_trend(self):
        insights = generate_insights(
            [tx("expense", 110)], [tx("expense", 100)], [], today=TODAY
        )
        assert "trend-up" not in ids(insights)
        assert "trend-down" not in ids(insights)
    
    def test_daily_average_uses_day_of_month(self):
        insights = generate_insights([tx("expense", 100)], [], [], today=TODAY)
        
        average = next(i for i in insights if i.id == "avg-daily")
        assert average.message == "You're spending 10.00 per day on average"
    
    def test_budget_alert(self):
        insights = generate_insights(
            [], [], [budget(100, 120), budget(100, 150), budget(100, 20)], today=TODAY
        )
        
        alert = next(i for i in insights if i.id == "budget-warning")
        assert alert.message == "2 budgets are over limit"
    
    def test_budgets_on_track(self):
        insights = generate_insights([], [], [budget(100, 100)], today=TODAY)
        assert "budget-success" in ids(insights)
    
    def test_no_budgets_no_budget_insight(self):
        insights = generate_insights([], [], [], today=TODAY)
        assert ids(insights) == ["avg-daily"]
    
    def test_savings_rate(self):
        great = generate_insights(
            [tx("income", 1000), tx("expense", 500)], [], [], today=TODAY
        )
        negative = generate_insights(
            [tx("income", 100), tx("expense", 500)], [], [], today=TODAY
        )
        
        assert "You're saving 50% of your income" in [i.message for i in great]
        assert "savings-negative" in ids(negative)
    
    def test_top_category(self):
        insights = generate_insights(
            [
                tx("expense", 30, "c-1", "Groceries"),
                tx("expense", 70, "c-2", None),
            ],
            [],
            [],
            today=TODAY,
        )
        
        top = next(i for i in insights if i.id == "top-category")
        assert top.message == "Unknown accounts for 70% of expenses"
    
    def test_high_frequency(self):
        many = [tx("expense", n + 1) for n in range(51)]
        
        insights = generate_insights(many, [], [], today=TODAY)
        
        assert "high-frequency" in ids(insights)
        assert "high-frequency" not in ids(generate_insights(many[:50], [], [], today=TODAY))


class TestPredictMonthEndSpending:
    """Tests for the linear month-end projection."""
    
    def test_projection(self):
        spent = [tx("expense", 100), tx("income", 1000)]
        
        assert predict_month_end_spending(spent, today=date(2024, 4, 10)) == pytest.approx(300)
    
    def test_leap_february(self):
        spent = [tx("expense", 29)]
        
        assert predict_month_end_spending(spent, today=date(2024, 2, 1)) == pytest.approx(29 * 29)
        assert predict_month_end_spending(spent, today=date(2023, 2, 1)) == pytest.approx(29 * 28)


class TestBudgetHealthScore:
    """Tests for the 0-100 budget health score."""
    
    def test_no_budgets(self):
        assert calculate_budget_health_score([]) == 100
    
    def test_usage_buckets(self):
        assert calculate_budget_health_score([budget(100, 80)]) == 100
        assert calculate_budget_health_score([budget(100, 100)]) == 80
        assert calculate_budget_health_score([budget(100, 120)]) == 50
        assert calculate_budget_health_score([budget(100, 121)]) == 20
    
    def test_average_rounds_halves_up(self):
        budgets = [budget(100, 10), budget(100, 10), budget(100, 90), budget(100, 110)]
        # (100 + 100 + 80 + 50) / 4 == 82.5
        assert calculate_budget_health_score(budgets) == 83


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
