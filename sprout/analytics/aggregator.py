"""
Aggregation Engine

DESIGN DECISION: Every aggregate is a pure read, recomputed from the raw
transaction and budget rows on each call. There is no cache and no
incremental maintenance, so there is nothing to invalidate. Expected data
volumes (one person's transactions) keep full recomputation cheap.

Amounts are floats; sums carry the usual IEEE-754 rounding.
"""

from sprout.analytics.periods import month_bounds, trailing_periods, validate_period
from sprout.models.analytics import (
    CategoryBreakdown,
    DailySpending,
    MonthlyTrend,
    MonthSummary,
)
from sprout.models.finance import TransactionType
from sprout.services.storage.database import Database


class AggregationEngine:
    """
    Derives read models from transaction and budget rows.
    
    GUARANTEES:
    - Never writes
    - Category breakdowns are ordered by amount (largest first)
    - Daily series are ordered by date and contain no zero days
    """
    
    def __init__(self, db: Database):
        self._db = db
    
    async def get_month_summary(self, month: int, year: int) -> MonthSummary:
        """Income, expense, net and row count for one month."""
        start, end = month_bounds(month, year)
        row = self._db.fetch_one(
            """SELECT
                   COALESCE(SUM(CASE WHEN type = 'income' THEN amount ELSE 0 END), 0) AS total_income,
                   COALESCE(SUM(CASE WHEN type = 'expense' THEN amount ELSE 0 END), 0) AS total_expense,
                   COUNT(*) AS tx_count
               FROM "transaction"
               WHERE date >= ? AND date <= ?""",
            (start, end),
        )
        total_income = float(row["total_income"])
        total_expense = float(row["total_expense"])
        return MonthSummary(
            total_income=total_income,
            total_expense=total_expense,
            net_balance=total_income - total_expense,
            transaction_count=row["tx_count"],
        )
    
    async def get_category_breakdown(
        self,
        month: int,
        year: int,
        type: TransactionType = TransactionType.EXPENSE,
    ) -> list[CategoryBreakdown]:
        """
        Per-category totals for one month and one transaction type.
        
        Transactions whose category was deleted are still grouped under
        their category_id, with empty display fields.
        """
        start, end = month_bounds(month, year)
        rows = self._db.fetch_all(
            """SELECT t.category_id AS category_id,
                      c.name AS category_name,
                      c.icon AS category_icon,
                      c.color AS category_color,
                      SUM(t.amount) AS total,
                      COUNT(*) AS tx_count
               FROM "transaction" t
               LEFT JOIN category c ON c.id = t.category_id
               WHERE t.date >= ? AND t.date <= ? AND t.type = ?
               GROUP BY t.category_id
               ORDER BY total DESC, t.category_id ASC""",
            (start, end, TransactionType(type).value),
        )
        
        grand_total = sum(row["total"] for row in rows)
        
        return [
            CategoryBreakdown(
                category_id=row["category_id"],
                category_name=row["category_name"],
                category_icon=row["category_icon"],
                category_color=row["category_color"],
                amount=row["total"],
                percentage=(row["total"] / grand_total) * 100 if grand_total > 0 else 0.0,
                transaction_count=row["tx_count"],
            )
            for row in rows
        ]
    
    async def get_daily_spending(self, month: int, year: int) -> list[DailySpending]:
        """Expense total per day that has any expense, oldest first."""
        start, end = month_bounds(month, year)
        rows = self._db.fetch_all(
            """SELECT date, SUM(amount) AS total
               FROM "transaction"
               WHERE date >= ? AND date <= ? AND type = 'expense'
               GROUP BY date
               ORDER BY date ASC""",
            (start, end),
        )
        return [DailySpending(date=row["date"], amount=row["total"]) for row in rows]
    
    async def get_spent_by_category(self, category_id: str, month: int, year: int) -> float:
        """Expense total for one category in one month."""
        start, end = month_bounds(month, year)
        return float(
            self._db.fetch_value(
                """SELECT COALESCE(SUM(amount), 0) FROM "transaction"
                   WHERE category_id = ? AND date >= ? AND date <= ? AND type = 'expense'""",
                (category_id, start, end),
                default=0.0,
            )
        )
    
    async def get_total_budget(self, month: int, year: int) -> float:
        """Sum of budget limits for one month (0 when there are none)."""
        validate_period(month, year)
        return float(
            self._db.fetch_value(
                "SELECT COALESCE(SUM(limit_amount), 0) FROM budget WHERE month = ? AND year = ?",
                (month, year),
                default=0.0,
            )
        )
    
    async def get_monthly_trend(
        self,
        month: int,
        year: int,
        months: int = 6,
    ) -> list[MonthlyTrend]:
        """Income and expense for the `months` periods ending at (month, year)."""
        trend = []
        for period_month, period_year in trailing_periods(month, year, months):
            summary = await self.get_month_summary(period_month, period_year)
            trend.append(
                MonthlyTrend(
                    month=period_month,
                    year=period_year,
                    income=summary.total_income,
                    expense=summary.total_expense,
                )
            )
        return trend
