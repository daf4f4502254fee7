"""
Derived read models.

Nothing in this module is ever persisted. Every instance is recomputed
from transaction and budget rows on demand.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class MonthSummary(BaseModel):
    """Income/expense totals for one calendar month."""

    total_income: float = 0.0
    total_expense: float = 0.0
    net_balance: float = 0.0
    transaction_count: int = Field(
        default=0,
        ge=0,
        description="All transactions in the period, regardless of type"
    )


class CategoryBreakdown(BaseModel):
    """One category's share of a period's income or expense."""

    category_id: str
    category_name: Optional[str] = None
    category_icon: Optional[str] = None
    category_color: Optional[str] = None
    amount: float
    percentage: float = Field(
        ...,
        ge=0,
        description="Share of the period total, 0-100"
    )
    transaction_count: int


class DailySpending(BaseModel):
    """Expense total for one calendar day."""

    date: str
    amount: float


class MonthlyTrend(BaseModel):
    """Income and expense for one month of a multi-month series."""

    month: int
    year: int
    income: float = 0.0
    expense: float = 0.0

    @property
    def net(self) -> float:
        return self.income - self.expense


class BudgetRecommendation(BaseModel):
    """Suggested monthly limit for a category (50/30/20 rule)."""

    category_id: str
    category_name: str
    recommended_amount: float
    percentage: float
    bucket: str = Field(..., description="needs, wants or savings")


class InsightType(str, Enum):
    """How an insight should be presented."""
    TREND = "trend"
    WARNING = "warning"
    SUCCESS = "success"
    INFO = "info"


class SpendingInsight(BaseModel):
    """One observation about a month's spending."""

    id: str = Field(..., description="Stable key, e.g. 'trend-up' or 'budget-warning'")
    type: InsightType
    title: str
    message: str
    icon: str
