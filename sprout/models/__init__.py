"""
Data Models Package

This package contains all Pydantic models used by the Sprout data layer.
All data returned by repositories conforms to these schemas.
"""

from sprout.models.finance import (
    Budget,
    BudgetInput,
    BudgetPatch,
    BudgetWithCategory,
    Category,
    CategoryInput,
    CategoryPatch,
    CurrencyCode,
    Goal,
    GoalInput,
    GoalPatch,
    Patch,
    PaymentMethod,
    PaymentMethodInput,
    PaymentMethodPatch,
    Transaction,
    TransactionInput,
    TransactionPatch,
    TransactionType,
    TransactionWithCategory,
    UserProfile,
    UserProfileInput,
    UserProfilePatch,
)
from sprout.models.analytics import (
    BudgetRecommendation,
    CategoryBreakdown,
    DailySpending,
    MonthlyTrend,
    InsightType,
    MonthSummary,
    SpendingInsight,
)
from sprout.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Entities
    "Budget",
    "BudgetWithCategory",
    "Category",
    "Goal",
    "PaymentMethod",
    "Transaction",
    "TransactionWithCategory",
    "UserProfile",
    # Enums
    "CurrencyCode",
    "TransactionType",
    # Inputs
    "BudgetInput",
    "CategoryInput",
    "GoalInput",
    "PaymentMethodInput",
    "TransactionInput",
    "UserProfileInput",
    # Patches
    "BudgetPatch",
    "CategoryPatch",
    "GoalPatch",
    "Patch",
    "PaymentMethodPatch",
    "TransactionPatch",
    "UserProfilePatch",
    # Derived
    "BudgetRecommendation",
    "CategoryBreakdown",
    "DailySpending",
    "InsightType",
    "MonthlyTrend",
    "MonthSummary",
    "SpendingInsight",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
