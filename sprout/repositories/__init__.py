"""Entity repositories package."""

from sprout.repositories.budget import BudgetRepository
from sprout.repositories.category import CategoryRepository
from sprout.repositories.goal import GoalRepository
from sprout.repositories.payment_method import PaymentMethodRepository
from sprout.repositories.transaction import TransactionRepository
from sprout.repositories.user_profile import UserProfileRepository

__all__ = [
    "BudgetRepository",
    "CategoryRepository",
    "GoalRepository",
    "PaymentMethodRepository",
    "TransactionRepository",
    "UserProfileRepository",
]
