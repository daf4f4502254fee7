"""Seeding package: default catalog and demo dataset."""

from sprout.seeding.defaults import (
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_INCOME_CATEGORIES,
    DEFAULT_PAYMENT_METHODS,
    seed_defaults,
)
from sprout.seeding.demo import seed_demo_data

__all__ = [
    "DEFAULT_EXPENSE_CATEGORIES",
    "DEFAULT_INCOME_CATEGORIES",
    "DEFAULT_PAYMENT_METHODS",
    "seed_defaults",
    "seed_demo_data",
]
