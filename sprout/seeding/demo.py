"""
Demo dataset.

Makes a fresh install look alive: a demo profile, transactions across
the current and previous month, budgets for the current month and a few
partially funded goals. Idempotent: skipped when a profile exists.

Requires the default categories and payment methods to be seeded first.
"""

from datetime import date
from typing import Optional

import structlog

from sprout.analytics.periods import previous_period
from sprout.audit.logger import AuditLogger
from sprout.models.finance import (
    BudgetInput,
    CurrencyCode,
    GoalInput,
    TransactionInput,
    TransactionType,
    UserProfileInput,
)
from sprout.repositories.budget import BudgetRepository
from sprout.repositories.category import CategoryRepository
from sprout.repositories.goal import GoalRepository
from sprout.repositories.payment_method import PaymentMethodRepository
from sprout.repositories.transaction import TransactionRepository
from sprout.repositories.user_profile import UserProfileRepository
from sprout.services.storage.database import Database


logger = structlog.get_logger(__name__)

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE

# (type, amount, category, day, note, payment method)
CURRENT_MONTH_TRANSACTIONS = [
    (INCOME, 5200.00, "Salary", 1, "Monthly salary", "Debit Card"),
    (INCOME, 800.00, "Freelance", 5, "Website project", "Debit Card"),
    (INCOME, 150.00, "Investment", 3, "Dividend payout", "Debit Card"),
    (EXPENSE, 42.50, "Food & Dining", 2, "Dinner at Olive Garden", "Credit Card"),
    (EXPENSE, 15.00, "Transportation", 2, "Uber ride", "UPI"),
    (EXPENSE, 89.99, "Shopping", 3, "New headphones", "Credit Card"),
    (EXPENSE, 12.99, "Entertainment", 4, "Netflix subscription", "Debit Card"),
    (EXPENSE, 120.00, "Bills & Utilities", 5, "Electricity bill", "Debit Card"),
    (EXPENSE, 65.30, "Groceries", 6, "Weekly groceries", "Cash"),
    (EXPENSE, 28.00, "Food & Dining", 7, "Lunch with team", "UPI"),
    (EXPENSE, 45.00, "Health", 8, "Gym membership", "Debit Card"),
    (EXPENSE, 35.00, "Transportation", 9, "Gas refill", "Credit Card"),
    (EXPENSE, 22.50, "Food & Dining", 10, "Coffee & snacks", "Cash"),
    (EXPENSE, 199.99, "Shopping", 10, "Winter jacket", "Credit Card"),
    (EXPENSE, 8.99, "Entertainment", 11, "Spotify", "Debit Card"),
]

PREVIOUS_MONTH_TRANSACTIONS = [
    (INCOME, 5200.00, "Salary", 1, "Monthly salary", "Debit Card"),
    (EXPENSE, 55.00, "Food & Dining", 3, "Restaurant", "Credit Card"),
    (EXPENSE, 80.00, "Groceries", 5, "Costco run", "Debit Card"),
    (EXPENSE, 45.00, "Transportation", 7, "Gas", "Cash"),
    (EXPENSE, 150.00, "Bills & Utilities", 10, "Internet + Phone", "Debit Card"),
    (EXPENSE, 250.00, "Shopping", 12, "Electronics", "Credit Card"),
    (EXPENSE, 35.00, "Health", 15, "Pharmacy", "Cash"),
    (EXPENSE, 18.00, "Food & Dining", 18, "Pizza night", "UPI"),
    (EXPENSE, 12.99, "Entertainment", 20, "Netflix", "Debit Card"),
    (EXPENSE, 72.50, "Groceries", 22, "Groceries", "Cash"),
]

# (category, limit)
CURRENT_MONTH_BUDGETS = [
    ("Food & Dining", 300.00),
    ("Transportation", 200.00),
    ("Shopping", 400.00),
    ("Groceries", 350.00),
    ("Entertainment", 100.00),
    ("Bills & Utilities", 250.00),
]

DEMO_PROFILE = UserProfileInput(
    name="Alex Johnson",
    email="alex@example.com",
    currency=CurrencyCode.USD,
)


def _demo_goals(year: int) -> list[GoalInput]:
    return [
        GoalInput(title="Emergency Fund", target_amount=10000, current_amount=3500,
                  deadline=f"{year + 1}-06-30", icon="🛟"),
        GoalInput(title="New Laptop", target_amount=2000, current_amount=850,
                  deadline=f"{year}-12-31", icon="💻"),
        GoalInput(title="Vacation Trip", target_amount=5000, current_amount=1200,
                  deadline=f"{year + 1}-03-15", icon="🏖️"),
    ]


async def seed_demo_data(
    db: Database,
    today: Optional[date] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> bool:
    """
    Insert the demo dataset unless a user profile already exists.
    
    Everything is inserted in one transaction. Returns True if data was
    inserted; False when a profile exists or the default catalog is missing.
    """
    profiles = UserProfileRepository(db)
    if await profiles.exists():
        logger.debug("demo_data_skipped", reason="profile_exists")
        return False
    
    today = today or date.today()
    categories = CategoryRepository(db)
    payment_methods = PaymentMethodRepository(db)
    transactions = TransactionRepository(db)
    budgets = BudgetRepository(db)
    goals = GoalRepository(db)
    
    category_ids: dict[str, str] = {}
    for category in await categories.get_all():
        category_ids.setdefault(category.name, category.id)
    method_ids = {method.name: method.id for method in await payment_methods.get_all()}
    
    needed_categories = {row[2] for row in CURRENT_MONTH_TRANSACTIONS + PREVIOUS_MONTH_TRANSACTIONS}
    needed_methods = {row[5] for row in CURRENT_MONTH_TRANSACTIONS + PREVIOUS_MONTH_TRANSACTIONS}
    missing = (needed_categories - category_ids.keys()) | (needed_methods - method_ids.keys())
    if missing:
        logger.warning("demo_data_skipped", reason="missing_reference_data", missing=sorted(missing))
        return False
    
    last_month, last_month_year = previous_period(today.month, today.year)
    batches = [
        (today.month, today.year, CURRENT_MONTH_TRANSACTIONS),
        (last_month, last_month_year, PREVIOUS_MONTH_TRANSACTIONS),
    ]
    
    with db.transaction():
        await profiles.create(DEMO_PROFILE)
        
        transaction_count = 0
        for month, year, rows in batches:
            for tx_type, amount, category, day, note, method in rows:
                await transactions.create(
                    TransactionInput(
                        type=tx_type,
                        amount=amount,
                        category_id=category_ids[category],
                        date=date(year, month, day),
                        note=note,
                        payment_method_id=method_ids[method],
                    )
                )
                transaction_count += 1
        
        for category, limit in CURRENT_MONTH_BUDGETS:
            await budgets.create(
                BudgetInput(
                    month=today.month,
                    year=today.year,
                    category_id=category_ids[category],
                    limit_amount=limit,
                )
            )
        
        demo_goals = _demo_goals(today.year)
        for goal in demo_goals:
            await goals.create(goal)
    
    counts = {
        "transactions": transaction_count,
        "budgets": len(CURRENT_MONTH_BUDGETS),
        "goals": len(demo_goals),
    }
    logger.info("demo_data_seeded", **counts)
    if audit_logger:
        await audit_logger.log_seeded("demo", counts)
    return True
