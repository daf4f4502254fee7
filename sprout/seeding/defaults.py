"""
Default reference data.

Seeds the fixed catalog of categories and payment methods the first time
the store is opened. Idempotent: if any category exists, nothing happens.
"""

from typing import Optional

import structlog

from sprout.audit.logger import AuditLogger
from sprout.repositories.base import new_id
from sprout.services.storage.database import Database


logger = structlog.get_logger(__name__)


# (name, icon, color)
DEFAULT_EXPENSE_CATEGORIES = [
    ("Food & Dining", "🍕", "#FF7043"),
    ("Transportation", "🚗", "#42A5F5"),
    ("Shopping", "🛍️", "#AB47BC"),
    ("Entertainment", "🎬", "#EC407A"),
    ("Bills & Utilities", "💡", "#FFA726"),
    ("Health", "🏥", "#EF5350"),
    ("Education", "📚", "#5C6BC0"),
    ("Travel", "✈️", "#26A69A"),
    ("Groceries", "🛒", "#66BB6A"),
    ("Personal Care", "💇", "#F48FB1"),
    ("Gifts", "🎁", "#CE93D8"),
    ("Other", "📦", "#90A4AE"),
]

DEFAULT_INCOME_CATEGORIES = [
    ("Salary", "💰", "#66BB6A"),
    ("Freelance", "💻", "#42A5F5"),
    ("Investment", "📈", "#26A69A"),
    ("Gift", "🎁", "#CE93D8"),
    ("Refund", "🔄", "#FFA726"),
    ("Other Income", "💵", "#90A4AE"),
]

# (name, icon, is_default)
DEFAULT_PAYMENT_METHODS = [
    ("Cash", "💵", True),
    ("Credit Card", "💳", False),
    ("Debit Card", "🏧", False),
    ("UPI", "📱", False),
    ("Bank Transfer", "🏦", False),
    ("Wallet", "👛", False),
]


async def seed_defaults(db: Database, audit_logger: Optional[AuditLogger] = None) -> bool:
    """
    Insert default categories and payment methods into an empty store.
    
    Returns True if rows were inserted, False if the store was already seeded.
    """
    existing = db.fetch_value("SELECT COUNT(*) FROM category", default=0)
    if existing > 0:
        logger.debug("defaults_already_seeded", categories=existing)
        return False
    
    category_rows = [
        (new_id(), name, icon, color, "expense", 1)
        for name, icon, color in DEFAULT_EXPENSE_CATEGORIES
    ] + [
        (new_id(), name, icon, color, "income", 1)
        for name, icon, color in DEFAULT_INCOME_CATEGORIES
    ]
    payment_rows = [
        (new_id(), name, icon, 1 if is_default else 0)
        for name, icon, is_default in DEFAULT_PAYMENT_METHODS
    ]
    
    with db.transaction():
        db.execute_many(
            "INSERT INTO category (id, name, icon, color, type, is_default) VALUES (?, ?, ?, ?, ?, ?)",
            category_rows,
        )
        db.execute_many(
            "INSERT INTO payment_method (id, name, icon, is_default) VALUES (?, ?, ?, ?)",
            payment_rows,
        )
    
    counts = {"categories": len(category_rows), "payment_methods": len(payment_rows)}
    logger.info("defaults_seeded", **counts)
    if audit_logger:
        await audit_logger.log_seeded("defaults", counts)
    return True
