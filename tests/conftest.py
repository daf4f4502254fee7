"""
Shared fixtures.

Every test gets its own in-memory database, so tests never see each
other's rows and never touch the filesystem.
"""

import pytest
import pytest_asyncio

from sprout.audit import AuditLogger
from sprout.orchestrator import DataLayer
from sprout.services.storage import Database, SQLiteAuditStorage


@pytest.fixture
def db():
    """An empty, unmigrated in-memory database."""
    database = Database(path=":memory:")
    yield database
    database.close()


@pytest_asyncio.fixture
async def data(db):
    """A bootstrapped data layer (schema + default catalog, no demo data)."""
    layer = DataLayer(db, audit_logger=AuditLogger(storage=SQLiteAuditStorage(db)))
    await layer.bootstrap()
    yield layer


@pytest_asyncio.fixture
async def expense_category(data):
    return await data.categories.get_by_name("Groceries")


@pytest_asyncio.fixture
async def income_category(data):
    return await data.categories.get_by_name("Salary")


@pytest_asyncio.fixture
async def cash(data):
    return await data.payment_methods.get_by_name("Cash")
