"""
Main Orchestrator for Sprout

This module ties together all the components of the data layer and
defines the startup flow:

    migrations -> default catalog -> (optional) demo data

DESIGN DECISION: The DataLayer owns the one Database handle and injects
it into every repository. Nothing else opens the database. Callers build
one DataLayer per process, call `bootstrap()` once, then use the
repositories it exposes.
"""

from datetime import date
from typing import Optional

import structlog

from sprout.analytics.aggregator import AggregationEngine
from sprout.audit.logger import AuditLogger, configure_logging
from sprout.config import Settings, get_settings
from sprout.models.finance import CurrencyCode
from sprout.repositories import (
    BudgetRepository,
    CategoryRepository,
    GoalRepository,
    PaymentMethodRepository,
    TransactionRepository,
    UserProfileRepository,
)
from sprout.seeding import seed_defaults, seed_demo_data
from sprout.services.backup import BackupService
from sprout.services.export import ExportService
from sprout.services.storage import Database, SQLiteAuditStorage
from sprout.services.storage.migrations import apply_migrations


logger = structlog.get_logger(__name__)


class DataLayer:
    """
    The embedded store and everything built on top of it.
    
    Exposes one repository per entity plus the aggregation engine:
        data.categories, data.payment_methods, data.user_profile,
        data.transactions, data.budgets, data.goals, data.aggregator
    """
    
    def __init__(
        self,
        db: Database,
        audit_logger: Optional[AuditLogger] = None,
        seed_demo: bool = False,
        page_size: int = 50,
        recent_limit: int = 5,
        default_currency: CurrencyCode = CurrencyCode.USD,
    ):
        self.db = db
        self.audit = audit_logger
        self.seed_demo = seed_demo
        
        self.aggregator = AggregationEngine(db)
        self.categories = CategoryRepository(db, audit_logger)
        self.payment_methods = PaymentMethodRepository(db, audit_logger)
        self.user_profile = UserProfileRepository(db, audit_logger, default_currency)
        self.transactions = TransactionRepository(
            db,
            self.aggregator,
            audit_logger,
            page_size=page_size,
            recent_limit=recent_limit,
        )
        self.budgets = BudgetRepository(db, self.aggregator, audit_logger)
        self.goals = GoalRepository(db, audit_logger)
        self.backups = BackupService(self)
        self.exports = ExportService(self)
    
    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "DataLayer":
        """Build a DataLayer from environment configuration."""
        settings = settings or get_settings()
        app_settings = settings.app
        
        configure_logging(app_settings.log_level)
        db = Database.from_settings(settings.database)
        storage = SQLiteAuditStorage(db) if app_settings.audit_to_database else None
        
        return cls(
            db=db,
            audit_logger=AuditLogger(storage=storage),
            seed_demo=app_settings.seed_demo_data,
            page_size=app_settings.default_page_size,
            recent_limit=app_settings.recent_transactions_limit,
            default_currency=app_settings.default_currency,
        )
    
    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------
    
    async def apply_migrations(self) -> int:
        return await apply_migrations(self.db, audit_logger=self.audit)
    
    async def seed_defaults(self) -> bool:
        return await seed_defaults(self.db, audit_logger=self.audit)
    
    async def seed_demo_data(self, today: Optional[date] = None) -> bool:
        return await seed_demo_data(self.db, today=today, audit_logger=self.audit)
    
    async def bootstrap(self) -> int:
        """
        Prepare the store for use. Call once at process start.
        
        Returns the schema version. A SchemaError is fatal: there is no
        degraded mode when the schema cannot be brought up to date.
        """
        version = await self.apply_migrations()
        await self.seed_defaults()
        if self.seed_demo:
            await self.seed_demo_data()
        logger.info("data_layer_ready", schema_version=version, path=self.db.path)
        return version
    
    def close(self) -> None:
        self.db.close()
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
