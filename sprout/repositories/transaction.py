"""
Transaction repository.

Besides CRUD, this is the entry point for the analytics callers expect to
find on transactions (month summary, breakdown, daily series). Those
calls are delegated to the AggregationEngine.
"""

from typing import Optional

from sprout.analytics.aggregator import AggregationEngine
from sprout.analytics.periods import month_bounds
from sprout.audit.logger import AuditLogger
from sprout.models.analytics import (
    CategoryBreakdown,
    DailySpending,
    MonthlyTrend,
    MonthSummary,
)
from sprout.models.finance import (
    Transaction,
    TransactionInput,
    TransactionPatch,
    TransactionType,
    TransactionWithCategory,
)
from sprout.repositories.base import BaseRepository, new_id, utc_timestamp
from sprout.services.storage.database import Database


_SELECT_WITH_CATEGORY = """
    SELECT t.*,
           c.name AS category_name,
           c.icon AS category_icon,
           c.color AS category_color
    FROM "transaction" t
    LEFT JOIN category c ON t.category_id = c.id
"""


class TransactionRepository(BaseRepository):
    """CRUD and period queries for income/expense transactions."""
    
    table = "transaction"
    entity_type = "transaction"
    tracks_updated_at = True
    
    def __init__(
        self,
        db: Database,
        aggregator: Optional[AggregationEngine] = None,
        audit_logger: Optional[AuditLogger] = None,
        page_size: int = 50,
        recent_limit: int = 5,
    ):
        super().__init__(db, audit_logger)
        self._aggregator = aggregator or AggregationEngine(db)
        self.page_size = page_size
        self.recent_limit = recent_limit
    
    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    
    async def create(self, data: TransactionInput) -> Transaction:
        now = utc_timestamp()
        transaction = Transaction(
            id=new_id(),
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        self._insert(transaction.model_dump(mode="json"))
        await self._audit_created(
            transaction.id,
            {"type": transaction.type.value, "amount": transaction.amount},
        )
        return transaction
    
    async def update(self, transaction_id: str, patch: TransactionPatch) -> None:
        fields = self._update_columns(transaction_id, patch.to_columns())
        await self._audit_updated(transaction_id, fields)
    
    async def delete(self, transaction_id: str) -> None:
        if self._delete_row(transaction_id):
            await self._audit_deleted(transaction_id)
    
    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------
    
    async def get_by_id(self, transaction_id: str) -> Optional[TransactionWithCategory]:
        row = self._db.fetch_one(
            _SELECT_WITH_CATEGORY + " WHERE t.id = ?",
            (transaction_id,),
        )
        return TransactionWithCategory.model_validate(dict(row)) if row else None
    
    async def get_all(
        self,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[TransactionWithCategory]:
        """Newest first (by date, then by creation time). `limit` defaults to the page size."""
        if limit is None:
            limit = self.page_size
        rows = self._db.fetch_all(
            _SELECT_WITH_CATEGORY
            + " ORDER BY t.date DESC, t.created_at DESC LIMIT ? OFFSET ?",
            (limit, offset),
        )
        return [TransactionWithCategory.model_validate(dict(row)) for row in rows]
    
    async def get_by_date_range(self, start_date: str, end_date: str) -> list[TransactionWithCategory]:
        """Transactions dated within [start_date, end_date], newest first."""
        rows = self._db.fetch_all(
            _SELECT_WITH_CATEGORY
            + " WHERE t.date >= ? AND t.date <= ? ORDER BY t.date DESC, t.created_at DESC",
            (start_date, end_date),
        )
        return [TransactionWithCategory.model_validate(dict(row)) for row in rows]
    
    async def get_by_month(self, month: int, year: int) -> list[TransactionWithCategory]:
        start, end = month_bounds(month, year)
        return await self.get_by_date_range(start, end)
    
    async def get_recent_transactions(self, limit: Optional[int] = None) -> list[TransactionWithCategory]:
        return await self.get_all(limit=limit or self.recent_limit, offset=0)
    
    async def get_count(self) -> int:
        return self._db.fetch_value('SELECT COUNT(*) FROM "transaction"', default=0)
    
    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------
    
    async def get_month_summary(self, month: int, year: int) -> MonthSummary:
        return await self._aggregator.get_month_summary(month, year)
    
    async def get_category_breakdown(
        self,
        month: int,
        year: int,
        type: TransactionType = TransactionType.EXPENSE,
    ) -> list[CategoryBreakdown]:
        return await self._aggregator.get_category_breakdown(month, year, type)
    
    async def get_daily_spending(self, month: int, year: int) -> list[DailySpending]:
        return await self._aggregator.get_daily_spending(month, year)
    
    async def get_spent_by_category(self, category_id: str, month: int, year: int) -> float:
        return await self._aggregator.get_spent_by_category(category_id, month, year)
    
    async def get_monthly_trend(self, month: int, year: int, months: int = 6) -> list[MonthlyTrend]:
        return await self._aggregator.get_monthly_trend(month, year, months)
