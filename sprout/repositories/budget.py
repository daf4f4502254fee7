"""Budget repository."""

from typing import Optional

from sprout.analytics.aggregator import AggregationEngine
from sprout.audit.logger import AuditLogger
from sprout.models.finance import (
    Budget,
    BudgetInput,
    BudgetPatch,
    BudgetWithCategory,
)
from sprout.repositories.base import BaseRepository, new_id, utc_timestamp
from sprout.services.storage.database import Database


class BudgetRepository(BaseRepository):
    """
    Monthly spending limits per category.
    
    There is at most one budget per (month, year, category_id). The UNIQUE
    constraint enforces it; a second create for the same triple raises
    DuplicateError, which callers read as "budget already exists for this
    category this period".
    """
    
    table = "budget"
    entity_type = "budget"
    tracks_updated_at = True
    
    def __init__(
        self,
        db: Database,
        aggregator: Optional[AggregationEngine] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(db, audit_logger)
        self._aggregator = aggregator or AggregationEngine(db)
    
    async def create(self, data: BudgetInput) -> Budget:
        now = utc_timestamp()
        budget = Budget(id=new_id(), created_at=now, updated_at=now, **data.model_dump())
        self._insert(budget.model_dump(mode="json"))
        await self._audit_created(
            budget.id,
            {"month": budget.month, "year": budget.year, "category_id": budget.category_id},
        )
        return budget
    
    async def update(self, budget_id: str, patch: BudgetPatch) -> None:
        fields = self._update_columns(budget_id, patch.to_columns())
        await self._audit_updated(budget_id, fields)
    
    async def delete(self, budget_id: str) -> None:
        if self._delete_row(budget_id):
            await self._audit_deleted(budget_id)
    
    async def get_by_id(self, budget_id: str) -> Optional[Budget]:
        row = self._fetch_by_id(budget_id)
        return Budget.model_validate(dict(row)) if row else None
    
    async def get_by_month_year(self, month: int, year: int) -> list[BudgetWithCategory]:
        """
        Budgets for one period with category details and amount spent.
        
        `spent` is recomputed per budget row (one aggregate query each).
        """
        rows = self._db.fetch_all(
            """SELECT b.*,
                      c.name AS category_name,
                      c.icon AS category_icon,
                      c.color AS category_color
               FROM budget b
               LEFT JOIN category c ON b.category_id = c.id
               WHERE b.month = ? AND b.year = ?
               ORDER BY b.limit_amount DESC""",
            (month, year),
        )
        
        budgets = []
        for row in rows:
            spent = await self._aggregator.get_spent_by_category(row["category_id"], month, year)
            budgets.append(BudgetWithCategory.model_validate({**dict(row), "spent": spent}))
        return budgets
    
    async def get_all(self) -> list[Budget]:
        rows = self._db.fetch_all("SELECT * FROM budget ORDER BY year DESC, month DESC")
        return [Budget.model_validate(dict(row)) for row in rows]
    
    async def get_total_budget(self, month: int, year: int) -> float:
        return await self._aggregator.get_total_budget(month, year)
