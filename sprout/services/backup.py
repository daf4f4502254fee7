"""
JSON backup and restore.

A backup is a single JSON document holding every transaction, budget,
goal, category and payment method, plus an opaque settings blob owned by
the caller.

DESIGN DECISION: Restore is destructive and NOT atomic. It deletes all
transactions, budgets and goals, then re-creates them one by one through
the repositories (which assign fresh ids and timestamps). A crash half
way leaves a partially restored store. Categories and payment methods are
exported for reference but never restored over the existing catalog.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import structlog
from pydantic import BaseModel, Field, ValidationError

from sprout.models.finance import (
    Budget,
    BudgetInput,
    Category,
    Goal,
    GoalInput,
    PaymentMethod,
    Transaction,
    TransactionInput,
)

if TYPE_CHECKING:
    from sprout.orchestrator import DataLayer


BACKUP_VERSION = "1.0.0"

logger = structlog.get_logger(__name__)


class BackupError(Exception):
    """The backup file is missing, unreadable or not a backup."""
    pass


class BackupData(BaseModel):
    """On-disk backup document."""
    
    version: str = Field(..., min_length=1)
    timestamp: str = Field(..., min_length=1)
    settings: dict[str, Any] = Field(default_factory=dict)
    transactions: list[Transaction] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)
    goals: list[Goal] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    payment_methods: list[PaymentMethod] = Field(default_factory=list)
    
    def counts(self) -> dict[str, int]:
        return {
            "transactions": len(self.transactions),
            "budgets": len(self.budgets),
            "goals": len(self.goals),
            "categories": len(self.categories),
            "payment_methods": len(self.payment_methods),
        }


class BackupService:
    """Exports the store to JSON and restores it from JSON."""
    
    # Upper bound for "all transactions" when exporting
    EXPORT_LIMIT = 1_000_000
    
    def __init__(self, data: "DataLayer"):
        self._data = data
    
    async def export_data(self, settings: Optional[dict[str, Any]] = None) -> BackupData:
        """Snapshot the store into a BackupData document."""
        transactions = await self._data.transactions.get_all(limit=self.EXPORT_LIMIT, offset=0)
        return BackupData(
            version=BACKUP_VERSION,
            timestamp=datetime.now(timezone.utc).isoformat(),
            settings=settings or {},
            transactions=[Transaction.model_validate(t.model_dump()) for t in transactions],
            budgets=await self._data.budgets.get_all(),
            goals=await self._data.goals.get_all(),
            categories=await self._data.categories.get_all(),
            payment_methods=await self._data.payment_methods.get_all(),
        )
    
    async def create_backup(
        self,
        path: str,
        settings: Optional[dict[str, Any]] = None,
    ) -> BackupData:
        """Write a backup file to `path` and return its contents."""
        backup = await self.export_data(settings)
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(backup.model_dump_json(indent=2), encoding="utf-8")
        
        logger.info("backup_created", path=str(target), **backup.counts())
        if self._data.audit:
            await self._data.audit.log_backup_created(str(target), backup.counts())
        return backup
    
    def get_backup_info(self, path: str) -> BackupData:
        """
        Read and validate a backup file without restoring it.
        
        Raises:
            BackupError: file missing, not JSON, or missing version/timestamp
        """
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise BackupError(f"Could not read backup file {path}: {e}") from e
        
        try:
            return BackupData.model_validate(json.loads(raw))
        except json.JSONDecodeError as e:
            raise BackupError(f"Backup file is not valid JSON: {e}") from e
        except ValidationError as e:
            raise BackupError(f"Invalid backup file format: {e}") from e
    
    async def restore_backup(self, path: str) -> dict[str, int]:
        """
        Replace transactions, budgets and goals with the backup's contents.
        
        Returns the number of rows restored per entity.
        """
        backup = self.get_backup_info(path)
        db = self._data.db
        
        db.execute('DELETE FROM "transaction"')
        db.execute("DELETE FROM budget")
        db.execute("DELETE FROM goal")
        
        for tx in backup.transactions:
            await self._data.transactions.create(
                TransactionInput(
                    type=tx.type,
                    amount=tx.amount,
                    category_id=tx.category_id,
                    date=tx.date,
                    note=tx.note,
                    payment_method_id=tx.payment_method_id,
                )
            )
        
        for budget in backup.budgets:
            await self._data.budgets.create(
                BudgetInput(
                    month=budget.month,
                    year=budget.year,
                    category_id=budget.category_id,
                    limit_amount=budget.limit_amount,
                )
            )
        
        for goal in backup.goals:
            await self._data.goals.create(
                GoalInput(
                    title=goal.title,
                    target_amount=goal.target_amount,
                    current_amount=goal.current_amount,
                    deadline=goal.deadline,
                    icon=goal.icon,
                )
            )
        
        counts = {
            "transactions": len(backup.transactions),
            "budgets": len(backup.budgets),
            "goals": len(backup.goals),
        }
        logger.info("backup_restored", path=path, **counts)
        if self._data.audit:
            await self._data.audit.log_backup_restored(path, counts)
        return counts
