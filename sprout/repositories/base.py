"""
Shared plumbing for entity repositories.

DESIGN DECISION: Repositories build their return values from the input
plus the generated fields (id, timestamps) instead of re-reading the row.
Partial updates are driven by Patch models: only the columns a caller
supplied appear in the UPDATE statement.
"""

from datetime import datetime, timezone
from typing import Any, ClassVar, Optional, Sequence
from uuid import uuid4

from sprout.audit.logger import AuditLogger
from sprout.services.storage.database import Database


def utc_timestamp() -> str:
    """Current time as an ISO-8601 string (UTC)."""
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid4())


class BaseRepository:
    """
    Base class for table-backed repositories.
    
    Subclasses set `table` and `entity_type`, and `tracks_updated_at`
    when the table carries an updated_at column.
    """
    
    table: ClassVar[str] = ""
    entity_type: ClassVar[str] = ""
    tracks_updated_at: ClassVar[bool] = False
    
    def __init__(self, db: Database, audit_logger: Optional[AuditLogger] = None):
        self._db = db
        self._audit = audit_logger
    
    @property
    def quoted_table(self) -> str:
        # "transaction" is an SQL keyword
        return f'"{self.table}"'
    
    def _insert(self, values: dict[str, Any]) -> None:
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        self._db.execute(
            f"INSERT INTO {self.quoted_table} ({columns}) VALUES ({placeholders})",
            list(values.values()),
        )
    
    def _update_columns(self, entity_id: str, columns: Sequence[tuple[str, Any]]) -> list[str]:
        """
        Write the given columns for one row.
        
        Refreshes updated_at when the table tracks it. Returns the names of
        the columns written; an empty list means no row was changed.
        """
        columns = list(columns)
        if self.tracks_updated_at:
            columns.append(("updated_at", utc_timestamp()))
        if not columns:
            return []
        
        assignments = ", ".join(f"{name} = ?" for name, _ in columns)
        params = [value for _, value in columns]
        params.append(entity_id)
        cursor = self._db.execute(
            f"UPDATE {self.quoted_table} SET {assignments} WHERE id = ?",
            params,
        )
        if cursor.rowcount == 0:
            return []
        return [name for name, _ in columns]
    
    def _delete_row(self, entity_id: str) -> bool:
        cursor = self._db.execute(
            f"DELETE FROM {self.quoted_table} WHERE id = ?",
            (entity_id,),
        )
        return cursor.rowcount > 0
    
    def _fetch_by_id(self, entity_id: str):
        return self._db.fetch_one(
            f"SELECT * FROM {self.quoted_table} WHERE id = ?",
            (entity_id,),
        )
    
    async def _audit_created(self, entity_id: str, details: Optional[dict] = None) -> None:
        if self._audit:
            await self._audit.log_created(self.entity_type, entity_id, details)
    
    async def _audit_updated(self, entity_id: str, fields: list[str]) -> None:
        if self._audit and fields:
            await self._audit.log_updated(self.entity_type, entity_id, fields)
    
    async def _audit_deleted(self, entity_id: str) -> None:
        if self._audit:
            await self._audit.log_deleted(self.entity_type, entity_id)
