"""
SQLite implementation of audit log storage.

Events are written to the audit_log table created by schema version 2.
"""

import json
from datetime import datetime

from sprout.models.audit import AuditEvent, AuditEventType, AuditSeverity
from sprout.services.storage.database import Database
from sprout.services.storage.interface import AuditStorageInterface


AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "description",
    "details_json",
    "error_message",
]


class SQLiteAuditStorage(AuditStorageInterface):
    """
    Append-only audit log kept next to the data it describes.
    """
    
    def __init__(self, db: Database):
        self._db = db
    
    def _row_to_event(self, row) -> AuditEvent:
        """Convert an audit_log row to an AuditEvent."""
        details_json = row["details_json"]
        return AuditEvent(
            event_id=row["event_id"],
            timestamp=datetime.fromisoformat(row["timestamp"]),
            event_type=AuditEventType(row["event_type"]),
            severity=AuditSeverity(row["severity"]),
            entity_type=row["entity_type"],
            entity_id=row["entity_id"],
            description=row["description"],
            details=json.loads(details_json) if details_json else {},
            error_message=row["error_message"],
        )
    
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        placeholders = ", ".join("?" for _ in AUDIT_COLUMNS)
        self._db.execute(
            f"INSERT INTO audit_log ({', '.join(AUDIT_COLUMNS)}) VALUES ({placeholders})",
            event.to_row(),
        )
        return True
    
    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """Get events by entity, oldest first."""
        rows = self._db.fetch_all(
            """SELECT * FROM audit_log
               WHERE entity_type = ? AND entity_id = ?
               ORDER BY timestamp ASC, rowid ASC""",
            (entity_type, entity_id),
        )
        return [self._row_to_event(row) for row in rows]
    
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get recent events, newest first."""
        rows = self._db.fetch_all(
            "SELECT * FROM audit_log ORDER BY timestamp DESC, rowid DESC LIMIT ?",
            (limit,),
        )
        return [self._row_to_event(row) for row in rows]
