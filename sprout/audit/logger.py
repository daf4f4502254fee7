"""
Audit Logger

DESIGN DECISION: Every mutation of the store is logged.
This provides:
1. Complete traceability
2. Debugging capability
3. User can see history of their data

The audit logger:
- Always logs locally through structlog
- Gracefully handles failures (doesn't break the write it describes)
- Persists to an AuditStorageInterface when one is configured
"""

import logging
from typing import Optional

import structlog

from sprout.models.audit import AuditEvent, AuditEventBuilder
from sprout.services.storage.interface import AuditStorageInterface, StorageError


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output through the standard library at `level`.
    
    structlog renders the JSON line; stdlib only prints the message.
    """
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))
    logging.getLogger("sprout").setLevel(getattr(logging, level.upper()))


class AuditLogger:
    """
    Central audit logging service.
    
    Logs events both to:
    1. Structured local log (for debugging)
    2. The audit_log table (for persistence and user visibility)
    """
    
    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.
        
        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("sprout.audit")
    
    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage
    
    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.
        
        Always logs locally. Persists to storage if available.
        
        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()
        
        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)
        
        if self._storage:
            try:
                return await self._storage.append_event(event)
            except StorageError as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=event.event_id,
                )
                return False
        
        return True
    
    async def log_created(
        self,
        entity_type: str,
        entity_id: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log entity creation."""
        await self.log(AuditEventBuilder.entity_created(entity_type, entity_id, details))
    
    async def log_updated(
        self,
        entity_type: str,
        entity_id: str,
        fields: list[str],
    ) -> None:
        """Log a partial update."""
        await self.log(AuditEventBuilder.entity_updated(entity_type, entity_id, fields))
    
    async def log_deleted(self, entity_type: str, entity_id: str) -> None:
        """Log entity deletion."""
        await self.log(AuditEventBuilder.entity_deleted(entity_type, entity_id))
    
    async def log_funds_added(self, goal_id: str, amount: float) -> None:
        await self.log(AuditEventBuilder.funds_added(goal_id, amount))
    
    async def log_migration_applied(self, version: int, statement_count: int) -> None:
        await self.log(AuditEventBuilder.migration_applied(version, statement_count))
    
    async def log_migration_failed(self, version: int, error_message: str) -> None:
        await self.log(AuditEventBuilder.migration_failed(version, error_message))
    
    async def log_seeded(self, kind: str, counts: dict[str, int]) -> None:
        await self.log(AuditEventBuilder.seeded(kind, counts))
    
    async def log_backup_created(self, path: str, counts: dict[str, int]) -> None:
        await self.log(AuditEventBuilder.backup_created(path, counts))
    
    async def log_backup_restored(self, path: str, counts: dict[str, int]) -> None:
        await self.log(AuditEventBuilder.backup_restored(path, counts))
