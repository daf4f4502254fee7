"""
Storage Interface and Error Taxonomy

DESIGN DECISION: Every low-level sqlite3 error is translated exactly once,
at the Database boundary, into one of the exceptions below. Repositories
never catch these; they propagate to the caller, which decides whether to
show a message or retry.

Lookups that find nothing are NOT errors: `get_by_id` style methods
return None so callers can tell "does not exist" from "failed to fetch".
"""

from abc import ABC, abstractmethod

from sprout.models.audit import AuditEvent


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.
    
    Audit logs are append-only - we never delete or modify them.
    """
    
    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.
        
        Args:
            event: The audit event to log
            
        Returns:
            True if logged successfully
        """
        pass
    
    @abstractmethod
    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity.
        
        Args:
            entity_type: Type of entity (e.g., 'transaction', 'goal')
            entity_id: The entity's ID
            
        Returns:
            List of events in chronological order
        """
        pass
    
    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.
        
        Args:
            limit: Maximum number of events to return
            
        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SchemaError(StorageError):
    """A migration step failed. The schema version was not advanced."""
    
    def __init__(self, version: int, message: str):
        super().__init__(f"Migration to schema version {version} failed: {message}")
        self.version = version


class ConstraintViolation(StorageError):
    """A CHECK, NOT NULL or UNIQUE constraint rejected the write."""
    pass


class DuplicateError(ConstraintViolation):
    """Attempted to insert a row that violates a uniqueness constraint."""
    pass


class StorageIOError(StorageError):
    """The database file could not be opened, read or written."""
    pass
