"""
Audit Models for Sprout

Every mutation of the store is logged for audit purposes.
This provides:
1. Traceability of every create/update/delete
2. Debugging information when a migration or restore goes wrong
3. A history the user can inspect

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Entity lifecycle
    ENTITY_CREATED = "entity_created"
    ENTITY_UPDATED = "entity_updated"
    ENTITY_DELETED = "entity_deleted"
    GOAL_FUNDS_ADDED = "goal_funds_added"
    
    # Schema
    MIGRATION_APPLIED = "migration_applied"
    MIGRATION_FAILED = "migration_failed"
    
    # Seeding
    DEFAULTS_SEEDED = "defaults_seeded"
    DEMO_DATA_SEEDED = "demo_data_seeded"
    
    # Backup
    BACKUP_CREATED = "backup_created"
    BACKUP_RESTORED = "backup_restored"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.
    
    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """
    
    # Identity
    event_id: str = Field(
        default_factory=lambda: uuid4().hex,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    
    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )
    
    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'budget', 'schema')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )
    
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    
    error_message: Optional[str] = None
    
    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }
    
    def to_row(self) -> tuple:
        """
        Convert to a row for the audit_log table.
        
        Columns in order:
        (event_id, timestamp, event_type, severity, entity_type, entity_id,
         description, details_json, error_message)
        """
        return (
            self.event_id,
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type,
            self.entity_id,
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message,
        )


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.
    
    Usage:
        event = AuditEventBuilder.entity_created("budget", budget.id, {...})
        event = AuditEventBuilder.migration_applied(2, statement_count=3)
    """
    
    @staticmethod
    def entity_created(
        entity_type: str,
        entity_id: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_CREATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type} created",
            details=details or {},
        )
    
    @staticmethod
    def entity_updated(
        entity_type: str,
        entity_id: str,
        fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_UPDATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type} updated ({len(fields)} fields)",
            details={"fields": fields},
        )
    
    @staticmethod
    def entity_deleted(entity_type: str, entity_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_DELETED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type} deleted",
        )
    
    @staticmethod
    def funds_added(goal_id: str, amount: float) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GOAL_FUNDS_ADDED,
            entity_type="goal",
            entity_id=goal_id,
            description=f"Added {amount:.2f} to goal",
            details={"amount": amount},
        )
    
    @staticmethod
    def migration_applied(version: int, statement_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MIGRATION_APPLIED,
            entity_type="schema",
            entity_id=str(version),
            description=f"Schema migrated to version {version}",
            details={"statements": statement_count},
        )
    
    @staticmethod
    def migration_failed(version: int, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MIGRATION_FAILED,
            severity=AuditSeverity.CRITICAL,
            entity_type="schema",
            entity_id=str(version),
            description=f"Schema migration to version {version} failed",
            error_message=error_message,
        )
    
    @staticmethod
    def seeded(kind: str, counts: dict[str, int]) -> AuditEvent:
        event_type = (
            AuditEventType.DEMO_DATA_SEEDED
            if kind == "demo"
            else AuditEventType.DEFAULTS_SEEDED
        )
        return AuditEvent(
            event_type=event_type,
            description=f"Seeded {kind} data",
            details=counts,
        )
    
    @staticmethod
    def backup_created(path: str, counts: dict[str, int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_CREATED,
            entity_type="backup",
            description=f"Backup written to {path}",
            details=counts,
        )
    
    @staticmethod
    def backup_restored(path: str, counts: dict[str, int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_RESTORED,
            severity=AuditSeverity.WARNING,
            entity_type="backup",
            description=f"Backup restored from {path}",
            details=counts,
        )
