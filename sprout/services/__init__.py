"""Services package."""

from sprout.services.storage import (
    AuditStorageInterface,
    ConstraintViolation,
    Database,
    DuplicateError,
    SchemaError,
    SQLiteAuditStorage,
    StorageError,
    StorageIOError,
)

__all__ = [
    "AuditStorageInterface",
    "ConstraintViolation",
    "Database",
    "DuplicateError",
    "SchemaError",
    "SQLiteAuditStorage",
    "StorageError",
    "StorageIOError",
]
