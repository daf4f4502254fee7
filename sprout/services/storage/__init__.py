"""
Storage Services Package

Provides the SQLite database handle, schema migrations, audit storage and
the storage error taxonomy.
"""

from sprout.services.storage.interface import (
    AuditStorageInterface,
    ConstraintViolation,
    DuplicateError,
    SchemaError,
    StorageError,
    StorageIOError,
)
from sprout.services.storage.database import Database, translate_error
from sprout.services.storage.audit_storage import SQLiteAuditStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    # Exceptions
    "ConstraintViolation",
    "DuplicateError",
    "SchemaError",
    "StorageError",
    "StorageIOError",
    # SQLite implementation
    "Database",
    "SQLiteAuditStorage",
    "translate_error",
]
