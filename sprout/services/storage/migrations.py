"""
Schema migrations

DESIGN DECISION: The schema version lives in a single-row table and only
ever moves forward, one step at a time. Each step runs inside its own
transaction together with the version bump, so a failing statement rolls
the whole step back and leaves the counter on the last good version.

Every statement is guarded with IF NOT EXISTS, so re-running a step that
was interrupted is harmless.
"""

from typing import Optional

import structlog

from sprout.audit.logger import AuditLogger
from sprout.services.storage.database import Database
from sprout.services.storage.interface import SchemaError, StorageError


logger = structlog.get_logger(__name__)


# user_profile is a singleton under a fixed id
PROFILE_ID = "profile"

MIGRATIONS: dict[int, list[str]] = {
    1: [
        f"""CREATE TABLE IF NOT EXISTS user_profile (
            id TEXT PRIMARY KEY NOT NULL CHECK(id = '{PROFILE_ID}'),
            name TEXT NOT NULL,
            email TEXT NOT NULL DEFAULT '',
            currency TEXT NOT NULL DEFAULT 'USD',
            created_at TEXT NOT NULL DEFAULT (datetime('now'))
        )""",
        """CREATE TABLE IF NOT EXISTS category (
            id TEXT PRIMARY KEY NOT NULL,
            name TEXT NOT NULL,
            icon TEXT NOT NULL DEFAULT '📁',
            color TEXT NOT NULL DEFAULT '#66BB6A',
            type TEXT NOT NULL CHECK(type IN ('income', 'expense')),
            is_default INTEGER NOT NULL DEFAULT 0
        )""",
        """CREATE TABLE IF NOT EXISTS payment_method (
            id TEXT PRIMARY KEY NOT NULL,
            name TEXT NOT NULL,
            icon TEXT NOT NULL DEFAULT '💳',
            is_default INTEGER NOT NULL DEFAULT 0
        )""",
        """CREATE TABLE IF NOT EXISTS "transaction" (
            id TEXT PRIMARY KEY NOT NULL,
            type TEXT NOT NULL CHECK(type IN ('income', 'expense')),
            amount REAL NOT NULL CHECK(amount > 0),
            category_id TEXT NOT NULL,
            date TEXT NOT NULL,
            note TEXT NOT NULL DEFAULT '',
            payment_method_id TEXT NOT NULL,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (category_id) REFERENCES category(id),
            FOREIGN KEY (payment_method_id) REFERENCES payment_method(id)
        )""",
        """CREATE TABLE IF NOT EXISTS budget (
            id TEXT PRIMARY KEY NOT NULL,
            month INTEGER NOT NULL CHECK(month >= 1 AND month <= 12),
            year INTEGER NOT NULL,
            category_id TEXT NOT NULL,
            limit_amount REAL NOT NULL CHECK(limit_amount > 0),
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (category_id) REFERENCES category(id),
            UNIQUE(month, year, category_id)
        )""",
        """CREATE TABLE IF NOT EXISTS goal (
            id TEXT PRIMARY KEY NOT NULL,
            title TEXT NOT NULL,
            target_amount REAL NOT NULL CHECK(target_amount > 0),
            current_amount REAL NOT NULL DEFAULT 0 CHECK(current_amount >= 0),
            deadline TEXT NOT NULL DEFAULT '',
            icon TEXT,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        )""",
        'CREATE INDEX IF NOT EXISTS idx_transaction_date ON "transaction"(date)',
        'CREATE INDEX IF NOT EXISTS idx_transaction_category ON "transaction"(category_id)',
        'CREATE INDEX IF NOT EXISTS idx_transaction_type ON "transaction"(type)',
        "CREATE INDEX IF NOT EXISTS idx_budget_month_year ON budget(month, year)",
    ],
    2: [
        """CREATE TABLE IF NOT EXISTS audit_log (
            event_id TEXT PRIMARY KEY NOT NULL,
            timestamp TEXT NOT NULL,
            event_type TEXT NOT NULL,
            severity TEXT NOT NULL,
            entity_type TEXT,
            entity_id TEXT,
            description TEXT NOT NULL,
            details_json TEXT NOT NULL DEFAULT '',
            error_message TEXT
        )""",
        "CREATE INDEX IF NOT EXISTS idx_audit_log_entity ON audit_log(entity_type, entity_id)",
        "CREATE INDEX IF NOT EXISTS idx_audit_log_timestamp ON audit_log(timestamp)",
        # At most one payment method may be flagged as the default
        """CREATE UNIQUE INDEX IF NOT EXISTS idx_payment_method_single_default
            ON payment_method(is_default) WHERE is_default = 1""",
    ],
}

LATEST_VERSION = max(MIGRATIONS)


def get_schema_version(db: Database) -> int:
    """Current schema version (0 for a fresh database)."""
    db.execute(
        """CREATE TABLE IF NOT EXISTS schema_version (
            id INTEGER PRIMARY KEY CHECK(id = 1),
            version INTEGER NOT NULL DEFAULT 0
        )"""
    )
    row = db.fetch_one("SELECT version FROM schema_version WHERE id = 1")
    if row is None:
        db.execute("INSERT INTO schema_version (id, version) VALUES (1, 0)")
        return 0
    return row["version"]


async def apply_migrations(
    db: Database,
    audit_logger: Optional[AuditLogger] = None,
    migrations: Optional[dict[int, list[str]]] = None,
) -> int:
    """
    Bring the schema up to the latest known version.

    Safe to call on every startup. Returns the schema version afterwards.

    Raises:
        SchemaError: a step failed; nothing from that step was committed
    """
    migrations = MIGRATIONS if migrations is None else migrations
    latest = max(migrations) if migrations else 0

    try:
        current = get_schema_version(db)
    except StorageError as e:
        raise SchemaError(0, str(e)) from e

    applied: list[tuple[int, int]] = []
    for version in range(current + 1, latest + 1):
        statements = migrations.get(version)
        if not statements:
            continue

        try:
            with db.transaction():
                for sql in statements:
                    db.execute(sql)
                db.execute(
                    "UPDATE schema_version SET version = ? WHERE id = 1",
                    (version,),
                )
        except StorageError as e:
            logger.error("migration_failed", version=version, error=str(e))
            if audit_logger:
                await audit_logger.log_migration_failed(version, str(e))
            raise SchemaError(version, str(e)) from e

        logger.info("migration_applied", version=version, statements=len(statements))
        applied.append((version, len(statements)))
        current = version

    # Audit rows can only be written once the audit table exists
    if audit_logger:
        for version, statement_count in applied:
            await audit_logger.log_migration_applied(version, statement_count)

    return current
