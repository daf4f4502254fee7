"""
Tests for schema migrations

Test strategy:
1. A fresh database ends at the latest version with every table present
2. Re-running is a no-op
3. A failing step rolls back and leaves the version where it was
"""

import pytest

from sprout.audit import AuditLogger
from sprout.services.storage import SQLiteAuditStorage
from sprout.services.storage.interface import SchemaError
from sprout.services.storage.migrations import (
    LATEST_VERSION,
    MIGRATIONS,
    apply_migrations,
    get_schema_version,
)


def table_names(db) -> set[str]:
    rows = db.fetch_all("SELECT name FROM sqlite_master WHERE type = 'table'")
    return {row["name"] for row in rows}


class TestApplyMigrations:
    """Tests for bringing a database up to date."""
    
    @pytest.mark.asyncio
    async def test_fresh_database_reaches_latest_version(self, db):
        assert get_schema_version(db) == 0
        
        version = await apply_migrations(db)
        
        assert version == LATEST_VERSION
        assert get_schema_version(db) == LATEST_VERSION
    
    @pytest.mark.asyncio
    async def test_all_tables_created(self, db):
        await apply_migrations(db)
        
        expected = {
            "user_profile",
            "category",
            "payment_method",
            "transaction",
            "budget",
            "goal",
            "audit_log",
            "schema_version",
        }
        assert expected <= table_names(db)
    
    @pytest.mark.asyncio
    async def test_second_run_is_noop(self, db):
        await apply_migrations(db)
        db.execute(
            "INSERT INTO category (id, name, type) VALUES (?, ?, ?)",
            ("c-1", "Kept", "expense"),
        )
        
        version = await apply_migrations(db)
        
        assert version == LATEST_VERSION
        assert db.fetch_value("SELECT COUNT(*) FROM category") == 1
    
    @pytest.mark.asyncio
    async def test_version_is_single_row(self, db):
        await apply_migrations(db)
        await apply_migrations(db)
        assert db.fetch_value("SELECT COUNT(*) FROM schema_version") == 1
    
    @pytest.mark.asyncio
    async def test_applied_steps_are_audited(self, db):
        storage = SQLiteAuditStorage(db)
        await apply_migrations(db, audit_logger=AuditLogger(storage=storage))
        
        events = await storage.get_recent_events()
        versions = sorted(e.entity_id for e in events if e.event_type.value == "migration_applied")
        assert versions == [str(v) for v in sorted(MIGRATIONS)]


class TestFailingMigration:
    """Tests for a step that cannot be applied."""
    
    @pytest.mark.asyncio
    async def test_failure_raises_schema_error(self, db):
        migrations = {
            1: ["CREATE TABLE alpha (id TEXT PRIMARY KEY)"],
            2: ["THIS IS NOT SQL"],
        }
        
        with pytest.raises(SchemaError) as exc_info:
            await apply_migrations(db, migrations=migrations)
        
        assert exc_info.value.version == 2
        assert get_schema_version(db) == 1
    
    @pytest.mark.asyncio
    async def test_failed_step_is_rolled_back(self, db):
        """Statements before the failing one are undone too."""
        migrations = {
            1: [
                "CREATE TABLE beta (id TEXT PRIMARY KEY)",
                "CREATE TABLE beta (id TEXT PRIMARY KEY)",
            ],
        }
        
        with pytest.raises(SchemaError):
            await apply_migrations(db, migrations=migrations)
        
        assert "beta" not in table_names(db)
        assert get_schema_version(db) == 0
    
    @pytest.mark.asyncio
    async def test_later_steps_not_attempted(self, db):
        migrations = {
            1: ["NOT SQL EITHER"],
            2: ["CREATE TABLE gamma (id TEXT PRIMARY KEY)"],
        }
        
        with pytest.raises(SchemaError):
            await apply_migrations(db, migrations=migrations)
        
        assert "gamma" not in table_names(db)
    
    @pytest.mark.asyncio
    async def test_failure_does_not_break_audit(self, db):
        """A failure before the audit table exists is still reported as SchemaError."""
        logger = AuditLogger(storage=SQLiteAuditStorage(db))
        
        with pytest.raises(SchemaError):
            await apply_migrations(db, audit_logger=logger, migrations={1: ["BROKEN"]})


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
