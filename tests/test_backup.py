"""
Tests for JSON backup and restore
"""

import json

import pytest

from sprout.models import GoalInput, TransactionInput
from sprout.services.backup import BACKUP_VERSION, BackupError


class TestBackup:
    """Tests for writing and reading backup files."""
    
    @pytest.mark.asyncio
    async def test_create_backup(self, data, tmp_path):
        await data.transactions.create(
            TransactionInput(
                type="expense",
                amount=12.34,
                category_id="cat-1",
                date="2024-01-01",
                payment_method_id="pm-1",
            )
        )
        path = tmp_path / "backup.json"
        
        backup = await data.backups.create_backup(str(path), settings={"theme": "dark"})
        
        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["version"] == BACKUP_VERSION
        assert document["settings"] == {"theme": "dark"}
        assert len(document["transactions"]) == 1
        assert backup.counts()["categories"] == 18
    
    @pytest.mark.asyncio
    async def test_restore_replaces_rows(self, data, tmp_path):
        await data.goals.create(GoalInput(title="Kept", target_amount=100, current_amount=40))
        path = tmp_path / "backup.json"
        await data.backups.create_backup(str(path))
        
        await data.goals.create(GoalInput(title="Added later", target_amount=5))
        counts = await data.backups.restore_backup(str(path))
        
        goals = await data.goals.get_all()
        assert counts == {"transactions": 0, "budgets": 0, "goals": 1}
        assert [(g.title, g.current_amount) for g in goals] == [("Kept", 40)]
    
    @pytest.mark.asyncio
    async def test_missing_file(self, data, tmp_path):
        with pytest.raises(BackupError):
            data.backups.get_backup_info(str(tmp_path / "missing.json"))
    
    @pytest.mark.asyncio
    async def test_not_json(self, data, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not json", encoding="utf-8")
        
        with pytest.raises(BackupError, match="not valid JSON"):
            data.backups.get_backup_info(str(path))
    
    @pytest.mark.asyncio
    async def test_missing_version(self, data, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"timestamp": "2024-01-01"}), encoding="utf-8")
        
        with pytest.raises(BackupError, match="Invalid backup file format"):
            data.backups.get_backup_info(str(path))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
