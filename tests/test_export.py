"""
Tests for CSV export of transactions
"""

import pytest

from sprout.models import TransactionInput
from sprout.services.export import CSV_COLUMNS, ExportError, transactions_to_csv


async def record(data, amount, date, category_id, payment_method_id, note="", type="expense"):
    return await data.transactions.create(
        TransactionInput(
            type=type,
            amount=amount,
            category_id=category_id,
            date=date,
            note=note,
            payment_method_id=payment_method_id,
        )
    )


class TestTransactionsToCsv:
    """Tests for rendering rows."""
    
    @pytest.mark.asyncio
    async def test_rows_use_names(self, data, expense_category, cash):
        await record(data, 42.5, "2024-01-15", expense_category.id, cash.id, note='Lunch, with "team"')
        transactions = await data.transactions.get_all()
        
        text = transactions_to_csv(transactions, {cash.id: "Cash"})
        
        lines = text.splitlines()
        assert lines[0] == ",".join(CSV_COLUMNS)
        assert lines[1] == '2024-01-15,Expense,Groceries,42.5,Cash,"Lunch, with ""team"""'
    
    @pytest.mark.asyncio
    async def test_dangling_references_are_unknown(self, data):
        await record(data, 10, "2024-01-15", "cat-1", "pm-1", type="income")
        transactions = await data.transactions.get_all()
        
        lines = transactions_to_csv(transactions).splitlines()
        
        assert lines[1] == "2024-01-15,Income,Unknown,10.0,Unknown,"


class TestExportService:
    """Tests for writing export files."""
    
    @pytest.mark.asyncio
    async def test_export_all(self, data, expense_category, cash, tmp_path):
        await record(data, 1, "2024-01-01", expense_category.id, cash.id)
        await record(data, 2, "2024-02-01", expense_category.id, cash.id)
        path = tmp_path / "out" / "transactions.csv"
        
        rows = await data.exports.export_transactions(str(path))
        
        lines = path.read_text(encoding="utf-8").splitlines()
        assert rows == 2
        assert len(lines) == 3
        assert lines[1].startswith("2024-02-01,Expense,Groceries,2.0,Cash")
    
    @pytest.mark.asyncio
    async def test_export_date_range(self, data, expense_category, cash, tmp_path):
        await record(data, 1, "2024-01-01", expense_category.id, cash.id)
        await record(data, 2, "2024-02-01", expense_category.id, cash.id)
        path = tmp_path / "january.csv"
        
        rows = await data.exports.export_transactions(str(path), "2024-01-01", "2024-01-31")
        
        assert rows == 1
        assert "2024-02-01" not in path.read_text(encoding="utf-8")
    
    @pytest.mark.asyncio
    async def test_nothing_to_export(self, data, tmp_path):
        path = tmp_path / "empty.csv"
        
        with pytest.raises(ExportError):
            await data.exports.export_transactions(str(path))
        
        assert not path.exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
