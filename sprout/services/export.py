"""
CSV export of transactions.

One row per transaction with the columns
Date, Type, Category, Amount, Payment Method, Note.
Category and payment method are shown by name; a reference whose row
was deleted is shown as "Unknown".
"""

from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Optional, Sequence

import pandas as pd
import structlog

from sprout.models.finance import TransactionWithCategory

if TYPE_CHECKING:
    from sprout.orchestrator import DataLayer


CSV_COLUMNS = ["Date", "Type", "Category", "Amount", "Payment Method", "Note"]
UNKNOWN = "Unknown"

logger = structlog.get_logger(__name__)


class ExportError(Exception):
    """Nothing to export."""
    pass


def transactions_to_csv(
    transactions: Sequence[TransactionWithCategory],
    payment_method_names: Optional[Mapping[str, str]] = None,
) -> str:
    """Render transactions as CSV text (header included, "\\n" line endings)."""
    payment_method_names = payment_method_names or {}
    frame = pd.DataFrame(
        [
            (
                tx.date,
                tx.type.value.capitalize(),
                tx.category_name or UNKNOWN,
                tx.amount,
                payment_method_names.get(tx.payment_method_id, UNKNOWN),
                tx.note,
            )
            for tx in transactions
        ],
        columns=CSV_COLUMNS,
    )
    return frame.to_csv(index=False, lineterminator="\n")


class ExportService:
    """Writes transaction listings to CSV files."""

    # Upper bound for "all transactions"
    EXPORT_LIMIT = 1_000_000

    def __init__(self, data: "DataLayer"):
        self._data = data

    async def _payment_method_names(self) -> dict[str, str]:
        return {m.id: m.name for m in await self._data.payment_methods.get_all()}

    async def export_transactions(
        self,
        path: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> int:
        """
        Write all transactions, or those dated within [start_date, end_date],
        to `path`. Returns the number of rows written.

        Raises:
            ExportError: there are no transactions to export
        """
        if start_date and end_date:
            transactions = await self._data.transactions.get_by_date_range(start_date, end_date)
        else:
            transactions = await self._data.transactions.get_all(limit=self.EXPORT_LIMIT)

        if not transactions:
            raise ExportError("No transactions to export")

        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            transactions_to_csv(transactions, await self._payment_method_names()),
            encoding="utf-8",
        )
        logger.info("transactions_exported", path=str(target), rows=len(transactions))
        return len(transactions)
