"""Use case exporting the ledger to JSON or CSV."""

from collections.abc import Callable
from datetime import date, datetime, timezone

from src.application.use_cases.ledger_store import LedgerStore
from src.infrastructure.export_codec import (
    encode_ledger_json,
    transactions_to_csv,
)
from src.infrastructure.logging.logger import get_app_logger


class ExportLedgerUseCase:
    """Serialize the committed ledger state."""

    def __init__(
        self,
        store: LedgerStore,
        logger=None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the use case with its required dependencies.

        Args:
            store: Ledger store providing the snapshot.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Optional callable returning the export timestamp.
        """
        self._store = store
        self._logger = logger or get_app_logger()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def execute(self) -> str:
        """Return every collection of the current snapshot as JSON."""
        snapshot = self._store.snapshot()
        payload = encode_ledger_json(snapshot, self._clock())
        self._logger.info(
            f"Exported ledger JSON with {len(snapshot.transactions)} "
            "transactions"
        )
        return payload

    def export_csv(self, start_date: date | None = None) -> str:
        """Return transactions as CSV.

        Args:
            start_date: Optional first date to include.

        Returns:
            str: CSV document, transactions in store order.
        """
        snapshot = self._store.snapshot()
        transactions = [
            transaction
            for transaction in snapshot.transactions
            if start_date is None or transaction.date >= start_date
        ]
        self._logger.info(
            f"Exported {len(transactions)} transactions to CSV"
        )
        return transactions_to_csv(
            transactions,
            list(snapshot.accounts),
            list(snapshot.categories),
        )


__all__ = ["ExportLedgerUseCase"]
