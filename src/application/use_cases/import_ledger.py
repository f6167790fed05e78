"""Use case importing a JSON export into the ledger."""

from collections.abc import Callable
from dataclasses import dataclass, replace
import uuid

from src.application.use_cases.ledger_store import LedgerStore
from src.application.use_cases.process_recurring import (
    ProcessRecurringTransactionsUseCase,
)
from src.domain.errors import ImportFormatError, ValidationError
from src.domain.models import LedgerSnapshot
from src.infrastructure.export_codec import decode_ledger_json
from src.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class ImportLedgerResult:
    """Number of records written per collection."""

    accounts: int
    categories: int
    transactions: int
    recurring_transactions: int
    budgets: int
    generated_transactions: int = 0


def _remap(mapping: dict[str, str], value: str | None) -> str | None:
    if value is None:
        return None
    return mapping.get(value, value)


class ImportLedgerUseCase:
    """Add the records of an export to the current ledger.

    Imports are additive: every record gets a fresh id and references inside
    the payload follow the new ids. References to ids the payload does not
    define are kept unchanged. Balances are taken from the file as-is, so
    imported transactions do not move them again. When a scheduler is
    given, schedules that are already due catch up right after the import.
    """

    def __init__(
        self,
        store: LedgerStore,
        logger=None,
        id_factory: Callable[[], str] | None = None,
        scheduler: ProcessRecurringTransactionsUseCase | None = None,
    ) -> None:
        self._store = store
        self._logger = logger or get_app_logger()
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._scheduler = scheduler

    def execute(self, payload: str) -> ImportLedgerResult:
        """Decode, re-identify, and write an export in one unit of work.

        Args:
            payload: JSON document produced by the export.

        Returns:
            ImportLedgerResult: Counts of the records written and of the
            recurring transactions generated afterwards.

        Raises:
            ImportFormatError: If the payload is malformed or holds invalid
                records; nothing is written in that case.
        """
        decoded = decode_ledger_json(payload)
        incoming = self._reidentify(decoded)
        try:
            written = self._store.import_snapshot(incoming)
        except ValidationError as exc:
            self._logger.error(f"Rejected import payload: {exc}")
            raise ImportFormatError(
                f"Invalid record in import: {exc}"
            ) from exc
        generated = 0
        if self._scheduler is not None:
            generated = len(self._scheduler.execute().generated)
        return ImportLedgerResult(
            accounts=len(written.accounts),
            categories=len(written.categories),
            transactions=len(written.transactions),
            recurring_transactions=len(written.recurring_transactions),
            budgets=len(written.budgets),
            generated_transactions=generated,
        )

    def _reidentify(self, snapshot: LedgerSnapshot) -> LedgerSnapshot:
        account_ids = {
            item.id: self._id_factory() for item in snapshot.accounts
        }
        category_ids = {
            item.id: self._id_factory() for item in snapshot.categories
        }
        recurring_ids = {
            item.id: self._id_factory()
            for item in snapshot.recurring_transactions
        }
        return LedgerSnapshot(
            accounts=tuple(
                replace(item, id=account_ids[item.id])
                for item in snapshot.accounts
            ),
            categories=tuple(
                replace(item, id=category_ids[item.id])
                for item in snapshot.categories
            ),
            transactions=tuple(
                replace(
                    item,
                    id=self._id_factory(),
                    account_id=_remap(account_ids, item.account_id),
                    category_id=_remap(category_ids, item.category_id),
                    recurring_transaction_id=_remap(
                        recurring_ids,
                        item.recurring_transaction_id,
                    ),
                )
                for item in snapshot.transactions
            ),
            recurring_transactions=tuple(
                replace(
                    item,
                    id=recurring_ids[item.id],
                    account_id=_remap(account_ids, item.account_id),
                    category_id=_remap(category_ids, item.category_id),
                )
                for item in snapshot.recurring_transactions
            ),
            budgets=tuple(
                replace(
                    item,
                    id=self._id_factory(),
                    category_id=_remap(category_ids, item.category_id),
                )
                for item in snapshot.budgets
            ),
        )


__all__ = ["ImportLedgerUseCase", "ImportLedgerResult"]
