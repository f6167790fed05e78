"""In-memory persistence adapter for ephemeral ledger sessions."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from typing import TypeVar

from src.application.ports.persistence import (
    EntityCollectionPort,
    LedgerPersistencePort,
    TransactionCollectionPort,
)
from src.domain.errors import PersistenceError
from src.domain.models import (
    Account,
    Budget,
    Category,
    RecurringTransaction,
    Transaction,
)

EntityT = TypeVar("EntityT")


class _MemoryCollection(EntityCollectionPort[EntityT]):
    """Dictionary-backed collection keyed by entity id."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._items: dict[str, EntityT] = {}

    def get_all(self) -> list[EntityT]:
        return list(self._items.values())

    def get(self, entity_id: str) -> EntityT | None:
        return self._items.get(entity_id)

    def add(self, entity: EntityT) -> None:
        if entity.id in self._items:
            raise PersistenceError(
                f"Duplicate id in {self._name}: {entity.id}"
            )
        self._items[entity.id] = entity

    def update(self, entity: EntityT) -> None:
        self._items[entity.id] = entity

    def delete(self, entity_id: str) -> None:
        self._items.pop(entity_id, None)

    def clear(self) -> None:
        self._items.clear()

    def _snapshot(self) -> dict[str, EntityT]:
        return dict(self._items)

    def _restore(self, items: dict[str, EntityT]) -> None:
        self._items = items


class _MemoryTransactionCollection(
    _MemoryCollection[Transaction],
    TransactionCollectionPort,
):
    """Transactions collection with linear-scan filters."""

    def find(
        self,
        account_id: str | None = None,
        category_id: str | None = None,
        on_date: date | None = None,
    ) -> list[Transaction]:
        return [
            transaction
            for transaction in self._items.values()
            if (account_id is None or transaction.account_id == account_id)
            and (category_id is None or transaction.category_id == category_id)
            and (on_date is None or transaction.date == on_date)
        ]


class InMemoryLedgerPersistence(LedgerPersistencePort):
    """Ledger persistence that lives only as long as the process.

    ``atomic()`` snapshots every collection and restores them when the
    enclosed block raises.
    """

    def __init__(self) -> None:
        self._accounts: _MemoryCollection[Account] = _MemoryCollection(
            "accounts"
        )
        self._categories: _MemoryCollection[Category] = _MemoryCollection(
            "categories"
        )
        self._transactions = _MemoryTransactionCollection("transactions")
        self._recurring_transactions: _MemoryCollection[
            RecurringTransaction
        ] = _MemoryCollection("recurring_transactions")
        self._budgets: _MemoryCollection[Budget] = _MemoryCollection("budgets")
        self._depth = 0

    @property
    def accounts(self) -> EntityCollectionPort[Account]:
        return self._accounts

    @property
    def categories(self) -> EntityCollectionPort[Category]:
        return self._categories

    @property
    def transactions(self) -> TransactionCollectionPort:
        return self._transactions

    @property
    def recurring_transactions(
        self,
    ) -> EntityCollectionPort[RecurringTransaction]:
        return self._recurring_transactions

    @property
    def budgets(self) -> EntityCollectionPort[Budget]:
        return self._budgets

    def initialize(self) -> None:
        """Nothing to create for in-memory collections."""

    @contextmanager
    def atomic(self) -> Iterator[None]:
        if self._depth:
            yield
            return
        collections = self._collections()
        snapshots = [collection._snapshot() for collection in collections]
        self._depth += 1
        try:
            yield
        except BaseException:
            for collection, items in zip(collections, snapshots):
                collection._restore(items)
            raise
        finally:
            self._depth -= 1

    def _collections(self) -> list[_MemoryCollection]:
        return [
            self._accounts,
            self._categories,
            self._transactions,
            self._recurring_transactions,
            self._budgets,
        ]


__all__ = ["InMemoryLedgerPersistence"]
