"""Persistence ports for the ledger collections.

The ledger store depends only on these protocols; concrete adapters (an
embedded SQLite database, a remote SQL backend, or process memory) live in
the infrastructure layer.
"""

from contextlib import AbstractContextManager
from datetime import date
from typing import Generic, Protocol, TypeVar

from src.domain.models import (
    Account,
    Budget,
    Category,
    RecurringTransaction,
    Transaction,
)

EntityT = TypeVar("EntityT")


class EntityCollectionPort(Protocol, Generic[EntityT]):
    """Port exposing CRUD access to one entity collection."""

    def get_all(self) -> list[EntityT]:
        """Return every stored entity."""

    def get(self, entity_id: str) -> EntityT | None:
        """Return the entity with ``entity_id`` or None."""

    def add(self, entity: EntityT) -> None:
        """Insert an entity; raise PersistenceError on a duplicate id."""

    def update(self, entity: EntityT) -> None:
        """Insert or replace an entity by id."""

    def delete(self, entity_id: str) -> None:
        """Remove an entity; no-op when absent."""

    def clear(self) -> None:
        """Remove every entity of the collection."""


class TransactionCollectionPort(EntityCollectionPort[Transaction], Protocol):
    """Transactions collection with indexed lookups."""

    def find(
        self,
        account_id: str | None = None,
        category_id: str | None = None,
        on_date: date | None = None,
    ) -> list[Transaction]:
        """Return transactions matching every provided filter."""


class LedgerPersistencePort(Protocol):
    """Port grouping the five ledger collections under one unit of work."""

    @property
    def accounts(self) -> EntityCollectionPort[Account]:
        """Return the accounts collection."""

    @property
    def categories(self) -> EntityCollectionPort[Category]:
        """Return the categories collection."""

    @property
    def transactions(self) -> TransactionCollectionPort:
        """Return the transactions collection."""

    @property
    def recurring_transactions(
        self,
    ) -> EntityCollectionPort[RecurringTransaction]:
        """Return the recurring transactions collection."""

    @property
    def budgets(self) -> EntityCollectionPort[Budget]:
        """Return the budgets collection."""

    def initialize(self) -> None:
        """Create the storage schema when missing."""

    def atomic(self) -> AbstractContextManager[None]:
        """Return a context manager committing every write or none.

        Raises:
            PersistenceError: When the unit of work cannot be committed.
        """


__all__ = [
    "EntityCollectionPort",
    "TransactionCollectionPort",
    "LedgerPersistencePort",
]
