"""SQLAlchemy-backed persistence adapter for the ledger collections.

Amounts are stored as TEXT so Decimal values keep their exact minor-unit
precision on every backend; dates and timestamps are ISO-8601 strings.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import date, datetime
import threading
from typing import Any, TypeVar

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from src.application.ports.database import DatabaseEnginePort
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
from src.utils.decimal_utils import coerce_decimal, format_decimal

EntityT = TypeVar("EntityT")


CREATE_TABLES_SQL = (
    """
    CREATE TABLE IF NOT EXISTS accounts (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        account_type TEXT NOT NULL,
        balance TEXT NOT NULL,
        goal_amount TEXT,
        color TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS categories (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        category_type TEXT NOT NULL,
        icon TEXT NOT NULL,
        color TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS transactions (
        id TEXT PRIMARY KEY,
        account_id TEXT NOT NULL,
        category_id TEXT NOT NULL,
        amount TEXT NOT NULL,
        transaction_type TEXT NOT NULL,
        description TEXT NOT NULL,
        transaction_date TEXT NOT NULL,
        notes TEXT,
        recurring_transaction_id TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS recurring_transactions (
        id TEXT PRIMARY KEY,
        account_id TEXT NOT NULL,
        category_id TEXT NOT NULL,
        amount TEXT NOT NULL,
        transaction_type TEXT NOT NULL,
        description TEXT NOT NULL,
        frequency TEXT NOT NULL,
        next_date TEXT NOT NULL,
        active INTEGER NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS budgets (
        id TEXT PRIMARY KEY,
        category_id TEXT NOT NULL,
        amount TEXT NOT NULL,
        month TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
)

CREATE_INDEXES_SQL = (
    "CREATE INDEX IF NOT EXISTS ix_transactions_account_id "
    "ON transactions (account_id)",
    "CREATE INDEX IF NOT EXISTS ix_transactions_category_id "
    "ON transactions (category_id)",
    "CREATE INDEX IF NOT EXISTS ix_transactions_date "
    "ON transactions (transaction_date)",
    "CREATE INDEX IF NOT EXISTS ix_budgets_month ON budgets (month)",
)


def _optional_decimal(value):
    return None if value is None else coerce_decimal(value)


def _optional_text(value):
    return None if value is None else format_decimal(value)


def _account_to_row(account: Account) -> dict[str, Any]:
    return {
        "id": account.id,
        "name": account.name,
        "account_type": account.account_type,
        "balance": format_decimal(account.balance),
        "goal_amount": _optional_text(account.goal_amount),
        "color": account.color,
        "created_at": account.created_at.isoformat(),
        "updated_at": account.updated_at.isoformat(),
    }


def _account_from_row(row) -> Account:
    return Account(
        id=row.id,
        name=row.name,
        account_type=row.account_type,
        balance=coerce_decimal(row.balance),
        goal_amount=_optional_decimal(row.goal_amount),
        color=row.color,
        created_at=datetime.fromisoformat(row.created_at),
        updated_at=datetime.fromisoformat(row.updated_at),
    )


def _category_to_row(category: Category) -> dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "category_type": category.category_type,
        "icon": category.icon,
        "color": category.color,
        "created_at": category.created_at.isoformat(),
    }


def _category_from_row(row) -> Category:
    return Category(
        id=row.id,
        name=row.name,
        category_type=row.category_type,
        icon=row.icon,
        color=row.color,
        created_at=datetime.fromisoformat(row.created_at),
    )


def _transaction_to_row(transaction: Transaction) -> dict[str, Any]:
    return {
        "id": transaction.id,
        "account_id": transaction.account_id,
        "category_id": transaction.category_id,
        "amount": format_decimal(transaction.amount),
        "transaction_type": transaction.transaction_type,
        "description": transaction.description,
        "transaction_date": transaction.date.isoformat(),
        "notes": transaction.notes,
        "recurring_transaction_id": transaction.recurring_transaction_id,
        "created_at": transaction.created_at.isoformat(),
        "updated_at": transaction.updated_at.isoformat(),
    }


def _transaction_from_row(row) -> Transaction:
    return Transaction(
        id=row.id,
        account_id=row.account_id,
        category_id=row.category_id,
        amount=coerce_decimal(row.amount),
        transaction_type=row.transaction_type,
        description=row.description,
        date=date.fromisoformat(row.transaction_date),
        notes=row.notes,
        recurring_transaction_id=row.recurring_transaction_id,
        created_at=datetime.fromisoformat(row.created_at),
        updated_at=datetime.fromisoformat(row.updated_at),
    )


def _recurring_to_row(recurring: RecurringTransaction) -> dict[str, Any]:
    return {
        "id": recurring.id,
        "account_id": recurring.account_id,
        "category_id": recurring.category_id,
        "amount": format_decimal(recurring.amount),
        "transaction_type": recurring.transaction_type,
        "description": recurring.description,
        "frequency": recurring.frequency,
        "next_date": recurring.next_date.isoformat(),
        "active": 1 if recurring.active else 0,
        "created_at": recurring.created_at.isoformat(),
        "updated_at": recurring.updated_at.isoformat(),
    }


def _recurring_from_row(row) -> RecurringTransaction:
    return RecurringTransaction(
        id=row.id,
        account_id=row.account_id,
        category_id=row.category_id,
        amount=coerce_decimal(row.amount),
        transaction_type=row.transaction_type,
        description=row.description,
        frequency=row.frequency,
        next_date=date.fromisoformat(row.next_date),
        active=bool(row.active),
        created_at=datetime.fromisoformat(row.created_at),
        updated_at=datetime.fromisoformat(row.updated_at),
    )


def _budget_to_row(budget: Budget) -> dict[str, Any]:
    return {
        "id": budget.id,
        "category_id": budget.category_id,
        "amount": format_decimal(budget.amount),
        "month": budget.month.isoformat(),
        "created_at": budget.created_at.isoformat(),
        "updated_at": budget.updated_at.isoformat(),
    }


def _budget_from_row(row) -> Budget:
    return Budget(
        id=row.id,
        category_id=row.category_id,
        amount=coerce_decimal(row.amount),
        month=date.fromisoformat(row.month),
        created_at=datetime.fromisoformat(row.created_at),
        updated_at=datetime.fromisoformat(row.updated_at),
    )


class _SqlCollection(EntityCollectionPort[EntityT]):
    """CRUD access to one table through text statements."""

    def __init__(
        self,
        owner: "SqlAlchemyLedgerPersistence",
        table: str,
        columns: tuple[str, ...],
        to_row: Callable[[EntityT], dict[str, Any]],
        from_row: Callable[[Any], EntityT],
    ) -> None:
        self._owner = owner
        self._table = table
        self._columns = columns
        self._to_row = to_row
        self._from_row = from_row
        column_list = ", ".join(columns)
        self._select_sql = f"SELECT {column_list} FROM {table}"
        self._insert_sql = text(
            f"INSERT INTO {table} ({column_list}) "
            f"VALUES ({', '.join(':' + column for column in columns)})"
        )
        assignments = ", ".join(
            f"{column} = :{column}" for column in columns if column != "id"
        )
        self._update_sql = text(
            f"UPDATE {table} SET {assignments} WHERE id = :id"
        )
        self._get_sql = text(f"{self._select_sql} WHERE id = :id")
        self._delete_sql = text(f"DELETE FROM {table} WHERE id = :id")
        self._clear_sql = text(f"DELETE FROM {table}")

    def get_all(self) -> list[EntityT]:
        query = text(f"{self._select_sql} ORDER BY created_at, id")
        with self._owner._connection() as conn:
            rows = conn.execute(query).all()
        return [self._from_row(row) for row in rows]

    def get(self, entity_id: str) -> EntityT | None:
        with self._owner._connection() as conn:
            row = conn.execute(self._get_sql, {"id": entity_id}).first()
        return self._from_row(row) if row is not None else None

    def add(self, entity: EntityT) -> None:
        with self._owner._connection() as conn:
            conn.execute(self._insert_sql, self._to_row(entity))

    def update(self, entity: EntityT) -> None:
        payload = self._to_row(entity)
        with self._owner._connection() as conn:
            result = conn.execute(self._update_sql, payload)
            if result.rowcount == 0:
                conn.execute(self._insert_sql, payload)

    def delete(self, entity_id: str) -> None:
        with self._owner._connection() as conn:
            conn.execute(self._delete_sql, {"id": entity_id})

    def clear(self) -> None:
        with self._owner._connection() as conn:
            conn.execute(self._clear_sql)


class _SqlTransactionCollection(
    _SqlCollection[Transaction],
    TransactionCollectionPort,
):
    """Transactions table with indexed filters."""

    def find(
        self,
        account_id: str | None = None,
        category_id: str | None = None,
        on_date: date | None = None,
    ) -> list[Transaction]:
        base_sql = f"{self._select_sql} WHERE 1=1"
        params: dict[str, str] = {}
        if account_id is not None:
            base_sql += " AND account_id = :account_id"
            params["account_id"] = account_id
        if category_id is not None:
            base_sql += " AND category_id = :category_id"
            params["category_id"] = category_id
        if on_date is not None:
            base_sql += " AND transaction_date = :transaction_date"
            params["transaction_date"] = on_date.isoformat()
        base_sql += " ORDER BY transaction_date, created_at, id"
        with self._owner._connection() as conn:
            rows = conn.execute(text(base_sql), params).all()
        return [self._from_row(row) for row in rows]


class SqlAlchemyLedgerPersistence(LedgerPersistencePort):
    """Ledger persistence backed by a SQLAlchemy engine.

    Writes issued inside ``atomic()`` share one database transaction; writes
    outside it commit individually.
    """

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the adapter.

        Args:
            db_port: Port providing access to the ledger engine.
        """
        self._db_port = db_port
        self._local = threading.local()
        self._accounts = _SqlCollection(
            self,
            "accounts",
            (
                "id",
                "name",
                "account_type",
                "balance",
                "goal_amount",
                "color",
                "created_at",
                "updated_at",
            ),
            _account_to_row,
            _account_from_row,
        )
        self._categories = _SqlCollection(
            self,
            "categories",
            ("id", "name", "category_type", "icon", "color", "created_at"),
            _category_to_row,
            _category_from_row,
        )
        self._transactions = _SqlTransactionCollection(
            self,
            "transactions",
            (
                "id",
                "account_id",
                "category_id",
                "amount",
                "transaction_type",
                "description",
                "transaction_date",
                "notes",
                "recurring_transaction_id",
                "created_at",
                "updated_at",
            ),
            _transaction_to_row,
            _transaction_from_row,
        )
        self._recurring_transactions = _SqlCollection(
            self,
            "recurring_transactions",
            (
                "id",
                "account_id",
                "category_id",
                "amount",
                "transaction_type",
                "description",
                "frequency",
                "next_date",
                "active",
                "created_at",
                "updated_at",
            ),
            _recurring_to_row,
            _recurring_from_row,
        )
        self._budgets = _SqlCollection(
            self,
            "budgets",
            (
                "id",
                "category_id",
                "amount",
                "month",
                "created_at",
                "updated_at",
            ),
            _budget_to_row,
            _budget_from_row,
        )

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
        """Create the ledger tables and indexes if they do not exist."""
        with self._connection() as conn:
            for statement in CREATE_TABLES_SQL + CREATE_INDEXES_SQL:
                conn.exec_driver_sql(statement)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run the enclosed writes in a single database transaction.

        Nested calls join the outermost transaction.

        Raises:
            PersistenceError: When the database rejects a write or commit.
        """
        if getattr(self._local, "connection", None) is not None:
            yield
            return
        engine = self._db_port.get_ledger_engine()
        try:
            with engine.begin() as conn:
                self._local.connection = conn
                try:
                    yield
                finally:
                    self._local.connection = None
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Ledger write failed: {exc}") from exc

    @contextmanager
    def _connection(self) -> Iterator[Connection]:
        active = getattr(self._local, "connection", None)
        try:
            if active is not None:
                yield active
                return
            engine = self._db_port.get_ledger_engine()
            with engine.begin() as conn:
                yield conn
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Ledger storage failed: {exc}") from exc


__all__ = [
    "SqlAlchemyLedgerPersistence",
    "CREATE_TABLES_SQL",
    "CREATE_INDEXES_SQL",
]
