"""Domain models for ledger entities."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal


@dataclass(frozen=True)
class Account:
    """Account holding a materialized running balance.

    Attributes:
        id: Unique identifier.
        name: Display name.
        account_type: One of checking, savings, or emergency_savings.
        balance: Signed running total, co-updated by every transaction.
        goal_amount: Optional savings goal.
        color: Color tag used by presentation layers.
        created_at: Creation timestamp.
        updated_at: Timestamp of the last write.
    """

    id: str
    name: str
    account_type: str
    balance: Decimal
    color: str
    created_at: datetime
    updated_at: datetime
    goal_amount: Decimal | None = None


@dataclass(frozen=True)
class Category:
    """Income or expense category."""

    id: str
    name: str
    category_type: str
    icon: str
    color: str
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Ledger entry attributed to one account and one category.

    Attributes:
        id: Unique identifier.
        account_id: Owning account, possibly orphaned.
        category_id: Owning category, possibly orphaned.
        amount: Strictly positive amount.
        transaction_type: income or expense; carries the sign.
        description: Free-text description.
        date: Calendar date without time component.
        notes: Optional notes.
        recurring_transaction_id: Schedule that generated the entry, if any.
        created_at: Creation timestamp.
        updated_at: Timestamp of the last write.
    """

    id: str
    account_id: str
    category_id: str
    amount: Decimal
    transaction_type: str
    description: str
    date: date
    created_at: datetime
    updated_at: datetime
    notes: str | None = None
    recurring_transaction_id: str | None = None


@dataclass(frozen=True)
class RecurringTransaction:
    """Schedule materialized into transactions when due."""

    id: str
    account_id: str
    category_id: str
    amount: Decimal
    transaction_type: str
    description: str
    frequency: str
    next_date: date
    created_at: datetime
    updated_at: datetime
    active: bool = True


@dataclass(frozen=True)
class Budget:
    """Monthly spending ceiling for a category.

    Attributes:
        month: First day of the month the budget applies to.
    """

    id: str
    category_id: str
    amount: Decimal
    month: date
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class LedgerSnapshot:
    """Immutable view of every ledger collection."""

    accounts: tuple[Account, ...] = ()
    categories: tuple[Category, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    recurring_transactions: tuple[RecurringTransaction, ...] = ()
    budgets: tuple[Budget, ...] = ()


__all__ = [
    "Account",
    "Category",
    "Transaction",
    "RecurringTransaction",
    "Budget",
    "LedgerSnapshot",
]
