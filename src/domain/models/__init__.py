"""Domain models package."""

from .budgets import BudgetStatus
from .ledger import (
    Account,
    Budget,
    Category,
    LedgerSnapshot,
    RecurringTransaction,
    Transaction,
)
from .reports import CategoryBreakdownItem, LedgerReport, MonthlyTrendPoint
from .updates import (
    UNSET,
    AccountUpdate,
    CategoryUpdate,
    NewAccount,
    NewCategory,
    NewRecurringTransaction,
    NewTransaction,
    RecurringTransactionUpdate,
    TransactionUpdate,
)

__all__ = [
    "Account",
    "Budget",
    "Category",
    "LedgerSnapshot",
    "RecurringTransaction",
    "Transaction",
    "BudgetStatus",
    "CategoryBreakdownItem",
    "LedgerReport",
    "MonthlyTrendPoint",
    "UNSET",
    "AccountUpdate",
    "CategoryUpdate",
    "NewAccount",
    "NewCategory",
    "NewRecurringTransaction",
    "NewTransaction",
    "RecurringTransactionUpdate",
    "TransactionUpdate",
]
