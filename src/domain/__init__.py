"""Domain package for ledger rules and core models."""

from .constants import ACCOUNT_TYPES, FREQUENCIES, TRANSACTION_TYPES
from .errors import (
    ImportFormatError,
    LedgerError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from .models import (
    Account,
    Budget,
    BudgetStatus,
    Category,
    LedgerSnapshot,
    RecurringTransaction,
    Transaction,
)
from .services import advance_date, budget_status, signed_delta

__all__ = [
    "ACCOUNT_TYPES",
    "FREQUENCIES",
    "TRANSACTION_TYPES",
    "ImportFormatError",
    "LedgerError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
    "Account",
    "Budget",
    "BudgetStatus",
    "Category",
    "LedgerSnapshot",
    "RecurringTransaction",
    "Transaction",
    "advance_date",
    "budget_status",
    "signed_delta",
]
