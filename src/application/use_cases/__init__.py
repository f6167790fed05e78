"""Application use cases package."""

from .ledger_store import LedgerStore
from .process_recurring import (
    ProcessRecurringTransactionsUseCase,
    ProcessRecurringResult,
)
from .get_budget_statuses import GetBudgetStatusesUseCase
from .get_ledger_report import GetLedgerReportUseCase
from .export_ledger import ExportLedgerUseCase
from .import_ledger import ImportLedgerUseCase, ImportLedgerResult
from .initialize_ledger import (
    InitializeLedgerUseCase,
    InitializeLedgerResult,
)

__all__ = [
    "LedgerStore",
    "ProcessRecurringTransactionsUseCase",
    "ProcessRecurringResult",
    "GetBudgetStatusesUseCase",
    "GetLedgerReportUseCase",
    "ExportLedgerUseCase",
    "ImportLedgerUseCase",
    "ImportLedgerResult",
    "InitializeLedgerUseCase",
    "InitializeLedgerResult",
]
