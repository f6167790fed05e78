"""Use case evaluating budgets against the ledger snapshot."""

from datetime import date

from src.application.use_cases.ledger_store import LedgerStore
from src.domain.models import BudgetStatus
from src.domain.services import budget_status, month_start


class GetBudgetStatusesUseCase:
    """Compute spent, remaining, and status for a month's budgets."""

    def __init__(self, store: LedgerStore) -> None:
        """Initialize the use case with its required dependencies."""
        self._store = store

    def execute(self, month: date | None = None) -> list[BudgetStatus]:
        """Return the status of every budget of ``month``.

        Args:
            month: Any day of the month; defaults to the current month.

        Returns:
            list[BudgetStatus]: One status per budget, in store order.
        """
        target = month_start(month or self._store.today())
        snapshot = self._store.snapshot()
        return [
            budget_status(budget, snapshot.transactions)
            for budget in snapshot.budgets
            if budget.month == target
        ]


__all__ = ["GetBudgetStatusesUseCase", "BudgetStatus"]
