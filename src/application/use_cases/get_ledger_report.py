"""Use case building income and expense reports."""

from datetime import date

from src.application.use_cases.ledger_store import LedgerStore
from src.domain.constants import EXPENSE, INCOME
from src.domain.models import LedgerReport
from src.domain.services import (
    category_breakdown,
    monthly_trend,
    shift_month,
    total_expenses,
    total_income,
)
from src.infrastructure.logging.logger import get_app_logger


class GetLedgerReportUseCase:
    """Aggregate the ledger over a trailing window of months."""

    def __init__(self, store: LedgerStore, logger=None) -> None:
        """Initialize the use case.

        Args:
            store: Ledger store providing the snapshot.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._store = store
        self._logger = logger or get_app_logger()

    def execute(
        self,
        today: date | None = None,
        months: int = 6,
    ) -> LedgerReport:
        """Return totals, trend, and breakdowns for the window.

        Args:
            today: End of the window; defaults to the store's current date.
            months: Window length in calendar months, current month included.

        Returns:
            LedgerReport: Aggregated report.
        """
        if months < 1:
            raise ValueError("months must be at least 1")
        today = today or self._store.today()
        start_date = shift_month(today, -(months - 1))
        snapshot = self._store.snapshot()
        window = [
            transaction
            for transaction in snapshot.transactions
            if start_date <= transaction.date <= today
        ]
        report = LedgerReport(
            start_date=start_date,
            end_date=today,
            total_income=total_income(window),
            total_expenses=total_expenses(window),
            trend=monthly_trend(window, today, months),
            income_breakdown=category_breakdown(
                window,
                snapshot.categories,
                INCOME,
            ),
            expense_breakdown=category_breakdown(
                window,
                snapshot.categories,
                EXPENSE,
            ),
        )
        self._logger.info(
            f"Report {start_date} to {today}: income={report.total_income}, "
            f"expenses={report.total_expenses}"
        )
        return report


__all__ = ["GetLedgerReportUseCase", "LedgerReport"]
