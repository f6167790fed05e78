"""Use case materializing due recurring transactions.

Each run catches up every active schedule whose ``next_date`` is on or
before ``today``. In ``all`` mode a schedule that is several periods overdue
produces one transaction per elapsed due date in a single run; in ``single``
mode each schedule advances by at most one step per run.
"""

from dataclasses import dataclass
from datetime import date

from src.application.use_cases.ledger_store import LedgerStore
from src.domain.errors import ValidationError
from src.domain.models import Transaction
from src.infrastructure.logging.logger import get_app_logger

CATCH_UP_ALL = "all"
CATCH_UP_SINGLE = "single"


@dataclass(frozen=True)
class ProcessRecurringResult:
    """Result of a scheduler run.

    Attributes:
        generated: Transactions materialized during the run, in order.
        advanced_schedule_ids: Schedules whose next date moved forward.
        failed_schedule_ids: Schedules skipped because they are invalid.
    """

    generated: tuple[Transaction, ...]
    advanced_schedule_ids: tuple[str, ...]
    failed_schedule_ids: tuple[str, ...] = ()


class ProcessRecurringTransactionsUseCase:
    """Advance due recurring schedules into ledger transactions."""

    def __init__(
        self,
        store: LedgerStore,
        logger=None,
        catch_up_mode: str = CATCH_UP_ALL,
        max_catch_up_steps: int = 1000,
    ) -> None:
        """Initialize the use case.

        Args:
            store: Ledger store receiving the materialized transactions.
            logger: Optional logger compatible with logging.Logger-like API.
            catch_up_mode: ``all`` or ``single``.
            max_catch_up_steps: Upper bound of steps per schedule and run.

        Raises:
            ValueError: If the mode or the step bound is invalid.
        """
        if catch_up_mode not in (CATCH_UP_ALL, CATCH_UP_SINGLE):
            raise ValueError(
                f"Unsupported catch-up mode: {catch_up_mode}. "
                "Expected all or single."
            )
        if max_catch_up_steps < 1:
            raise ValueError("max_catch_up_steps must be at least 1")
        self._store = store
        self._logger = logger or get_app_logger()
        self._catch_up_mode = catch_up_mode
        self._max_steps = max_catch_up_steps

    def execute(self, today: date | None = None) -> ProcessRecurringResult:
        """Materialize every due occurrence up to ``today``.

        Args:
            today: Reference date; defaults to the store's current date.

        Returns:
            ProcessRecurringResult: Generated transactions and schedules.
        """
        today = today or self._store.today()
        limit = 1 if self._catch_up_mode == CATCH_UP_SINGLE else self._max_steps
        due = [
            schedule
            for schedule in self._store.recurring_transactions
            if schedule.active and schedule.next_date <= today
        ]

        generated: list[Transaction] = []
        advanced: list[str] = []
        failed: list[str] = []
        for schedule in due:
            current = schedule
            steps = 0
            try:
                while current.next_date <= today and steps < limit:
                    transaction, current = self._store.materialize_occurrence(
                        current.id
                    )
                    generated.append(transaction)
                    steps += 1
            except ValidationError as exc:
                self._logger.error(
                    f"Skipping recurring transaction {schedule.id}: {exc}"
                )
                failed.append(schedule.id)
            if steps:
                advanced.append(schedule.id)
            if (
                current.next_date <= today
                and steps == limit
                and self._catch_up_mode == CATCH_UP_ALL
            ):
                self._logger.warning(
                    f"Recurring transaction {schedule.id} still due on "
                    f"{current.next_date} after {steps} steps"
                )

        self._logger.info(
            f"Processed {len(due)} due recurring transactions; "
            f"generated {len(generated)} transactions"
        )
        return ProcessRecurringResult(
            generated=tuple(generated),
            advanced_schedule_ids=tuple(advanced),
            failed_schedule_ids=tuple(failed),
        )


__all__ = [
    "ProcessRecurringTransactionsUseCase",
    "ProcessRecurringResult",
    "CATCH_UP_ALL",
    "CATCH_UP_SINGLE",
]
