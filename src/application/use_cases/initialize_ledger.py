"""Use case bringing the ledger up at application start."""

from dataclasses import dataclass
from datetime import date

from src.application.ports.persistence import LedgerPersistencePort
from src.application.use_cases.ledger_store import LedgerStore
from src.application.use_cases.process_recurring import (
    ProcessRecurringResult,
    ProcessRecurringTransactionsUseCase,
)
from src.domain.models import LedgerSnapshot


@dataclass(frozen=True)
class InitializeLedgerResult:
    """Loaded state and the catch-up run that followed."""

    snapshot: LedgerSnapshot
    recurring: ProcessRecurringResult


class InitializeLedgerUseCase:
    """Create the schema, load the store, then catch up schedules once."""

    def __init__(
        self,
        persistence: LedgerPersistencePort,
        store: LedgerStore,
        scheduler: ProcessRecurringTransactionsUseCase,
    ) -> None:
        self._persistence = persistence
        self._store = store
        self._scheduler = scheduler

    def run(self, today: date | None = None) -> InitializeLedgerResult:
        """Initialize storage, load every collection, and run the scheduler.

        Args:
            today: Reference date for the catch-up run.

        Returns:
            InitializeLedgerResult: State after the catch-up run.
        """
        self._persistence.initialize()
        self._store.load()
        recurring = self._scheduler.execute(today)
        return InitializeLedgerResult(
            snapshot=self._store.snapshot(),
            recurring=recurring,
        )


__all__ = ["InitializeLedgerUseCase", "InitializeLedgerResult"]
