"""Composition root for wiring infrastructure adapters."""

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.persistence import LedgerPersistencePort
from src.application.use_cases import (
    ExportLedgerUseCase,
    GetBudgetStatusesUseCase,
    GetLedgerReportUseCase,
    ImportLedgerUseCase,
    InitializeLedgerUseCase,
    LedgerStore,
    ProcessRecurringTransactionsUseCase,
)
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.ledger_persistence_factory import (
    create_ledger_persistence,
)
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import LedgerSettings


def build_database_adapter(
    settings: LedgerSettings | None = None,
) -> DatabaseEnginePort:
    """Return the database adapter instance."""
    resolved = settings or LedgerSettings.from_env()
    return SqlAlchemyDatabaseEngineAdapter(resolved.db_url)


def build_ledger_persistence(
    settings: LedgerSettings | None = None,
    db_port: DatabaseEnginePort | None = None,
) -> LedgerPersistencePort:
    """Return the configured ledger persistence adapter."""
    resolved = settings or LedgerSettings.from_env()
    if resolved.backend == "sqlalchemy" and db_port is None:
        db_port = build_database_adapter(resolved)
    return create_ledger_persistence(
        backend=resolved.backend,
        db_port=db_port,
        logger=get_app_logger(),
    )


def build_ledger_store(persistence: LedgerPersistencePort) -> LedgerStore:
    """Return a ledger store bound to ``persistence``."""
    return LedgerStore(persistence, logger=get_app_logger())


def build_scheduler(
    store: LedgerStore,
    settings: LedgerSettings | None = None,
) -> ProcessRecurringTransactionsUseCase:
    """Return the recurring scheduler configured from settings."""
    resolved = settings or LedgerSettings.from_env()
    return ProcessRecurringTransactionsUseCase(
        store,
        logger=get_app_logger(),
        catch_up_mode=resolved.catch_up_mode,
        max_catch_up_steps=resolved.max_catch_up_steps,
    )


class LedgerServices:
    """Started ledger with the use cases the adapters need."""

    def __init__(
        self,
        store: LedgerStore,
        scheduler: ProcessRecurringTransactionsUseCase,
    ) -> None:
        self.store = store
        self.scheduler = scheduler
        self.budgets = GetBudgetStatusesUseCase(store)
        self.report = GetLedgerReportUseCase(store, logger=get_app_logger())
        self.exporter = ExportLedgerUseCase(store, logger=get_app_logger())
        self.importer = ImportLedgerUseCase(
            store,
            logger=get_app_logger(),
            scheduler=scheduler,
        )


def start_ledger(
    settings: LedgerSettings | None = None,
    run_scheduler: bool = True,
) -> LedgerServices:
    """Initialize storage, load the ledger, and return its services.

    Args:
        settings: Optional settings; read from the environment by default.
        run_scheduler: Whether to catch up recurring schedules on start.

    Returns:
        LedgerServices: Loaded store and use cases.
    """
    resolved = settings or LedgerSettings.from_env()
    persistence = build_ledger_persistence(resolved)
    store = build_ledger_store(persistence)
    scheduler = build_scheduler(store, resolved)
    if run_scheduler:
        InitializeLedgerUseCase(persistence, store, scheduler).run()
    else:
        persistence.initialize()
        store.load()
    return LedgerServices(store, scheduler)


__all__ = [
    "build_database_adapter",
    "build_ledger_persistence",
    "build_ledger_store",
    "build_scheduler",
    "LedgerServices",
    "start_ledger",
]
