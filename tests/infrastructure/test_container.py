"""Tests for the composition root."""

from datetime import date
from decimal import Decimal

from src.domain.models import NewAccount
from src.infrastructure import container
from src.infrastructure.memory_persistence import InMemoryLedgerPersistence
from src.infrastructure.settings import LedgerSettings
from src.infrastructure.sqlalchemy_persistence import (
    SqlAlchemyLedgerPersistence,
)


def test_build_ledger_persistence_uses_settings_backend() -> None:
    """The configured backend should decide the adapter type."""
    memory = container.build_ledger_persistence(
        LedgerSettings(backend="memory")
    )
    sql = container.build_ledger_persistence(
        LedgerSettings(backend="sqlalchemy", db_url="sqlite://")
    )

    assert isinstance(memory, InMemoryLedgerPersistence)
    assert isinstance(sql, SqlAlchemyLedgerPersistence)


def test_build_scheduler_applies_catch_up_settings() -> None:
    """The scheduler should honor the configured mode and bound."""
    store = container.build_ledger_store(InMemoryLedgerPersistence())
    scheduler = container.build_scheduler(
        store,
        LedgerSettings(catch_up_mode="single", max_catch_up_steps=7),
    )

    assert scheduler._catch_up_mode == "single"
    assert scheduler._max_steps == 7


def test_start_ledger_initializes_sqlite_database() -> None:
    """start_ledger should create the schema and load an empty ledger."""
    services = container.start_ledger(
        LedgerSettings(backend="sqlalchemy", db_url="sqlite://")
    )

    account = services.store.add_account(
        NewAccount(
            name="Checking",
            account_type="checking",
            balance=Decimal("10"),
        )
    )

    assert services.store.get_account(account.id) == account
    assert services.budgets.execute(date(2024, 1, 1)) == []


def test_start_ledger_importer_runs_the_scheduler() -> None:
    """Imports through the services should catch up due schedules."""
    services = container.start_ledger(LedgerSettings(backend="memory"))

    assert services.importer._scheduler is services.scheduler
