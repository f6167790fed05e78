"""Tests for the recurring transactions scheduler."""

from datetime import date, datetime, timezone
from decimal import Decimal
import itertools
from unittest.mock import MagicMock

import pytest

from src.application.use_cases.ledger_store import LedgerStore
from src.application.use_cases.process_recurring import (
    ProcessRecurringTransactionsUseCase,
)
from src.domain.models import (
    NewAccount,
    NewCategory,
    NewRecurringTransaction,
)
from src.infrastructure.memory_persistence import InMemoryLedgerPersistence

NOW = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)


def _make_store():
    counter = itertools.count(1)
    return LedgerStore(
        InMemoryLedgerPersistence(),
        logger=MagicMock(),
        clock=lambda: NOW,
        id_factory=lambda: f"id-{next(counter)}",
    )


def _schedule(store, next_date, frequency="monthly", active=True):
    account = store.add_account(
        NewAccount(
            name="Checking",
            account_type="checking",
            balance=Decimal("1000"),
        )
    )
    category = store.add_category(
        NewCategory(name="Rent", category_type="expense")
    )
    recurring = store.add_recurring_transaction(
        NewRecurringTransaction(
            account_id=account.id,
            category_id=category.id,
            amount=Decimal("100"),
            transaction_type="expense",
            description="Rent",
            frequency=frequency,
            next_date=next_date,
            active=active,
        )
    )
    return account, recurring


def test_catch_up_all_materializes_every_missed_period():
    """All mode should generate one transaction per elapsed due date."""
    store = _make_store()
    account, recurring = _schedule(store, date(2024, 1, 15))
    use_case = ProcessRecurringTransactionsUseCase(store, logger=MagicMock())

    result = use_case.execute(today=date(2024, 3, 1))

    assert [tx.date for tx in result.generated] == [
        date(2024, 1, 15),
        date(2024, 2, 15),
    ]
    assert result.advanced_schedule_ids == (recurring.id,)
    assert store.get_recurring_transaction(recurring.id).next_date == date(
        2024, 3, 15
    )
    assert store.get_account(account.id).balance == Decimal("800")
    assert all(
        tx.recurring_transaction_id == recurring.id for tx in store.transactions
    )


def test_catch_up_single_advances_one_step_per_run():
    """Single mode should produce exactly one transaction per run."""
    store = _make_store()
    _, recurring = _schedule(store, date(2024, 1, 15))
    use_case = ProcessRecurringTransactionsUseCase(
        store,
        logger=MagicMock(),
        catch_up_mode="single",
    )

    result = use_case.execute(today=date(2024, 3, 1))

    assert [tx.date for tx in result.generated] == [date(2024, 1, 15)]
    assert store.get_recurring_transaction(recurring.id).next_date == date(
        2024, 2, 15
    )

    use_case.execute(today=date(2024, 3, 1))
    assert store.get_recurring_transaction(recurring.id).next_date == date(
        2024, 3, 15
    )
    assert len(store.transactions) == 2


def test_schedule_due_today_fires_and_future_does_not():
    """next_date equal to today is due; later dates are not."""
    store = _make_store()
    _, due = _schedule(store, date(2024, 3, 1), frequency="weekly")
    _, future = _schedule(store, date(2024, 3, 2), frequency="weekly")
    use_case = ProcessRecurringTransactionsUseCase(store, logger=MagicMock())

    result = use_case.execute(today=date(2024, 3, 1))

    assert result.advanced_schedule_ids == (due.id,)
    assert store.get_recurring_transaction(due.id).next_date == date(2024, 3, 8)
    assert store.get_recurring_transaction(future.id).next_date == date(
        2024, 3, 2
    )


def test_inactive_schedules_never_fire():
    """Inactive schedules should be skipped."""
    store = _make_store()
    _, recurring = _schedule(store, date(2024, 1, 1), active=False)
    use_case = ProcessRecurringTransactionsUseCase(store, logger=MagicMock())

    result = use_case.execute(today=date(2024, 3, 1))

    assert result.generated == ()
    assert store.get_recurring_transaction(recurring.id).next_date == date(
        2024, 1, 1
    )


def test_month_end_schedule_clamps_every_step():
    """A schedule on the 31st should clamp in short months."""
    store = _make_store()
    _, recurring = _schedule(store, date(2024, 1, 31))
    use_case = ProcessRecurringTransactionsUseCase(store, logger=MagicMock())

    result = use_case.execute(today=date(2024, 4, 30))

    assert [tx.date for tx in result.generated] == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 29),
        date(2024, 4, 29),
    ]
    assert store.get_recurring_transaction(recurring.id).next_date == date(
        2024, 5, 29
    )


def test_step_limit_stops_catch_up_and_warns():
    """The step bound should cap a run and log a warning."""
    store = _make_store()
    _, recurring = _schedule(store, date(2024, 1, 1), frequency="daily")
    logger = MagicMock()
    use_case = ProcessRecurringTransactionsUseCase(
        store,
        logger=logger,
        max_catch_up_steps=3,
    )

    result = use_case.execute(today=date(2024, 3, 1))

    assert len(result.generated) == 3
    assert store.get_recurring_transaction(recurring.id).next_date == date(
        2024, 1, 4
    )
    logger.warning.assert_called_once()


def test_next_date_strictly_increases_after_each_run():
    """Every firing run should move next_date forward."""
    store = _make_store()
    _, recurring = _schedule(store, date(2024, 1, 10), frequency="weekly")
    use_case = ProcessRecurringTransactionsUseCase(
        store,
        logger=MagicMock(),
        catch_up_mode="single",
    )

    previous = recurring.next_date
    for _ in range(5):
        use_case.execute(today=date(2024, 12, 31))
        current = store.get_recurring_transaction(recurring.id).next_date
        assert current > previous
        previous = current


def test_invalid_configuration_is_rejected():
    """Unknown modes and non-positive bounds should raise ValueError."""
    store = _make_store()

    with pytest.raises(ValueError):
        ProcessRecurringTransactionsUseCase(store, catch_up_mode="bulk")
    with pytest.raises(ValueError):
        ProcessRecurringTransactionsUseCase(store, max_catch_up_steps=0)
