"""Tests for the export and import use cases."""

from datetime import date, datetime, timezone
from decimal import Decimal
import itertools
import json
from unittest.mock import MagicMock

import pytest

from src.application.use_cases.export_ledger import ExportLedgerUseCase
from src.application.use_cases.import_ledger import ImportLedgerUseCase
from src.application.use_cases.ledger_store import LedgerStore
from src.application.use_cases.process_recurring import (
    ProcessRecurringTransactionsUseCase,
)
from src.domain.errors import ImportFormatError
from src.domain.models import (
    NewAccount,
    NewCategory,
    NewRecurringTransaction,
    NewTransaction,
    TransactionUpdate,
)
from src.infrastructure.memory_persistence import InMemoryLedgerPersistence

NOW = datetime(2024, 3, 5, 9, 30, tzinfo=timezone.utc)


def _make_store(prefix="id"):
    counter = itertools.count(1)
    return LedgerStore(
        InMemoryLedgerPersistence(),
        logger=MagicMock(),
        clock=lambda: NOW,
        id_factory=lambda: f"{prefix}-{next(counter)}",
    )


def _populated_store():
    store = _make_store()
    account = store.add_account(
        NewAccount(
            name="Rainy day",
            account_type="emergency_savings",
            balance=Decimal("1000.50"),
            goal_amount=Decimal("5000"),
            color="#00ff00",
        )
    )
    food = store.add_category(
        NewCategory(name="Food", category_type="expense", icon="cart")
    )
    recurring = store.add_recurring_transaction(
        NewRecurringTransaction(
            account_id=account.id,
            category_id=food.id,
            amount=Decimal("12.25"),
            transaction_type="expense",
            description="Box",
            frequency="weekly",
            next_date=date(2024, 3, 4),
        )
    )
    store.materialize_occurrence(recurring.id)
    store.add_transaction(
        NewTransaction(
            account_id=account.id,
            category_id=food.id,
            amount=Decimal("3.10"),
            transaction_type="expense",
            description='Coffee, "large"',
            date=date(2024, 3, 5),
            notes="with milk",
        )
    )
    store.set_budget(food.id, Decimal("250"))
    return store


def _comparable(snapshot):
    accounts = {a.id: a.name for a in snapshot.accounts}
    categories = {c.id: c.name for c in snapshot.categories}
    return {
        "accounts": sorted(
            (a.name, a.account_type, a.balance, a.goal_amount, a.color)
            for a in snapshot.accounts
        ),
        "categories": sorted(
            (c.name, c.category_type, c.icon, c.color)
            for c in snapshot.categories
        ),
        "transactions": sorted(
            (
                accounts.get(t.account_id),
                categories.get(t.category_id),
                t.amount,
                t.transaction_type,
                t.description,
                t.date,
                t.notes,
                t.recurring_transaction_id is not None,
            )
            for t in snapshot.transactions
        ),
        "recurring": sorted(
            (
                accounts.get(r.account_id),
                r.amount,
                r.frequency,
                r.next_date,
                r.active,
            )
            for r in snapshot.recurring_transactions
        ),
        "budgets": sorted(
            (categories.get(b.category_id), b.amount, b.month)
            for b in snapshot.budgets
        ),
    }


def test_export_then_import_into_empty_store_round_trips():
    """Importing an export should reproduce every entity's values."""
    source = _populated_store()
    payload = ExportLedgerUseCase(
        source,
        logger=MagicMock(),
        clock=lambda: NOW,
    ).execute()
    target = _make_store(prefix="new")

    result = ImportLedgerUseCase(target, logger=MagicMock()).execute(payload)

    assert result.accounts == 1
    assert result.transactions == 2
    assert result.recurring_transactions == 1
    assert result.budgets == 1
    assert _comparable(target.snapshot()) == _comparable(source.snapshot())


def test_import_assigns_fresh_ids_and_remaps_references():
    """Imported records get new ids and references follow them."""
    source = _populated_store()
    payload = ExportLedgerUseCase(source, logger=MagicMock()).execute()
    target = _make_store(prefix="new")

    ImportLedgerUseCase(target, logger=MagicMock()).execute(payload)

    source_ids = {a.id for a in source.accounts}
    account = target.accounts[0]
    recurring = target.recurring_transactions[0]
    assert account.id not in source_ids
    assert {t.account_id for t in target.transactions} == {account.id}
    generated = [
        t for t in target.transactions if t.recurring_transaction_id
    ]
    assert generated[0].recurring_transaction_id == recurring.id
    assert target.budgets[0].category_id == target.categories[0].id


def test_import_does_not_reapply_transaction_deltas():
    """Imported balances are taken verbatim from the file."""
    source = _populated_store()
    payload = ExportLedgerUseCase(source, logger=MagicMock()).execute()
    target = _make_store(prefix="new")

    ImportLedgerUseCase(target, logger=MagicMock()).execute(payload)

    assert target.accounts[0].balance == source.accounts[0].balance


def test_importing_twice_is_additive():
    """A second import should duplicate records except upserted budgets."""
    source = _populated_store()
    payload = ExportLedgerUseCase(source, logger=MagicMock()).execute()
    target = _make_store(prefix="new")
    use_case = ImportLedgerUseCase(target, logger=MagicMock())

    use_case.execute(payload)
    use_case.execute(payload)

    assert len(target.accounts) == 2
    assert len(target.transactions) == 4
    assert len(target.budgets) == 2


def test_invalid_record_rejects_whole_import():
    """A single invalid entity should leave the store untouched."""
    source = _populated_store()
    document = json.loads(
        ExportLedgerUseCase(source, logger=MagicMock()).execute()
    )
    document["transactions"][1]["amount"] = -5
    target = _make_store(prefix="new")

    with pytest.raises(ImportFormatError):
        ImportLedgerUseCase(target, logger=MagicMock()).execute(
            json.dumps(document)
        )

    assert target.accounts == ()
    assert target.transactions == ()


def test_malformed_payload_raises_import_format_error():
    """Non-JSON input should be rejected before any write."""
    target = _make_store()

    with pytest.raises(ImportFormatError):
        ImportLedgerUseCase(target, logger=MagicMock()).execute("{not json")


def test_export_csv_filters_by_start_date():
    """CSV export should keep only transactions on or after start_date."""
    store = _populated_store()
    use_case = ExportLedgerUseCase(store, logger=MagicMock())

    csv_text = use_case.export_csv(start_date=date(2024, 3, 5))

    lines = csv_text.splitlines()
    assert lines[0] == "Date,Description,Account,Category,Type,Amount,Notes"
    assert lines[1:] == [
        '"2024-03-05","Coffee, ""large""","Rainy day","Food","expense",'
        '"3.10","with milk"'
    ]


def test_integer_amounts_export_as_plain_numbers():
    """Amounts given as ints should export like their Decimal values."""
    store = _make_store()
    account = store.add_account(
        NewAccount(name="Checking", account_type="checking", balance=1000)
    )
    food = store.add_category(NewCategory(name="Food", category_type="expense"))
    expense = store.add_transaction(
        NewTransaction(
            account_id=account.id,
            category_id=food.id,
            amount=50,
            transaction_type="expense",
            description="Groceries",
            date=date(2024, 3, 5),
        )
    )
    use_case = ExportLedgerUseCase(store, logger=MagicMock())

    first_json = json.loads(use_case.execute())
    first_csv = use_case.export_csv().splitlines()
    store.update_transaction(expense.id, TransactionUpdate(amount=40))
    second_json = json.loads(use_case.execute())
    second_csv = use_case.export_csv().splitlines()

    assert first_json["accounts"][0]["balance"] == 950
    assert first_json["transactions"][0]["amount"] == 50
    assert first_csv[1] == (
        '"2024-03-05","Groceries","Checking","Food","expense","50",""'
    )
    assert second_json["accounts"][0]["balance"] == 960
    assert second_json["transactions"][0]["amount"] == 40
    assert second_csv[1].endswith('"expense","40",""')


def test_json_amounts_keep_cents_exactly():
    """Large amounts with cents should survive export and import."""
    store = _make_store()
    store.add_account(
        NewAccount(
            name="Checking",
            account_type="checking",
            balance=Decimal("9876543210.99"),
        )
    )
    payload = ExportLedgerUseCase(store, logger=MagicMock()).execute()
    target = _make_store(prefix="new")

    ImportLedgerUseCase(target, logger=MagicMock()).execute(payload)

    assert target.accounts[0].balance == Decimal("9876543210.99")


def test_import_catches_up_due_schedules_when_scheduler_given():
    """Overdue imported schedules should materialize right after import."""
    source = _populated_store()
    document = json.loads(
        ExportLedgerUseCase(source, logger=MagicMock()).execute()
    )
    document["recurringTransactions"][0]["nextDate"] = "2024-02-26"
    target = _make_store(prefix="new")
    scheduler = ProcessRecurringTransactionsUseCase(target, logger=MagicMock())

    result = ImportLedgerUseCase(
        target,
        logger=MagicMock(),
        scheduler=scheduler,
    ).execute(json.dumps(document))

    assert result.transactions == 2
    assert result.generated_transactions == 2
    assert len(target.transactions) == 4
    assert target.recurring_transactions[0].next_date == date(2024, 3, 11)
    assert target.accounts[0].balance == (
        source.accounts[0].balance - Decimal("24.50")
    )


def test_import_without_scheduler_leaves_schedules_due():
    """Without a scheduler the import writes records only."""
    source = _populated_store()
    document = json.loads(
        ExportLedgerUseCase(source, logger=MagicMock()).execute()
    )
    document["recurringTransactions"][0]["nextDate"] = "2024-02-26"
    target = _make_store(prefix="new")

    result = ImportLedgerUseCase(target, logger=MagicMock()).execute(
        json.dumps(document)
    )

    assert result.generated_transactions == 0
    assert target.recurring_transactions[0].next_date == date(2024, 2, 26)
