"""Tests for the JSON and CSV ledger codec."""

from datetime import date, datetime, timezone
from decimal import Decimal
import json

import pytest

from src.domain.errors import ImportFormatError
from src.domain.models import (
    Account,
    Budget,
    Category,
    LedgerSnapshot,
    Transaction,
)
from src.infrastructure import export_codec

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _snapshot() -> LedgerSnapshot:
    account = Account(
        id="a1",
        name="Checking",
        account_type="checking",
        balance=Decimal("1150.25"),
        color="#fff",
        created_at=NOW,
        updated_at=NOW,
    )
    category = Category(
        id="c1",
        name="Food",
        category_type="expense",
        icon="cart",
        color="#f00",
        created_at=NOW,
    )
    transaction = Transaction(
        id="t1",
        account_id="a1",
        category_id="c1",
        amount=Decimal("50"),
        transaction_type="expense",
        description="Groceries",
        date=date(2024, 3, 1),
        created_at=NOW,
        updated_at=NOW,
    )
    budget = Budget(
        id="b1",
        category_id="c1",
        amount=Decimal("300.00"),
        month=date(2024, 3, 1),
        created_at=NOW,
        updated_at=NOW,
    )
    return LedgerSnapshot(
        accounts=(account,),
        categories=(category,),
        transactions=(transaction,),
        budgets=(budget,),
    )


def test_encode_uses_camel_case_keys_and_json_numbers():
    """The document should use camelCase keys and numeric amounts."""
    payload = export_codec.encode_ledger_json(_snapshot(), NOW)
    document = json.loads(payload)

    assert set(document) == {
        "accounts",
        "categories",
        "transactions",
        "recurringTransactions",
        "budgets",
        "exportDate",
    }
    account = document["accounts"][0]
    assert account["type"] == "checking"
    assert account["balance"] == 1150.25
    assert "goalAmount" not in account
    transaction = document["transactions"][0]
    assert transaction["accountId"] == "a1"
    assert transaction["amount"] == 50
    assert transaction["date"] == "2024-03-01"
    assert "notes" not in transaction
    assert document["exportDate"] == "2024-03-01T12:00:00+00:00"


def test_decode_restores_snapshot_with_decimals():
    """Decoding an encoded snapshot should give back equal entities."""
    original = _snapshot()

    decoded = export_codec.decode_ledger_json(
        export_codec.encode_ledger_json(original, NOW)
    )

    assert decoded == original
    assert isinstance(decoded.accounts[0].balance, Decimal)


def test_decode_accepts_zulu_timestamps_and_missing_optionals():
    """Trailing Z timestamps and missing fields should be tolerated."""
    payload = json.dumps(
        {
            "accounts": [],
            "categories": [
                {"id": "c1", "name": "Pay", "type": "Income"},
            ],
            "transactions": [],
            "recurringTransactions": [
                {
                    "id": "r1",
                    "accountId": "a1",
                    "categoryId": "c1",
                    "amount": 10.5,
                    "type": "income",
                    "description": "Allowance",
                    "frequency": "weekly",
                    "nextDate": "2024-03-04",
                    "createdAt": "2024-01-01T00:00:00.000Z",
                }
            ],
            "budgets": [],
            "exportDate": "2024-02-01T00:00:00Z",
        }
    )

    decoded = export_codec.decode_ledger_json(payload)

    category = decoded.categories[0]
    recurring = decoded.recurring_transactions[0]
    assert category.category_type == "income"
    assert category.created_at == datetime(2024, 2, 1, tzinfo=timezone.utc)
    assert recurring.active is True
    assert recurring.amount == Decimal("10.5")
    assert recurring.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        "[]",
        json.dumps({"accounts": []}),
        json.dumps(
            {
                "accounts": [{"id": "a1", "name": "x", "type": "checking"}],
                "categories": [],
                "transactions": [],
                "recurringTransactions": [],
                "budgets": [],
            }
        ),
        json.dumps(
            {
                "accounts": "oops",
                "categories": [],
                "transactions": [],
                "recurringTransactions": [],
                "budgets": [],
            }
        ),
    ],
)
def test_decode_rejects_malformed_payloads(payload):
    """Malformed input should raise ImportFormatError."""
    with pytest.raises(ImportFormatError):
        export_codec.decode_ledger_json(payload)


def test_csv_quotes_fields_and_resolves_names():
    """Every row field should be quoted with names resolved."""
    snapshot = _snapshot()
    orphan = Transaction(
        id="t2",
        account_id="gone",
        category_id="gone",
        amount=Decimal("1.50"),
        transaction_type="expense",
        description='Say "hi"',
        date=date(2024, 3, 2),
        created_at=NOW,
        updated_at=NOW,
        notes="n",
    )

    csv_text = export_codec.transactions_to_csv(
        [snapshot.transactions[0], orphan],
        list(snapshot.accounts),
        list(snapshot.categories),
    )

    assert csv_text == (
        "Date,Description,Account,Category,Type,Amount,Notes\n"
        '"2024-03-01","Groceries","Checking","Food","expense","50",""\n'
        '"2024-03-02","Say ""hi""","","","expense","1.50","n"\n'
    )
