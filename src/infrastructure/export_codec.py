"""Portable JSON and CSV representations of the ledger.

The JSON document mirrors the entity fields with camelCase keys
(``accountId``, ``goalAmount``, ``nextDate``...), ISO-8601 strings for dates
and timestamps, and amounts as JSON numbers. Numbers are decoded straight
into Decimal so amounts never pass through binary floating point on import.
"""

import csv
from datetime import date, datetime, timezone
from decimal import Decimal
import io
import json
from typing import Any

from src.domain.errors import ImportFormatError
from src.domain.models import (
    Account,
    Budget,
    Category,
    LedgerSnapshot,
    RecurringTransaction,
    Transaction,
)
from src.domain.services import normalize_kind
from src.utils.decimal_utils import format_decimal

COLLECTION_KEYS = (
    "accounts",
    "categories",
    "transactions",
    "recurringTransactions",
    "budgets",
)

CSV_HEADER = "Date,Description,Account,Category,Type,Amount,Notes"


def _json_number(value: Decimal) -> int | float:
    """Return a JSON-encodable number for a Decimal amount.

    Integral amounts become ints; others become the float whose shortest
    repr equals the decimal string. Validation caps amounts at two
    fractional digits, so the round trip is exact for any amount of up to
    15 significant digits (below 10 trillion with cents).
    """
    if value == value.to_integral_value():
        return int(value)
    return float(format_decimal(value))


def _optional(payload: dict[str, Any], key: str, value) -> None:
    if value is not None:
        payload[key] = value


def _account_to_dict(account: Account) -> dict[str, Any]:
    payload = {
        "id": account.id,
        "name": account.name,
        "type": account.account_type,
        "balance": _json_number(account.balance),
        "color": account.color,
        "createdAt": account.created_at.isoformat(),
        "updatedAt": account.updated_at.isoformat(),
    }
    if account.goal_amount is not None:
        payload["goalAmount"] = _json_number(account.goal_amount)
    return payload


def _category_to_dict(category: Category) -> dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "type": category.category_type,
        "icon": category.icon,
        "color": category.color,
        "createdAt": category.created_at.isoformat(),
    }


def _transaction_to_dict(transaction: Transaction) -> dict[str, Any]:
    payload = {
        "id": transaction.id,
        "accountId": transaction.account_id,
        "categoryId": transaction.category_id,
        "amount": _json_number(transaction.amount),
        "type": transaction.transaction_type,
        "description": transaction.description,
        "date": transaction.date.isoformat(),
        "createdAt": transaction.created_at.isoformat(),
        "updatedAt": transaction.updated_at.isoformat(),
    }
    _optional(payload, "notes", transaction.notes)
    _optional(
        payload,
        "recurringTransactionId",
        transaction.recurring_transaction_id,
    )
    return payload


def _recurring_to_dict(recurring: RecurringTransaction) -> dict[str, Any]:
    return {
        "id": recurring.id,
        "accountId": recurring.account_id,
        "categoryId": recurring.category_id,
        "amount": _json_number(recurring.amount),
        "type": recurring.transaction_type,
        "description": recurring.description,
        "frequency": recurring.frequency,
        "nextDate": recurring.next_date.isoformat(),
        "active": recurring.active,
        "createdAt": recurring.created_at.isoformat(),
        "updatedAt": recurring.updated_at.isoformat(),
    }


def _budget_to_dict(budget: Budget) -> dict[str, Any]:
    return {
        "id": budget.id,
        "categoryId": budget.category_id,
        "amount": _json_number(budget.amount),
        "month": budget.month.isoformat(),
        "createdAt": budget.created_at.isoformat(),
        "updatedAt": budget.updated_at.isoformat(),
    }


def encode_ledger_json(snapshot: LedgerSnapshot, export_date: datetime) -> str:
    """Serialize every collection of a snapshot to a JSON document.

    Args:
        snapshot: State to export.
        export_date: Timestamp recorded under ``exportDate``.

    Returns:
        str: Indented JSON document.
    """
    document = {
        "accounts": [_account_to_dict(item) for item in snapshot.accounts],
        "categories": [
            _category_to_dict(item) for item in snapshot.categories
        ],
        "transactions": [
            _transaction_to_dict(item) for item in snapshot.transactions
        ],
        "recurringTransactions": [
            _recurring_to_dict(item)
            for item in snapshot.recurring_transactions
        ],
        "budgets": [_budget_to_dict(item) for item in snapshot.budgets],
        "exportDate": export_date.isoformat(),
    }
    return json.dumps(document, indent=2)


class _EntityReader:
    """Typed field access to one raw entity with located error messages."""

    def __init__(
        self,
        raw: Any,
        location: str,
        fallback_timestamp: datetime,
    ) -> None:
        if not isinstance(raw, dict):
            raise ImportFormatError(f"{location} must be an object")
        self._raw = raw
        self._location = location
        self._fallback_timestamp = fallback_timestamp

    def _fail(self, key: str, problem: str) -> ImportFormatError:
        return ImportFormatError(f"{self._location}.{key} {problem}")

    def _value(self, key: str, required: bool):
        if key not in self._raw or self._raw[key] is None:
            if required:
                raise self._fail(key, "is missing")
            return None
        return self._raw[key]

    def text(self, key: str) -> str:
        value = self._value(key, required=True)
        if not isinstance(value, str):
            raise self._fail(key, "must be a string")
        return value

    def optional_text(self, key: str) -> str | None:
        value = self._value(key, required=False)
        if value is None:
            return None
        if not isinstance(value, str):
            raise self._fail(key, "must be a string")
        return value

    def kind(self, key: str) -> str:
        value = normalize_kind(self.text(key))
        if value is None:
            raise self._fail(key, "is empty")
        return value

    def decimal(self, key: str, required: bool = True) -> Decimal | None:
        value = self._value(key, required)
        if value is None:
            return None
        if isinstance(value, bool):
            raise self._fail(key, "must be a number")
        if isinstance(value, Decimal):
            return value
        if isinstance(value, (int, str)):
            try:
                return Decimal(str(value).strip())
            except ArithmeticError as exc:
                raise self._fail(key, "must be a number") from exc
        raise self._fail(key, "must be a number")

    def date(self, key: str) -> date:
        value = self.text(key)
        try:
            return date.fromisoformat(value[:10])
        except ValueError as exc:
            raise self._fail(key, f"is not an ISO date: {value!r}") from exc

    def timestamp(self, key: str) -> datetime:
        value = self._value(key, required=False)
        if value is None:
            return self._fallback_timestamp
        if not isinstance(value, str):
            raise self._fail(key, "must be a string")
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as exc:
            raise self._fail(
                key,
                f"is not an ISO timestamp: {value!r}",
            ) from exc
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    def boolean(self, key: str, default: bool) -> bool:
        value = self._value(key, required=False)
        if value is None:
            return default
        if not isinstance(value, bool):
            raise self._fail(key, "must be a boolean")
        return value


def _read_account(reader: _EntityReader) -> Account:
    return Account(
        id=reader.text("id"),
        name=reader.text("name"),
        account_type=reader.kind("type"),
        balance=reader.decimal("balance"),
        goal_amount=reader.decimal("goalAmount", required=False),
        color=reader.optional_text("color") or "",
        created_at=reader.timestamp("createdAt"),
        updated_at=reader.timestamp("updatedAt"),
    )


def _read_category(reader: _EntityReader) -> Category:
    return Category(
        id=reader.text("id"),
        name=reader.text("name"),
        category_type=reader.kind("type"),
        icon=reader.optional_text("icon") or "",
        color=reader.optional_text("color") or "",
        created_at=reader.timestamp("createdAt"),
    )


def _read_transaction(reader: _EntityReader) -> Transaction:
    return Transaction(
        id=reader.text("id"),
        account_id=reader.text("accountId"),
        category_id=reader.text("categoryId"),
        amount=reader.decimal("amount"),
        transaction_type=reader.kind("type"),
        description=reader.optional_text("description") or "",
        date=reader.date("date"),
        notes=reader.optional_text("notes"),
        recurring_transaction_id=reader.optional_text(
            "recurringTransactionId"
        ),
        created_at=reader.timestamp("createdAt"),
        updated_at=reader.timestamp("updatedAt"),
    )


def _read_recurring(reader: _EntityReader) -> RecurringTransaction:
    return RecurringTransaction(
        id=reader.text("id"),
        account_id=reader.text("accountId"),
        category_id=reader.text("categoryId"),
        amount=reader.decimal("amount"),
        transaction_type=reader.kind("type"),
        description=reader.optional_text("description") or "",
        frequency=reader.kind("frequency"),
        next_date=reader.date("nextDate"),
        active=reader.boolean("active", default=True),
        created_at=reader.timestamp("createdAt"),
        updated_at=reader.timestamp("updatedAt"),
    )


def _read_budget(reader: _EntityReader) -> Budget:
    return Budget(
        id=reader.text("id"),
        category_id=reader.text("categoryId"),
        amount=reader.decimal("amount"),
        month=reader.date("month"),
        created_at=reader.timestamp("createdAt"),
        updated_at=reader.timestamp("updatedAt"),
    )


_READERS = {
    "accounts": _read_account,
    "categories": _read_category,
    "transactions": _read_transaction,
    "recurringTransactions": _read_recurring,
    "budgets": _read_budget,
}


def decode_ledger_json(
    payload: str,
    fallback_timestamp: datetime | None = None,
) -> LedgerSnapshot:
    """Parse a JSON export into a snapshot without touching any store.

    Args:
        payload: JSON document produced by ``encode_ledger_json``.
        fallback_timestamp: Timestamp for records lacking one; defaults to
            the document's ``exportDate`` or the current time.

    Returns:
        LedgerSnapshot: Decoded records with their original ids.

    Raises:
        ImportFormatError: If the payload is not valid JSON, is not an
            object, lacks a collection, or holds a malformed entity.
    """
    try:
        document = json.loads(
            payload,
            parse_float=Decimal,
            parse_int=Decimal,
        )
    except (TypeError, ValueError) as exc:
        raise ImportFormatError(
            f"Import payload is not valid JSON: {exc}"
        ) from exc
    if not isinstance(document, dict):
        raise ImportFormatError("Import payload must be a JSON object")

    missing = [key for key in COLLECTION_KEYS if key not in document]
    if missing:
        raise ImportFormatError(
            f"Import payload is missing collections: {', '.join(missing)}"
        )

    fallback = fallback_timestamp or _export_date(document)
    decoded: dict[str, tuple] = {}
    for key in COLLECTION_KEYS:
        items = document[key]
        if not isinstance(items, list):
            raise ImportFormatError(f"{key} must be a list")
        reader = _READERS[key]
        decoded[key] = tuple(
            reader(_EntityReader(raw, f"{key}[{index}]", fallback))
            for index, raw in enumerate(items)
        )

    return LedgerSnapshot(
        accounts=decoded["accounts"],
        categories=decoded["categories"],
        transactions=decoded["transactions"],
        recurring_transactions=decoded["recurringTransactions"],
        budgets=decoded["budgets"],
    )


def _export_date(document: dict[str, Any]) -> datetime:
    raw = document.get("exportDate")
    if isinstance(raw, str):
        try:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            parsed = None
        if parsed is not None:
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
    return datetime.now(timezone.utc)


def transactions_to_csv(
    transactions: list[Transaction],
    accounts: list[Account],
    categories: list[Category],
) -> str:
    """Render transactions as CSV with resolved account and category names.

    Args:
        transactions: Transactions to export, in output order.
        accounts: Accounts used to resolve names; orphans render empty.
        categories: Categories used to resolve names; orphans render empty.

    Returns:
        str: Header line followed by one fully quoted line per transaction.
    """
    account_names = {account.id: account.name for account in accounts}
    category_names = {category.id: category.name for category in categories}

    buffer = io.StringIO()
    buffer.write(CSV_HEADER + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for transaction in transactions:
        writer.writerow(
            [
                transaction.date.isoformat(),
                transaction.description,
                account_names.get(transaction.account_id, ""),
                category_names.get(transaction.category_id, ""),
                transaction.transaction_type,
                format_decimal(transaction.amount),
                transaction.notes or "",
            ]
        )
    return buffer.getvalue()


__all__ = [
    "COLLECTION_KEYS",
    "CSV_HEADER",
    "encode_ledger_json",
    "decode_ledger_json",
    "transactions_to_csv",
]
