"""Creation and partial-update payloads for ledger entities.

Creation payloads carry the caller-supplied fields of an entity; the store
assigns identity and timestamps. Update payloads default every field to
``UNSET`` so that only explicitly provided fields are merged. Optional
entity fields (``goal_amount``, ``notes``) accept ``None`` to clear them.
"""

from dataclasses import dataclass, fields, replace
from datetime import date
from decimal import Decimal
from typing import Any


class _Unset:
    """Marker type for fields left untouched by an update."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class NewAccount:
    """Fields required to open an account."""

    name: str
    account_type: str
    balance: Decimal = Decimal("0")
    color: str = ""
    goal_amount: Decimal | None = None


@dataclass(frozen=True)
class NewCategory:
    """Fields required to create a category."""

    name: str
    category_type: str
    icon: str = ""
    color: str = ""


@dataclass(frozen=True)
class NewTransaction:
    """Fields required to record a transaction."""

    account_id: str
    category_id: str
    amount: Decimal
    transaction_type: str
    description: str
    date: date
    notes: str | None = None
    recurring_transaction_id: str | None = None


@dataclass(frozen=True)
class NewRecurringTransaction:
    """Fields required to create a recurring schedule."""

    account_id: str
    category_id: str
    amount: Decimal
    transaction_type: str
    description: str
    frequency: str
    next_date: date
    active: bool = True


@dataclass(frozen=True)
class AccountUpdate:
    """Partial update of an account."""

    name: Any = UNSET
    account_type: Any = UNSET
    balance: Any = UNSET
    color: Any = UNSET
    goal_amount: Any = UNSET


@dataclass(frozen=True)
class CategoryUpdate:
    """Partial update of a category."""

    name: Any = UNSET
    category_type: Any = UNSET
    icon: Any = UNSET
    color: Any = UNSET


@dataclass(frozen=True)
class TransactionUpdate:
    """Partial update of a transaction."""

    account_id: Any = UNSET
    category_id: Any = UNSET
    amount: Any = UNSET
    transaction_type: Any = UNSET
    description: Any = UNSET
    date: Any = UNSET
    notes: Any = UNSET

    def touches_balance(self) -> bool:
        """Return True when the update may change the signed delta."""
        return any(
            value is not UNSET
            for value in (self.amount, self.transaction_type, self.account_id)
        )


@dataclass(frozen=True)
class RecurringTransactionUpdate:
    """Partial update of a recurring schedule."""

    account_id: Any = UNSET
    category_id: Any = UNSET
    amount: Any = UNSET
    transaction_type: Any = UNSET
    description: Any = UNSET
    frequency: Any = UNSET
    next_date: Any = UNSET
    active: Any = UNSET


def set_fields(update) -> dict[str, Any]:
    """Return the explicitly provided fields of an update payload.

    Args:
        update: Any of the update dataclasses in this module.

    Returns:
        dict[str, Any]: Field names mapped to their new values.
    """
    return {
        field.name: getattr(update, field.name)
        for field in fields(update)
        if getattr(update, field.name) is not UNSET
    }


def merge(entity, update, **extra):
    """Return a copy of ``entity`` with the provided update fields applied."""
    return replace(entity, **set_fields(update), **extra)


__all__ = [
    "UNSET",
    "NewAccount",
    "NewCategory",
    "NewTransaction",
    "NewRecurringTransaction",
    "AccountUpdate",
    "CategoryUpdate",
    "TransactionUpdate",
    "RecurringTransactionUpdate",
    "set_fields",
    "merge",
]
