"""Domain validation helpers.

Every check raises ``ValidationError`` so callers can reject input before
any state is mutated.
"""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from src.domain.constants import (
    ACCOUNT_TYPES,
    AMOUNT_PLACES,
    FREQUENCIES,
    TRANSACTION_TYPES,
)
from src.domain.errors import ValidationError
from src.domain.models import Category


def validate_decimal(value, label: str = "amount") -> Decimal:
    """Validate that a value is a finite Decimal in minor currency units.

    Ints are accepted and converted. At most ``AMOUNT_PLACES`` fractional
    digits are allowed so exported amounts stay exact as JSON numbers.

    Args:
        value: Raw value supplied by a caller.
        label: Field name used in the error message.

    Returns:
        Decimal: The value as a Decimal.
    """
    if isinstance(value, bool) or not isinstance(value, (Decimal, int)):
        raise ValidationError(f"{label} must be a Decimal, got {value!r}")
    result = Decimal(value)
    if not result.is_finite():
        raise ValidationError(f"{label} must be finite, got {value!r}")
    if result.normalize().as_tuple().exponent < -AMOUNT_PLACES:
        raise ValidationError(
            f"{label} must have at most {AMOUNT_PLACES} decimal places, "
            f"got {value}"
        )
    return result


def validate_amount(amount, *, allow_zero: bool = False) -> Decimal:
    """Validate a monetary amount.

    Args:
        amount: Raw amount; must be a Decimal or int.
        allow_zero: Whether zero is acceptable (budgets).

    Returns:
        Decimal: The validated amount.
    """
    value = validate_decimal(amount, "Amount")
    if value < 0 or (value == 0 and not allow_zero):
        bound = "non-negative" if allow_zero else "positive"
        raise ValidationError(f"Amount must be {bound}, got {amount}")
    return value


def validate_choice(value, choices: Iterable[str], label: str) -> str:
    """Validate that ``value`` belongs to an enumerated set."""
    allowed = tuple(choices)
    if value not in allowed:
        raise ValidationError(
            f"Invalid {label} {value!r}. Expected one of {', '.join(allowed)}."
        )
    return value


def validate_account_type(value) -> str:
    return validate_choice(value, ACCOUNT_TYPES, "account type")


def validate_transaction_type(value) -> str:
    return validate_choice(value, TRANSACTION_TYPES, "transaction type")


def validate_frequency(value) -> str:
    return validate_choice(value, FREQUENCIES, "frequency")


def validate_date(value, label: str = "date") -> date:
    """Validate a calendar date without time component."""
    if not isinstance(value, date) or hasattr(value, "hour"):
        raise ValidationError(f"Invalid {label}: {value!r}")
    return value


def validate_category_type(
    transaction_type: str,
    category: Category | None,
) -> None:
    """Reject a transaction whose type contradicts its category.

    Orphaned categories are tolerated and skip the check.
    """
    if category is None:
        return
    if category.category_type != transaction_type:
        raise ValidationError(
            f"Transaction type {transaction_type} does not match category "
            f"{category.name} ({category.category_type})"
        )


__all__ = [
    "validate_decimal",
    "validate_amount",
    "validate_choice",
    "validate_account_type",
    "validate_transaction_type",
    "validate_frequency",
    "validate_date",
    "validate_category_type",
]
