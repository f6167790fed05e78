"""Tests for domain validation helpers."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from src.domain.errors import ValidationError
from src.domain.models import Category
from src.domain.services import (
    validate_account_type,
    validate_amount,
    validate_category_type,
    validate_date,
    validate_frequency,
)


def test_validate_amount_accepts_positive_decimal():
    """Positive Decimals should pass through unchanged."""
    assert validate_amount(Decimal("12.34")) == Decimal("12.34")


@pytest.mark.parametrize("value", [Decimal("0"), Decimal("-1"), 0])
def test_validate_amount_rejects_non_positive(value):
    """Zero and negatives should be rejected for transactions."""
    with pytest.raises(ValidationError):
        validate_amount(value)


def test_validate_amount_allows_zero_for_budgets():
    """allow_zero should admit zero but still reject negatives."""
    assert validate_amount(Decimal("0"), allow_zero=True) == Decimal("0")
    with pytest.raises(ValidationError):
        validate_amount(Decimal("-0.01"), allow_zero=True)


@pytest.mark.parametrize(
    "value",
    [1.5, "10", None, True, Decimal("NaN"), Decimal("Infinity")],
)
def test_validate_amount_rejects_non_decimal_values(value):
    """Floats, strings, booleans, and non-finite values are invalid."""
    with pytest.raises(ValidationError):
        validate_amount(value)


def test_validate_amount_converts_ints_to_decimal():
    """Integer amounts should come back as Decimals."""
    result = validate_amount(50)

    assert isinstance(result, Decimal)
    assert result == Decimal("50")


@pytest.mark.parametrize("value", [Decimal("10.005"), Decimal("0.001")])
def test_validate_amount_rejects_sub_cent_precision(value):
    """Amounts are kept in whole cents."""
    with pytest.raises(ValidationError, match="decimal places"):
        validate_amount(value)


def test_validate_amount_ignores_trailing_zeros():
    """Trailing zeros beyond the cents do not count as precision."""
    assert validate_amount(Decimal("10.500")) == Decimal("10.5")


def test_enumerated_validators_reject_unknown_values():
    """Account types and frequencies should be checked against constants."""
    assert validate_account_type("emergency_savings") == "emergency_savings"
    assert validate_frequency("weekly") == "weekly"
    with pytest.raises(ValidationError):
        validate_account_type("credit")
    with pytest.raises(ValidationError):
        validate_frequency("hourly")


def test_validate_date_rejects_datetimes():
    """Dates carry no time component."""
    assert validate_date(date(2024, 1, 1)) == date(2024, 1, 1)
    with pytest.raises(ValidationError):
        validate_date(datetime(2024, 1, 1, tzinfo=timezone.utc))
    with pytest.raises(ValidationError):
        validate_date("2024-01-01")


def test_validate_category_type_mismatch_and_orphan():
    """Mismatched kinds fail while orphaned categories are tolerated."""
    category = Category(
        id="c1",
        name="Salary",
        category_type="income",
        icon="",
        color="",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )

    validate_category_type("income", category)
    validate_category_type("expense", None)
    with pytest.raises(ValidationError):
        validate_category_type("expense", category)
