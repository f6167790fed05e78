"""Tests for recurring schedule date arithmetic."""

from datetime import date

import pytest

from src.domain.services import advance_date


@pytest.mark.parametrize(
    ("current", "frequency", "expected"),
    [
        (date(2024, 1, 15), "daily", date(2024, 1, 16)),
        (date(2024, 12, 31), "daily", date(2025, 1, 1)),
        (date(2024, 2, 26), "weekly", date(2024, 3, 4)),
        (date(2024, 1, 15), "monthly", date(2024, 2, 15)),
        (date(2024, 12, 10), "monthly", date(2025, 1, 10)),
        (date(2024, 3, 1), "yearly", date(2025, 3, 1)),
    ],
)
def test_advance_date_steps_by_frequency(current, frequency, expected):
    """Each frequency should move the date by exactly one period."""
    assert advance_date(current, frequency) == expected


def test_monthly_step_clamps_to_month_end_in_leap_year():
    """January 31 should advance to February 29 in a leap year."""
    assert advance_date(date(2024, 1, 31), "monthly") == date(2024, 2, 29)


def test_monthly_step_clamps_to_month_end_in_common_year():
    """January 31 should advance to February 28 outside leap years."""
    assert advance_date(date(2023, 1, 31), "monthly") == date(2023, 2, 28)


def test_monthly_step_clamps_to_thirty_day_month():
    """March 31 should advance to April 30."""
    assert advance_date(date(2024, 3, 31), "monthly") == date(2024, 4, 30)


def test_yearly_step_from_leap_day_clamps():
    """February 29 should advance yearly to February 28."""
    assert advance_date(date(2024, 2, 29), "yearly") == date(2025, 2, 28)


@pytest.mark.parametrize("frequency", ["daily", "weekly", "monthly", "yearly"])
def test_advance_date_is_strictly_increasing(frequency):
    """Repeated steps should always move forward."""
    current = date(2023, 12, 31)
    for _ in range(30):
        following = advance_date(current, frequency)
        assert following > current
        current = following


def test_advance_date_rejects_unknown_frequency():
    """Unknown frequencies should raise a ValueError."""
    with pytest.raises(ValueError):
        advance_date(date(2024, 1, 1), "fortnightly")
