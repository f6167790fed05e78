"""Calendar arithmetic for recurring schedules."""

import calendar
from datetime import date, timedelta


def _add_months(value: date, months: int) -> date:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))


def advance_date(value: date, frequency: str) -> date:
    """Return the next occurrence one frequency step after ``value``.

    Monthly and yearly steps keep the day of month and clamp it to the last
    day of the target month, so 2024-01-31 advances to 2024-02-29 and
    2024-02-29 advances yearly to 2025-02-28.

    Args:
        value: Current due date.
        frequency: daily, weekly, monthly, or yearly.

    Returns:
        date: The next due date, strictly after ``value``.

    Raises:
        ValueError: If the frequency is unknown.
    """
    if frequency == "daily":
        return value + timedelta(days=1)
    if frequency == "weekly":
        return value + timedelta(days=7)
    if frequency == "monthly":
        return _add_months(value, 1)
    if frequency == "yearly":
        return _add_months(value, 12)
    raise ValueError(f"Unsupported frequency: {frequency}")


__all__ = ["advance_date"]
