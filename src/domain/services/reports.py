"""Domain services for income and expense reports."""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from src.domain.constants import EXPENSE, INCOME
from src.domain.models import (
    Account,
    Category,
    CategoryBreakdownItem,
    MonthlyTrendPoint,
    Transaction,
)
from src.domain.services.budgets import month_bounds


def _in_month(value: date, month: date | None) -> bool:
    if month is None:
        return True
    start, end = month_bounds(month)
    return start <= value <= end


def _total(
    transactions: Iterable[Transaction],
    transaction_type: str,
    month: date | None,
) -> Decimal:
    return sum(
        (
            transaction.amount
            for transaction in transactions
            if transaction.transaction_type == transaction_type
            and _in_month(transaction.date, month)
        ),
        Decimal("0"),
    )


def total_income(
    transactions: Iterable[Transaction],
    month: date | None = None,
) -> Decimal:
    """Return the income total, optionally restricted to one month."""
    return _total(transactions, INCOME, month)


def total_expenses(
    transactions: Iterable[Transaction],
    month: date | None = None,
) -> Decimal:
    """Return the expense total, optionally restricted to one month."""
    return _total(transactions, EXPENSE, month)


def shift_month(month: date, offset: int) -> date:
    """Return the first day of the month ``offset`` months from ``month``."""
    month_index = month.month - 1 + offset
    return date(month.year + month_index // 12, month_index % 12 + 1, 1)


def monthly_trend(
    transactions: Iterable[Transaction],
    today: date,
    months: int = 6,
) -> list[MonthlyTrendPoint]:
    """Return income and expenses for the trailing ``months`` months.

    Args:
        transactions: Transactions to aggregate.
        today: Reference date; its month is the last point.
        months: Number of months, oldest first.

    Returns:
        list[MonthlyTrendPoint]: One point per month.
    """
    rows = list(transactions)
    points = []
    for offset in range(months - 1, -1, -1):
        month = shift_month(today, -offset)
        points.append(
            MonthlyTrendPoint(
                month=month,
                income=total_income(rows, month),
                expenses=total_expenses(rows, month),
            )
        )
    return points


def category_breakdown(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    category_type: str,
    month: date | None = None,
) -> list[CategoryBreakdownItem]:
    """Return non-zero totals per category, largest first.

    Args:
        transactions: Transactions to aggregate.
        categories: Categories to report on.
        category_type: income or expense.
        month: Optional month restriction.

    Returns:
        list[CategoryBreakdownItem]: Totals sorted by amount descending.
    """
    totals: dict[str, Decimal] = {}
    for transaction in transactions:
        if transaction.transaction_type != category_type:
            continue
        if not _in_month(transaction.date, month):
            continue
        totals[transaction.category_id] = (
            totals.get(transaction.category_id, Decimal("0"))
            + transaction.amount
        )

    items = [
        CategoryBreakdownItem(
            category=category.name,
            amount=totals.get(category.id, Decimal("0")),
            color=category.color,
        )
        for category in categories
        if category.category_type == category_type
    ]
    items = [item for item in items if item.amount > 0]
    return sorted(items, key=lambda item: item.amount, reverse=True)


def goal_progress(account: Account) -> Decimal | None:
    """Return the percentage of an account's savings goal reached."""
    if not account.goal_amount:
        return None
    return account.balance / account.goal_amount * 100


__all__ = [
    "total_income",
    "total_expenses",
    "shift_month",
    "monthly_trend",
    "category_breakdown",
    "goal_progress",
]
