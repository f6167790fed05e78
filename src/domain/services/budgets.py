"""Domain services for budget evaluation.

Pure functions over already-loaded transactions: nothing here mutates or
persists state.
"""

import calendar
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from src.domain.constants import (
    BUDGET_EXCEEDED,
    BUDGET_EXCEEDED_PERCENTAGE,
    BUDGET_GOOD,
    BUDGET_WARNING,
    BUDGET_WARNING_PERCENTAGE,
    EXPENSE,
)
from src.domain.models import Budget, BudgetStatus, Transaction


def month_bounds(month: date) -> tuple[date, date]:
    """Return the first and last day of the month containing ``month``."""
    last_day = calendar.monthrange(month.year, month.month)[1]
    return month.replace(day=1), month.replace(day=last_day)


def category_spending(
    transactions: Iterable[Transaction],
    category_id: str,
    month: date,
) -> Decimal:
    """Sum expense amounts for a category within a calendar month.

    Args:
        transactions: Transactions to scan.
        category_id: Category to total.
        month: Any day of the month window; bounds are inclusive.

    Returns:
        Decimal: Total spent.
    """
    start, end = month_bounds(month)
    return sum(
        (
            transaction.amount
            for transaction in transactions
            if transaction.category_id == category_id
            and transaction.transaction_type == EXPENSE
            and start <= transaction.date <= end
        ),
        Decimal("0"),
    )


def classify_percentage(percentage: Decimal) -> str:
    """Map a spent percentage onto a budget status.

    Boundaries count toward the stricter bucket: exactly 80 is a warning and
    exactly 100 is exceeded.
    """
    if percentage >= BUDGET_EXCEEDED_PERCENTAGE:
        return BUDGET_EXCEEDED
    if percentage >= BUDGET_WARNING_PERCENTAGE:
        return BUDGET_WARNING
    return BUDGET_GOOD


def budget_status(
    budget: Budget,
    transactions: Iterable[Transaction],
) -> BudgetStatus:
    """Evaluate a budget against the transactions of its month.

    A zero budget reports 0 percent while nothing is spent and an infinite
    percentage (exceeded) once anything is spent.

    Args:
        budget: Budget to evaluate.
        transactions: Transactions to scan.

    Returns:
        BudgetStatus: Spent, remaining, percentage, and status.
    """
    spent = category_spending(transactions, budget.category_id, budget.month)
    remaining = budget.amount - spent
    if budget.amount == 0:
        percentage = Decimal("0") if spent == 0 else Decimal("Infinity")
    else:
        percentage = spent / budget.amount * 100
    return BudgetStatus(
        budget=budget,
        spent=spent,
        remaining=remaining,
        percentage=percentage,
        status=classify_percentage(percentage),
    )


__all__ = [
    "month_bounds",
    "category_spending",
    "classify_percentage",
    "budget_status",
]
