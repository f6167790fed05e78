"""Domain models for ledger reports."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class MonthlyTrendPoint:
    """Income and expense totals for one calendar month."""

    month: date
    income: Decimal
    expenses: Decimal

    @property
    def net(self) -> Decimal:
        """Return income minus expenses."""
        return self.income - self.expenses


@dataclass(frozen=True)
class CategoryBreakdownItem:
    """Total amount attributed to a category."""

    category: str
    amount: Decimal
    color: str


@dataclass(frozen=True)
class LedgerReport:
    """Totals, trend, and breakdowns over a trailing window."""

    start_date: date
    end_date: date
    total_income: Decimal
    total_expenses: Decimal
    trend: list[MonthlyTrendPoint]
    income_breakdown: list[CategoryBreakdownItem]
    expense_breakdown: list[CategoryBreakdownItem]

    @property
    def net(self) -> Decimal:
        """Return total income minus total expenses."""
        return self.total_income - self.total_expenses


__all__ = ["MonthlyTrendPoint", "CategoryBreakdownItem", "LedgerReport"]
