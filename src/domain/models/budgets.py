"""Domain models for budget evaluation."""

from dataclasses import dataclass
from decimal import Decimal

from src.domain.models.ledger import Budget


@dataclass(frozen=True)
class BudgetStatus:
    """Spending of a budget's category against its ceiling.

    Attributes:
        budget: Evaluated budget.
        spent: Expense total for the budget's category and month.
        remaining: Budget amount minus spent; negative once exceeded.
        percentage: Spent as a percentage of the budget amount.
        status: good, warning, or exceeded.
    """

    budget: Budget
    spent: Decimal
    remaining: Decimal
    percentage: Decimal
    status: str


__all__ = ["BudgetStatus"]
