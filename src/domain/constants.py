"""Domain constants for the ledger."""

from decimal import Decimal

ACCOUNT_TYPES = (
    "checking",
    "savings",
    "emergency_savings",
)

INCOME = "income"
EXPENSE = "expense"

TRANSACTION_TYPES = (INCOME, EXPENSE)

FREQUENCIES = (
    "daily",
    "weekly",
    "monthly",
    "yearly",
)

# Fractional digits kept for every monetary amount.
AMOUNT_PLACES = 2

BUDGET_WARNING_PERCENTAGE = Decimal("80")
BUDGET_EXCEEDED_PERCENTAGE = Decimal("100")

BUDGET_GOOD = "good"
BUDGET_WARNING = "warning"
BUDGET_EXCEEDED = "exceeded"


__all__ = [
    "ACCOUNT_TYPES",
    "INCOME",
    "EXPENSE",
    "TRANSACTION_TYPES",
    "FREQUENCIES",
    "AMOUNT_PLACES",
    "BUDGET_WARNING_PERCENTAGE",
    "BUDGET_EXCEEDED_PERCENTAGE",
    "BUDGET_GOOD",
    "BUDGET_WARNING",
    "BUDGET_EXCEEDED",
]
