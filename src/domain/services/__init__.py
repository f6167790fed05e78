"""Domain services package."""

from .balances import signed_delta
from .budgets import (
    budget_status,
    category_spending,
    classify_percentage,
    month_bounds,
)
from .normalization import month_start, normalize_kind
from .reports import (
    category_breakdown,
    goal_progress,
    monthly_trend,
    shift_month,
    total_expenses,
    total_income,
)
from .schedule import advance_date
from .validation import (
    validate_account_type,
    validate_amount,
    validate_category_type,
    validate_date,
    validate_decimal,
    validate_frequency,
    validate_transaction_type,
)

__all__ = [
    "signed_delta",
    "budget_status",
    "category_spending",
    "classify_percentage",
    "month_bounds",
    "month_start",
    "normalize_kind",
    "category_breakdown",
    "goal_progress",
    "monthly_trend",
    "shift_month",
    "total_expenses",
    "total_income",
    "advance_date",
    "validate_account_type",
    "validate_amount",
    "validate_category_type",
    "validate_date",
    "validate_decimal",
    "validate_frequency",
    "validate_transaction_type",
]
