"""Domain services for balance side effects."""

from decimal import Decimal

from src.domain.constants import INCOME


def signed_delta(amount: Decimal, transaction_type: str) -> Decimal:
    """Return the balance adjustment contributed by a transaction.

    Args:
        amount: Positive transaction amount.
        transaction_type: income or expense.

    Returns:
        Decimal: ``+amount`` for income, ``-amount`` for expense.
    """
    return amount if transaction_type == INCOME else -amount


__all__ = ["signed_delta"]
