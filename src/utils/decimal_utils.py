"""Helpers for Decimal normalization."""

from decimal import Decimal


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL, JSON, or adapters.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def format_decimal(value: Decimal) -> str:
    """Render a Decimal as a plain string without exponent notation.

    Args:
        value: Amount to render.

    Returns:
        str: Plain decimal string, e.g. ``"1150.00"`` or ``"50"``.
    """
    return format(value, "f")


__all__ = ["coerce_decimal", "format_decimal"]
