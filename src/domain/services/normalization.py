"""Domain normalization helpers."""

from datetime import date


def normalize_kind(value: str | None) -> str | None:
    """Normalize enumerated kind values (types, frequencies).

    Args:
        value: Raw kind value from callers or imports.

    Returns:
        str | None: Lower-cased, stripped value.
    """
    if not value:
        return None
    cleaned = value.strip()
    return cleaned.lower() if cleaned else None


def month_start(value: date) -> date:
    """Return the first day of the month containing ``value``."""
    return value.replace(day=1)


__all__ = ["normalize_kind", "month_start"]
