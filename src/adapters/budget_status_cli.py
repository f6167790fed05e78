"""CLI adapter printing budget usage for a month."""

import argparse
from datetime import date, datetime

from src.infrastructure.container import start_ledger
from src.infrastructure.logging.logger import get_usage_logger
from src.utils.decimal_utils import format_decimal


def _parse_month(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m").date()
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid month '{value}'. Expected format YYYY-MM."
        ) from exc


def main(argv: list[str] | None = None) -> None:
    """Print spent, remaining, and status of each budget of a month."""
    parser = argparse.ArgumentParser(
        prog="budget_status_cli",
        description="Show budget usage for a month.",
    )
    parser.add_argument("month", nargs="?", type=_parse_month)
    args = parser.parse_args(argv)
    get_usage_logger().info("budget_status_cli")

    services = start_ledger()
    statuses = services.budgets.execute(args.month)
    month = args.month or services.store.today()
    if not statuses:
        print(f"No budgets for {month:%Y-%m}.")
        return

    names = {
        category.id: category.name for category in services.store.categories
    }
    print(f"Budgets for {month:%Y-%m}")
    for status in statuses:
        name = names.get(status.budget.category_id, status.budget.category_id)
        percentage = (
            "inf"
            if not status.percentage.is_finite()
            else f"{status.percentage:.0f}"
        )
        print(
            f"{name}: spent {format_decimal(status.spent)} of "
            f"{format_decimal(status.budget.amount)} "
            f"({percentage}%, {status.status}), "
            f"remaining {format_decimal(status.remaining)}"
        )


if __name__ == "__main__":  # pragma: no cover
    main()
