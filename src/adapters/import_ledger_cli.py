"""CLI adapter to import a JSON export into the ledger."""

import argparse
from pathlib import Path

from src.domain.errors import ImportFormatError
from src.infrastructure.container import start_ledger
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger


def main(argv: list[str] | None = None) -> int:
    """Import a JSON export and print the number of records added.

    Args:
        argv: Optional argument list; defaults to ``sys.argv``.

    Returns:
        int: Process exit code, 1 when the file is rejected.
    """
    parser = argparse.ArgumentParser(
        prog="import_ledger_cli",
        description="Add the records of a JSON export to the ledger.",
    )
    parser.add_argument("path", type=Path)
    args = parser.parse_args(argv)
    get_usage_logger().info(f"import_ledger_cli {args.path}")

    logger = get_app_logger()
    payload = args.path.read_text(encoding="utf-8")
    services = start_ledger(run_scheduler=False)
    try:
        result = services.importer.execute(payload)
    except ImportFormatError as exc:
        logger.error(f"Import of {args.path} rejected: {exc}")
        print(f"Import failed: {exc}")
        return 1

    print(
        f"Imported {result.accounts} accounts, {result.categories} "
        f"categories, {result.transactions} transactions, "
        f"{result.recurring_transactions} recurring transactions and "
        f"{result.budgets} budgets."
    )
    if result.generated_transactions:
        print(
            f"Generated {result.generated_transactions} due recurring "
            "transactions."
        )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
