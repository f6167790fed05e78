"""CLI adapter to export the ledger as JSON or CSV."""

import argparse
from datetime import date
from pathlib import Path

from src.infrastructure.container import start_ledger
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="export_ledger_cli",
        description="Export the ledger to a file or stdout.",
    )
    parser.add_argument("format", choices=("json", "csv"))
    parser.add_argument("path", nargs="?", type=Path)
    parser.add_argument(
        "--start-date",
        type=date.fromisoformat,
        help="CSV only: first transaction date to include (YYYY-MM-DD).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Export the ledger in the requested format.

    Args:
        argv: Optional argument list; defaults to ``sys.argv``.
    """
    args = _build_parser().parse_args(argv)
    get_usage_logger().info(f"export_ledger_cli {args.format}")
    logger = get_app_logger()
    services = start_ledger(run_scheduler=False)

    if args.format == "json":
        payload = services.exporter.execute()
    else:
        payload = services.exporter.export_csv(start_date=args.start_date)

    if args.path is None:
        print(payload, end="" if payload.endswith("\n") else "\n")
        return
    args.path.write_text(payload, encoding="utf-8")
    logger.info(f"Wrote {args.format} export to {args.path}")
    print(f"Exported ledger to {args.path}.")


if __name__ == "__main__":  # pragma: no cover
    main()
