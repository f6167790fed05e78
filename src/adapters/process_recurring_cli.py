"""CLI adapter to catch up recurring transactions.

Meant to run from a daily cron job: it loads the configured ledger, runs the
scheduler once, and prints how many transactions were generated.
"""

from src.infrastructure.container import start_ledger
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger


def main() -> None:
    """Load the ledger and materialize every due recurring transaction."""
    get_usage_logger().info("process_recurring_cli")
    logger = get_app_logger()
    services = start_ledger(run_scheduler=False)
    result = services.scheduler.execute()

    if result.failed_schedule_ids:
        logger.warning(
            f"{len(result.failed_schedule_ids)} recurring schedules failed: "
            f"{', '.join(result.failed_schedule_ids)}"
        )
    print(
        f"Generated {len(result.generated)} transactions from "
        f"{len(result.advanced_schedule_ids)} recurring schedules."
    )


if __name__ == "__main__":  # pragma: no cover
    main()
