"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

import dotenv

from src.infrastructure.logging.logger import get_app_logger
from src.utils.utils import get_project_root

CATCH_UP_MODES = ("all", "single")
DEFAULT_MAX_CATCH_UP_STEPS = 1000


@dataclass(frozen=True)
class LedgerSettings:
    """Settings for the ledger backend and scheduler.

    Attributes:
        backend: Persistence backend identifier (sqlalchemy or memory).
        db_url: SQLAlchemy URL of the ledger database.
        catch_up_mode: ``all`` to materialize every missed period per run,
            ``single`` to advance each schedule by one step per run.
        max_catch_up_steps: Upper bound of steps per schedule and run.
    """

    backend: str = "sqlalchemy"
    db_url: str | None = None
    catch_up_mode: str = "all"
    max_catch_up_steps: int = DEFAULT_MAX_CATCH_UP_STEPS

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        """Build settings from environment variables and ``.env``.

        Returns:
            LedgerSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        backend = os.getenv("LEDGER_BACKEND", "sqlalchemy").strip().lower()
        db_url = os.getenv("LEDGER_DB_URL") or cls.default_db_url()
        catch_up_mode = cls._parse_catch_up_mode(
            os.getenv("RECURRING_CATCH_UP", "all"),
            logger=logger,
        )
        max_steps = cls._parse_max_steps(
            os.getenv("RECURRING_MAX_STEPS"),
            logger=logger,
        )
        return cls(
            backend=backend,
            db_url=db_url,
            catch_up_mode=catch_up_mode,
            max_catch_up_steps=max_steps,
        )

    @staticmethod
    def default_db_url() -> str:
        """Return the embedded SQLite database URL under ``data/``."""
        path = get_project_root() / "data" / "ledger.sqlite3"
        return f"sqlite:///{path}"

    @staticmethod
    def _parse_catch_up_mode(raw_value: str, logger) -> str:
        value = raw_value.strip().lower()
        if value not in CATCH_UP_MODES:
            logger.warning(
                f"Unsupported RECURRING_CATCH_UP '{raw_value}'; using 'all'"
            )
            return "all"
        return value

    @staticmethod
    def _parse_max_steps(raw_value: str | None, logger) -> int:
        if not raw_value:
            return DEFAULT_MAX_CATCH_UP_STEPS
        try:
            value = int(raw_value)
        except ValueError:
            value = 0
        if value < 1:
            logger.warning(
                f"Invalid RECURRING_MAX_STEPS '{raw_value}'; "
                f"using {DEFAULT_MAX_CATCH_UP_STEPS}"
            )
            return DEFAULT_MAX_CATCH_UP_STEPS
        return value


__all__ = ["LedgerSettings", "CATCH_UP_MODES", "DEFAULT_MAX_CATCH_UP_STEPS"]
