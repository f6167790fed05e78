"""Factory helpers to select the ledger persistence backend."""

import os

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.persistence import LedgerPersistencePort
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.memory_persistence import InMemoryLedgerPersistence
from src.infrastructure.sqlalchemy_persistence import (
    SqlAlchemyLedgerPersistence,
)


def create_ledger_persistence(
    backend: str | None = None,
    db_port: DatabaseEnginePort | None = None,
    logger=None,
) -> LedgerPersistencePort:
    """Return a ledger persistence implementation based on configuration.

    Args:
        backend: Optional backend override (sqlalchemy or memory).
        db_port: Port providing the engine for the SQLAlchemy backend.
        logger: Optional logger compatible with logging.Logger-like API.

    Returns:
        LedgerPersistencePort: Concrete persistence implementation.
    """
    resolved_logger = logger or get_app_logger()
    selected_backend = (
        backend or os.getenv("LEDGER_BACKEND", "sqlalchemy")
    ).strip().lower()

    if selected_backend == "sqlalchemy":
        return SqlAlchemyLedgerPersistence(
            db_port or SqlAlchemyDatabaseEngineAdapter()
        )

    if selected_backend == "memory":
        resolved_logger.warning(
            "Using in-memory ledger persistence; data is lost on exit"
        )
        return InMemoryLedgerPersistence()

    raise ValueError(
        "Unsupported ledger backend: "
        f"{selected_backend}. Expected sqlalchemy or memory."
    )


__all__ = ["create_ledger_persistence"]
