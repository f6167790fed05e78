"""Database infrastructure for the ledger.

This module exposes concrete helpers to create and reuse the SQLAlchemy
engine connected to the ledger database. SQLite files are the embedded
default; any other SQLAlchemy URL selects a remote backend.
"""

import os
from pathlib import Path
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import QueuePool, StaticPool

from src.application.ports.database import DatabaseEnginePort
from src.infrastructure.settings import LedgerSettings


def _get_db_url() -> str:
    """Return the configured ledger database URL.

    Returns:
        str: URL from ``LEDGER_DB_URL`` or the embedded SQLite default.
    """
    dotenv.load_dotenv()
    return os.getenv("LEDGER_DB_URL") or LedgerSettings.default_db_url()


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine for the ledger database.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)

    Returns:
        Engine: A SQLAlchemy engine. In-memory SQLite shares one connection,
        file SQLite uses the driver defaults, and server databases get a
        small pool with health checks enabled.
    """
    url = make_url(db_url)
    if url.get_backend_name() == "sqlite":
        database = url.database
        if not database or database == ":memory:":
            return create_engine(
                db_url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                future=True,
            )
        Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)
        return create_engine(
            db_url,
            connect_args={"check_same_thread": False},
            future=True,
        )
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_ledger_engine: Optional[Engine] = None


def get_ledger_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the ledger database.

    Returns:
        Engine: Lazily initialized engine connected to the ledger backend.
    """
    global _ledger_engine
    if _ledger_engine is None:
        _ledger_engine = _create_engine(_get_db_url())
    return _ledger_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by SQLAlchemy engines.

    The adapter hides configuration details (environment variables, pooling)
    behind the port so persistence adapters depend only on the protocol.
    An explicit URL bypasses the process-wide engine.
    """

    def __init__(self, db_url: str | None = None) -> None:
        self._db_url = db_url
        self._engine: Engine | None = None

    def get_ledger_engine(self) -> Engine:
        """Get the engine for the ledger database.

        Returns:
            Engine: SQLAlchemy engine connected to the ledger store.
        """
        if self._db_url is None:
            return get_ledger_engine()
        if self._engine is None:
            self._engine = _create_engine(self._db_url)
        return self._engine


__all__ = [
    "get_ledger_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]
