"""Tests for ledger persistence backend selection."""

from unittest.mock import MagicMock

import pytest

from src.infrastructure import ledger_persistence_factory as factory
from src.infrastructure.memory_persistence import InMemoryLedgerPersistence
from src.infrastructure.sqlalchemy_persistence import (
    SqlAlchemyLedgerPersistence,
)


def test_factory_defaults_to_sqlalchemy(monkeypatch) -> None:
    """Factory should return the SQLAlchemy adapter by default."""
    monkeypatch.delenv("LEDGER_BACKEND", raising=False)

    persistence = factory.create_ledger_persistence(
        db_port=MagicMock(),
        logger=MagicMock(),
    )

    assert isinstance(persistence, SqlAlchemyLedgerPersistence)


def test_factory_reads_backend_from_environment(monkeypatch) -> None:
    """LEDGER_BACKEND should select the backend when no override is given."""
    monkeypatch.setenv("LEDGER_BACKEND", "memory")
    logger = MagicMock()

    persistence = factory.create_ledger_persistence(logger=logger)

    assert isinstance(persistence, InMemoryLedgerPersistence)
    logger.warning.assert_called_once()


def test_factory_rejects_unknown_backend() -> None:
    """Unsupported backends should raise a ValueError."""
    with pytest.raises(ValueError):
        factory.create_ledger_persistence(
            backend="mongodb",
            logger=MagicMock(),
        )
