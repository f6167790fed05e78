"""Tests for the in-memory ledger persistence adapter."""

from datetime import datetime, timezone

import pytest

from src.domain.errors import PersistenceError
from src.domain.models import Category
from src.infrastructure.memory_persistence import InMemoryLedgerPersistence

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _category(category_id: str) -> Category:
    return Category(
        id=category_id,
        name=f"Category {category_id}",
        category_type="expense",
        icon="",
        color="",
        created_at=NOW,
    )


def test_collections_support_crud():
    """Collections should add, update, get, and delete by id."""
    persistence = InMemoryLedgerPersistence()
    persistence.categories.add(_category("c1"))
    persistence.categories.update(_category("c2"))

    assert [c.id for c in persistence.categories.get_all()] == ["c1", "c2"]

    persistence.categories.delete("c1")
    persistence.categories.delete("missing")
    assert persistence.categories.get("c1") is None


def test_duplicate_add_raises():
    """Adding an existing id should be rejected."""
    persistence = InMemoryLedgerPersistence()
    persistence.categories.add(_category("c1"))

    with pytest.raises(PersistenceError):
        persistence.categories.add(_category("c1"))


def test_atomic_restores_collections_on_error():
    """Any exception inside atomic should undo the enclosed writes."""
    persistence = InMemoryLedgerPersistence()
    persistence.categories.add(_category("c1"))

    with pytest.raises(RuntimeError):
        with persistence.atomic():
            persistence.categories.add(_category("c2"))
            persistence.categories.clear()
            raise RuntimeError("boom")

    assert [c.id for c in persistence.categories.get_all()] == ["c1"]


def test_nested_atomic_joins_outer_unit():
    """An inner failure should roll back the whole outer unit."""
    persistence = InMemoryLedgerPersistence()

    with pytest.raises(PersistenceError):
        with persistence.atomic():
            persistence.categories.add(_category("c1"))
            with persistence.atomic():
                persistence.categories.add(_category("c1"))

    assert persistence.categories.get_all() == []
