"""Application ports package."""

from .database import DatabaseEnginePort
from .persistence import (
    EntityCollectionPort,
    LedgerPersistencePort,
    TransactionCollectionPort,
)

__all__ = [
    "DatabaseEnginePort",
    "EntityCollectionPort",
    "LedgerPersistencePort",
    "TransactionCollectionPort",
]
