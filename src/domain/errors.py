"""Error taxonomy raised by the ledger core."""


class LedgerError(Exception):
    """Base class for every ledger failure surfaced to callers."""


class NotFoundError(LedgerError):
    """Raised when the direct target of an operation does not exist.

    Attributes:
        entity: Collection name of the missing entity.
        entity_id: Identifier that failed to resolve.
    """

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(LedgerError):
    """Raised for malformed input before any state is touched."""


class PersistenceError(LedgerError):
    """Raised when the durable storage round trip fails."""


class ImportFormatError(LedgerError):
    """Raised when an import payload cannot be decoded."""


__all__ = [
    "LedgerError",
    "NotFoundError",
    "ValidationError",
    "PersistenceError",
    "ImportFormatError",
]
