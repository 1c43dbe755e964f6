"""Storage interfaces and in-memory backends."""

from household_ledger.storage.interface import (
    AuditStorageInterface,
    ColorReservationError,
    PaletteReservationInterface,
    StorageError,
)
from household_ledger.storage.memory import (
    InMemoryAuditStorage,
    InMemoryPaletteReservation,
)

__all__ = [
    "AuditStorageInterface",
    "ColorReservationError",
    "InMemoryAuditStorage",
    "InMemoryPaletteReservation",
    "PaletteReservationInterface",
    "StorageError",
]
