"""
In-Memory Storage Backends

Used by tests and by single-process deployments. Both classes guard
their state with a lock so concurrent callers see atomic operations.
"""

from threading import Lock
from typing import Optional

from household_ledger.models.audit import AuditEvent
from household_ledger.storage.interface import (
    AuditStorageInterface,
    ColorReservationError,
    PaletteReservationInterface,
)


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log kept in a list."""

    def __init__(self):
        self._events: list[AuditEvent] = []
        self._lock = Lock()

    def append_event(self, event: AuditEvent) -> bool:
        with self._lock:
            self._events.append(event)
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        with self._lock:
            return [
                e for e in self._events
                if e.entity_type == entity_type and e.entity_id == entity_id
            ]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        with self._lock:
            return list(reversed(self._events[-limit:])) if limit > 0 else []


class InMemoryPaletteReservation(PaletteReservationInterface):
    """
    Palette reservation backed by a dict of claims.

    The lowest unclaimed palette slot wins. Once every slot is taken,
    the least-used slot is shared (lowest index on ties), so colors
    only repeat after the palette is exhausted.
    """

    def __init__(self, palette: list[str]):
        if not palette:
            raise ColorReservationError("Palette must contain at least one color")
        self._palette = list(palette)
        # household_id -> {member_id: palette index}
        self._claims: dict[str, dict[str, int]] = {}
        self._lock = Lock()

    def claim_color(self, household_id: str, member_id: str) -> str:
        with self._lock:
            claims = self._claims.setdefault(household_id, {})
            existing: Optional[int] = claims.get(member_id)
            if existing is not None:
                return self._palette[existing]

            usage = [0] * len(self._palette)
            for index in claims.values():
                usage[index] += 1
            index = min(range(len(self._palette)), key=lambda i: (usage[i], i))
            claims[member_id] = index
            return self._palette[index]

    def release_color(self, household_id: str, member_id: str) -> bool:
        with self._lock:
            claims = self._claims.get(household_id, {})
            return claims.pop(member_id, None) is not None

    def claimed_colors(self, household_id: str) -> dict[str, str]:
        with self._lock:
            claims = self._claims.get(household_id, {})
            return {member: self._palette[i] for member, i in claims.items()}
