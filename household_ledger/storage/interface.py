"""
Abstract Storage Interfaces

DESIGN DECISION: The calculation core never talks to a database.
The two places where it touches the persistence boundary are defined
here as abstract interfaces:
1. Appending audit events
2. Atomically reserving a member display color

Member colors used to be derived from `member_count % palette_size`,
which hands two concurrent approvals the same color. A reservation
backend must claim a palette slot atomically instead.
"""

from abc import ABC, abstractmethod

from household_ledger.models.audit import AuditEvent


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Args:
            event: The audit event to log

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity.

        Args:
            entity_type: Type of entity (e.g., 'expense', 'category')
            entity_id: The entity's ID

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Args:
            limit: Maximum number of events to return

        Returns:
            List of recent events (newest first)
        """
        pass


class PaletteReservationInterface(ABC):
    """
    Abstract interface for claiming member display colors.

    Implementations must make `claim_color` atomic per household:
    two concurrent claims never receive the same palette slot while
    unclaimed slots remain.
    """

    @abstractmethod
    def claim_color(self, household_id: str, member_id: str) -> str:
        """
        Claim a color for a member.

        Claiming again for the same member returns the same color.

        Raises:
            ColorReservationError: If no color can be claimed
        """
        pass

    @abstractmethod
    def release_color(self, household_id: str, member_id: str) -> bool:
        """
        Release a member's color so it can be claimed again.

        Returns:
            True if the member held a color
        """
        pass

    @abstractmethod
    def claimed_colors(self, household_id: str) -> dict[str, str]:
        """Return the member_id -> color claims for a household."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ColorReservationError(StorageError):
    """A display color could not be reserved."""
    pass
