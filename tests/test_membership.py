"""
Tests for membership approval, palette reservation and audit storage.
"""

import importlib
import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from household_ledger.audit import AuditLogger
from household_ledger.audit import logger as audit_logger_module
from household_ledger.config import MembershipSettings, get_settings
from household_ledger.membership import MembershipApplication, approve_application
from household_ledger.models.audit import AuditEventBuilder, AuditEventType
from household_ledger.storage import (
    AuditStorageInterface,
    ColorReservationError,
    InMemoryAuditStorage,
    InMemoryPaletteReservation,
    PaletteReservationInterface,
    StorageError,
)


PALETTE = ["#10B981", "#3B82F6", "#F59E0B"]


class FailingReservation(PaletteReservationInterface):
    """Reservation backend that is always unavailable."""

    def claim_color(self, household_id, member_id):
        raise ColorReservationError("reservation backend unavailable")

    def release_color(self, household_id, member_id):
        return False

    def claimed_colors(self, household_id):
        return {}


class FailingAuditStorage(AuditStorageInterface):
    """Audit storage whose writes always fail."""

    def append_event(self, event):
        raise StorageError("disk full")

    def get_events_by_entity(self, entity_type, entity_id):
        return []

    def get_recent_events(self, limit=100):
        return []


@pytest.fixture
def settings():
    return MembershipSettings(default_tax_rate=0.32, color_palette=",".join(PALETTE))


class TestApproveApplication:
    """Tests for turning applications into household members."""

    def test_new_member_defaults(self, settings):
        """Test new members start with no income and the default tax rate."""
        reservation = InMemoryPaletteReservation(settings.palette)
        user = approve_application(
            MembershipApplication(applicant_id="u1", name="Alice"),
            household_id="h1",
            reservation=reservation,
            settings=settings,
        )
        assert user.id == "u1"
        assert user.monthly_income == 0
        assert user.tax_rate == pytest.approx(0.32)
        assert user.color == "#10B981"

    def test_members_get_distinct_colors(self, settings):
        """Test consecutive approvals walk the palette."""
        reservation = InMemoryPaletteReservation(settings.palette)
        colors = [
            approve_application(
                MembershipApplication(applicant_id=f"u{i}", name=f"User {i}"),
                household_id="h1",
                reservation=reservation,
                settings=settings,
            ).color
            for i in range(3)
        ]
        assert colors == PALETTE

    def test_approval_is_audited(self, settings):
        """Test approvals land in audit storage."""
        storage = InMemoryAuditStorage()
        approve_application(
            MembershipApplication(applicant_id="u1", name="Alice"),
            household_id="h1",
            reservation=InMemoryPaletteReservation(settings.palette),
            settings=settings,
            audit_logger=AuditLogger(storage=storage),
        )
        (event,) = storage.get_events_by_entity("user", "u1")
        assert event.event_type == AuditEventType.MEMBER_APPROVED
        assert event.details["household_id"] == "h1"

    def test_reservation_failure_propagates(self, settings):
        """Test a failed color claim is logged and re-raised."""
        storage = InMemoryAuditStorage()
        with pytest.raises(ColorReservationError):
            approve_application(
                MembershipApplication(applicant_id="u1", name="Alice"),
                household_id="h1",
                reservation=FailingReservation(),
                settings=settings,
                audit_logger=AuditLogger(storage=storage),
            )
        (event,) = storage.get_recent_events()
        assert event.event_type == AuditEventType.SYSTEM_ERROR

    def test_application_requires_name(self):
        """Test applications without a name are rejected."""
        with pytest.raises(ValueError):
            MembershipApplication(applicant_id="u1", name="   ")


class TestPaletteReservation:
    """Tests for the in-memory palette reservation."""

    def test_claim_is_idempotent(self):
        """Test claiming twice for one member returns the same color."""
        reservation = InMemoryPaletteReservation(PALETTE)
        first = reservation.claim_color("h1", "u1")
        assert reservation.claim_color("h1", "u1") == first
        assert reservation.claimed_colors("h1") == {"u1": first}

    def test_households_are_independent(self):
        """Test each household starts at the first color."""
        reservation = InMemoryPaletteReservation(PALETTE)
        reservation.claim_color("h1", "u1")
        assert reservation.claim_color("h2", "u2") == PALETTE[0]

    def test_wraps_after_palette_exhausted(self):
        """Test colors repeat only once every slot is taken."""
        reservation = InMemoryPaletteReservation(PALETTE[:2])
        colors = [reservation.claim_color("h1", f"u{i}") for i in range(3)]
        assert colors == [PALETTE[0], PALETTE[1], PALETTE[0]]

    def test_release_frees_slot(self):
        """Test a released color is handed out again."""
        reservation = InMemoryPaletteReservation(PALETTE)
        reservation.claim_color("h1", "u1")
        reservation.claim_color("h1", "u2")
        assert reservation.release_color("h1", "u1") is True
        assert reservation.release_color("h1", "u1") is False
        assert reservation.claim_color("h1", "u3") == PALETTE[0]

    def test_empty_palette_rejected(self):
        """Test a reservation needs at least one color."""
        with pytest.raises(ColorReservationError):
            InMemoryPaletteReservation([])

    def test_concurrent_claims_get_distinct_colors(self):
        """Test simultaneous approvals never share a color."""
        palette = [f"#00000{i}" for i in range(10)]
        reservation = InMemoryPaletteReservation(palette)
        with ThreadPoolExecutor(max_workers=10) as pool:
            colors = list(pool.map(
                lambda i: reservation.claim_color("h1", f"u{i}"), range(10)
            ))
        assert sorted(colors) == sorted(palette)


class TestAuditLogger:
    """Tests for the audit logger and in-memory audit storage."""

    def test_storage_failure_does_not_raise(self):
        """Test a failing backend is reported, not raised."""
        logger = AuditLogger(storage=FailingAuditStorage())
        event = AuditEventBuilder.expense_deleted(expense_id="e1", category_id="shared")
        assert logger.log(event) is False

    def test_log_without_storage(self):
        """Test local-only logging succeeds."""
        event = AuditEventBuilder.expense_deleted(expense_id="e1", category_id="shared")
        assert AuditLogger().log(event) is True

    def test_recent_events_newest_first(self):
        """Test recent events are returned newest first and limited."""
        storage = InMemoryAuditStorage()
        for i in range(3):
            storage.append_event(
                AuditEventBuilder.expense_deleted(expense_id=f"e{i}", category_id="shared")
            )
        assert [e.entity_id for e in storage.get_recent_events(limit=2)] == ["e2", "e1"]
        assert storage.get_recent_events(limit=0) == []


class TestLoggingSetup:
    """Tests for logging configuration."""

    def test_import_leaves_root_logger_alone(self, monkeypatch):
        """Test importing the audit module only configures structlog."""
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        importlib.reload(audit_logger_module)
        assert calls == []

    def test_configure_logging_sets_root_level(self, monkeypatch):
        """Test explicit configuration applies the configured level."""
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        audit_logger_module.configure_logging()
        (kwargs,) = calls
        assert kwargs["level"] == getattr(logging, get_settings().logging.level)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
