"""
Membership Approval

Turns an approved membership application into a household User.

New members start with no income and the default tax rate, and get a
display color claimed atomically from a palette reservation backend.
Deriving the color from the current member count let two concurrent
approvals pick the same color; the reservation closes that race.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from household_ledger.audit import AuditLogger
from household_ledger.config import MembershipSettings, get_settings
from household_ledger.models.audit import AuditEventBuilder
from household_ledger.models.expense import User
from household_ledger.storage import ColorReservationError, PaletteReservationInterface


class MembershipApplication(BaseModel):
    """A pending request to join a household."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    applicant_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, max_length=254)


def approve_application(
    application: MembershipApplication,
    household_id: str,
    reservation: PaletteReservationInterface,
    settings: Optional[MembershipSettings] = None,
    audit_logger: Optional[AuditLogger] = None,
    correlation_id: Optional[UUID] = None,
) -> User:
    """
    Create the User record for an approved applicant.

    Raises:
        ColorReservationError: If the reservation backend cannot claim a color
    """
    settings = settings or get_settings().membership
    audit_logger = audit_logger or AuditLogger()

    try:
        color = reservation.claim_color(household_id, application.applicant_id)
    except ColorReservationError as e:
        audit_logger.log_error(
            error_type="color_reservation_failed",
            error_message=str(e),
            details={
                "household_id": household_id,
                "applicant_id": application.applicant_id,
            },
            correlation_id=correlation_id,
        )
        raise

    user = User(
        id=application.applicant_id,
        name=application.name,
        monthly_income=0.0,
        color=color,
        tax_rate=settings.default_tax_rate,
    )
    audit_logger.log(AuditEventBuilder.member_approved(
        user_id=user.id,
        household_id=household_id,
        color=color,
        correlation_id=correlation_id,
    ))
    return user
