"""
Split Resolver

Computes how much each household member owes for an expense.

Strategies:
- EQUAL: amount divided by the participant count
- PERCENTAGE: amount times each member's frozen fraction
- FIXED: the whole amount belongs to the owner

IMPORTANT: Percentage shares are never renormalized. An edit whose
shares do not sum to 1 (within tolerance) is rejected in full by
`validate_percentage_shares`.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Optional

import structlog

from household_ledger.calculations.frequency import monthly_amount
from household_ledger.config import get_settings
from household_ledger.models.expense import (
    EqualSplit,
    Expense,
    FixedSplit,
    PercentageSplit,
    Split,
    SplitType,
    User,
)


logger = structlog.get_logger(__name__)


class SplitValidationError(ValueError):
    """Percentage shares do not cover the household or do not sum to 1."""

    def __init__(
        self,
        message: str,
        total: Optional[float] = None,
        missing: Iterable[str] = (),
        unexpected: Iterable[str] = (),
    ):
        super().__init__(message)
        self.total = total
        self.missing = sorted(missing)
        self.unexpected = sorted(unexpected)


def income_weighted_shares(users: Sequence[User]) -> dict[str, float]:
    """
    Default percentage shares: each member's fraction of household income.

    Falls back to a uniform 1/N when nobody has any income.
    """
    if not users:
        return {}

    total_income = sum(u.monthly_income for u in users)
    if total_income > 0:
        return {u.id: u.monthly_income / total_income for u in users}
    return {u.id: 1 / len(users) for u in users}


def validate_percentage_shares(
    shares: Mapping[str, float],
    participant_ids: Iterable[str],
    tolerance: Optional[float] = None,
) -> None:
    """
    Check a proposed percentage split before it is accepted.

    Raises:
        SplitValidationError: If the key set differs from the participants
            or the fractions do not sum to 1 within tolerance
    """
    if tolerance is None:
        tolerance = get_settings().ledger.split_tolerance

    expected = set(participant_ids)
    actual = set(shares)
    missing = expected - actual
    unexpected = actual - expected
    if missing or unexpected:
        parts = []
        if missing:
            parts.append(f"missing shares for {', '.join(sorted(missing))}")
        if unexpected:
            parts.append(f"shares for unknown users {', '.join(sorted(unexpected))}")
        raise SplitValidationError(
            "Percentage split must cover exactly the household: " + "; ".join(parts),
            missing=missing,
            unexpected=unexpected,
        )

    total = sum(shares.values())
    if abs(total - 1.0) > tolerance:
        raise SplitValidationError(
            f"Percentages must add up to 100% (got {total:.1%})",
            total=total,
        )


def default_split(
    split_type: SplitType,
    users: Sequence[User],
    owner_id: Optional[str] = None,
) -> Split:
    """
    Build the default split for a new expense.

    Percentage defaults are income-weighted and frozen into the split
    at this point; later income changes do not touch existing expenses.
    """
    if split_type == SplitType.FIXED:
        if not owner_id:
            raise ValueError("A fixed split needs an owner")
        return FixedSplit(owner_id=owner_id)
    if split_type == SplitType.PERCENTAGE:
        if not users:
            raise ValueError("A percentage split needs at least one user")
        return PercentageSplit(shares=income_weighted_shares(users))
    return EqualSplit()


def compute_shares(
    expense: Expense,
    users: Sequence[User],
    monthly: bool = False,
) -> dict[str, float]:
    """
    Compute each user's owed share of an expense.

    Args:
        expense: The expense to split
        users: Participating household members
        monthly: Split the normalized monthly amount instead of the
                 stated amount

    Returns:
        Mapping of user id to amount. The values sum to the split amount
        for any expense that passed validation. Never mutates its inputs.
    """
    base = monthly_amount(expense) if monthly else expense.amount
    split = expense.split

    if isinstance(split, FixedSplit):
        return {split.owner_id: base}

    participant_ids = list(dict.fromkeys(u.id for u in users))

    if not participant_ids:
        logger.debug(
            "split_without_participants",
            expense_id=expense.id,
            paid_by=expense.paid_by,
        )
        return {expense.paid_by: base}

    if len(participant_ids) == 1:
        return {participant_ids[0]: base}

    if isinstance(split, EqualSplit):
        per_person = base / len(participant_ids)
        return {user_id: per_person for user_id in participant_ids}

    stale = set(split.shares) - set(participant_ids)
    if stale:
        logger.debug(
            "stale_split_share",
            expense_id=expense.id,
            user_ids=sorted(stale),
        )
    return {
        user_id: base * split.shares.get(user_id, 0.0)
        for user_id in participant_ids
    }
