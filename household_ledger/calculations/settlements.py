"""
Settlement Calculator

Works out who owes whom each month.

Balances: a payer is credited with what they paid, and every member is
debited with their share. Personal expenses paid by someone other than
their owner move the full amount from owner to payer.

Settlements: each debtor pays creditors greedily, in household order.
"""

from collections.abc import Mapping

import structlog

from household_ledger.calculations.frequency import monthly_amount
from household_ledger.calculations.splits import compute_shares
from household_ledger.models.expense import LedgerSnapshot
from household_ledger.models.results import Settlement


logger = structlog.get_logger(__name__)

SETTLEMENT_TOLERANCE = 1e-9


def compute_balances(snapshot: LedgerSnapshot) -> dict[str, float]:
    """
    Monthly net balance per user (positive = is owed money).

    Expenses paid by someone outside the household are skipped.
    """
    users = snapshot.users
    balances = {user.id: 0.0 for user in users}

    for expense in snapshot.all_expenses():
        amount = monthly_amount(expense)

        if expense.paid_by not in balances:
            logger.debug(
                "unknown_payer_skipped",
                expense_id=expense.id,
                paid_by=expense.paid_by,
            )
            continue

        if expense.is_shared:
            balances[expense.paid_by] += amount
            for user_id, share in compute_shares(expense, users, monthly=True).items():
                if user_id in balances:
                    balances[user_id] -= share
        elif expense.user_id != expense.paid_by and expense.user_id in balances:
            balances[expense.paid_by] += amount
            balances[expense.user_id] -= amount

    return balances


def compute_settlements(
    balances: Mapping[str, float],
    tolerance: float = SETTLEMENT_TOLERANCE,
) -> list[Settlement]:
    """
    Turn balances into transfers that zero them out.

    Residues smaller than `tolerance` (float noise) are ignored.
    """
    creditors = [
        [user_id, balance] for user_id, balance in balances.items()
        if balance > tolerance
    ]
    debtors = [
        (user_id, -balance) for user_id, balance in balances.items()
        if balance < -tolerance
    ]

    settlements: list[Settlement] = []
    for debtor_id, debt in debtors:
        remaining = debt
        for creditor in creditors:
            if remaining <= tolerance:
                break
            if creditor[1] <= tolerance:
                continue
            amount = min(remaining, creditor[1])
            settlements.append(
                Settlement(from_user=debtor_id, to_user=creditor[0], amount=amount)
            )
            remaining -= amount
            creditor[1] -= amount

    return settlements


def settle(snapshot: LedgerSnapshot) -> list[Settlement]:
    """Balances and settlements in one step."""
    return compute_settlements(compute_balances(snapshot))
