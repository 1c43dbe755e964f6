"""
Frequency Normalizer

Every aggregation, comparison and sort works on the normalized monthly
amount. It is derived on demand and never rounded until display.
"""

from decimal import ROUND_FLOOR, Decimal
from typing import Optional

from household_ledger.config import get_settings
from household_ledger.models.expense import Expense, Frequency


MONTHS_PER_YEAR = 12


def monthly_amount(expense: Expense) -> float:
    """Monthly equivalent of an expense: yearly amounts are divided by 12."""
    if expense.frequency == Frequency.YEARLY:
        return expense.amount / MONTHS_PER_YEAR
    return expense.amount


def format_money(amount: float) -> str:
    """Round to whole units (halves toward +inf) and add thousands separators."""
    whole = (Decimal(str(amount)) + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR)
    return f"{int(whole):,}"


def format_expense_amount(
    expense: Expense,
    include_frequency: bool = False,
    currency: Optional[str] = None,
) -> str:
    """
    Display string for an expense amount.

    Examples (currency "kr"):
        "100 kr"
        "1,200 kr/year (100 kr/month)"
        "100 kr/month"
    """
    if currency is None:
        currency = get_settings().ledger.currency_suffix

    formatted = format_money(monthly_amount(expense))

    if not include_frequency:
        return f"{formatted} {currency}"

    if expense.frequency == Frequency.YEARLY:
        return (
            f"{format_money(expense.amount)} {currency}/year "
            f"({formatted} {currency}/month)"
        )

    return f"{formatted} {currency}/month"


def frequency_text(expense: Expense) -> str:
    return "Yearly" if expense.frequency == Frequency.YEARLY else "Monthly"
