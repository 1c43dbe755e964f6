"""
Sort Engine

Stable ordering of expense collections.

Amounts compare by normalized monthly amount, so 1200/year equals
100/month. Descending sorts use `reverse=True`, which keeps equal keys
in their original relative order (a reversed ascending list would not).
"""

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict

from household_ledger.calculations.collation import collation_key
from household_ledger.calculations.frequency import monthly_amount
from household_ledger.models.expense import Expense


class SortKey(str, Enum):
    NAME = "name"
    AMOUNT = "amount"
    TYPE = "type"  # fixed before budgeted


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _name_key(expense: Expense):
    return collation_key(expense.name)


def _amount_key(expense: Expense) -> float:
    return monthly_amount(expense)


def _type_key(expense: Expense) -> int:
    return 1 if expense.is_budgeted else 0


def sort_expenses(
    expenses: Iterable[Expense],
    key: SortKey = SortKey.NAME,
    order: SortOrder = SortOrder.ASC,
    secondary: SortKey = SortKey.NAME,
) -> list[Expense]:
    """
    Return a new, stably sorted list of expenses.

    Args:
        expenses: Expenses to sort (not modified)
        key: Primary sort key
        order: Direction of the primary key
        secondary: For TYPE sorts only, the name/amount key used
                   (always ascending) inside each type bucket
    """
    key = SortKey(key)
    descending = SortOrder(order) == SortOrder.DESC

    if key == SortKey.NAME:
        return sorted(expenses, key=_name_key, reverse=descending)
    if key == SortKey.AMOUNT:
        return sorted(expenses, key=_amount_key, reverse=descending)

    # Two stable passes: secondary ascending, then type in the requested order
    inner = _amount_key if secondary == SortKey.AMOUNT else _name_key
    by_secondary = sorted(expenses, key=inner)
    return sorted(by_secondary, key=_type_key, reverse=descending)


class SortState(BaseModel):
    """
    Which column the expense list is sorted by.

    Selecting a different key resets to ascending; re-selecting the
    same key flips the order.
    """
    model_config = ConfigDict(frozen=True)

    key: SortKey = SortKey.NAME
    order: SortOrder = SortOrder.ASC
    previous_key: SortKey = SortKey.NAME

    def toggle(self, new_key: SortKey) -> "SortState":
        new_key = SortKey(new_key)
        if new_key == self.key:
            flipped = SortOrder.DESC if self.order == SortOrder.ASC else SortOrder.ASC
            return self.model_copy(update={"order": flipped})

        previous = self.previous_key
        if new_key == SortKey.TYPE and self.key != SortKey.TYPE:
            previous = self.key
        return SortState(key=new_key, order=SortOrder.ASC, previous_key=previous)

    def apply(self, expenses: Iterable[Expense]) -> list[Expense]:
        return sort_expenses(
            expenses,
            key=self.key,
            order=self.order,
            secondary=self.previous_key,
        )
