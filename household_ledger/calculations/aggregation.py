"""
Category Aggregator

Rolls normalized monthly amounts up per category.

DESIGN DECISION: Two ordering rules are layered on top of the generic
name collation:
1. The pooled household category ("shared") is always listed first
2. The "Uncategorized" personal group is always listed last

Orphaned personal-category references (the category was deleted) are
never an error: they fold into the "Uncategorized" group.
"""

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Optional

import structlog

from household_ledger.calculations.collation import collation_key
from household_ledger.calculations.frequency import monthly_amount
from household_ledger.config import get_settings
from household_ledger.models.expense import (
    Expense,
    ExpenseCategory,
    PersonalExpenseCategory,
)
from household_ledger.models.results import (
    CategorySummary,
    CategoryTotals,
    ExpenseGroup,
)

if TYPE_CHECKING:
    from household_ledger.view_state import CollapseState


logger = structlog.get_logger(__name__)

UNCATEGORIZED_ID = "uncategorized"


def category_totals(expenses: Iterable[Expense]) -> CategoryTotals:
    """
    Sum monthly amounts into fixed and budgeted buckets.

    An empty collection yields all-zero totals.
    """
    fixed_total = 0.0
    budgeted_total = 0.0
    for expense in expenses:
        if expense.is_budgeted:
            budgeted_total += monthly_amount(expense)
        else:
            fixed_total += monthly_amount(expense)

    return CategoryTotals(
        fixed_total=fixed_total,
        budgeted_total=budgeted_total,
        grand_total=fixed_total + budgeted_total,
    )


def group_by_personal_category(
    expenses: Iterable[Expense],
    personal_categories: Sequence[PersonalExpenseCategory],
    uncategorized_label: Optional[str] = None,
) -> list[ExpenseGroup]:
    """
    Partition personal expenses by their sub-category.

    Groups are ordered alphabetically by resolved name (case-insensitive)
    with the uncategorized group last. Within a group, expenses keep
    their input order.
    """
    if uncategorized_label is None:
        uncategorized_label = get_settings().ledger.uncategorized_label

    names = {c.id: c.name for c in personal_categories}
    # None is the uncategorized bucket; it cannot collide with a real id
    buckets: dict[Optional[str], list[Expense]] = {}

    for expense in expenses:
        key = expense.personal_category_id
        if key is not None and key not in names:
            logger.debug(
                "orphan_category_reference",
                expense_id=expense.id,
                personal_category_id=key,
            )
            key = None
        buckets.setdefault(key, []).append(expense)

    ordered = sorted(
        buckets.items(),
        key=lambda item: (
            item[0] is None,
            collation_key(names[item[0]] if item[0] is not None else uncategorized_label),
        ),
    )

    return [
        ExpenseGroup(
            category_id=key if key is not None else UNCATEGORIZED_ID,
            name=names[key] if key is not None else uncategorized_label,
            expenses=tuple(members),
            total=sum(monthly_amount(e) for e in members),
        )
        for key, members in ordered
    ]


def order_categories(
    categories: Iterable[ExpenseCategory],
    shared_category_id: Optional[str] = None,
) -> list[ExpenseCategory]:
    """Pooled household category first, then the rest alphabetically."""
    if shared_category_id is None:
        shared_category_id = get_settings().ledger.shared_category_id

    return sorted(
        categories,
        key=lambda c: (c.id != shared_category_id, collation_key(c.name)),
    )


def summarize_categories(
    categories: Iterable[ExpenseCategory],
    collapse_state: Optional["CollapseState"] = None,
) -> list[CategorySummary]:
    """
    Ordered category summaries for display.

    The collapsed flag is copied from the caller's view state; it never
    affects the totals.
    """
    return [
        CategorySummary(
            category_id=category.id,
            name=category.name,
            totals=category_totals(category.expenses),
            count=len(category.expenses),
            collapsed=(
                collapse_state.is_collapsed(category.id)
                if collapse_state is not None
                else False
            ),
        )
        for category in order_categories(categories)
    ]
