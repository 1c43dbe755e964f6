"""Calculation core: every function here is pure and synchronous."""

from household_ledger.calculations.aggregation import (
    UNCATEGORIZED_ID,
    category_totals,
    group_by_personal_category,
    order_categories,
    summarize_categories,
)
from household_ledger.calculations.collation import collation_key
from household_ledger.calculations.frequency import (
    format_expense_amount,
    format_money,
    frequency_text,
    monthly_amount,
)
from household_ledger.calculations.settlements import (
    compute_balances,
    compute_settlements,
    settle,
)
from household_ledger.calculations.sorting import (
    SortKey,
    SortOrder,
    SortState,
    sort_expenses,
)
from household_ledger.calculations.splits import (
    SplitValidationError,
    compute_shares,
    default_split,
    income_weighted_shares,
    validate_percentage_shares,
)
from household_ledger.calculations.summary import (
    after_tax_income,
    budget_summary,
    user_breakdowns,
)

__all__ = [
    # Collation
    "collation_key",
    # Frequency
    "format_expense_amount",
    "format_money",
    "frequency_text",
    "monthly_amount",
    # Splits
    "SplitValidationError",
    "compute_shares",
    "default_split",
    "income_weighted_shares",
    "validate_percentage_shares",
    # Aggregation
    "UNCATEGORIZED_ID",
    "category_totals",
    "group_by_personal_category",
    "order_categories",
    "summarize_categories",
    # Sorting
    "SortKey",
    "SortOrder",
    "SortState",
    "sort_expenses",
    # Settlements
    "compute_balances",
    "compute_settlements",
    "settle",
    # Summary
    "after_tax_income",
    "budget_summary",
    "user_breakdowns",
]
