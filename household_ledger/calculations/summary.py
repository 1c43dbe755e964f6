"""
Budget Summary

Household-wide and per-member monthly positions, built from the split
resolver and the category aggregator. Income is taxed at each member's
flat tax rate.
"""

from household_ledger.calculations.aggregation import (
    category_totals,
    group_by_personal_category,
)
from household_ledger.calculations.frequency import monthly_amount
from household_ledger.calculations.splits import compute_shares
from household_ledger.models.expense import LedgerSnapshot, User
from household_ledger.models.results import (
    BudgetSummary,
    PersonalExpenseBreakdown,
    UserBudgetBreakdown,
)


def after_tax_income(user: User) -> float:
    return user.monthly_income * (1 - user.tax_rate)


def _percent(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def user_breakdowns(snapshot: LedgerSnapshot) -> list[UserBudgetBreakdown]:
    """One breakdown per household member, in household order."""
    users = snapshot.users
    expenses = snapshot.all_expenses()
    shared = [e for e in expenses if e.is_shared]

    breakdowns = []
    for user in users:
        income = after_tax_income(user)

        shared_owed = sum(
            compute_shares(e, users, monthly=True).get(user.id, 0.0)
            for e in shared
        )

        personal = [e for e in expenses if e.user_id == user.id]
        personal_total = sum(monthly_amount(e) for e in personal)

        groups = group_by_personal_category(personal, snapshot.personal_categories)
        personal_breakdown = tuple(
            PersonalExpenseBreakdown(
                category_id=group.category_id,
                category_name=group.name,
                amount=group.total,
                percentage=_percent(group.total, income),
            )
            for group in groups
        )

        breakdowns.append(UserBudgetBreakdown(
            user_id=user.id,
            income=income,
            shared_expenses_owed=shared_owed,
            personal_expenses=personal_total,
            remaining_after_expenses=income - shared_owed - personal_total,
            shared_expense_percentage=_percent(shared_owed, income),
            personal_expense_breakdown=personal_breakdown,
        ))

    return breakdowns


def budget_summary(snapshot: LedgerSnapshot) -> BudgetSummary:
    """Household totals: income, shared and personal spend, what remains."""
    expenses = snapshot.all_expenses()
    shared = category_totals(e for e in expenses if e.is_shared)
    personal = category_totals(e for e in expenses if not e.is_shared)

    total_income = sum(u.monthly_income for u in snapshot.users)
    taxed_income = sum(after_tax_income(u) for u in snapshot.users)
    after_shared = taxed_income - shared.grand_total
    after_personal = after_shared - personal.grand_total

    return BudgetSummary(
        total_income=total_income,
        total_shared_expenses=shared.grand_total,
        total_personal_expenses=personal.grand_total,
        total_budgeted_shared_expenses=shared.budgeted_total,
        total_budgeted_personal_expenses=personal.budgeted_total,
        after_tax_income=taxed_income,
        after_shared_expenses=after_shared,
        after_personal_expenses=after_personal,
        remaining_income=after_personal,
        percentage_remaining=_percent(after_personal, taxed_income),
    )
