"""
Calculation Result Models

Everything the calculation core returns is a freshly built value of one
of these models. None of them is ever fed back into storage.
"""

from pydantic import BaseModel, ConfigDict, Field

from household_ledger.models.expense import Expense


class CategoryTotals(BaseModel):
    """Monthly totals for one category, split into accounting buckets."""
    model_config = ConfigDict(frozen=True)

    fixed_total: float = 0.0
    budgeted_total: float = 0.0
    grand_total: float = 0.0


class CategorySummary(BaseModel):
    """A top-level category with its totals and presentation flag."""
    model_config = ConfigDict(frozen=True)

    category_id: str
    name: str
    totals: CategoryTotals
    count: int = Field(ge=0)
    collapsed: bool = False


class ExpenseGroup(BaseModel):
    """Personal expenses sharing one resolved sub-category."""
    model_config = ConfigDict(frozen=True)

    category_id: str
    name: str
    expenses: tuple[Expense, ...] = Field(default_factory=tuple)
    total: float = 0.0

    @property
    def count(self) -> int:
        return len(self.expenses)


class Settlement(BaseModel):
    """A single transfer that evens out household balances."""
    model_config = ConfigDict(frozen=True)

    from_user: str
    to_user: str
    amount: float = Field(gt=0)


class PersonalExpenseBreakdown(BaseModel):
    """One user's personal spending in one sub-category."""
    model_config = ConfigDict(frozen=True)

    category_id: str
    category_name: str
    amount: float
    percentage: float = Field(description="Share of after-tax income, in percent")


class UserBudgetBreakdown(BaseModel):
    """Monthly position of one household member."""
    model_config = ConfigDict(frozen=True)

    user_id: str
    income: float = Field(description="Monthly after-tax income")
    shared_expenses_owed: float
    personal_expenses: float
    remaining_after_expenses: float
    shared_expense_percentage: float
    personal_expense_breakdown: tuple[PersonalExpenseBreakdown, ...] = Field(
        default_factory=tuple
    )


class BudgetSummary(BaseModel):
    """Household-wide monthly summary."""
    model_config = ConfigDict(frozen=True)

    total_income: float
    total_shared_expenses: float
    total_personal_expenses: float
    total_budgeted_shared_expenses: float
    total_budgeted_personal_expenses: float
    after_tax_income: float
    after_shared_expenses: float
    after_personal_expenses: float
    remaining_income: float
    percentage_remaining: float
