"""
Core Data Models for Household Ledger

These models define the strict schemas for all data flowing through
the calculation core. They are designed to:
1. Reject invalid amounts at the construction boundary
2. Make invalid split/ownership combinations unrepresentable
3. Be immutable, so calculations can never mutate caller input

DESIGN DECISION: The split strategy is a tagged variant
(EqualSplit | PercentageSplit | FixedSplit) discriminated on `kind`.
The flat isShared/splitType/splitData/userId shape used by the
upstream documents lives in `household_ledger.records` only.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def _new_id() -> str:
    return str(uuid4())


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Frequency(str, Enum):
    """How often the stated amount is paid."""
    MONTHLY = "monthly"
    YEARLY = "yearly"


class SplitType(str, Enum):
    """
    Split strategies.

    EQUAL and PERCENTAGE are household (shared) strategies.
    FIXED means the expense is owned wholly by one user.
    """
    EQUAL = "equal"
    PERCENTAGE = "percentage"
    FIXED = "fixed"


# =============================================================================
# HOUSEHOLD MEMBERS
# =============================================================================

class User(BaseModel):
    """An approved household member."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique user id"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name"
    )
    monthly_income: float = Field(
        default=0.0,
        ge=0,
        allow_inf_nan=False,
        description="Gross monthly income"
    )
    color: str = Field(
        default="#10B981",
        description="Display color"
    )
    tax_rate: float = Field(
        default=0.32,
        ge=0.0,
        le=1.0,
        description="Flat tax rate applied to income"
    )


# =============================================================================
# SPLIT VARIANTS
# =============================================================================

class EqualSplit(BaseModel):
    """Amount divided evenly among all participants."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["equal"] = "equal"


class PercentageSplit(BaseModel):
    """
    Amount divided by per-user fractions.

    The fractions are frozen when the expense is created. Whether they
    sum to 1 and cover exactly the household is checked at edit time by
    the validator, because that depends on who the participants are.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["percentage"] = "percentage"
    shares: dict[str, float] = Field(
        ...,
        min_length=1,
        description="Mapping of user id to fraction of the amount"
    )

    @field_validator('shares')
    @classmethod
    def validate_fractions(cls, v: dict[str, float]) -> dict[str, float]:
        """Every fraction must be within [0, 1]."""
        for user_id, fraction in v.items():
            if not 0.0 <= fraction <= 1.0:
                raise ValueError(
                    f"Share for {user_id} must be between 0 and 1, got {fraction}"
                )
        return v


class FixedSplit(BaseModel):
    """Not split at all: the expense belongs wholly to one user."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    kind: Literal["fixed"] = "fixed"
    owner_id: str = Field(
        ...,
        min_length=1,
        description="User who owns this personal expense"
    )


Split = Annotated[
    Union[EqualSplit, PercentageSplit, FixedSplit],
    Field(discriminator="kind"),
]


# =============================================================================
# EXPENSES AND CATEGORIES
# =============================================================================

class Expense(BaseModel):
    """
    A tracked recurring expense.

    The monthly amount is derived (see calculations.frequency) and never
    stored. Budgeted/fixed is an accounting bucket and varies
    independently of the split strategy. Unknown fields are rejected so
    a misspelled edit never passes as a no-op.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")

    id: str = Field(
        default_factory=_new_id,
        min_length=1,
        description="Unique expense id"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Expense name"
    )
    amount: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Amount paid per period"
    )
    frequency: Frequency = Field(
        default=Frequency.MONTHLY,
        description="Period the amount refers to"
    )
    split: Split = Field(
        default_factory=EqualSplit,
        description="Split strategy"
    )
    paid_by: str = Field(
        ...,
        min_length=1,
        description="User who pays the expense"
    )
    personal_category_id: Optional[str] = Field(
        default=None,
        description="Personal sub-category the expense is filed under"
    )
    is_budgeted: bool = Field(
        default=False,
        description="Budgeted (variable) rather than fixed cost"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def reject_non_numeric(cls, v):
        """Only real numbers are accepted; no strings, no booleans."""
        if isinstance(v, bool) or not isinstance(v, (int, float, Decimal)):
            raise ValueError(f"Amount must be a number, got {type(v).__name__}")
        return v

    @field_validator('personal_category_id')
    @classmethod
    def blank_category_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @property
    def is_shared(self) -> bool:
        """Household expenses are every expense not owned by one user."""
        return not isinstance(self.split, FixedSplit)

    @property
    def split_type(self) -> SplitType:
        return SplitType(self.split.kind)

    @property
    def user_id(self) -> Optional[str]:
        """Owner of a personal expense."""
        if isinstance(self.split, FixedSplit):
            return self.split.owner_id
        return None

    @property
    def split_data(self) -> Optional[dict[str, float]]:
        if isinstance(self.split, PercentageSplit):
            return dict(self.split.shares)
        return None

    def with_updates(self, **updates) -> "Expense":
        """
        Return a re-validated copy with a subset of fields replaced.

        The id is always preserved. Raises pydantic.ValidationError when
        the merged record is invalid or an update names an unknown field;
        self is never modified.
        """
        updates.pop("id", None)
        data = self.model_dump()
        data.update(updates)
        data["id"] = self.id
        return Expense.model_validate(data)


class ExpenseCategory(BaseModel):
    """A top-level category holding an ordered collection of expenses."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(default_factory=_new_id, min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    expenses: tuple[Expense, ...] = Field(default_factory=tuple)
    collapsed: bool = False

    @property
    def total_count(self) -> int:
        return len(self.expenses)


class PersonalExpenseCategory(BaseModel):
    """A user-defined sub-category for personal expenses."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(default_factory=_new_id, min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    collapsed: bool = False


class LedgerSnapshot(BaseModel):
    """
    An in-memory snapshot of a household's ledger.

    Everything the engine computes is derived from one of these.
    Users are kept in household order (owner first).
    """
    model_config = ConfigDict(frozen=True)

    users: tuple[User, ...] = Field(default_factory=tuple)
    categories: tuple[ExpenseCategory, ...] = Field(default_factory=tuple)
    personal_categories: tuple[PersonalExpenseCategory, ...] = Field(
        default_factory=tuple
    )

    def all_expenses(self) -> list[Expense]:
        return [e for category in self.categories for e in category.expenses]

    def find_user(self, user_id: str) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)

    def find_category(self, category_id: str) -> Optional[ExpenseCategory]:
        return next((c for c in self.categories if c.id == category_id), None)

    def find_personal_category(
        self,
        category_id: str,
    ) -> Optional[PersonalExpenseCategory]:
        return next(
            (c for c in self.personal_categories if c.id == category_id),
            None,
        )

    def find_expense(
        self,
        expense_id: str,
    ) -> Optional[tuple[ExpenseCategory, Expense]]:
        """Locate an expense and the category that holds it."""
        for category in self.categories:
            for expense in category.expenses:
                if expense.id == expense_id:
                    return category, expense
        return None


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'schema', 'unknown_user', 'split_sum')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """Result of validating a proposed expense or edit."""

    expense_id: Optional[str] = Field(
        default=None,
        description="Id of the expense being validated, if known"
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [i.message for i in self.issues if i.severity == "warning"]
