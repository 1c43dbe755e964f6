"""
Record Adapter

The persistence/sync layer stores flat camelCase documents:

    {"id": "...", "name": "Rent", "amount": 12000, "isShared": true,
     "splitType": "percentage", "splitData": {"u1": 0.6, "u2": 0.4},
     "paidBy": "u1", "isYearly": false, "isBudgeted": false}

This module converts those documents to and from the tagged models.
Only this module knows about the flat shape.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from household_ledger.calculations.splits import income_weighted_shares
from household_ledger.config import get_settings
from household_ledger.models.expense import (
    EqualSplit,
    Expense,
    ExpenseCategory,
    FixedSplit,
    Frequency,
    LedgerSnapshot,
    PercentageSplit,
    PersonalExpenseCategory,
    Split,
    SplitType,
    User,
)


class ExpenseRecord(BaseModel):
    """Flat expense document as stored upstream."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    # Left untyped here; Expense rejects non-numeric amounts
    amount: Any
    is_shared: bool = Field(default=False, alias="isShared")
    split_type: Optional[SplitType] = Field(default=None, alias="splitType")
    split_data: Optional[dict[str, float]] = Field(default=None, alias="splitData")
    paid_by: Optional[str] = Field(default=None, alias="paidBy")
    user_id: Optional[str] = Field(default=None, alias="userId")
    frequency: Optional[Frequency] = None
    is_yearly: Optional[bool] = Field(default=None, alias="isYearly")
    is_budgeted: bool = Field(default=False, alias="isBudgeted")
    personal_category_id: Optional[str] = Field(default=None, alias="personalCategoryId")


class UserRecord(BaseModel):
    """Flat user document as stored upstream."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    monthly_income: float = Field(default=0.0, alias="monthlyIncome")
    color: Optional[str] = None
    tax_rate: Optional[float] = Field(default=None, alias="taxRate")
    municipal_tax_rate: Optional[float] = Field(default=None, alias="municipalTaxRate")


class CategoryRecord(BaseModel):
    """Flat category document; personal categories carry no expenses."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    collapsed: bool = False
    expenses: list[dict[str, Any]] = Field(default_factory=list)


def _split_from_record(record: ExpenseRecord, users: Sequence[User]) -> Split:
    if not record.is_shared or record.split_type == SplitType.FIXED:
        owner_id = record.user_id or record.paid_by
        if not owner_id:
            raise ValueError(f"Personal expense {record.id} has no owner")
        return FixedSplit(owner_id=owner_id)

    if record.split_type == SplitType.PERCENTAGE:
        shares = record.split_data or income_weighted_shares(users)
        if not shares:
            raise ValueError(f"Percentage expense {record.id} has no shares")
        return PercentageSplit(shares=shares)

    return EqualSplit()


def expense_from_record(
    record: Mapping[str, Any],
    users: Sequence[User] = (),
) -> Expense:
    """
    Build an Expense from a stored document.

    Shared percentage documents without splitData fall back to
    income-weighted shares of `users`. A missing payer defaults to the
    owner, then to the first household member.

    Raises:
        pydantic.ValidationError / ValueError: If the document is invalid
    """
    parsed = ExpenseRecord.model_validate(record)
    split = _split_from_record(parsed, users)

    paid_by = parsed.paid_by
    if not paid_by and isinstance(split, FixedSplit):
        paid_by = split.owner_id
    if not paid_by and users:
        paid_by = users[0].id
    if not paid_by:
        raise ValueError(f"Expense {parsed.id} has no payer")

    frequency = parsed.frequency or (
        Frequency.YEARLY if parsed.is_yearly else Frequency.MONTHLY
    )

    return Expense(
        id=parsed.id,
        name=parsed.name,
        amount=parsed.amount,
        frequency=frequency,
        split=split,
        paid_by=paid_by,
        personal_category_id=parsed.personal_category_id,
        is_budgeted=parsed.is_budgeted,
    )


def expense_to_record(expense: Expense) -> dict[str, Any]:
    """Flatten an Expense into the stored document shape (no null fields)."""
    record: dict[str, Any] = {
        "id": expense.id,
        "name": expense.name,
        "amount": expense.amount,
        "frequency": expense.frequency.value,
        "isYearly": expense.frequency == Frequency.YEARLY,
        "isShared": expense.is_shared,
        "splitType": expense.split_type.value,
        "paidBy": expense.paid_by,
        "isBudgeted": expense.is_budgeted,
    }
    if expense.split_data is not None:
        record["splitData"] = expense.split_data
    if expense.user_id is not None:
        record["userId"] = expense.user_id
    if expense.personal_category_id is not None:
        record["personalCategoryId"] = expense.personal_category_id
    return record


def user_from_record(record: Mapping[str, Any]) -> User:
    """Build a User, defaulting the tax rate to the membership default."""
    parsed = UserRecord.model_validate(record)
    tax_rate = parsed.tax_rate
    if tax_rate is None:
        tax_rate = parsed.municipal_tax_rate
    if tax_rate is None:
        tax_rate = get_settings().membership.default_tax_rate

    data = {
        "id": parsed.id,
        "name": parsed.name,
        "monthly_income": parsed.monthly_income,
        "tax_rate": tax_rate,
    }
    if parsed.color:
        data["color"] = parsed.color
    return User(**data)


def category_from_record(
    record: Mapping[str, Any],
    users: Sequence[User] = (),
) -> ExpenseCategory:
    parsed = CategoryRecord.model_validate(record)
    return ExpenseCategory(
        id=parsed.id,
        name=parsed.name,
        collapsed=parsed.collapsed,
        expenses=tuple(expense_from_record(e, users) for e in parsed.expenses),
    )


def personal_category_from_record(record: Mapping[str, Any]) -> PersonalExpenseCategory:
    parsed = CategoryRecord.model_validate(record)
    return PersonalExpenseCategory(
        id=parsed.id,
        name=parsed.name,
        collapsed=parsed.collapsed,
    )


def snapshot_from_records(
    users: Iterable[Mapping[str, Any]],
    categories: Iterable[Mapping[str, Any]] = (),
    personal_categories: Iterable[Mapping[str, Any]] = (),
) -> LedgerSnapshot:
    """Assemble a LedgerSnapshot from the upstream collections."""
    parsed_users = tuple(user_from_record(u) for u in users)
    return LedgerSnapshot(
        users=parsed_users,
        categories=tuple(category_from_record(c, parsed_users) for c in categories),
        personal_categories=tuple(
            personal_category_from_record(c) for c in personal_categories
        ),
    )
