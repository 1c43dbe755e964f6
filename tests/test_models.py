"""
Tests for Household Ledger models

Test strategy:
1. Unit tests for individual components (models, calculations, validators)
2. Flow tests for the ledger editor with in-memory storage
3. No external services in tests
"""

import math

import pytest
from pydantic import ValidationError

from household_ledger.models.expense import (
    EqualSplit,
    Expense,
    ExpenseCategory,
    FixedSplit,
    Frequency,
    LedgerSnapshot,
    PercentageSplit,
    PersonalExpenseCategory,
    SplitType,
    User,
    ValidationIssue,
    ValidationResult,
)
from household_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestUserModel:
    """Tests for the User model."""

    def test_user_creation(self):
        """Test User model creation with defaults."""
        user = User(id="u1", name="  Alice  ", monthly_income=30000)
        assert user.name == "Alice"
        assert user.monthly_income == 30000
        assert user.tax_rate == 0.32

    def test_user_rejects_negative_income(self):
        """Test that negative income is rejected."""
        with pytest.raises(ValidationError):
            User(id="u1", name="Alice", monthly_income=-1)

    def test_user_rejects_tax_rate_above_one(self):
        """Test tax rate must be a fraction."""
        with pytest.raises(ValidationError):
            User(id="u1", name="Alice", tax_rate=1.5)

    def test_user_is_immutable(self):
        """Test that users cannot be modified in place."""
        user = User(id="u1", name="Alice")
        with pytest.raises(ValidationError):
            user.monthly_income = 100


class TestExpenseModel:
    """Tests for the Expense model and its amount boundary."""

    def test_expense_defaults(self):
        """Test Expense defaults to a monthly, equal, fixed-bucket expense."""
        expense = Expense(name="Rent", amount=12000, paid_by="u1")
        assert expense.frequency == Frequency.MONTHLY
        assert isinstance(expense.split, EqualSplit)
        assert expense.is_budgeted is False
        assert expense.is_shared is True
        assert expense.id

    @pytest.mark.parametrize("amount", [0, -5, -0.01])
    def test_expense_rejects_non_positive_amount(self, amount):
        """Test that zero and negative amounts are rejected."""
        with pytest.raises(ValidationError):
            Expense(name="Rent", amount=amount, paid_by="u1")

    @pytest.mark.parametrize("amount", ["100", None, True, [100]])
    def test_expense_rejects_non_numeric_amount(self, amount):
        """Test that strings, None and booleans are not accepted as amounts."""
        with pytest.raises(ValidationError):
            Expense(name="Rent", amount=amount, paid_by="u1")

    @pytest.mark.parametrize("amount", [math.inf, math.nan])
    def test_expense_rejects_non_finite_amount(self, amount):
        """Test that infinity and NaN are rejected."""
        with pytest.raises(ValidationError):
            Expense(name="Rent", amount=amount, paid_by="u1")

    def test_fixed_split_makes_personal_expense(self):
        """Test derived fields for a personal expense."""
        expense = Expense(
            name="Gym",
            amount=400,
            paid_by="u1",
            split=FixedSplit(owner_id="u1"),
        )
        assert expense.is_shared is False
        assert expense.user_id == "u1"
        assert expense.split_type == SplitType.FIXED
        assert expense.split_data is None

    def test_percentage_split_exposes_split_data(self):
        """Test derived split data for a percentage split."""
        expense = Expense(
            name="Rent",
            amount=1000,
            paid_by="u1",
            split=PercentageSplit(shares={"u1": 0.75, "u2": 0.25}),
        )
        assert expense.split_type == SplitType.PERCENTAGE
        assert expense.split_data == {"u1": 0.75, "u2": 0.25}
        assert expense.user_id is None

    def test_split_parsed_from_tagged_dict(self):
        """Test the split variant is chosen by its kind tag."""
        expense = Expense.model_validate({
            "name": "Rent",
            "amount": 1000,
            "paid_by": "u1",
            "split": {"kind": "fixed", "owner_id": "u2"},
        })
        assert isinstance(expense.split, FixedSplit)
        assert expense.user_id == "u2"

    def test_unknown_split_kind_rejected(self):
        """Test an unknown split kind cannot be represented."""
        with pytest.raises(ValidationError):
            Expense.model_validate({
                "name": "Rent",
                "amount": 1000,
                "paid_by": "u1",
                "split": {"kind": "weighted"},
            })

    def test_percentage_share_out_of_range_rejected(self):
        """Test a single share above 1 is rejected."""
        with pytest.raises(ValidationError):
            PercentageSplit(shares={"u1": 1.2})

    def test_blank_personal_category_becomes_none(self):
        """Test an empty category reference means uncategorized."""
        expense = Expense(name="Gym", amount=400, paid_by="u1", personal_category_id="")
        assert expense.personal_category_id is None

    def test_with_updates_preserves_id(self):
        """Test partial updates keep the id and leave the original untouched."""
        expense = Expense(name="Rent", amount=1000, paid_by="u1")
        updated = expense.with_updates(amount=1200, id="other", name="New rent")
        assert updated.id == expense.id
        assert updated.amount == 1200
        assert updated.name == "New rent"
        assert expense.amount == 1000

    def test_with_updates_revalidates(self):
        """Test that an invalid update raises instead of applying."""
        expense = Expense(name="Rent", amount=1000, paid_by="u1")
        with pytest.raises(ValidationError):
            expense.with_updates(amount=-1)


class TestLedgerSnapshot:
    """Tests for snapshot lookups."""

    def test_find_expense_returns_category(self):
        """Test locating an expense and its category."""
        rent = Expense(id="e1", name="Rent", amount=1000, paid_by="u1")
        snapshot = LedgerSnapshot(
            users=(User(id="u1", name="Alice"),),
            categories=(ExpenseCategory(id="shared", name="Household", expenses=(rent,)),),
        )
        category, expense = snapshot.find_expense("e1")
        assert category.id == "shared"
        assert expense is rent
        assert snapshot.find_expense("missing") is None
        assert snapshot.all_expenses() == [rent]

    def test_find_personal_category(self):
        """Test personal category lookup."""
        hobbies = PersonalExpenseCategory(id="c1", name="Hobbies")
        snapshot = LedgerSnapshot(personal_categories=(hobbies,))
        assert snapshot.find_personal_category("c1") == hobbies
        assert snapshot.find_personal_category("c2") is None


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_CREATED,
            description="Expense created",
        )
        assert event.event_type == AuditEventType.EXPENSE_CREATED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.expense_created(
            expense_id="e1",
            name="Rent",
            category_id="shared",
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "expense_created"
        assert log_dict["entity_id"] == "e1"
        assert log_dict["details"]["category_id"] == "shared"

    def test_edit_rejected_is_warning(self):
        """Test rejected edits are logged as warnings."""
        event = AuditEventBuilder.edit_rejected(
            expense_id="e1",
            issues=[{"field": "split.shares"}],
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.details["issues"] == [{"field": "split.shares"}]

    def test_category_changed_entity_type(self):
        """Test personal category events are tagged as such."""
        event = AuditEventBuilder.category_changed(
            AuditEventType.PERSONAL_CATEGORY_RENAMED, "c1", "Hobbies"
        )
        assert event.entity_type == "personal_category"
        assert event.description == "Category renamed: Hobbies"


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            expense_id="e1",
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="split.shares",
                    issue_type="split_sum",
                    message="Percentages must add up to 100%",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="name",
                    issue_type="duplicate_name",
                    message="Name already used",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.warnings == ["Name already used"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
