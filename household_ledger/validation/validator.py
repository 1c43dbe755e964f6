"""
Two-Stage Edit Validation

DESIGN DECISION: Every proposed expense (new or edited) is validated
in two stages before it can be committed:

STAGE 1 - SCHEMA VALIDATION:
- Types, required fields, amount > 0 and numeric
- Handled by the Pydantic models; errors are converted to issues

STAGE 2 - HOUSEHOLD VALIDATION:
- Payer and owner are household members
- Percentage shares cover exactly the household and sum to 1
- Personal category reference resolves (informational only)

IMPORTANT: Validation NEVER silently fixes issues. A percentage split
that sums to 0.98 is rejected, not renormalized, and the caller's data
stays untouched so the form can be corrected.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Optional

from pydantic import ValidationError

from household_ledger.calculations.splits import (
    SplitValidationError,
    validate_percentage_shares,
)
from household_ledger.config import get_settings
from household_ledger.models.expense import (
    Expense,
    FixedSplit,
    PercentageSplit,
    PersonalExpenseCategory,
    User,
    ValidationIssue,
    ValidationResult,
)


class ExpenseValidationError(Exception):
    """A proposed expense or edit failed validation and was rejected."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = [i.message for i in result.issues if i.severity == "error"]
        super().__init__("; ".join(messages) or "Expense failed validation")


class ExpenseValidator:
    """
    Validates proposed expenses against the household.

    Stage 1: Schema validation (Pydantic)
    Stage 2: Household validation (needs the users and categories)
    """

    def __init__(
        self,
        personal_categories: Sequence[PersonalExpenseCategory] = (),
        tolerance: Optional[float] = None,
    ):
        """
        Initialize validator.

        Args:
            personal_categories: Known personal categories, used to flag
                                 dangling references
            tolerance: Allowed deviation of percentage shares from 1.0.
                       Defaults to the configured split tolerance.
        """
        self._personal_category_ids = {c.id for c in personal_categories}
        self._tolerance = (
            tolerance if tolerance is not None
            else get_settings().ledger.split_tolerance
        )

    def _schema_issues(self, error: ValidationError) -> list[ValidationIssue]:
        """Stage 1: convert Pydantic errors into issues."""
        issues = []
        for err in error.errors():
            field = ".".join(str(part) for part in err["loc"]) or "expense"
            issues.append(ValidationIssue(
                field=field,
                issue_type="schema",
                message=f"{field}: {err['msg']}",
                severity="error",
            ))
        return issues

    def _household_issues(
        self,
        expense: Expense,
        users: Sequence[User],
    ) -> list[ValidationIssue]:
        """Stage 2: checks that need to know who is in the household."""
        issues = []
        user_ids = [u.id for u in users]

        if expense.paid_by not in user_ids:
            issues.append(ValidationIssue(
                field="paid_by",
                issue_type="unknown_user",
                message=f"Payer {expense.paid_by} is not a household member",
                severity="error",
                suggested_fix="Choose who pays from the household members",
            ))

        if isinstance(expense.split, FixedSplit) and expense.split.owner_id not in user_ids:
            issues.append(ValidationIssue(
                field="split.owner_id",
                issue_type="unknown_user",
                message=f"Owner {expense.split.owner_id} is not a household member",
                severity="error",
                suggested_fix="Assign the expense to a household member",
            ))

        if isinstance(expense.split, PercentageSplit):
            try:
                validate_percentage_shares(
                    expense.split.shares,
                    user_ids,
                    tolerance=self._tolerance,
                )
            except SplitValidationError as e:
                issues.append(ValidationIssue(
                    field="split.shares",
                    issue_type="split_sum" if e.total is not None else "split_participants",
                    message=str(e),
                    severity="error",
                    suggested_fix="Adjust the percentages so they add up to 100%",
                ))

        if (
            expense.personal_category_id
            and self._personal_category_ids
            and expense.personal_category_id not in self._personal_category_ids
        ):
            issues.append(ValidationIssue(
                field="personal_category_id",
                issue_type="orphan_reference",
                message="Category no longer exists; shown as Uncategorized",
                severity="info",
            ))

        return issues

    def _result(
        self,
        expense_id: Optional[str],
        issues: list[ValidationIssue],
    ) -> ValidationResult:
        return ValidationResult(
            expense_id=expense_id,
            is_valid=not any(i.severity == "error" for i in issues),
            issues=issues,
        )

    def validate(
        self,
        expense: Expense,
        users: Sequence[User],
    ) -> ValidationResult:
        """Validate an already constructed expense."""
        return self._result(expense.id, self._household_issues(expense, users))

    def validate_new(
        self,
        data: Mapping[str, Any],
        users: Sequence[User],
    ) -> tuple[Optional[Expense], ValidationResult]:
        """
        Build and validate a new expense from raw field values.

        Returns:
            (expense, result); expense is None when stage 1 failed
        """
        try:
            expense = Expense.model_validate(dict(data))
        except ValidationError as e:
            expense_id = data.get("id")
            if not isinstance(expense_id, str):
                expense_id = None
            return None, self._result(expense_id, self._schema_issues(e))
        return expense, self.validate(expense, users)

    def validate_update(
        self,
        expense: Expense,
        updates: Mapping[str, Any],
        users: Sequence[User],
    ) -> tuple[Optional[Expense], ValidationResult]:
        """
        Merge a partial update onto an expense and validate the candidate.

        The id is preserved and `expense` itself is never modified.

        Returns:
            (candidate, result); candidate is None when stage 1 failed
        """
        try:
            candidate = expense.with_updates(**updates)
        except ValidationError as e:
            return None, self._result(expense.id, self._schema_issues(e))
        return candidate, self.validate(candidate, users)

    @staticmethod
    def ensure_valid(result: ValidationResult) -> None:
        """
        Raises:
            ExpenseValidationError: If the result has error-level issues
        """
        if result.has_errors:
            raise ExpenseValidationError(result)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Short summary suitable for showing next to the edit form."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []
        if result.has_errors:
            lines.append("Please fix the following before saving:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
