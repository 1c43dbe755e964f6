"""
Ledger Editor

This module applies lifecycle edits (create, update, move, delete) to
expenses and categories.

DESIGN DECISION: The editor enforces the boundaries:
- Snapshots are immutable; every edit returns a NEW snapshot
- A rejected edit raises before anything is built, so the caller's
  snapshot (and form state) is left exactly as it was
- Every committed or rejected edit is audited

Serializing writes to the authoritative store, and allowing at most
one in-flight edit per expense, is the owning application's job.
"""

from collections.abc import Mapping
from typing import Any, Optional
from uuid import UUID

from household_ledger.audit import AuditLogger
from household_ledger.models.audit import AuditEventBuilder, AuditEventType
from household_ledger.models.expense import (
    Expense,
    ExpenseCategory,
    LedgerSnapshot,
    PersonalExpenseCategory,
    ValidationResult,
)
from household_ledger.validation import ExpenseValidationError, ExpenseValidator


class NotFoundError(LookupError):
    """An edit referenced an expense or category that does not exist."""
    pass


class LedgerEditor:
    """
    Applies edits to ledger snapshots.

    Usage:
        editor = LedgerEditor()
        snapshot, expense = editor.add_expense(snapshot, "shared", {...})
        snapshot = editor.update_expense(snapshot, expense.id, {"amount": 900})
    """

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._audit = audit_logger or AuditLogger()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_category(
        self,
        snapshot: LedgerSnapshot,
        category_id: str,
    ) -> ExpenseCategory:
        category = snapshot.find_category(category_id)
        if category is None:
            raise NotFoundError(f"Category not found: {category_id}")
        return category

    def _require_personal_category(
        self,
        snapshot: LedgerSnapshot,
        category_id: str,
    ) -> PersonalExpenseCategory:
        category = snapshot.find_personal_category(category_id)
        if category is None:
            raise NotFoundError(f"Personal category not found: {category_id}")
        return category

    def _require_expense(
        self,
        snapshot: LedgerSnapshot,
        expense_id: str,
    ) -> tuple[ExpenseCategory, Expense]:
        found = snapshot.find_expense(expense_id)
        if found is None:
            raise NotFoundError(f"Expense not found: {expense_id}")
        return found

    def _reject_if_invalid(
        self,
        result: ValidationResult,
        correlation_id: Optional[UUID],
    ) -> None:
        if not result.has_errors:
            return
        self._audit.log(AuditEventBuilder.edit_rejected(
            expense_id=result.expense_id,
            issues=[i.model_dump() for i in result.issues],
            correlation_id=correlation_id,
        ))
        raise ExpenseValidationError(result)

    @staticmethod
    def _with_category(
        snapshot: LedgerSnapshot,
        updated: ExpenseCategory,
    ) -> LedgerSnapshot:
        categories = tuple(
            updated if c.id == updated.id else c for c in snapshot.categories
        )
        return snapshot.model_copy(update={"categories": categories})

    @staticmethod
    def _with_personal_category(
        snapshot: LedgerSnapshot,
        updated: PersonalExpenseCategory,
    ) -> LedgerSnapshot:
        categories = tuple(
            updated if c.id == updated.id else c
            for c in snapshot.personal_categories
        )
        return snapshot.model_copy(update={"personal_categories": categories})

    @staticmethod
    def _copy_category(category: ExpenseCategory, **changes) -> ExpenseCategory:
        """Rebuild a category so name changes are validated."""
        data = {
            "id": category.id,
            "name": category.name,
            "expenses": category.expenses,
            "collapsed": category.collapsed,
        }
        data.update(changes)
        return ExpenseCategory(**data)

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def add_expense(
        self,
        snapshot: LedgerSnapshot,
        category_id: str,
        data: Mapping[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> tuple[LedgerSnapshot, Expense]:
        """
        Validate and append a new expense to a category.

        Raises:
            NotFoundError: If the category does not exist
            ExpenseValidationError: If the expense is invalid
        """
        category = self._require_category(snapshot, category_id)

        validator = ExpenseValidator(snapshot.personal_categories)
        expense, result = validator.validate_new(data, snapshot.users)
        self._reject_if_invalid(result, correlation_id)

        updated = self._copy_category(category, expenses=category.expenses + (expense,))
        self._audit.log(AuditEventBuilder.expense_created(
            expense_id=expense.id,
            name=expense.name,
            category_id=category_id,
            correlation_id=correlation_id,
        ))
        return self._with_category(snapshot, updated), expense

    def update_expense(
        self,
        snapshot: LedgerSnapshot,
        expense_id: str,
        updates: Mapping[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> LedgerSnapshot:
        """
        Replace a subset of an expense's fields, preserving its id.

        The whole update is rejected if the merged expense is invalid;
        nothing is partially applied.

        Raises:
            NotFoundError: If the expense does not exist
            ExpenseValidationError: If the merged expense is invalid
        """
        category, expense = self._require_expense(snapshot, expense_id)

        validator = ExpenseValidator(snapshot.personal_categories)
        candidate, result = validator.validate_update(expense, updates, snapshot.users)
        self._reject_if_invalid(result, correlation_id)

        expenses = tuple(
            candidate if e.id == expense_id else e for e in category.expenses
        )
        self._audit.log(AuditEventBuilder.expense_updated(
            expense_id=expense_id,
            fields=sorted(k for k in updates if k != "id"),
            correlation_id=correlation_id,
        ))
        return self._with_category(
            snapshot, self._copy_category(category, expenses=expenses)
        )

    def move_expense(
        self,
        snapshot: LedgerSnapshot,
        expense_id: str,
        to_category_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerSnapshot:
        """Move an expense to the end of another category."""
        source, expense = self._require_expense(snapshot, expense_id)
        target = self._require_category(snapshot, to_category_id)
        if source.id == target.id:
            return snapshot

        snapshot = self._with_category(snapshot, self._copy_category(
            source,
            expenses=tuple(e for e in source.expenses if e.id != expense_id),
        ))
        snapshot = self._with_category(snapshot, self._copy_category(
            target,
            expenses=target.expenses + (expense,),
        ))
        self._audit.log(AuditEventBuilder.expense_moved(
            expense_id=expense_id,
            from_category_id=source.id,
            to_category_id=target.id,
            correlation_id=correlation_id,
        ))
        return snapshot

    def delete_expense(
        self,
        snapshot: LedgerSnapshot,
        expense_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerSnapshot:
        """Remove an expense from its category."""
        category, _ = self._require_expense(snapshot, expense_id)
        updated = self._copy_category(
            category,
            expenses=tuple(e for e in category.expenses if e.id != expense_id),
        )
        self._audit.log(AuditEventBuilder.expense_deleted(
            expense_id=expense_id,
            category_id=category.id,
            correlation_id=correlation_id,
        ))
        return self._with_category(snapshot, updated)

    # -------------------------------------------------------------------------
    # Top-level categories
    # -------------------------------------------------------------------------

    def add_category(
        self,
        snapshot: LedgerSnapshot,
        name: str,
        category_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[LedgerSnapshot, ExpenseCategory]:
        """
        Create an empty category.

        Raises:
            ValueError: If a category with the same id already exists
        """
        data = {"name": name}
        if category_id is not None:
            data["id"] = category_id
        category = ExpenseCategory(**data)
        if snapshot.find_category(category.id) is not None:
            raise ValueError(f"Category already exists: {category.id}")

        self._audit.log(AuditEventBuilder.category_changed(
            AuditEventType.CATEGORY_CREATED, category.id, category.name, correlation_id
        ))
        return (
            snapshot.model_copy(update={"categories": snapshot.categories + (category,)}),
            category,
        )

    def rename_category(
        self,
        snapshot: LedgerSnapshot,
        category_id: str,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerSnapshot:
        category = self._require_category(snapshot, category_id)
        updated = self._copy_category(category, name=name)
        self._audit.log(AuditEventBuilder.category_changed(
            AuditEventType.CATEGORY_RENAMED, category_id, updated.name, correlation_id
        ))
        return self._with_category(snapshot, updated)

    def delete_category(
        self,
        snapshot: LedgerSnapshot,
        category_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerSnapshot:
        """Delete a category together with the expenses it holds."""
        category = self._require_category(snapshot, category_id)
        self._audit.log(AuditEventBuilder.category_changed(
            AuditEventType.CATEGORY_DELETED, category_id, category.name, correlation_id
        ))
        return snapshot.model_copy(update={
            "categories": tuple(c for c in snapshot.categories if c.id != category_id)
        })

    def toggle_category_collapse(
        self,
        snapshot: LedgerSnapshot,
        category_id: str,
    ) -> LedgerSnapshot:
        """Flip the collapsed flag stored with a category."""
        category = self._require_category(snapshot, category_id)
        return self._with_category(
            snapshot, self._copy_category(category, collapsed=not category.collapsed)
        )

    # -------------------------------------------------------------------------
    # Personal categories
    # -------------------------------------------------------------------------

    def add_personal_category(
        self,
        snapshot: LedgerSnapshot,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[LedgerSnapshot, PersonalExpenseCategory]:
        category = PersonalExpenseCategory(name=name)
        self._audit.log(AuditEventBuilder.category_changed(
            AuditEventType.PERSONAL_CATEGORY_CREATED, category.id, category.name,
            correlation_id,
        ))
        return (
            snapshot.model_copy(update={
                "personal_categories": snapshot.personal_categories + (category,)
            }),
            category,
        )

    def rename_personal_category(
        self,
        snapshot: LedgerSnapshot,
        category_id: str,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerSnapshot:
        category = self._require_personal_category(snapshot, category_id)
        updated = PersonalExpenseCategory(
            id=category.id, name=name, collapsed=category.collapsed
        )
        self._audit.log(AuditEventBuilder.category_changed(
            AuditEventType.PERSONAL_CATEGORY_RENAMED, category_id, updated.name,
            correlation_id,
        ))
        return self._with_personal_category(snapshot, updated)

    def delete_personal_category(
        self,
        snapshot: LedgerSnapshot,
        category_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerSnapshot:
        """
        Delete a personal category and clear references to it.

        Expenses that pointed at it become uncategorized.
        """
        category = self._require_personal_category(snapshot, category_id)

        categories = []
        for top in snapshot.categories:
            if any(e.personal_category_id == category_id for e in top.expenses):
                top = self._copy_category(top, expenses=tuple(
                    e.model_copy(update={"personal_category_id": None})
                    if e.personal_category_id == category_id else e
                    for e in top.expenses
                ))
            categories.append(top)

        self._audit.log(AuditEventBuilder.category_changed(
            AuditEventType.PERSONAL_CATEGORY_DELETED, category_id, category.name,
            correlation_id,
        ))
        return snapshot.model_copy(update={
            "categories": tuple(categories),
            "personal_categories": tuple(
                c for c in snapshot.personal_categories if c.id != category_id
            ),
        })

    def toggle_personal_category_collapse(
        self,
        snapshot: LedgerSnapshot,
        category_id: str,
    ) -> LedgerSnapshot:
        category = self._require_personal_category(snapshot, category_id)
        updated = category.model_copy(update={"collapsed": not category.collapsed})
        return self._with_personal_category(snapshot, updated)
