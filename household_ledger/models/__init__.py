"""
Data Models Package

This package contains all Pydantic models used in the Household Ledger.
All data flowing through the calculation core must conform to these schemas.
"""

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
    ValidationIssue,
    ValidationResult,
)
from household_ledger.models.results import (
    BudgetSummary,
    CategorySummary,
    CategoryTotals,
    ExpenseGroup,
    PersonalExpenseBreakdown,
    Settlement,
    UserBudgetBreakdown,
)
from household_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "EqualSplit",
    "Expense",
    "ExpenseCategory",
    "FixedSplit",
    "Frequency",
    "LedgerSnapshot",
    "PercentageSplit",
    "PersonalExpenseCategory",
    "Split",
    "SplitType",
    "User",
    "ValidationIssue",
    "ValidationResult",
    # Result models
    "BudgetSummary",
    "CategorySummary",
    "CategoryTotals",
    "ExpenseGroup",
    "PersonalExpenseBreakdown",
    "Settlement",
    "UserBudgetBreakdown",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
