"""
Tests for the flat record adapter and configuration.
"""

import pytest
from pydantic import ValidationError

from household_ledger.config import (
    LedgerSettings,
    MembershipSettings,
    get_settings,
    validate_all_settings,
)
from household_ledger.models.expense import (
    EqualSplit,
    FixedSplit,
    Frequency,
    PercentageSplit,
    User,
)
from household_ledger.records import (
    expense_from_record,
    expense_to_record,
    snapshot_from_records,
    user_from_record,
)


USERS = (
    User(id="u1", name="Alice", monthly_income=30000),
    User(id="u2", name="Bob", monthly_income=10000),
)


class TestExpenseRecords:
    """Tests for converting stored expense documents."""

    def test_percentage_record(self):
        """Test a shared percentage document parses into a tagged split."""
        expense = expense_from_record({
            "id": "e1",
            "name": "Rent",
            "amount": 12000,
            "isShared": True,
            "splitType": "percentage",
            "splitData": {"u1": 0.6, "u2": 0.4},
            "paidBy": "u1",
        })
        assert expense.id == "e1"
        assert expense.split == PercentageSplit(shares={"u1": 0.6, "u2": 0.4})
        assert expense.frequency == Frequency.MONTHLY

    def test_yearly_flag(self):
        """Test the legacy isYearly flag maps to yearly frequency."""
        expense = expense_from_record({
            "id": "e1",
            "name": "Insurance",
            "amount": 1200,
            "isShared": True,
            "splitType": "equal",
            "paidBy": "u1",
            "isYearly": True,
        })
        assert expense.frequency == Frequency.YEARLY
        assert isinstance(expense.split, EqualSplit)

    def test_personal_record_owner(self):
        """Test a non-shared document becomes a fixed split for its owner."""
        expense = expense_from_record({
            "id": "e1",
            "name": "Gym",
            "amount": 400,
            "isShared": False,
            "userId": "u2",
        })
        assert expense.split == FixedSplit(owner_id="u2")
        assert expense.paid_by == "u2"

    def test_percentage_without_shares_uses_income(self):
        """Test missing splitData falls back to income-weighted shares."""
        expense = expense_from_record({
            "id": "e1",
            "name": "Rent",
            "amount": 1000,
            "isShared": True,
            "splitType": "percentage",
        }, USERS)
        assert expense.split.shares == pytest.approx({"u1": 0.75, "u2": 0.25})
        assert expense.paid_by == "u1"

    def test_missing_payer_without_users(self):
        """Test a shared document needs a payer when there is no household."""
        with pytest.raises(ValueError):
            expense_from_record({
                "id": "e1",
                "name": "Rent",
                "amount": 1000,
                "isShared": True,
                "splitType": "equal",
            })

    def test_string_amount_rejected(self):
        """Test stored amounts must be numbers."""
        with pytest.raises(ValidationError):
            expense_from_record({
                "id": "e1",
                "name": "Rent",
                "amount": "1000",
                "isShared": True,
                "paidBy": "u1",
            })

    def test_to_record_omits_nulls(self):
        """Test flattened documents carry only meaningful fields."""
        expense = expense_from_record({
            "id": "e1",
            "name": "Gym",
            "amount": 400,
            "isShared": False,
            "userId": "u1",
            "isYearly": True,
        })
        record = expense_to_record(expense)
        assert record == {
            "id": "e1",
            "name": "Gym",
            "amount": 400,
            "frequency": "yearly",
            "isYearly": True,
            "isShared": False,
            "splitType": "fixed",
            "paidBy": "u1",
            "isBudgeted": False,
            "userId": "u1",
        }


class TestUserRecords:
    """Tests for stored user documents."""

    def test_tax_rate_fallbacks(self):
        """Test taxRate, then municipalTaxRate, then the configured default."""
        assert user_from_record({"id": "u1", "name": "A", "taxRate": 0.25}).tax_rate == 0.25
        assert user_from_record(
            {"id": "u1", "name": "A", "municipalTaxRate": 0.3}
        ).tax_rate == 0.3
        assert user_from_record({"id": "u1", "name": "A"}).tax_rate == pytest.approx(
            get_settings().membership.default_tax_rate
        )

    def test_snapshot_from_records(self):
        """Test assembling a snapshot from the upstream collections."""
        snapshot = snapshot_from_records(
            users=[
                {"id": "u1", "name": "Alice", "monthlyIncome": 30000, "color": "#3B82F6"},
                {"id": "u2", "name": "Bob", "monthlyIncome": 10000},
            ],
            categories=[{
                "id": "shared",
                "name": "Household",
                "collapsed": True,
                "expenses": [{
                    "id": "e1",
                    "name": "Rent",
                    "amount": 1000,
                    "isShared": True,
                    "splitType": "percentage",
                }],
            }],
            personal_categories=[{"id": "c1", "name": "Hobbies"}],
        )
        assert snapshot.find_user("u1").color == "#3B82F6"
        assert snapshot.find_category("shared").collapsed is True
        _, rent = snapshot.find_expense("e1")
        assert rent.split.shares == pytest.approx({"u1": 0.75, "u2": 0.25})
        assert snapshot.find_personal_category("c1").name == "Hobbies"


class TestSettings:
    """Tests for pydantic-settings configuration."""

    def test_defaults(self):
        """Test built-in defaults."""
        ledger = LedgerSettings()
        assert ledger.shared_category_id == "shared"
        assert ledger.split_tolerance == pytest.approx(0.001)

    def test_env_override(self, monkeypatch):
        """Test environment variables use the section prefix."""
        monkeypatch.setenv("LEDGER_CURRENCY_SUFFIX", "EUR")
        monkeypatch.setenv("MEMBERSHIP_DEFAULT_TAX_RATE", "0.25")
        assert LedgerSettings().currency_suffix == "EUR"
        assert MembershipSettings().default_tax_rate == pytest.approx(0.25)

    def test_palette_list(self):
        """Test the palette string is exposed as a list."""
        settings = MembershipSettings(color_palette="#111111, #222222,")
        assert settings.palette == ["#111111", "#222222"]

    def test_empty_palette_rejected(self):
        """Test a palette with no colors is a configuration error."""
        with pytest.raises(ValidationError):
            MembershipSettings(color_palette=" , ")

    def test_validate_all_settings(self):
        """Test the startup check reports every section."""
        results = validate_all_settings()
        assert results["ledger"] is True
        assert results["membership"] is True
        assert results["logging"] is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
