"""
Tests for payroll arithmetic and calendar helpers.
"""

from datetime import date
from decimal import Decimal

import pytest

from erp_ledger.rules.payroll import (
    calendar_days_in_month,
    clip_to_month,
    compute_payroll_totals,
    consultant_earnings,
    month_name,
    tds_amount,
    validate_period,
    working_days_between,
)


class TestCalendar:

    def test_month_name(self):
        assert month_name(3) == "March"
        assert month_name(0) == "Unknown"
        assert month_name(13) == "Unknown"

    def test_leap_february(self):
        assert calendar_days_in_month(2, 2024) == 29
        assert calendar_days_in_month(2, 2023) == 28

    def test_working_days_in_march_2024(self):
        assert working_days_between(date(2024, 3, 1), date(2024, 3, 31)) == 21

    def test_weekend_only(self):
        assert working_days_between(date(2024, 3, 2), date(2024, 3, 3)) == 0

    def test_reversed_or_missing_range(self):
        assert working_days_between(date(2024, 3, 10), date(2024, 3, 1)) == 0
        assert working_days_between(None, date(2024, 3, 1)) == 0

    def test_validate_period(self):
        validate_period(12, 2024)
        with pytest.raises(ValueError, match="Month must be between 1 and 12"):
            validate_period(13, 2024)


class TestClipToMonth:

    def test_project_spanning_months(self):
        assert clip_to_month(date(2024, 1, 15), date(2024, 5, 1), 3, 2024) == (
            date(2024, 3, 1), date(2024, 3, 31),
        )

    def test_project_starting_mid_month(self):
        assert clip_to_month(date(2024, 3, 18), None, 3, 2024) == (
            date(2024, 3, 18), date(2024, 3, 31),
        )

    def test_project_outside_month(self):
        assert clip_to_month(date(2024, 4, 1), date(2024, 4, 30), 3, 2024) is None


class TestAmounts:

    def test_consultant_daily_rate(self):
        assert consultant_earnings(Decimal("22000"), 21) == Decimal("21000.00")

    def test_consultant_rounds_to_cents(self):
        assert consultant_earnings(Decimal("10000"), 1) == Decimal("454.55")

    def test_tds(self):
        assert tds_amount(Decimal("10000"), Decimal("0.05")) == Decimal("500.00")

    def test_totals(self):
        totals = compute_payroll_totals(
            Decimal("10000"),
            [Decimal("500"), Decimal("250")],
            [Decimal("537.50")],
        )
        assert totals.total_additions == Decimal("750")
        assert totals.total_earnings == Decimal("10750")
        assert totals.total_amount == Decimal("10212.50")
