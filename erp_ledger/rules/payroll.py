"""
Payroll arithmetic.

    total earnings = basic salary + additions
    total amount   = total earnings - deductions
    TDS            = total earnings * TDS rate (5% by default)

Consultants are paid a daily rate (monthly salary / 22) for each
weekday they were on an in-progress project during the month.
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from erp_ledger.rules.money import quantize

SALARY_EXPENSE_ACCOUNT = "Salary Expense"
SALARY_PAYABLE_ACCOUNT = "Salary Payable"
CASH_ACCOUNT = "Cash/Bank"

TDS_DESCRIPTION = "Tax Deducted at Source"
TDS_NOTE = "5% of total earnings"


@dataclass(frozen=True)
class PayrollTotals:
    total_additions: Decimal
    total_deductions: Decimal
    total_earnings: Decimal
    total_amount: Decimal


def month_name(month: int) -> str:
    if 1 <= month <= 12:
        return calendar.month_name[month]
    return "Unknown"


def calendar_days_in_month(month: int, year: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(month: int, year: int) -> tuple[date, date]:
    validate_period(month, year)
    last = calendar_days_in_month(month, year)
    return date(year, month, 1), date(year, month, last)


def validate_period(month: int, year: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 1 and 12")
    if year < 1:
        raise ValueError("Year must be positive")


def working_days_between(start: date | None, end: date | None) -> int:
    """Count Monday-Friday days in [start, end]; 0 if either is missing or reversed."""
    if start is None or end is None or end < start:
        return 0
    days = 0
    current = start
    while current <= end:
        if current.weekday() < 5:
            days += 1
        current += timedelta(days=1)
    return days


def clip_to_month(
    start: date | None, end: date | None, month: int, year: int
) -> tuple[date, date] | None:
    """
    Intersect a project period with the payroll month.

    Missing dates default to the month bounds. Returns None when
    the period does not touch the month.
    """
    first, last = month_bounds(month, year)
    period_start = max(start or first, first)
    period_end = min(end or last, last)
    if period_end < period_start:
        return None
    return period_start, period_end


def consultant_earnings(
    monthly_salary: Decimal, worked_days: int, divisor_days: int = 22
) -> Decimal:
    daily_rate = monthly_salary / Decimal(divisor_days)
    return quantize(daily_rate * worked_days)


def tds_amount(total_earnings: Decimal, rate: Decimal) -> Decimal:
    return quantize(total_earnings * rate)


def compute_payroll_totals(
    basic_salary: Decimal,
    additions: list[Decimal],
    deductions: list[Decimal],
) -> PayrollTotals:
    total_additions = sum(additions, Decimal("0"))
    total_deductions = sum(deductions, Decimal("0"))
    earnings = basic_salary + total_additions
    return PayrollTotals(
        total_additions=total_additions,
        total_deductions=total_deductions,
        total_earnings=earnings,
        total_amount=earnings - total_deductions,
    )
