"""
Pydantic schemas for payroll operations.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from erp_ledger.models.enums import PayrollStatus


class PayrollGenerateRequest(BaseModel):
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000, le=2100)


class PayrollEntryUpdate(BaseModel):
    """Status changes and manual corrections to a draft entry."""
    status: PayrollStatus | None = None
    working_days: int | None = Field(default=None, ge=0, le=31)
    basic_salary: Decimal | None = Field(
        default=None, ge=0, max_digits=10, decimal_places=2
    )


class AdjustmentCreate(BaseModel):
    """An addition or a deduction on a payroll entry."""
    description: str = Field(min_length=1, max_length=255)
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    note: str | None = None


class AdjustmentUpdate(BaseModel):
    description: str | None = Field(default=None, min_length=1, max_length=255)
    amount: Decimal | None = Field(
        default=None, gt=0, max_digits=10, decimal_places=2
    )
    note: str | None = None


class AdjustmentResponse(BaseModel):
    id: int
    payroll_entry_id: int
    description: str
    amount: Decimal
    note: str | None

    model_config = {"from_attributes": True}


class PayrollEntryResponse(BaseModel):
    id: int
    employee_id: int
    employee_name: str
    project_id: int | None
    month: int
    year: int
    working_days: int
    basic_salary: Decimal
    total_additions: Decimal
    total_deductions: Decimal
    total_amount: Decimal
    status: PayrollStatus
    generated_date: datetime

    model_config = {"from_attributes": True}


class ClearPeriodResponse(BaseModel):
    deleted_payroll_entries: int
    deleted_general_ledger_entries: int
