"""
Pydantic schemas for suppliers, customers, projects and employees.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from erp_ledger.models.enums import EmployeeCategory, ProjectStatus


# --- Suppliers ---

class SupplierCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    tax_id: str | None = None
    bank_info: str | None = None
    vat_number: str | None = Field(default=None, max_length=15)
    payment_terms: str | None = "30_days"
    currency: str = Field(default="AED", min_length=3, max_length=3)
    credit_limit: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None


class SupplierUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    tax_id: str | None = None
    bank_info: str | None = None
    vat_number: str | None = Field(default=None, max_length=15)
    payment_terms: str | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    credit_limit: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None


class SupplierResponse(BaseModel):
    id: int
    name: str
    contact_person: str | None
    email: str | None
    phone: str | None
    address: str | None
    tax_id: str | None
    bank_info: str | None
    vat_number: str | None
    payment_terms: str | None
    currency: str
    credit_limit: Decimal | None
    notes: str | None
    is_archived: bool
    created_at: datetime

    model_config = {"from_attributes": True}


# --- Customers ---

class CustomerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    contact_person: str | None = None
    email: str | None = None
    phone: str = Field(min_length=3, max_length=50)
    address: str | None = None
    tax_id: str | None = None
    currency: str = Field(default="AED", min_length=3, max_length=3)
    credit_limit: Decimal | None = Field(default=None, ge=0)


class CustomerResponse(BaseModel):
    id: int
    name: str
    contact_person: str | None
    email: str | None
    phone: str
    address: str | None
    tax_id: str | None
    currency: str
    credit_limit: Decimal | None
    is_archived: bool

    model_config = {"from_attributes": True}


# --- Projects ---

class ProjectCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    customer_id: int | None = None
    status: ProjectStatus = ProjectStatus.PLANNING
    start_date: date | None = None
    planned_end_date: date | None = None
    actual_end_date: date | None = None
    employee_ids: list[int] = Field(default_factory=list)


class ProjectResponse(BaseModel):
    id: int
    title: str
    description: str | None
    customer_id: int | None
    status: ProjectStatus
    start_date: date | None
    planned_end_date: date | None
    actual_end_date: date | None

    model_config = {"from_attributes": True}


# --- Employees ---

class EmployeeCreate(BaseModel):
    employee_code: str = Field(min_length=1, max_length=50)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str | None = None
    category: EmployeeCategory | None = None
    salary: Decimal | None = Field(default=None, ge=0)
    is_active: bool = True


class EmployeeResponse(BaseModel):
    id: int
    employee_code: str
    first_name: str
    last_name: str
    email: str | None
    category: EmployeeCategory | None
    salary: Decimal | None
    is_active: bool

    model_config = {"from_attributes": True}
