"""
Pydantic schemas for credit notes, proforma invoices and the
sales invoices produced by proforma conversion.

Totals are never accepted from the client; they are derived
from the items and discount.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from erp_ledger.models.enums import (
    CreditNoteStatus,
    ProformaStatus,
    SalesInvoiceStatus,
)


# --- Line items ---

class LineItemIn(BaseModel):
    description: str = Field(min_length=1)
    quantity: Decimal = Field(ge=0)
    unit_price: Decimal = Field(ge=0)
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)


class CreditNoteItemResponse(BaseModel):
    id: int
    description: str
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    line_total: Decimal

    model_config = {"from_attributes": True}


class DocumentItem(BaseModel):
    """A line item as stored in a document's JSON items column."""
    description: str
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")


# --- Credit notes ---

class CreditNoteCreate(BaseModel):
    credit_note_number: str | None = Field(default=None, max_length=50)
    sales_invoice_id: int | None = None
    customer_id: int | None = None
    status: CreditNoteStatus = CreditNoteStatus.DRAFT
    credit_note_date: date
    billing_address: str | None = None
    reason: str | None = None
    items: list[LineItemIn] = Field(min_length=1)
    discount: Decimal = Decimal("0")


class CreditNoteUpdate(BaseModel):
    sales_invoice_id: int | None = None
    customer_id: int | None = None
    status: CreditNoteStatus | None = None
    credit_note_date: date | None = None
    billing_address: str | None = None
    reason: str | None = None
    items: list[LineItemIn] | None = Field(default=None, min_length=1)
    discount: Decimal | None = None


class CreditNoteResponse(BaseModel):
    id: int
    credit_note_number: str
    sales_invoice_id: int | None
    customer_id: int | None
    status: CreditNoteStatus
    credit_note_date: date
    billing_address: str | None
    reason: str | None
    items: list[CreditNoteItemResponse]
    subtotal: Decimal
    tax_amount: Decimal
    discount: Decimal
    total_amount: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}


# --- Proforma invoices ---

class ProformaCreate(BaseModel):
    proforma_number: str | None = Field(default=None, max_length=50)
    customer_id: int | None = None
    project_id: int | None = None
    status: ProformaStatus = ProformaStatus.DRAFT
    invoice_date: date | None = None
    valid_until: date | None = None
    payment_terms: str | None = None
    delivery_terms: str | None = None
    bank_account: str | None = None
    billing_address: str | None = None
    terms_and_conditions: str | None = None
    remarks: str | None = None
    items: list[LineItemIn] = Field(min_length=1)
    discount: Decimal = Decimal("0")


class ProformaUpdate(BaseModel):
    customer_id: int | None = None
    project_id: int | None = None
    status: ProformaStatus | None = None
    invoice_date: date | None = None
    valid_until: date | None = None
    payment_terms: str | None = None
    delivery_terms: str | None = None
    bank_account: str | None = None
    billing_address: str | None = None
    terms_and_conditions: str | None = None
    remarks: str | None = None
    items: list[LineItemIn] | None = Field(default=None, min_length=1)
    discount: Decimal | None = None
    is_archived: bool | None = None


class ProformaResponse(BaseModel):
    id: int
    proforma_number: str
    customer_id: int | None
    project_id: int | None
    status: ProformaStatus
    invoice_date: date
    valid_until: date | None
    payment_terms: str | None
    delivery_terms: str | None
    bank_account: str | None
    billing_address: str | None
    terms_and_conditions: str | None
    remarks: str | None
    items: list[DocumentItem]
    subtotal: Decimal
    tax_amount: Decimal
    discount: Decimal
    total_amount: Decimal
    is_archived: bool
    created_at: datetime

    model_config = {"from_attributes": True}


# --- Sales invoices ---

class SalesInvoiceResponse(BaseModel):
    id: int
    invoice_number: str
    customer_id: int | None
    project_id: int | None
    proforma_invoice_id: int | None
    status: SalesInvoiceStatus
    invoice_date: date
    due_date: date
    items: list[DocumentItem]
    subtotal: Decimal
    tax_amount: Decimal
    discount: Decimal
    total_amount: Decimal
    paid_amount: Decimal

    model_config = {"from_attributes": True}


class ConversionResponse(BaseModel):
    message: str
    sales_invoice: SalesInvoiceResponse
    proforma_invoice: ProformaResponse
