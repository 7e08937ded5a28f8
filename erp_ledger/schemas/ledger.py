"""
Pydantic schemas for general ledger operations.

These define the API contract. They are separate from the
database models because the API shape and the storage shape
differ (amounts, for one, travel as decimal strings).
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from erp_ledger.models.enums import CounterpartType, EntryType, LedgerStatus


# --- Request Schemas ---

class JournalRowCreate(BaseModel):
    """One debit or credit line of a journal."""
    account_name: str = Field(min_length=1, max_length=150)
    debit_amount: Decimal = Field(
        default=Decimal("0"), ge=0, max_digits=12, decimal_places=2
    )
    credit_amount: Decimal = Field(
        default=Decimal("0"), ge=0, max_digits=12, decimal_places=2
    )
    entity_type: CounterpartType | None = None
    entity_id: int | None = None
    entity_name: str | None = None
    project_id: int | None = None
    invoice_number: str | None = None
    notes: str | None = None


class JournalCreate(BaseModel):
    """
    A paired journal: rows sharing one description and date.

    Balance is checked by the LedgerService so an unbalanced
    journal is a 400, like any other rejected posting.
    """
    entry_type: EntryType
    reference_type: str = Field(default="manual", max_length=50)
    reference_id: int | None = None
    description: str = Field(min_length=1)
    transaction_date: date
    due_date: date | None = None
    status: LedgerStatus = LedgerStatus.PENDING
    entries: list[JournalRowCreate] = Field(min_length=2)


class LedgerEntryCreate(BaseModel):
    """A single ledger row posted on its own (no counter-row)."""
    entry_type: EntryType = EntryType.MANUAL
    reference_type: str = Field(default="manual", max_length=50)
    reference_id: int | None = None
    account_name: str = Field(min_length=1, max_length=150)
    description: str = Field(min_length=1)
    debit_amount: Decimal = Field(
        default=Decimal("0"), ge=0, max_digits=12, decimal_places=2
    )
    credit_amount: Decimal = Field(
        default=Decimal("0"), ge=0, max_digits=12, decimal_places=2
    )
    entity_type: CounterpartType | None = None
    entity_id: int | None = None
    entity_name: str | None = None
    project_id: int | None = None
    invoice_number: str | None = None
    transaction_date: date
    due_date: date | None = None
    status: LedgerStatus = LedgerStatus.PENDING
    notes: str | None = None

    @model_validator(mode="after")
    def exactly_one_side(self):
        if (self.debit_amount == 0) == (self.credit_amount == 0):
            raise ValueError(
                "exactly one of debit_amount or credit_amount must be non-zero"
            )
        return self


class LedgerEntryUpdate(BaseModel):
    """Partial update; only the fields sent are changed."""
    account_name: str | None = Field(default=None, min_length=1, max_length=150)
    description: str | None = Field(default=None, min_length=1)
    debit_amount: Decimal | None = Field(
        default=None, ge=0, max_digits=12, decimal_places=2
    )
    credit_amount: Decimal | None = Field(
        default=None, ge=0, max_digits=12, decimal_places=2
    )
    entity_type: CounterpartType | None = None
    entity_id: int | None = None
    entity_name: str | None = None
    project_id: int | None = None
    invoice_number: str | None = None
    transaction_date: date | None = None
    due_date: date | None = None
    status: LedgerStatus | None = None
    notes: str | None = None


# --- Response Schemas ---

class LedgerEntryResponse(BaseModel):
    id: int
    journal_id: uuid.UUID | None
    entry_type: EntryType
    reference_type: str
    reference_id: int | None
    account_name: str
    description: str
    debit_amount: Decimal
    credit_amount: Decimal
    entity_type: CounterpartType | None
    entity_id: int | None
    entity_name: str | None
    project_id: int | None
    project_title: str | None
    invoice_number: str | None
    transaction_date: date
    due_date: date | None
    status: LedgerStatus
    notes: str | None
    created_by: int | None
    created_at: datetime

    model_config = {"from_attributes": True}


class JournalResponse(BaseModel):
    journal_id: uuid.UUID
    entries: list[LedgerEntryResponse]
    total_amount: Decimal
