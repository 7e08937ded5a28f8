"""
Credit note model.

A credit note reduces the amount owed on a previously issued
sales invoice. Header totals are derived from the items and are
recomputed by the service whenever items or discount change.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Text, Date, DateTime, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp_ledger.models.base import Base
from erp_ledger.models.enums import CreditNoteStatus, enum_values


class CreditNote(Base):
    __tablename__ = "credit_notes"

    id: Mapped[int] = mapped_column(primary_key=True)
    credit_note_number: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False
    )
    sales_invoice_id: Mapped[int | None] = mapped_column(
        ForeignKey("sales_invoices.id"), nullable=True, index=True
    )
    customer_id: Mapped[int | None] = mapped_column(
        ForeignKey("customers.id"), nullable=True, index=True
    )
    status: Mapped[CreditNoteStatus] = mapped_column(
        SAEnum(
            CreditNoteStatus,
            name="credit_note_status_enum",
            values_callable=enum_values,
        ),
        nullable=False,
        default=CreditNoteStatus.DRAFT,
    )
    credit_note_date: Mapped[date] = mapped_column(Date, nullable=False)
    billing_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    subtotal: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    tax_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    discount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    # Hard delete of a credit note removes its items
    items: Mapped[list["CreditNoteItem"]] = relationship(
        back_populates="credit_note",
        cascade="all, delete-orphan",
        order_by="CreditNoteItem.id",
    )

    def __repr__(self) -> str:
        return (
            f"<CreditNote {self.credit_note_number} "
            f"{self.total_amount} ({self.status.value})>"
        )


class CreditNoteItem(Base):
    __tablename__ = "credit_note_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    credit_note_id: Mapped[int] = mapped_column(
        ForeignKey("credit_notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    tax_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("0")
    )
    tax_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    line_total: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )

    credit_note: Mapped["CreditNote"] = relationship(back_populates="items")
