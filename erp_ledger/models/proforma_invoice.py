"""
Proforma invoice model.

A non-binding draft invoice. Once approved it can be converted
into a sales invoice exactly once; the status lifecycle lives in
erp_ledger.rules.transitions.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Text, Date, DateTime, Numeric, Boolean, ForeignKey, JSON,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column

from erp_ledger.models.base import Base
from erp_ledger.models.enums import ProformaStatus, enum_values


class ProformaInvoice(Base):
    __tablename__ = "proforma_invoices"

    id: Mapped[int] = mapped_column(primary_key=True)
    proforma_number: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False
    )
    customer_id: Mapped[int | None] = mapped_column(
        ForeignKey("customers.id"), nullable=True, index=True
    )
    project_id: Mapped[int | None] = mapped_column(
        ForeignKey("projects.id"), nullable=True, index=True
    )
    status: Mapped[ProformaStatus] = mapped_column(
        SAEnum(
            ProformaStatus,
            name="proforma_status_enum",
            values_callable=enum_values,
        ),
        nullable=False,
        default=ProformaStatus.DRAFT,
    )
    invoice_date: Mapped[date] = mapped_column(Date, nullable=False)
    valid_until: Mapped[date | None] = mapped_column(Date, nullable=True)
    payment_terms: Mapped[str | None] = mapped_column(Text, nullable=True)
    delivery_terms: Mapped[str | None] = mapped_column(Text, nullable=True)
    bank_account: Mapped[str | None] = mapped_column(Text, nullable=True)
    billing_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    terms_and_conditions: Mapped[str | None] = mapped_column(
        Text, nullable=True
    )
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Line items as stored on the document: description, quantity,
    # unit_price, tax_rate, tax_amount (all strings).
    items: Mapped[list[dict]] = mapped_column(
        JSON, nullable=False, default=list
    )
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
    is_archived: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<ProformaInvoice {self.proforma_number} "
            f"({self.status.value})>"
        )
