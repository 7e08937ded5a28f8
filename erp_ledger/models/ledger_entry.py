"""
General ledger entry model.

Each row is one debit or credit line. Rows created together by
the journal endpoint share a journal_id; within a journal the sum
of debits equals the sum of credits. Manual single-sided rows
have no journal_id.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Text, Date, DateTime, Numeric, ForeignKey, Integer,
    Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp_ledger.models.base import Base
from erp_ledger.models.enums import (
    CounterpartType, EntryType, LedgerStatus, enum_values,
)


class GeneralLedgerEntry(Base):
    """
    A debit or credit line in the general ledger.

    Exactly one of debit_amount / credit_amount is non-zero.
    The balance rule for paired rows is enforced by the
    LedgerService, not by the model.
    """

    __tablename__ = "general_ledger_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    journal_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, nullable=True, index=True
    )
    entry_type: Mapped[EntryType] = mapped_column(
        SAEnum(
            EntryType,
            name="entry_type_enum",
            values_callable=enum_values,
        ),
        nullable=False,
    )
    reference_type: Mapped[str] = mapped_column(
        String(50), nullable=False, default="manual"
    )
    reference_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True, index=True
    )
    account_name: Mapped[str] = mapped_column(String(150), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    debit_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    credit_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    entity_type: Mapped[CounterpartType | None] = mapped_column(
        SAEnum(
            CounterpartType,
            name="counterpart_type_enum",
            values_callable=enum_values,
        ),
        nullable=True,
    )
    entity_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    entity_name: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    project_id: Mapped[int | None] = mapped_column(
        ForeignKey("projects.id"), nullable=True, index=True
    )
    invoice_number: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[LedgerStatus] = mapped_column(
        SAEnum(
            LedgerStatus,
            name="ledger_status_enum",
            values_callable=enum_values,
        ),
        nullable=False,
        default=LedgerStatus.PENDING,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    project: Mapped["Project | None"] = relationship()

    @property
    def project_title(self) -> str | None:
        return self.project.title if self.project else None

    def __repr__(self) -> str:
        return (
            f"<GeneralLedgerEntry {self.account_name} "
            f"Dr {self.debit_amount} Cr {self.credit_amount}>"
        )
