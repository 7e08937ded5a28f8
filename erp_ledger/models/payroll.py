"""
Payroll models.

One PayrollEntry per employee per month. Additions and deductions
are child rows; the entry's totals are always recomputed from
them, never edited directly.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, Text, Integer, DateTime, Numeric, ForeignKey,
    Enum as SAEnum, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp_ledger.models.base import Base
from erp_ledger.models.enums import PayrollStatus, enum_values


class PayrollEntry(Base):
    __tablename__ = "payroll_entries"
    __table_args__ = (
        UniqueConstraint(
            "employee_id", "month", "year", name="uq_payroll_employee_period"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    employee_id: Mapped[int] = mapped_column(
        ForeignKey("employees.id"), nullable=False, index=True
    )
    project_id: Mapped[int | None] = mapped_column(
        ForeignKey("projects.id"), nullable=True
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    working_days: Mapped[int] = mapped_column(Integer, nullable=False)
    basic_salary: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    total_additions: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    total_deductions: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    status: Mapped[PayrollStatus] = mapped_column(
        SAEnum(
            PayrollStatus,
            name="payroll_status_enum",
            values_callable=enum_values,
        ),
        nullable=False,
        default=PayrollStatus.DRAFT,
    )
    generated_date: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    employee: Mapped["Employee"] = relationship()
    additions: Mapped[list["PayrollAddition"]] = relationship(
        back_populates="payroll_entry",
        cascade="all, delete-orphan",
        order_by="PayrollAddition.id",
    )
    deductions: Mapped[list["PayrollDeduction"]] = relationship(
        back_populates="payroll_entry",
        cascade="all, delete-orphan",
        order_by="PayrollDeduction.id",
    )

    @property
    def employee_name(self) -> str:
        return self.employee.full_name if self.employee else ""

    def __repr__(self) -> str:
        return (
            f"<PayrollEntry employee={self.employee_id} "
            f"{self.month}/{self.year} ({self.status.value})>"
        )


class PayrollAddition(Base):
    __tablename__ = "payroll_additions"

    id: Mapped[int] = mapped_column(primary_key=True)
    payroll_entry_id: Mapped[int] = mapped_column(
        ForeignKey("payroll_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    payroll_entry: Mapped["PayrollEntry"] = relationship(
        back_populates="additions"
    )


class PayrollDeduction(Base):
    __tablename__ = "payroll_deductions"

    id: Mapped[int] = mapped_column(primary_key=True)
    payroll_entry_id: Mapped[int] = mapped_column(
        ForeignKey("payroll_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    payroll_entry: Mapped["PayrollEntry"] = relationship(
        back_populates="deductions"
    )
