"""
Project model and employee assignments.

Projects can be chosen as the counterpart of a ledger entry, and
consultant payroll is derived from the assignments that overlap
the payroll month.
"""

from datetime import date, datetime

from sqlalchemy import (
    String, Text, Date, DateTime, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp_ledger.models.base import Base
from erp_ledger.models.enums import ProjectStatus, enum_values


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    customer_id: Mapped[int | None] = mapped_column(
        ForeignKey("customers.id"), nullable=True, index=True
    )
    status: Mapped[ProjectStatus] = mapped_column(
        SAEnum(
            ProjectStatus,
            name="project_status_enum",
            values_callable=enum_values,
        ),
        nullable=False,
        default=ProjectStatus.PLANNING,
    )
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    planned_end_date: Mapped[date | None] = mapped_column(
        Date, nullable=True
    )
    actual_end_date: Mapped[date | None] = mapped_column(
        Date, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    assignments: Mapped[list["ProjectEmployee"]] = relationship(
        back_populates="project", cascade="all, delete-orphan"
    )

    @property
    def end_date(self) -> date | None:
        """Actual end wins over the planned end."""
        return self.actual_end_date or self.planned_end_date

    def __repr__(self) -> str:
        return f"<Project {self.title} ({self.status.value})>"


class ProjectEmployee(Base):
    __tablename__ = "project_employees"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id"), nullable=False, index=True
    )
    employee_id: Mapped[int] = mapped_column(
        ForeignKey("employees.id"), nullable=False, index=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    project: Mapped["Project"] = relationship(back_populates="assignments")
    employee: Mapped["Employee"] = relationship()
