"""
Payroll service.

Generation creates one draft entry per active, categorised
employee for a month, with a TDS deduction and an accrual
journal (Salary Expense / Salary Payable). Paying an entry posts
the settlement journal (Salary Payable / Cash/Bank).

Lifecycle:
    draft -> approved -> paid

Additions and deductions can only change while an entry is a
draft; every change recomputes the totals and keeps the accrual
rows equal to the gross earnings.
"""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import select, delete
from sqlalchemy.orm import Session, selectinload

from erp_ledger.config import get_settings
from erp_ledger.models.employee import Employee
from erp_ledger.models.enums import (
    EmployeeCategory,
    EntryType,
    LedgerStatus,
    PayrollStatus,
    ProjectStatus,
    ReferenceType,
)
from erp_ledger.models.ledger_entry import GeneralLedgerEntry
from erp_ledger.models.payroll import (
    PayrollAddition,
    PayrollDeduction,
    PayrollEntry,
)
from erp_ledger.models.project import Project, ProjectEmployee
from erp_ledger.rules import payroll as rules
from erp_ledger.rules.money import quantize
from erp_ledger.rules.transitions import (
    PAYROLL_MACHINE,
    InvalidTransition,
    can_edit_payroll_adjustments,
)
from erp_ledger.schemas.ledger import JournalCreate, JournalRowCreate
from erp_ledger.schemas.payroll import (
    AdjustmentCreate,
    AdjustmentUpdate,
    PayrollEntryUpdate,
)
from erp_ledger.services.errors import NotFoundError
from erp_ledger.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)

ACCRUAL_ACCOUNTS = (rules.SALARY_EXPENSE_ACCOUNT, rules.SALARY_PAYABLE_ACCOUNT)


class PayrollService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = LedgerService(db)
        self.settings = get_settings()

    # --- Queries ---

    def get(self, entry_id: int) -> PayrollEntry:
        entry = self.db.get(PayrollEntry, entry_id)
        if not entry:
            raise NotFoundError(f"Payroll entry {entry_id} not found")
        return entry

    def list_period(
        self, month: int | None = None, year: int | None = None
    ) -> list[PayrollEntry]:
        query = select(PayrollEntry).options(
            selectinload(PayrollEntry.employee)
        )
        if month is not None:
            query = query.where(PayrollEntry.month == month)
        if year is not None:
            query = query.where(PayrollEntry.year == year)
        query = query.order_by(
            PayrollEntry.year.desc(),
            PayrollEntry.month.desc(),
            PayrollEntry.id,
        )
        return list(self.db.execute(query).scalars().all())

    def _accrual_rows(self, entry_id: int) -> list[GeneralLedgerEntry]:
        return [
            row for row in self.ledger.entries_by_reference(
                ReferenceType.PAYROLL.value, entry_id
            )
            if row.account_name in ACCRUAL_ACCOUNTS
        ]

    # --- Generation ---

    def _consultant_earnings(
        self, employee: Employee, month: int, year: int
    ) -> tuple[Decimal, int | None]:
        """Earnings from in-progress assignments and the first such project."""
        assignments = self.db.execute(
            select(ProjectEmployee)
            .join(Project, ProjectEmployee.project_id == Project.id)
            .where(
                ProjectEmployee.employee_id == employee.id,
                Project.status == ProjectStatus.IN_PROGRESS,
            )
            .order_by(ProjectEmployee.id)
        ).scalars().all()

        worked_days = 0
        first_project_id = None
        for assignment in assignments:
            project = assignment.project
            period = rules.clip_to_month(
                project.start_date, project.end_date, month, year
            )
            if period is None:
                continue
            worked_days += rules.working_days_between(*period)
            if first_project_id is None:
                first_project_id = project.id

        earnings = rules.consultant_earnings(
            employee.salary or Decimal("0"),
            worked_days,
            self.settings.CONSULTANT_DIVISOR_DAYS,
        )
        return earnings, first_project_id

    def _post_accrual(self, entry: PayrollEntry, employee: Employee) -> None:
        earnings = entry.basic_salary + entry.total_additions
        if earnings <= 0:
            return
        first_day, _ = rules.month_bounds(entry.month, entry.year)
        description = (
            f"Salary for {employee.full_name} - "
            f"{rules.month_name(entry.month)} {entry.year}"
        )
        self.ledger.post_journal(JournalCreate(
            entry_type=EntryType.PAYABLE,
            reference_type=ReferenceType.PAYROLL.value,
            reference_id=entry.id,
            description=description,
            transaction_date=first_day,
            status=LedgerStatus.PENDING,
            entries=[
                JournalRowCreate(
                    account_name=rules.SALARY_EXPENSE_ACCOUNT,
                    debit_amount=earnings,
                    entity_name=employee.full_name,
                    project_id=entry.project_id,
                ),
                JournalRowCreate(
                    account_name=rules.SALARY_PAYABLE_ACCOUNT,
                    credit_amount=earnings,
                    entity_name=employee.full_name,
                    project_id=entry.project_id,
                ),
            ],
        ))

    def generate(self, month: int, year: int) -> list[PayrollEntry]:
        """
        Create draft entries for every eligible employee.

        Employees without a category and employees who already have
        an entry for the period are skipped. Returns the new entries.
        """
        rules.validate_period(month, year)
        working_days = rules.working_days_between(
            *rules.month_bounds(month, year)
        )

        existing = set(self.db.execute(
            select(PayrollEntry.employee_id).where(
                PayrollEntry.month == month, PayrollEntry.year == year
            )
        ).scalars().all())

        employees = self.db.execute(
            select(Employee)
            .where(Employee.is_active.is_(True))
            .order_by(Employee.id)
        ).scalars().all()

        created = []
        for employee in employees:
            if employee.category is None:
                logger.info(
                    "Skipping %s: no employee category", employee.employee_code
                )
                continue
            if employee.id in existing:
                continue

            project_id = None
            if employee.category == EmployeeCategory.CONSULTANT:
                basic, project_id = self._consultant_earnings(
                    employee, month, year
                )
            else:
                basic = quantize(employee.salary or Decimal("0"))

            entry = PayrollEntry(
                employee_id=employee.id,
                employee=employee,
                project_id=project_id,
                month=month,
                year=year,
                working_days=working_days,
                basic_salary=basic,
                total_additions=Decimal("0"),
                total_deductions=Decimal("0"),
                total_amount=basic,
                status=PayrollStatus.DRAFT,
            )
            tds = rules.tds_amount(basic, self.settings.TDS_RATE)
            if tds > 0:
                entry.deductions.append(PayrollDeduction(
                    description=rules.TDS_DESCRIPTION,
                    amount=tds,
                    note=rules.TDS_NOTE,
                ))
            self._apply_totals(entry)
            self.db.add(entry)
            self.db.flush()

            self._post_accrual(entry, employee)
            created.append(entry)

        self.db.flush()
        logger.info(
            "Generated %d payroll entries for %s %d",
            len(created), rules.month_name(month), year,
        )
        return created

    # --- Totals and adjustments ---

    def _apply_totals(self, entry: PayrollEntry) -> None:
        totals = rules.compute_payroll_totals(
            entry.basic_salary,
            [addition.amount for addition in entry.additions],
            [deduction.amount for deduction in entry.deductions],
        )
        entry.total_additions = quantize(totals.total_additions)
        entry.total_deductions = quantize(totals.total_deductions)
        entry.total_amount = quantize(totals.total_amount)

    def recalculate(self, entry: PayrollEntry) -> PayrollEntry:
        """Recompute totals and keep the accrual rows at gross earnings."""
        self._apply_totals(entry)
        earnings = quantize(entry.basic_salary + entry.total_additions)

        rows = self._accrual_rows(entry.id)
        if earnings <= 0:
            for row in rows:
                self.db.delete(row)
            self.db.flush()
            return entry
        if not rows:
            self.db.flush()
            self._post_accrual(entry, entry.employee)
        for row in rows:
            if row.account_name == rules.SALARY_EXPENSE_ACCOUNT:
                row.debit_amount = earnings
            else:
                row.credit_amount = earnings
        self.db.flush()
        return entry

    def _require_draft(self, entry: PayrollEntry) -> None:
        if not can_edit_payroll_adjustments(entry.status):
            raise InvalidTransition(
                f"Payroll entry is {entry.status.value}; additions and "
                f"deductions can only change while it is a draft"
            )

    def add_addition(
        self, entry_id: int, request: AdjustmentCreate
    ) -> PayrollAddition:
        entry = self.get(entry_id)
        self._require_draft(entry)
        addition = PayrollAddition(
            description=request.description,
            amount=request.amount,
            note=request.note,
        )
        entry.additions.append(addition)
        self.recalculate(entry)
        return addition

    def add_deduction(
        self, entry_id: int, request: AdjustmentCreate
    ) -> PayrollDeduction:
        entry = self.get(entry_id)
        self._require_draft(entry)
        deduction = PayrollDeduction(
            description=request.description,
            amount=request.amount,
            note=request.note,
        )
        entry.deductions.append(deduction)
        self.recalculate(entry)
        return deduction

    def _get_adjustment(self, model, adjustment_id: int):
        adjustment = self.db.get(model, adjustment_id)
        if not adjustment:
            kind = "Addition" if model is PayrollAddition else "Deduction"
            raise NotFoundError(f"{kind} {adjustment_id} not found")
        self._require_draft(adjustment.payroll_entry)
        return adjustment

    def _update_adjustment(
        self, model, adjustment_id: int, request: AdjustmentUpdate
    ):
        adjustment = self._get_adjustment(model, adjustment_id)
        changes = request.model_dump(exclude_unset=True)
        for name in ("description", "amount"):
            if changes.get(name) is not None:
                setattr(adjustment, name, changes[name])
        if "note" in changes:
            adjustment.note = changes["note"]
        self.recalculate(adjustment.payroll_entry)
        return adjustment

    def _delete_adjustment(self, model, adjustment_id: int) -> PayrollEntry:
        adjustment = self._get_adjustment(model, adjustment_id)
        entry = adjustment.payroll_entry
        if model is PayrollAddition:
            entry.additions.remove(adjustment)
        else:
            entry.deductions.remove(adjustment)
        self.recalculate(entry)
        return entry

    def update_addition(
        self, addition_id: int, request: AdjustmentUpdate
    ) -> PayrollAddition:
        return self._update_adjustment(PayrollAddition, addition_id, request)

    def delete_addition(self, addition_id: int) -> PayrollEntry:
        return self._delete_adjustment(PayrollAddition, addition_id)

    def update_deduction(
        self, deduction_id: int, request: AdjustmentUpdate
    ) -> PayrollDeduction:
        return self._update_adjustment(PayrollDeduction, deduction_id, request)

    def delete_deduction(self, deduction_id: int) -> PayrollEntry:
        return self._delete_adjustment(PayrollDeduction, deduction_id)

    # --- Status ---

    def update(
        self, entry_id: int, request: PayrollEntryUpdate
    ) -> PayrollEntry:
        entry = self.get(entry_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)

        amount_fields = {"working_days", "basic_salary"} & changes.keys()
        if amount_fields:
            self._require_draft(entry)
            for name in amount_fields:
                setattr(entry, name, changes[name])
            self.recalculate(entry)

        target = changes.get("status")
        if target is not None and target != entry.status:
            PAYROLL_MACHINE.require(entry.status, target)
            entry.status = target
            if target == PayrollStatus.PAID:
                self._post_payment(entry)
            self.db.flush()
            logger.info(
                "Payroll entry %d for %s moved to %s",
                entry.id, entry.employee_name, target.value,
            )
        return entry

    def _post_payment(self, entry: PayrollEntry) -> None:
        if entry.total_amount > 0:
            self.ledger.post_journal(JournalCreate(
                entry_type=EntryType.PAYABLE,
                reference_type=ReferenceType.PAYROLL_PAYMENT.value,
                reference_id=entry.id,
                description=(
                    f"Salary payment for {entry.employee_name} - "
                    f"{rules.month_name(entry.month)} {entry.year}"
                ),
                transaction_date=date.today(),
                status=LedgerStatus.PAID,
                entries=[
                    JournalRowCreate(
                        account_name=rules.SALARY_PAYABLE_ACCOUNT,
                        debit_amount=entry.total_amount,
                        entity_name=entry.employee_name,
                    ),
                    JournalRowCreate(
                        account_name=rules.CASH_ACCOUNT,
                        credit_amount=entry.total_amount,
                        entity_name=entry.employee_name,
                    ),
                ],
            ))
        for row in self._accrual_rows(entry.id):
            row.status = LedgerStatus.PAID

    # --- Clearing ---

    def clear_period(self, month: int, year: int) -> dict[str, int]:
        """
        Delete every payroll entry of a month along with its
        adjustments and ledger rows.
        """
        rules.validate_period(month, year)
        entries = self.list_period(month, year)
        entry_ids = [entry.id for entry in entries]
        if not entry_ids:
            return {
                "deleted_payroll_entries": 0,
                "deleted_general_ledger_entries": 0,
            }

        ledger_result = self.db.execute(
            delete(GeneralLedgerEntry)
            .where(
                GeneralLedgerEntry.reference_id.in_(entry_ids),
                GeneralLedgerEntry.reference_type.in_((
                    ReferenceType.PAYROLL.value,
                    ReferenceType.PAYROLL_PAYMENT.value,
                )),
            )
            .execution_options(synchronize_session=False)
        )
        for entry in entries:
            self.db.delete(entry)
        self.db.flush()

        result = {
            "deleted_payroll_entries": len(entry_ids),
            "deleted_general_ledger_entries": ledger_result.rowcount,
        }
        logger.info(
            "Cleared payroll for %s %d: %s",
            rules.month_name(month), year, result,
        )
        return result
