"""
Ledger service: the only writer of general ledger rows.

This service enforces the rules the entry pages rely on:
1. A journal balances (debits = credits) and every row has
   exactly one non-zero side
2. Rows of a journal are written together or not at all
3. Referenced projects exist
4. A journal row's amounts cannot be edited afterwards, since
   that would unbalance its pair

Single-sided manual rows are accepted through create_entry();
they are the General Ledger page's quick-entry path.
"""

import logging
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session, selectinload

from erp_ledger.models.enums import EntryType, LedgerStatus, ReferenceType
from erp_ledger.models.ledger_entry import GeneralLedgerEntry
from erp_ledger.models.project import Project
from erp_ledger.rules.journal import (
    ACCOUNTS_PAYABLE,
    ACCOUNTS_RECEIVABLE,
    JournalValidationError,
    check_balanced,
)
from erp_ledger.schemas.ledger import (
    JournalCreate,
    LedgerEntryCreate,
    LedgerEntryUpdate,
)
from erp_ledger.services.errors import NotFoundError

logger = logging.getLogger(__name__)

OPEN_STATUSES = (LedgerStatus.PENDING, LedgerStatus.OVERDUE)

# A null sent for one of these on update leaves the column unchanged
REQUIRED_COLUMNS = frozenset({
    "account_name", "description", "debit_amount", "credit_amount",
    "transaction_date", "status",
})

# Rows under these reference types are owned by the payroll service
SYSTEM_REFERENCE_TYPES = frozenset({
    ReferenceType.PAYROLL.value,
    ReferenceType.PAYROLL_PAYMENT.value,
})


class LedgerService:
    """
    All ledger writes pass through this service.

    The caller owns the session and decides when to commit or
    roll back.
    """

    def __init__(self, db: Session):
        self.db = db

    def _check_projects(self, project_ids: set[int]) -> None:
        if not project_ids:
            return
        found = set(self.db.execute(
            select(Project.id).where(Project.id.in_(project_ids))
        ).scalars().all())
        missing = project_ids - found
        if missing:
            raise NotFoundError(f"Projects not found: {sorted(missing)}")

    @staticmethod
    def require_user_reference_type(reference_type: str) -> None:
        """Reject reference types that only the payroll service may write."""
        if reference_type in SYSTEM_REFERENCE_TYPES:
            raise ValueError(
                f"Reference type '{reference_type}' is reserved for payroll"
            )

    def post_journal(
        self, request: JournalCreate, created_by: int | None = None
    ) -> tuple[uuid.UUID, list[GeneralLedgerEntry]]:
        """
        Post a balanced set of rows as one journal.

        Nothing is written if any check fails. Returns the new
        journal_id and the created rows.
        """
        try:
            check_balanced(request.entries)
        except JournalValidationError:
            logger.warning(
                "Rejected unbalanced journal: %s", request.description
            )
            raise

        self._check_projects({
            row.project_id for row in request.entries
            if row.project_id is not None
        })

        journal_id = uuid.uuid4()
        rows = []
        for row in request.entries:
            entry = GeneralLedgerEntry(
                journal_id=journal_id,
                entry_type=request.entry_type,
                reference_type=request.reference_type,
                reference_id=request.reference_id,
                account_name=row.account_name,
                description=request.description,
                debit_amount=row.debit_amount,
                credit_amount=row.credit_amount,
                entity_type=row.entity_type,
                entity_id=row.entity_id,
                entity_name=row.entity_name,
                project_id=row.project_id,
                invoice_number=row.invoice_number,
                transaction_date=request.transaction_date,
                due_date=request.due_date,
                status=request.status,
                notes=row.notes,
                created_by=created_by,
            )
            self.db.add(entry)
            rows.append(entry)

        self.db.flush()
        logger.info(
            "Posted %s journal %s with %d rows",
            request.entry_type.value, journal_id, len(rows),
        )
        return journal_id, rows

    def create_entry(
        self, request: LedgerEntryCreate, created_by: int | None = None
    ) -> GeneralLedgerEntry:
        """Post one single-sided row."""
        if request.project_id is not None:
            self._check_projects({request.project_id})

        entry = GeneralLedgerEntry(
            **request.model_dump(),
            created_by=created_by,
        )
        self.db.add(entry)
        self.db.flush()
        logger.info(
            "Posted manual %s row on %s",
            "debit" if entry.debit_amount else "credit",
            entry.account_name,
        )
        return entry

    def get_entry(self, entry_id: int) -> GeneralLedgerEntry:
        entry = self.db.get(GeneralLedgerEntry, entry_id)
        if not entry:
            raise NotFoundError(f"General ledger entry {entry_id} not found")
        return entry

    def update_entry(
        self, entry_id: int, request: LedgerEntryUpdate
    ) -> GeneralLedgerEntry:
        entry = self.get_entry(entry_id)
        changes = {
            name: value
            for name, value in request.model_dump(exclude_unset=True).items()
            if value is not None or name not in REQUIRED_COLUMNS
        }

        amount_fields = {"debit_amount", "credit_amount"}
        if entry.journal_id is not None and amount_fields & changes.keys():
            new_debit = changes.get("debit_amount", entry.debit_amount)
            new_credit = changes.get("credit_amount", entry.credit_amount)
            if new_debit != entry.debit_amount or new_credit != entry.credit_amount:
                raise ValueError(
                    "Amounts of a journal row cannot be edited; "
                    "post a correcting journal instead"
                )

        if changes.get("project_id") is not None:
            self._check_projects({changes["project_id"]})

        for name, value in changes.items():
            setattr(entry, name, value)

        debit = entry.debit_amount or Decimal("0")
        credit = entry.credit_amount or Decimal("0")
        if (debit == 0) == (credit == 0):
            raise ValueError(
                "exactly one of debit_amount or credit_amount must be non-zero"
            )

        self.db.flush()
        return entry

    def _filtered(
        self,
        entry_type: EntryType | None = None,
        reference_type: str | None = None,
        status: LedgerStatus | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        entity_id: int | None = None,
        project_id: int | None = None,
        account_name: str | None = None,
        search: str | None = None,
    ):
        conditions = []
        if entry_type is not None:
            conditions.append(GeneralLedgerEntry.entry_type == entry_type)
        if reference_type:
            conditions.append(
                GeneralLedgerEntry.reference_type == reference_type
            )
        if status is not None:
            conditions.append(GeneralLedgerEntry.status == status)
        if start_date is not None:
            conditions.append(GeneralLedgerEntry.transaction_date >= start_date)
        if end_date is not None:
            conditions.append(GeneralLedgerEntry.transaction_date <= end_date)
        if entity_id is not None:
            conditions.append(GeneralLedgerEntry.entity_id == entity_id)
        if project_id is not None:
            conditions.append(GeneralLedgerEntry.project_id == project_id)
        if account_name:
            conditions.append(
                GeneralLedgerEntry.account_name.ilike(f"%{account_name}%")
            )
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(
                GeneralLedgerEntry.description.ilike(pattern),
                GeneralLedgerEntry.entity_name.ilike(pattern),
                GeneralLedgerEntry.invoice_number.ilike(pattern),
            ))
        return conditions

    def list_entries(
        self, page: int = 1, limit: int = 20, **filters
    ) -> tuple[list[GeneralLedgerEntry], int]:
        """
        Return one page of rows matching the filters and the total count.

        Rows are ordered newest transaction date first.
        """
        conditions = self._filtered(**filters)
        total = self.db.execute(
            select(func.count(GeneralLedgerEntry.id)).where(*conditions)
        ).scalar_one()

        entries = self.db.execute(
            select(GeneralLedgerEntry)
            .where(*conditions)
            .options(selectinload(GeneralLedgerEntry.project))
            .order_by(
                GeneralLedgerEntry.transaction_date.desc(),
                GeneralLedgerEntry.id.desc(),
            )
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars().all()
        return list(entries), total

    def all_entries(self, **filters) -> list[GeneralLedgerEntry]:
        """Every row matching the filters, for exports."""
        conditions = self._filtered(**filters)
        entries = self.db.execute(
            select(GeneralLedgerEntry)
            .where(*conditions)
            .options(selectinload(GeneralLedgerEntry.project))
            .order_by(
                GeneralLedgerEntry.transaction_date.desc(),
                GeneralLedgerEntry.id.desc(),
            )
        ).scalars().all()
        return list(entries)

    def open_items(self, entry_type: EntryType) -> list[GeneralLedgerEntry]:
        """
        Outstanding receivables or payables.

        Only the control-account row of each journal is returned
        (Accounts Receivable / Accounts Payable), so each business
        event appears once.
        """
        control_account = (
            ACCOUNTS_RECEIVABLE
            if entry_type == EntryType.RECEIVABLE else ACCOUNTS_PAYABLE
        )
        entries = self.db.execute(
            select(GeneralLedgerEntry)
            .where(
                GeneralLedgerEntry.entry_type == entry_type,
                GeneralLedgerEntry.account_name == control_account,
                GeneralLedgerEntry.status.in_(OPEN_STATUSES),
            )
            .order_by(GeneralLedgerEntry.due_date, GeneralLedgerEntry.id)
        ).scalars().all()
        return list(entries)

    def entries_by_reference(
        self, reference_type: str, reference_id: int
    ) -> list[GeneralLedgerEntry]:
        entries = self.db.execute(
            select(GeneralLedgerEntry)
            .where(
                GeneralLedgerEntry.reference_type == reference_type,
                GeneralLedgerEntry.reference_id == reference_id,
            )
            .order_by(GeneralLedgerEntry.id)
        ).scalars().all()
        return list(entries)
