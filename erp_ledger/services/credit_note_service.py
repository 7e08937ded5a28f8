"""
Credit note service.

Header totals are never taken from the request: they are
recomputed from the items and discount whenever either changes.
"""

import logging
from datetime import date

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from erp_ledger.models.credit_note import CreditNote, CreditNoteItem
from erp_ledger.models.sales_invoice import SalesInvoice
from erp_ledger.rules.money import quantize
from erp_ledger.rules.totals import LineItem, compute_totals, line_totals
from erp_ledger.rules.transitions import CREDIT_NOTE_MACHINE
from erp_ledger.schemas.documents import (
    CreditNoteCreate,
    CreditNoteUpdate,
    LineItemIn,
)
from erp_ledger.services.errors import NotFoundError

logger = logging.getLogger(__name__)


class CreditNoteService:

    def __init__(self, db: Session):
        self.db = db

    def _next_number(self, credit_note_date: date) -> str:
        prefix = f"CN-{credit_note_date.year}-"
        count = self.db.execute(
            select(func.count(CreditNote.id)).where(
                CreditNote.credit_note_number.like(f"{prefix}%")
            )
        ).scalar_one()
        seq = count + 1
        while True:
            number = f"{prefix}{seq:04d}"
            taken = self.db.execute(
                select(CreditNote.id).where(
                    CreditNote.credit_note_number == number
                )
            ).first()
            if not taken:
                return number
            seq += 1

    def _check_invoice(self, sales_invoice_id: int | None) -> None:
        if sales_invoice_id is None:
            return
        if not self.db.get(SalesInvoice, sales_invoice_id):
            raise NotFoundError(f"Sales invoice {sales_invoice_id} not found")

    def _apply_items(
        self, credit_note: CreditNote, items: list[LineItemIn], discount
    ) -> None:
        """Replace the items and recompute the header totals."""
        line_items = [
            LineItem(
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                tax_rate=item.tax_rate,
            )
            for item in items
        ]
        credit_note.items.clear()
        for line_item in line_items:
            line = line_totals(line_item)
            credit_note.items.append(CreditNoteItem(
                description=line_item.description,
                quantity=line_item.quantity,
                unit_price=line_item.unit_price,
                tax_rate=line_item.tax_rate,
                tax_amount=quantize(line.tax_amount),
                line_total=quantize(line.total),
            ))

        totals = compute_totals(line_items, discount)
        credit_note.subtotal = quantize(totals.subtotal)
        credit_note.tax_amount = quantize(totals.tax_amount)
        credit_note.discount = quantize(totals.discount)
        credit_note.total_amount = quantize(totals.total_amount)

    def create(self, request: CreditNoteCreate) -> CreditNote:
        self._check_invoice(request.sales_invoice_id)

        number = request.credit_note_number or self._next_number(
            request.credit_note_date
        )
        existing = self.db.execute(
            select(CreditNote.id).where(
                CreditNote.credit_note_number == number
            )
        ).first()
        if existing:
            raise ValueError(f"Credit note number '{number}' already exists")

        credit_note = CreditNote(
            credit_note_number=number,
            sales_invoice_id=request.sales_invoice_id,
            customer_id=request.customer_id,
            status=request.status,
            credit_note_date=request.credit_note_date,
            billing_address=request.billing_address,
            reason=request.reason,
        )
        self._apply_items(credit_note, request.items, request.discount)
        self.db.add(credit_note)
        self.db.flush()
        logger.info(
            "Created credit note %s for %s",
            credit_note.credit_note_number, credit_note.total_amount,
        )
        return credit_note

    def get(self, credit_note_id: int) -> CreditNote:
        credit_note = self.db.get(CreditNote, credit_note_id)
        if not credit_note:
            raise NotFoundError(f"Credit note {credit_note_id} not found")
        return credit_note

    def list_all(self) -> list[CreditNote]:
        return list(self.db.execute(
            select(CreditNote)
            .options(selectinload(CreditNote.items))
            .order_by(CreditNote.credit_note_date.desc(), CreditNote.id.desc())
        ).scalars().all())

    def list_for_invoice(self, sales_invoice_id: int) -> list[CreditNote]:
        self._check_invoice(sales_invoice_id)
        return list(self.db.execute(
            select(CreditNote)
            .where(CreditNote.sales_invoice_id == sales_invoice_id)
            .options(selectinload(CreditNote.items))
            .order_by(CreditNote.id)
        ).scalars().all())

    def update(
        self, credit_note_id: int, request: CreditNoteUpdate
    ) -> CreditNote:
        credit_note = self.get(credit_note_id)
        changes = request.model_dump(exclude_unset=True)

        if "status" in changes and changes["status"] is not None:
            CREDIT_NOTE_MACHINE.require(credit_note.status, changes["status"])
        if changes.get("sales_invoice_id") is not None:
            self._check_invoice(changes["sales_invoice_id"])

        items_changed = request.items is not None
        discount_changed = request.discount is not None
        for name in (
            "sales_invoice_id", "customer_id", "status",
            "credit_note_date", "billing_address", "reason",
        ):
            if name not in changes:
                continue
            # status and date are required columns
            if changes[name] is None and name in ("status", "credit_note_date"):
                continue
            setattr(credit_note, name, changes[name])

        if items_changed or discount_changed:
            if items_changed:
                items = request.items
            else:
                items = [
                    LineItemIn(
                        description=item.description,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                        tax_rate=item.tax_rate,
                    )
                    for item in credit_note.items
                ]
            discount = (
                request.discount if discount_changed else credit_note.discount
            )
            self._apply_items(credit_note, items, discount)

        self.db.flush()
        return credit_note

    def delete(self, credit_note_id: int) -> None:
        credit_note = self.get(credit_note_id)
        self.db.delete(credit_note)
        self.db.flush()
        logger.info("Deleted credit note %s", credit_note.credit_note_number)
