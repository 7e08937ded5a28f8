"""
Proforma invoice service.

Lifecycle:
    draft/sent -> approved -> converted

Conversion is the only way into "converted" and produces exactly
one draft sales invoice carrying the proforma's items and totals.
Both rows change in the caller's transaction, so a failed commit
leaves neither behind.
"""

import logging
from datetime import date, datetime, timedelta

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from erp_ledger.config import get_settings
from erp_ledger.models.enums import ProformaStatus, SalesInvoiceStatus
from erp_ledger.models.proforma_invoice import ProformaInvoice
from erp_ledger.models.sales_invoice import SalesInvoice
from erp_ledger.rules.money import quantize, to_money_string
from erp_ledger.rules.totals import LineItem, compute_totals, line_totals
from erp_ledger.rules.transitions import (
    PROFORMA_MACHINE,
    InvalidTransition,
    check_proforma_status_edit,
)
from erp_ledger.schemas.documents import (
    LineItemIn,
    ProformaCreate,
    ProformaUpdate,
)
from erp_ledger.services.errors import NotFoundError

logger = logging.getLogger(__name__)


def _stored_items(items: list[LineItemIn]) -> tuple[list[dict], list[LineItem]]:
    """Items in their JSON column shape plus the calculator's view of them."""
    line_items = [
        LineItem(
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
            tax_rate=item.tax_rate,
        )
        for item in items
    ]
    stored = []
    for line_item in line_items:
        line = line_totals(line_item)
        stored.append({
            "description": line_item.description,
            "quantity": str(line_item.quantity),
            "unit_price": str(line_item.unit_price),
            "tax_rate": str(line_item.tax_rate),
            "tax_amount": to_money_string(line.tax_amount),
        })
    return stored, line_items


class ProformaService:

    def __init__(self, db: Session):
        self.db = db
        self.settings = get_settings()

    def _next_number(self, invoice_date: date) -> str:
        prefix = f"PI-{invoice_date.year}-"
        count = self.db.execute(
            select(func.count(ProformaInvoice.id)).where(
                ProformaInvoice.proforma_number.like(f"{prefix}%")
            )
        ).scalar_one()
        seq = count + 1
        while self._number_taken(f"{prefix}{seq:04d}"):
            seq += 1
        return f"{prefix}{seq:04d}"

    def _number_taken(self, number: str) -> bool:
        return self.db.execute(
            select(ProformaInvoice.id).where(
                ProformaInvoice.proforma_number == number
            )
        ).first() is not None

    def _apply_items(self, proforma: ProformaInvoice, items, discount) -> None:
        stored, line_items = _stored_items(items)
        totals = compute_totals(line_items, discount)
        proforma.items = stored
        proforma.subtotal = quantize(totals.subtotal)
        proforma.tax_amount = quantize(totals.tax_amount)
        proforma.discount = quantize(totals.discount)
        proforma.total_amount = quantize(totals.total_amount)

    def create(self, request: ProformaCreate) -> ProformaInvoice:
        if request.status == ProformaStatus.CONVERTED:
            raise InvalidTransition(
                "Use the convert-to-invoice action to convert a proforma invoice"
            )

        invoice_date = request.invoice_date or date.today()
        number = request.proforma_number or self._next_number(invoice_date)
        if self._number_taken(number):
            raise ValueError(f"Proforma number '{number}' already exists")

        proforma = ProformaInvoice(
            proforma_number=number,
            customer_id=request.customer_id,
            project_id=request.project_id,
            status=request.status,
            invoice_date=invoice_date,
            valid_until=request.valid_until,
            payment_terms=request.payment_terms,
            delivery_terms=request.delivery_terms,
            bank_account=request.bank_account,
            billing_address=request.billing_address,
            terms_and_conditions=request.terms_and_conditions,
            remarks=request.remarks,
            is_archived=False,
        )
        self._apply_items(proforma, request.items, request.discount)
        self.db.add(proforma)
        self.db.flush()
        logger.info("Created proforma invoice %s", proforma.proforma_number)
        return proforma

    def get(self, proforma_id: int) -> ProformaInvoice:
        proforma = self.db.get(ProformaInvoice, proforma_id)
        if not proforma:
            raise NotFoundError(f"Proforma invoice {proforma_id} not found")
        return proforma

    def list_all(
        self,
        status: ProformaStatus | None = None,
        include_archived: bool = False,
    ) -> list[ProformaInvoice]:
        query = select(ProformaInvoice)
        if status is not None:
            query = query.where(ProformaInvoice.status == status)
        if not include_archived:
            query = query.where(ProformaInvoice.is_archived.is_(False))
        query = query.order_by(
            ProformaInvoice.invoice_date.desc(), ProformaInvoice.id.desc()
        )
        return list(self.db.execute(query).scalars().all())

    def update(
        self, proforma_id: int, request: ProformaUpdate
    ) -> ProformaInvoice:
        """
        Edit a proforma. A status sent here follows the same guards as
        the approve and convert actions.
        """
        proforma = self.get(proforma_id)
        changes = request.model_dump(exclude_unset=True)

        if (
            proforma.status == ProformaStatus.CONVERTED
            and set(changes) - {"is_archived"}
        ):
            raise InvalidTransition("A converted proforma invoice cannot be edited")

        if changes.get("status") is not None:
            check_proforma_status_edit(proforma.status, changes["status"])

        for name in (
            "customer_id", "project_id", "status", "invoice_date",
            "valid_until", "payment_terms", "delivery_terms",
            "bank_account", "billing_address", "terms_and_conditions",
            "remarks", "is_archived",
        ):
            if name not in changes:
                continue
            if changes[name] is None and name in (
                "status", "invoice_date", "is_archived",
            ):
                continue
            setattr(proforma, name, changes[name])

        if request.items is not None or request.discount is not None:
            if request.items is not None:
                items = request.items
            else:
                items = [LineItemIn(**item) for item in proforma.items]
            discount = (
                request.discount
                if request.discount is not None else proforma.discount
            )
            self._apply_items(proforma, items, discount)

        self.db.flush()
        return proforma

    def approve(self, proforma_id: int) -> ProformaInvoice:
        proforma = self.get(proforma_id)
        if not PROFORMA_MACHINE.can_transition(
            proforma.status, ProformaStatus.APPROVED
        ):
            logger.warning(
                "Rejected approval of %s in status %s",
                proforma.proforma_number, proforma.status.value,
            )
            raise InvalidTransition(
                f"Cannot approve proforma invoice from "
                f"{proforma.status.value} status"
            )
        proforma.status = ProformaStatus.APPROVED
        self.db.flush()
        logger.info("Approved proforma invoice %s", proforma.proforma_number)
        return proforma

    def _next_invoice_number(self) -> str:
        stamp = int(datetime.utcnow().timestamp() * 1000)
        while self.db.execute(
            select(SalesInvoice.id).where(
                SalesInvoice.invoice_number == f"SI-{stamp}"
            )
        ).first():
            stamp += 1
        return f"SI-{stamp}"

    def convert(
        self, proforma_id: int
    ) -> tuple[SalesInvoice, ProformaInvoice]:
        """
        Turn an approved proforma into a draft sales invoice.

        Returns the new invoice and the updated proforma.
        """
        proforma = self.get(proforma_id)
        if proforma.status != ProformaStatus.APPROVED:
            logger.warning(
                "Rejected conversion of %s in status %s",
                proforma.proforma_number, proforma.status.value,
            )
            raise InvalidTransition(
                "Only approved proforma invoices can be converted"
            )

        today = date.today()
        invoice = SalesInvoice(
            invoice_number=self._next_invoice_number(),
            customer_id=proforma.customer_id,
            project_id=proforma.project_id,
            proforma_invoice_id=proforma.id,
            status=SalesInvoiceStatus.DRAFT,
            invoice_date=today,
            due_date=today + timedelta(days=self.settings.INVOICE_DUE_DAYS),
            items=[dict(item) for item in proforma.items],
            subtotal=proforma.subtotal,
            tax_amount=proforma.tax_amount,
            discount=proforma.discount,
            total_amount=proforma.total_amount,
            paid_amount=0,
        )
        self.db.add(invoice)
        PROFORMA_MACHINE.require(proforma.status, ProformaStatus.CONVERTED)
        proforma.status = ProformaStatus.CONVERTED
        self.db.flush()

        logger.info(
            "Converted proforma %s into sales invoice %s",
            proforma.proforma_number, invoice.invoice_number,
        )
        return invoice, proforma

    def delete(self, proforma_id: int) -> None:
        proforma = self.get(proforma_id)
        if proforma.status == ProformaStatus.CONVERTED:
            raise ValueError(
                "A converted proforma invoice cannot be deleted; "
                "archive it instead"
            )
        self.db.delete(proforma)
        self.db.flush()
        logger.info("Deleted proforma invoice %s", proforma.proforma_number)
