"""
Credit note API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from erp_ledger.models.base import get_db
from erp_ledger.schemas.common import MessageResponse
from erp_ledger.schemas.documents import (
    CreditNoteCreate,
    CreditNoteResponse,
    CreditNoteUpdate,
)
from erp_ledger.services.credit_note_service import CreditNoteService
from erp_ledger.services.errors import NotFoundError

router = APIRouter(tags=["Credit Notes"])


@router.get("/credit-notes", response_model=list[CreditNoteResponse])
def list_credit_notes(db: Session = Depends(get_db)):
    return CreditNoteService(db).list_all()


@router.post(
    "/credit-notes", response_model=CreditNoteResponse, status_code=201
)
def create_credit_note(
    request: CreditNoteCreate,
    db: Session = Depends(get_db),
):
    """
    Create a credit note.

    Totals are computed from the items; a number is generated
    when none is given.
    """
    service = CreditNoteService(db)
    try:
        credit_note = service.create(request)
        db.commit()
        return credit_note
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/credit-notes/{credit_note_id}", response_model=CreditNoteResponse)
def get_credit_note(
    credit_note_id: int,
    db: Session = Depends(get_db),
):
    try:
        return CreditNoteService(db).get(credit_note_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/credit-notes/{credit_note_id}", response_model=CreditNoteResponse)
def update_credit_note(
    credit_note_id: int,
    request: CreditNoteUpdate,
    db: Session = Depends(get_db),
):
    service = CreditNoteService(db)
    try:
        credit_note = service.update(credit_note_id, request)
        db.commit()
        return credit_note
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.delete(
    "/credit-notes/{credit_note_id}", response_model=MessageResponse
)
def delete_credit_note(
    credit_note_id: int,
    db: Session = Depends(get_db),
):
    service = CreditNoteService(db)
    try:
        service.delete(credit_note_id)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    return MessageResponse(message="Credit note deleted")


@router.get(
    "/sales-invoices/{sales_invoice_id}/credit-notes",
    response_model=list[CreditNoteResponse],
)
def list_invoice_credit_notes(
    sales_invoice_id: int,
    db: Session = Depends(get_db),
):
    """Credit notes issued against one sales invoice."""
    try:
        return CreditNoteService(db).list_for_invoice(sales_invoice_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
