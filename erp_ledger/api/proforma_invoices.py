"""
Proforma invoice API endpoints, including approval and
conversion into a sales invoice.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from erp_ledger.models.base import get_db
from erp_ledger.models.enums import ProformaStatus
from erp_ledger.schemas.common import MessageResponse
from erp_ledger.schemas.documents import (
    ConversionResponse,
    ProformaCreate,
    ProformaResponse,
    ProformaUpdate,
    SalesInvoiceResponse,
)
from erp_ledger.services.errors import NotFoundError
from erp_ledger.services.proforma_service import ProformaService

router = APIRouter(prefix="/proforma-invoices", tags=["Proforma Invoices"])


@router.get("", response_model=list[ProformaResponse])
def list_proformas(
    status: ProformaStatus | None = Query(default=None),
    show_archived: bool = Query(default=False, alias="showArchived"),
    db: Session = Depends(get_db),
):
    return ProformaService(db).list_all(
        status=status, include_archived=show_archived
    )


@router.post("", response_model=ProformaResponse, status_code=201)
def create_proforma(
    request: ProformaCreate,
    db: Session = Depends(get_db),
):
    service = ProformaService(db)
    try:
        proforma = service.create(request)
        db.commit()
        return proforma
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{proforma_id}", response_model=ProformaResponse)
def get_proforma(
    proforma_id: int,
    db: Session = Depends(get_db),
):
    try:
        return ProformaService(db).get(proforma_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{proforma_id}", response_model=ProformaResponse)
def update_proforma(
    proforma_id: int,
    request: ProformaUpdate,
    db: Session = Depends(get_db),
):
    """
    Edit a proforma invoice.

    Setting status to approved is subject to the approval rule;
    converted can only be reached through convert-to-invoice.
    """
    service = ProformaService(db)
    try:
        proforma = service.update(proforma_id, request)
        db.commit()
        return proforma
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{proforma_id}", response_model=MessageResponse)
def delete_proforma(
    proforma_id: int,
    db: Session = Depends(get_db),
):
    service = ProformaService(db)
    try:
        service.delete(proforma_id)
        db.commit()
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    return MessageResponse(message="Proforma invoice deleted")


@router.post("/{proforma_id}/approve", response_model=ProformaResponse)
def approve_proforma(
    proforma_id: int,
    db: Session = Depends(get_db),
):
    """Approve a draft or sent proforma invoice."""
    service = ProformaService(db)
    try:
        proforma = service.approve(proforma_id)
        db.commit()
        return proforma
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/{proforma_id}/convert-to-invoice", response_model=ConversionResponse
)
def convert_proforma(
    proforma_id: int,
    db: Session = Depends(get_db),
):
    """
    Convert an approved proforma into a draft sales invoice.

    The new invoice and the proforma's status change are
    committed together.
    """
    service = ProformaService(db)
    try:
        invoice, proforma = service.convert(proforma_id)
        db.commit()
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    return ConversionResponse(
        message="Proforma invoice converted to sales invoice successfully",
        sales_invoice=SalesInvoiceResponse.model_validate(invoice),
        proforma_invoice=ProformaResponse.model_validate(proforma),
    )
