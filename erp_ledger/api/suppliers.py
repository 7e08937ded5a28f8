"""
Supplier API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from erp_ledger.config import get_settings
from erp_ledger.models.base import get_db
from erp_ledger.schemas.common import MessageResponse, Page, Pagination
from erp_ledger.schemas.directory import (
    SupplierCreate,
    SupplierResponse,
    SupplierUpdate,
)
from erp_ledger.services.directory_service import DirectoryService
from erp_ledger.services.errors import NotFoundError

router = APIRouter(prefix="/suppliers", tags=["Suppliers"])


@router.get("", response_model=Page[SupplierResponse])
def list_suppliers(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=get_settings().DEFAULT_PAGE_SIZE, ge=1, le=500),
    search: str | None = Query(default=None),
    show_archived: bool = Query(default=False, alias="showArchived"),
    db: Session = Depends(get_db),
):
    service = DirectoryService(db)
    suppliers, total = service.list_suppliers(
        page=page, limit=limit, search=search, show_archived=show_archived
    )
    return Page[SupplierResponse](
        data=[SupplierResponse.model_validate(s) for s in suppliers],
        pagination=Pagination.build(page, limit, total),
    )


@router.post("", response_model=SupplierResponse, status_code=201)
def create_supplier(
    request: SupplierCreate,
    db: Session = Depends(get_db),
):
    service = DirectoryService(db)
    try:
        supplier = service.create_supplier(request)
        db.commit()
        return supplier
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{supplier_id}", response_model=SupplierResponse)
def get_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
):
    try:
        return DirectoryService(db).get_supplier(supplier_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{supplier_id}", response_model=SupplierResponse)
def update_supplier(
    supplier_id: int,
    request: SupplierUpdate,
    db: Session = Depends(get_db),
):
    service = DirectoryService(db)
    try:
        supplier = service.update_supplier(supplier_id, request)
        db.commit()
        return supplier
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{supplier_id}", response_model=MessageResponse)
def delete_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
):
    """Delete a supplier; suppliers with ledger rows must be archived."""
    service = DirectoryService(db)
    try:
        service.delete_supplier(supplier_id)
        db.commit()
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    return MessageResponse(message="Supplier deleted")


@router.post("/{supplier_id}/archive", response_model=SupplierResponse)
def archive_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
):
    service = DirectoryService(db)
    try:
        supplier = service.set_supplier_archived(supplier_id, True)
        db.commit()
        return supplier
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{supplier_id}/unarchive", response_model=SupplierResponse)
def unarchive_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
):
    service = DirectoryService(db)
    try:
        supplier = service.set_supplier_archived(supplier_id, False)
        db.commit()
        return supplier
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
