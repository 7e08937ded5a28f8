"""
General ledger API endpoints.

Query parameters use the camelCase names the ledger pages send
(entryType, startDate, ...); bodies are snake_case.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from erp_ledger.config import get_settings
from erp_ledger.models.base import get_db
from erp_ledger.models.enums import EntryType, LedgerStatus
from erp_ledger.rules.exports import ledger_csv
from erp_ledger.schemas.common import Page, Pagination
from erp_ledger.schemas.ledger import (
    JournalCreate,
    JournalResponse,
    LedgerEntryCreate,
    LedgerEntryResponse,
    LedgerEntryUpdate,
)
from erp_ledger.services.errors import NotFoundError
from erp_ledger.services.ledger_service import LedgerService

router = APIRouter(prefix="/general-ledger", tags=["General Ledger"])


def ledger_filters(
    entry_type: EntryType | None = Query(default=None, alias="entryType"),
    reference_type: str | None = Query(default=None, alias="referenceType"),
    status: LedgerStatus | None = Query(default=None),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    entity_id: int | None = Query(default=None, alias="entityId"),
    project_id: int | None = Query(default=None, alias="projectId"),
    account_name: str | None = Query(default=None, alias="accountName"),
    search: str | None = Query(default=None),
) -> dict:
    """Filters shared by the list and export endpoints."""
    return {
        "entry_type": entry_type,
        "reference_type": reference_type,
        "status": status,
        "start_date": start_date,
        "end_date": end_date,
        "entity_id": entity_id,
        "project_id": project_id,
        "account_name": account_name,
        "search": search,
    }


@router.get("", response_model=Page[LedgerEntryResponse])
def list_entries(
    filters: dict = Depends(ledger_filters),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=get_settings().DEFAULT_PAGE_SIZE, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """List ledger rows, newest transaction date first."""
    service = LedgerService(db)
    entries, total = service.list_entries(page=page, limit=limit, **filters)
    return Page[LedgerEntryResponse](
        data=[LedgerEntryResponse.model_validate(e) for e in entries],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/receivables", response_model=list[LedgerEntryResponse])
def list_receivables(db: Session = Depends(get_db)):
    """Outstanding receivables (pending or overdue)."""
    return LedgerService(db).open_items(EntryType.RECEIVABLE)


@router.get("/payables", response_model=list[LedgerEntryResponse])
def list_payables(db: Session = Depends(get_db)):
    """Outstanding payables (pending or overdue)."""
    return LedgerService(db).open_items(EntryType.PAYABLE)


@router.get("/export.csv")
def export_entries(
    filters: dict = Depends(ledger_filters),
    db: Session = Depends(get_db),
):
    """Every row matching the filters as a CSV download."""
    entries = LedgerService(db).all_entries(**filters)
    return Response(
        content=ledger_csv(entries),
        media_type="text/csv",
        headers={
            "Content-Disposition": (
                f'attachment; filename="general-ledger-{date.today()}.csv"'
            ),
        },
    )


@router.post("", response_model=LedgerEntryResponse, status_code=201)
def create_entry(
    request: LedgerEntryCreate,
    db: Session = Depends(get_db),
):
    """
    Post a single ledger row.

    This is the quick-entry path: no counter-row is written, so
    the ledger is only balanced if the caller posts one.
    """
    service = LedgerService(db)
    try:
        service.require_user_reference_type(request.reference_type)
        entry = service.create_entry(request)
        db.commit()
        return entry
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/journal", response_model=JournalResponse, status_code=201)
def post_journal(
    request: JournalCreate,
    db: Session = Depends(get_db),
):
    """
    Post a balanced journal.

    All rows are written in one transaction; an unbalanced or
    otherwise invalid journal writes nothing and returns 400.
    """
    service = LedgerService(db)
    try:
        service.require_user_reference_type(request.reference_type)
        journal_id, entries = service.post_journal(request)
        db.commit()
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    return JournalResponse(
        journal_id=journal_id,
        entries=[LedgerEntryResponse.model_validate(e) for e in entries],
        total_amount=sum(e.debit_amount for e in entries),
    )


@router.get("/{entry_id}", response_model=LedgerEntryResponse)
def get_entry(
    entry_id: int,
    db: Session = Depends(get_db),
):
    try:
        return LedgerService(db).get_entry(entry_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{entry_id}", response_model=LedgerEntryResponse)
def update_entry(
    entry_id: int,
    request: LedgerEntryUpdate,
    db: Session = Depends(get_db),
):
    """Edit a ledger row. Amounts of journal rows are locked."""
    service = LedgerService(db)
    try:
        entry = service.update_entry(entry_id, request)
        db.commit()
        return entry
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
