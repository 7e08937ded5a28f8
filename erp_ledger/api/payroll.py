"""
Payroll API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from erp_ledger.models.base import get_db
from erp_ledger.schemas.payroll import (
    AdjustmentCreate,
    AdjustmentResponse,
    AdjustmentUpdate,
    ClearPeriodResponse,
    PayrollEntryResponse,
    PayrollEntryUpdate,
    PayrollGenerateRequest,
)
from erp_ledger.services.errors import NotFoundError
from erp_ledger.services.payroll_service import PayrollService

router = APIRouter(prefix="/payroll", tags=["Payroll"])


@router.get("", response_model=list[PayrollEntryResponse])
def list_payroll(
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None),
    db: Session = Depends(get_db),
):
    return PayrollService(db).list_period(month, year)


@router.post(
    "/generate", response_model=list[PayrollEntryResponse], status_code=201
)
def generate_payroll(
    request: PayrollGenerateRequest,
    db: Session = Depends(get_db),
):
    """
    Generate draft payroll entries for a month.

    Employees that already have an entry for the month are
    skipped, so generating twice is harmless.
    """
    service = PayrollService(db)
    try:
        entries = service.generate(request.month, request.year)
        db.commit()
        return entries
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/clear-period", response_model=ClearPeriodResponse)
def clear_period(
    month: int = Query(),
    year: int = Query(),
    db: Session = Depends(get_db),
):
    """Delete a month's payroll entries and their ledger rows."""
    service = PayrollService(db)
    try:
        result = service.clear_period(month, year)
        db.commit()
        return result
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{entry_id}", response_model=PayrollEntryResponse)
def get_payroll_entry(
    entry_id: int,
    db: Session = Depends(get_db),
):
    try:
        return PayrollService(db).get(entry_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{entry_id}", response_model=PayrollEntryResponse)
def update_payroll_entry(
    entry_id: int,
    request: PayrollEntryUpdate,
    db: Session = Depends(get_db),
):
    """
    Change an entry's status or correct a draft.

    Enforces draft -> approved -> paid; paying posts the
    settlement rows to the ledger.
    """
    service = PayrollService(db)
    try:
        entry = service.update(entry_id, request)
        db.commit()
        return entry
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{entry_id}/additions", response_model=list[AdjustmentResponse])
def list_additions(
    entry_id: int,
    db: Session = Depends(get_db),
):
    try:
        return PayrollService(db).get(entry_id).additions
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/{entry_id}/additions",
    response_model=AdjustmentResponse,
    status_code=201,
)
def add_addition(
    entry_id: int,
    request: AdjustmentCreate,
    db: Session = Depends(get_db),
):
    service = PayrollService(db)
    try:
        addition = service.add_addition(entry_id, request)
        db.commit()
        return addition
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{entry_id}/deductions", response_model=list[AdjustmentResponse])
def list_deductions(
    entry_id: int,
    db: Session = Depends(get_db),
):
    try:
        return PayrollService(db).get(entry_id).deductions
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/{entry_id}/deductions",
    response_model=AdjustmentResponse,
    status_code=201,
)
def add_deduction(
    entry_id: int,
    request: AdjustmentCreate,
    db: Session = Depends(get_db),
):
    service = PayrollService(db)
    try:
        deduction = service.add_deduction(entry_id, request)
        db.commit()
        return deduction
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


# --- Single adjustments (draft entries only) ---

@router.put("/additions/{addition_id}", response_model=AdjustmentResponse)
def update_addition(
    addition_id: int,
    request: AdjustmentUpdate,
    db: Session = Depends(get_db),
):
    service = PayrollService(db)
    try:
        addition = service.update_addition(addition_id, request)
        db.commit()
        return addition
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/additions/{addition_id}", response_model=PayrollEntryResponse)
def delete_addition(
    addition_id: int,
    db: Session = Depends(get_db),
):
    """Remove an addition and return the recalculated entry."""
    service = PayrollService(db)
    try:
        entry = service.delete_addition(addition_id)
        db.commit()
        return entry
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/deductions/{deduction_id}", response_model=AdjustmentResponse)
def update_deduction(
    deduction_id: int,
    request: AdjustmentUpdate,
    db: Session = Depends(get_db),
):
    service = PayrollService(db)
    try:
        deduction = service.update_deduction(deduction_id, request)
        db.commit()
        return deduction
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/deductions/{deduction_id}", response_model=PayrollEntryResponse)
def delete_deduction(
    deduction_id: int,
    db: Session = Depends(get_db),
):
    """Remove a deduction and return the recalculated entry."""
    service = PayrollService(db)
    try:
        entry = service.delete_deduction(deduction_id)
        db.commit()
        return entry
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
