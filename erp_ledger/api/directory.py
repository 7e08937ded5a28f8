"""
Customer, project and employee endpoints.

Only what the ledger forms and payroll generation need: a list
for lookups and a create.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from erp_ledger.models.base import get_db
from erp_ledger.schemas.directory import (
    CustomerCreate,
    CustomerResponse,
    EmployeeCreate,
    EmployeeResponse,
    ProjectCreate,
    ProjectResponse,
)
from erp_ledger.services.directory_service import DirectoryService
from erp_ledger.services.errors import NotFoundError

router = APIRouter(tags=["Directory"])


# --- Customers ---

@router.get("/customers", response_model=list[CustomerResponse])
def list_customers(db: Session = Depends(get_db)):
    return DirectoryService(db).list_customers()


@router.post("/customers", response_model=CustomerResponse, status_code=201)
def create_customer(
    request: CustomerCreate,
    db: Session = Depends(get_db),
):
    """Create a new customer."""
    service = DirectoryService(db)
    try:
        customer = service.create_customer(request)
        db.commit()
        return customer
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


# --- Projects ---

@router.get("/projects", response_model=list[ProjectResponse])
def list_projects(db: Session = Depends(get_db)):
    return DirectoryService(db).list_projects()


@router.post("/projects", response_model=ProjectResponse, status_code=201)
def create_project(
    request: ProjectCreate,
    db: Session = Depends(get_db),
):
    """Create a project and assign the listed employees to it."""
    service = DirectoryService(db)
    try:
        project = service.create_project(request)
        db.commit()
        return project
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


# --- Employees ---

@router.get("/employees", response_model=list[EmployeeResponse])
def list_employees(db: Session = Depends(get_db)):
    return DirectoryService(db).list_employees()


@router.post("/employees", response_model=EmployeeResponse, status_code=201)
def create_employee(
    request: EmployeeCreate,
    db: Session = Depends(get_db),
):
    service = DirectoryService(db)
    try:
        employee = service.create_employee(request)
        db.commit()
        return employee
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
