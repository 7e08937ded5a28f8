"""
Directory service: suppliers, customers, projects and employees.

These are the counterparts picked on the ledger forms and the
inputs of payroll generation.
"""

import logging

from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from erp_ledger.models.customer import Customer
from erp_ledger.models.employee import Employee
from erp_ledger.models.ledger_entry import GeneralLedgerEntry
from erp_ledger.models.enums import CounterpartType
from erp_ledger.models.project import Project, ProjectEmployee
from erp_ledger.models.supplier import Supplier
from erp_ledger.schemas.directory import (
    CustomerCreate,
    EmployeeCreate,
    ProjectCreate,
    SupplierCreate,
    SupplierUpdate,
)
from erp_ledger.services.errors import NotFoundError

logger = logging.getLogger(__name__)


class DirectoryService:

    def __init__(self, db: Session):
        self.db = db

    # --- Suppliers ---

    def create_supplier(self, request: SupplierCreate) -> Supplier:
        supplier = Supplier(**request.model_dump(), is_archived=False)
        self.db.add(supplier)
        self.db.flush()
        logger.info("Created supplier %s", supplier.name)
        return supplier

    def get_supplier(self, supplier_id: int) -> Supplier:
        supplier = self.db.get(Supplier, supplier_id)
        if not supplier:
            raise NotFoundError(f"Supplier {supplier_id} not found")
        return supplier

    def list_suppliers(
        self,
        page: int = 1,
        limit: int = 20,
        search: str | None = None,
        show_archived: bool = False,
    ) -> tuple[list[Supplier], int]:
        """One page of suppliers by name, plus the total matching count."""
        conditions = []
        if not show_archived:
            conditions.append(Supplier.is_archived.is_(False))
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(
                Supplier.name.ilike(pattern),
                Supplier.contact_person.ilike(pattern),
                Supplier.email.ilike(pattern),
            ))

        total = self.db.execute(
            select(func.count(Supplier.id)).where(*conditions)
        ).scalar_one()
        suppliers = self.db.execute(
            select(Supplier)
            .where(*conditions)
            .order_by(Supplier.name, Supplier.id)
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars().all()
        return list(suppliers), total

    def update_supplier(
        self, supplier_id: int, request: SupplierUpdate
    ) -> Supplier:
        supplier = self.get_supplier(supplier_id)
        for name, value in request.model_dump(exclude_unset=True).items():
            if value is None and name in ("name", "currency"):
                continue
            setattr(supplier, name, value)
        self.db.flush()
        return supplier

    def set_supplier_archived(
        self, supplier_id: int, archived: bool
    ) -> Supplier:
        supplier = self.get_supplier(supplier_id)
        supplier.is_archived = archived
        self.db.flush()
        logger.info(
            "%s supplier %s",
            "Archived" if archived else "Unarchived", supplier.name,
        )
        return supplier

    def delete_supplier(self, supplier_id: int) -> None:
        """
        Delete a supplier that no ledger row points at.

        Referenced suppliers must be archived instead so their
        payables keep a counterpart.
        """
        supplier = self.get_supplier(supplier_id)
        referenced = self.db.execute(
            select(GeneralLedgerEntry.id).where(
                GeneralLedgerEntry.entity_type == CounterpartType.SUPPLIER,
                GeneralLedgerEntry.entity_id == supplier.id,
            ).limit(1)
        ).first()
        if referenced:
            raise ValueError(
                f"Supplier '{supplier.name}' has ledger entries; "
                f"archive it instead"
            )
        self.db.delete(supplier)
        self.db.flush()
        logger.info("Deleted supplier %s", supplier.name)

    # --- Customers ---

    def create_customer(self, request: CustomerCreate) -> Customer:
        existing = self.db.execute(
            select(Customer).where(Customer.phone == request.phone)
        ).scalar_one_or_none()
        if existing:
            raise ValueError(
                f"Customer with phone '{request.phone}' already exists"
            )
        customer = Customer(**request.model_dump(), is_archived=False)
        self.db.add(customer)
        self.db.flush()
        return customer

    def list_customers(self) -> list[Customer]:
        return list(self.db.execute(
            select(Customer)
            .where(Customer.is_archived.is_(False))
            .order_by(Customer.name)
        ).scalars().all())

    # --- Projects ---

    def create_project(self, request: ProjectCreate) -> Project:
        data = request.model_dump(exclude={"employee_ids"})
        project = Project(**data)
        for employee_id in request.employee_ids:
            if not self.db.get(Employee, employee_id):
                raise NotFoundError(f"Employee {employee_id} not found")
            project.assignments.append(ProjectEmployee(employee_id=employee_id))
        self.db.add(project)
        self.db.flush()
        return project

    def list_projects(self) -> list[Project]:
        return list(self.db.execute(
            select(Project).order_by(Project.title)
        ).scalars().all())

    # --- Employees ---

    def create_employee(self, request: EmployeeCreate) -> Employee:
        existing = self.db.execute(
            select(Employee).where(
                Employee.employee_code == request.employee_code
            )
        ).scalar_one_or_none()
        if existing:
            raise ValueError(
                f"Employee code '{request.employee_code}' already exists"
            )
        employee = Employee(**request.model_dump())
        self.db.add(employee)
        self.db.flush()
        return employee

    def list_employees(self) -> list[Employee]:
        return list(self.db.execute(
            select(Employee).order_by(Employee.last_name, Employee.first_name)
        ).scalars().all())
