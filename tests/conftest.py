"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the
real one. Tables are created before and dropped after every
test, so no test data persists.
"""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from erp_ledger.main import app
from erp_ledger.models import Base, Customer, Employee, Project, Supplier
from erp_ledger.models.base import get_db
from erp_ledger.models.enums import EmployeeCategory, ProjectStatus
from erp_ledger.models.project import ProjectEmployee


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client bound to the test database.

    The get_db dependency is overridden so the app uses the
    test session instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# --- Directory fixtures ---

@pytest.fixture
def customer(db_session):
    customer = Customer(name="Acme Trading", phone="+971500000001")
    db_session.add(customer)
    db_session.commit()
    return customer


@pytest.fixture
def supplier(db_session):
    supplier = Supplier(name="Office Supplies LLC")
    db_session.add(supplier)
    db_session.commit()
    return supplier


@pytest.fixture
def project(db_session):
    project = Project(
        title="Warehouse Fit-out",
        status=ProjectStatus.IN_PROGRESS,
        start_date=date(2024, 3, 1),
        planned_end_date=date(2024, 3, 31),
    )
    db_session.add(project)
    db_session.commit()
    return project


@pytest.fixture
def permanent_employee(db_session):
    employee = Employee(
        employee_code="EMP-001",
        first_name="Jane",
        last_name="Doe",
        category=EmployeeCategory.PERMANENT,
        salary=Decimal("10000.00"),
    )
    db_session.add(employee)
    db_session.commit()
    return employee


@pytest.fixture
def consultant(db_session, project):
    """A consultant assigned to an in-progress project covering March 2024."""
    employee = Employee(
        employee_code="CON-001",
        first_name="Sam",
        last_name="Lee",
        category=EmployeeCategory.CONSULTANT,
        salary=Decimal("22000.00"),
    )
    db_session.add(employee)
    db_session.flush()
    db_session.add(ProjectEmployee(project_id=project.id, employee_id=employee.id))
    db_session.commit()
    return employee
