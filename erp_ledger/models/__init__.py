"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from erp_ledger.models.base import Base
from erp_ledger.models.enums import (
    EntryType,
    EntryDirection,
    LedgerStatus,
    ReferenceType,
    CounterpartType,
    CreditNoteStatus,
    ProformaStatus,
    SalesInvoiceStatus,
    PayrollStatus,
    EmployeeCategory,
    ProjectStatus,
)
from erp_ledger.models.customer import Customer
from erp_ledger.models.supplier import Supplier
from erp_ledger.models.employee import Employee
from erp_ledger.models.project import Project, ProjectEmployee
from erp_ledger.models.ledger_entry import GeneralLedgerEntry
from erp_ledger.models.sales_invoice import SalesInvoice
from erp_ledger.models.credit_note import CreditNote, CreditNoteItem
from erp_ledger.models.proforma_invoice import ProformaInvoice
from erp_ledger.models.payroll import (
    PayrollEntry,
    PayrollAddition,
    PayrollDeduction,
)

__all__ = [
    "Base",
    "EntryType",
    "EntryDirection",
    "LedgerStatus",
    "ReferenceType",
    "CounterpartType",
    "CreditNoteStatus",
    "ProformaStatus",
    "SalesInvoiceStatus",
    "PayrollStatus",
    "EmployeeCategory",
    "ProjectStatus",
    "Customer",
    "Supplier",
    "Employee",
    "Project",
    "ProjectEmployee",
    "GeneralLedgerEntry",
    "SalesInvoice",
    "CreditNote",
    "CreditNoteItem",
    "ProformaInvoice",
    "PayrollEntry",
    "PayrollAddition",
    "PayrollDeduction",
]
