"""
Shared enumerations for database models and request schemas.

The values are the lowercase strings the REST API speaks, so an
enum member serialises directly into a JSON payload.
"""

import enum


class EntryType(str, enum.Enum):
    """What kind of business event a ledger row belongs to."""
    RECEIVABLE = "receivable"
    PAYABLE = "payable"
    MANUAL = "manual"


class EntryDirection(str, enum.Enum):
    """Side of a single manual ledger row."""
    DEBIT = "debit"
    CREDIT = "credit"


class LedgerStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class ReferenceType(str, enum.Enum):
    MANUAL = "manual"
    SALES_INVOICE = "sales_invoice"
    PURCHASE_INVOICE = "purchase_invoice"
    PAYROLL = "payroll"
    PAYROLL_PAYMENT = "payroll_payment"


class CounterpartType(str, enum.Enum):
    """Classification of the account chosen on the receivable/payable forms."""
    CUSTOMER = "customer"
    SUPPLIER = "supplier"
    PROJECT = "project"
    ACCOUNT = "account"


class CreditNoteStatus(str, enum.Enum):
    DRAFT = "draft"
    ISSUED = "issued"
    CANCELLED = "cancelled"


class ProformaStatus(str, enum.Enum):
    DRAFT = "draft"
    SENT = "sent"
    APPROVED = "approved"
    REJECTED = "rejected"
    CONVERTED = "converted"
    EXPIRED = "expired"


class SalesInvoiceStatus(str, enum.Enum):
    DRAFT = "draft"
    APPROVED = "approved"
    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    OVERDUE = "overdue"


class PayrollStatus(str, enum.Enum):
    DRAFT = "draft"
    APPROVED = "approved"
    PAID = "paid"


class EmployeeCategory(str, enum.Enum):
    PERMANENT = "permanent"
    CONSULTANT = "consultant"


class ProjectStatus(str, enum.Enum):
    PLANNING = "planning"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Store enum values (not member names) in database columns."""
    return [member.value for member in enum_cls]
