"""Business logic services."""

from erp_ledger.services.ledger_service import LedgerService
from erp_ledger.services.credit_note_service import CreditNoteService
from erp_ledger.services.proforma_service import ProformaService
from erp_ledger.services.payroll_service import PayrollService
from erp_ledger.services.directory_service import DirectoryService

__all__ = [
    "LedgerService",
    "CreditNoteService",
    "ProformaService",
    "PayrollService",
    "DirectoryService",
]
