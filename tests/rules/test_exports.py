"""
Tests for the ledger CSV export.
"""

from datetime import date

from erp_ledger.models.enums import EntryType, LedgerStatus
from erp_ledger.rules.exports import ledger_csv


def test_header_only_for_no_rows():
    assert ledger_csv([]) == (
        '"Date","Type","Account","Description","Entity","Project",'
        '"Invoice","Debit","Credit","Status"'
    )


def test_row_fields_are_quoted_and_missing_values_dashed():
    row = {
        "transaction_date": date(2024, 3, 1),
        "entry_type": EntryType.RECEIVABLE,
        "account_name": "Accounts Receivable",
        "description": 'Invoice "A-1"',
        "entity_name": "Acme",
        "project_title": None,
        "invoice_number": "",
        "debit_amount": "200.00",
        "credit_amount": "0.00",
        "status": LedgerStatus.PENDING,
    }
    lines = ledger_csv([row]).split("\n")
    assert len(lines) == 2
    assert lines[1] == (
        '"2024-03-01","receivable","Accounts Receivable","Invoice ""A-1""",'
        '"Acme","-","-","200.00","0.00","pending"'
    )
