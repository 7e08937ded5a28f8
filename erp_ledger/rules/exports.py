"""CSV rendering of general ledger rows."""

import csv
import io

LEDGER_CSV_HEADERS = [
    "Date",
    "Type",
    "Account",
    "Description",
    "Entity",
    "Project",
    "Invoice",
    "Debit",
    "Credit",
    "Status",
]


def _value(entry, name):
    if isinstance(entry, dict):
        return entry.get(name)
    return getattr(entry, name, None)


def _text(value) -> str:
    if value is None or value == "":
        return "-"
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def ledger_csv(entries) -> str:
    """
    Render ledger rows (models, schemas or dicts) as CSV.

    Every field is quoted and rows are joined with newlines.
    Missing entity, project and invoice show as '-'.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(LEDGER_CSV_HEADERS)
    for entry in entries:
        transaction_date = _value(entry, "transaction_date")
        writer.writerow([
            _text(transaction_date.isoformat()
                  if hasattr(transaction_date, "isoformat")
                  else transaction_date),
            _text(_value(entry, "entry_type")),
            _text(_value(entry, "account_name")),
            _text(_value(entry, "description")),
            _text(_value(entry, "entity_name")),
            _text(_value(entry, "project_title")),
            _text(_value(entry, "invoice_number")),
            _text(_value(entry, "debit_amount") or "0"),
            _text(_value(entry, "credit_amount") or "0"),
            _text(_value(entry, "status")),
        ])
    return buffer.getvalue().rstrip("\n")
