"""
Form validation for ledger entries.

These checks run before anything is submitted. They collect every
problem into a list of messages rather than stopping at the first.
"""

from dataclasses import dataclass, field

from erp_ledger.models.enums import CounterpartType, EntryDirection
from erp_ledger.rules.money import ParseError, parse_amount


@dataclass
class LedgerEntryForm:
    """The fields of the receivable/payable entry dialogs."""
    description: str = ""
    amount: str = ""
    transaction_date: str = ""
    account_type: CounterpartType | str | None = None
    selected_customer_id: str | int | None = None
    selected_supplier_id: str | int | None = None
    project_id: str | int | None = None
    selected_account: str | None = None
    entity_name: str | None = None
    invoice_number: str | None = None
    due_date: str | None = None
    notes: str | None = None


@dataclass
class ManualEntryForm:
    """The fields of the generic single-row General Ledger dialog."""
    account_name: str = ""
    description: str = ""
    amount: str = ""
    direction: EntryDirection | str = EntryDirection.DEBIT
    transaction_date: str = ""
    entry_type: str = "manual"
    entity_name: str | None = None
    invoice_number: str | None = None
    notes: str | None = None


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


# The form field that must be filled for each account type
REQUIRED_SELECTION = {
    CounterpartType.CUSTOMER: ("selected_customer_id", "Please select a customer"),
    CounterpartType.SUPPLIER: ("selected_supplier_id", "Please select a supplier"),
    CounterpartType.PROJECT: ("project_id", "Please select a project"),
    CounterpartType.ACCOUNT: ("selected_account", "Please select an account"),
}


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_amount(amount, errors: list[str]) -> None:
    try:
        value = parse_amount(amount)
    except ParseError:
        errors.append("Amount must be a valid number greater than 0")
        return
    if value <= 0:
        errors.append("Amount must be greater than 0")


def validate_ledger_form(form: LedgerEntryForm) -> ValidationResult:
    """Check a receivable/payable form; never mutates it."""
    errors: list[str] = []

    if _blank(form.description):
        errors.append("Description is required")
    _check_amount(form.amount, errors)
    if _blank(form.transaction_date):
        errors.append("Transaction date is required")

    if _blank(form.account_type):
        errors.append("Account type is required")
    else:
        try:
            account_type = CounterpartType(form.account_type)
        except ValueError:
            errors.append(f"Unknown account type: {form.account_type}")
        else:
            field_name, message = REQUIRED_SELECTION[account_type]
            if _blank(getattr(form, field_name)):
                errors.append(message)

    return ValidationResult(errors=errors)


def validate_manual_entry(form: ManualEntryForm) -> ValidationResult:
    errors: list[str] = []

    if _blank(form.account_name):
        errors.append("Account name is required")
    if _blank(form.description):
        errors.append("Description is required")
    _check_amount(form.amount, errors)
    if _blank(form.transaction_date):
        errors.append("Transaction date is required")
    try:
        EntryDirection(form.direction)
    except ValueError:
        errors.append("Entry direction must be debit or credit")

    return ValidationResult(errors=errors)
