"""
Journal pair builder.

Turns a single receivable or payable event into the two ledger
rows of a double entry:

    receivable:  DEBIT  Accounts Receivable
                 CREDIT Revenue (or the chosen chart account)

    payable:     DEBIT  Operating Expenses (or the chosen chart account)
                 CREDIT Accounts Payable

Both rows carry the same amount string, so the pair balances by
construction. Single-sided manual rows are built here too.
"""

from dataclasses import dataclass, field, asdict
from datetime import date
from decimal import Decimal

from erp_ledger.models.enums import (
    CounterpartType,
    EntryDirection,
    EntryType,
    LedgerStatus,
    ReferenceType,
)
from erp_ledger.rules.money import ParseError, amount_string, parse_amount

ACCOUNTS_RECEIVABLE = "Accounts Receivable"
ACCOUNTS_PAYABLE = "Accounts Payable"
DEFAULT_REVENUE_ACCOUNT = "Revenue"
DEFAULT_EXPENSE_ACCOUNT = "Operating Expenses"


class JournalValidationError(ValueError):
    """A journal request failed a rule before anything was written."""


@dataclass(frozen=True)
class Counterpart:
    """The customer, supplier, project or chart account picked on the form."""
    type: CounterpartType
    name: str = ""
    id: int | None = None


@dataclass
class JournalRow:
    account_name: str
    debit_amount: str
    credit_amount: str
    description: str
    entry_type: EntryType
    reference_type: str = ReferenceType.MANUAL.value
    entity_type: CounterpartType | None = None
    entity_id: int | None = None
    entity_name: str | None = None
    project_id: int | None = None
    invoice_number: str | None = None
    notes: str | None = None
    transaction_date: date | None = None
    due_date: date | None = None
    status: LedgerStatus = LedgerStatus.PENDING
    reference_id: int | None = field(default=None)

    def to_dict(self) -> dict:
        return asdict(self)


def _require_counterpart(counterpart: Counterpart) -> None:
    ctype = counterpart.type
    if ctype == CounterpartType.ACCOUNT:
        if not (counterpart.name or "").strip():
            raise JournalValidationError("Please select an account")
    elif ctype in (
        CounterpartType.CUSTOMER,
        CounterpartType.SUPPLIER,
        CounterpartType.PROJECT,
    ):
        if counterpart.id is None:
            raise JournalValidationError(f"Please select a {ctype.value}")
    else:
        raise JournalValidationError(f"Unknown account type: {ctype}")


def _require_positive(amount) -> Decimal:
    try:
        value = parse_amount(amount)
    except ParseError:
        raise JournalValidationError("Amount is required")
    if value <= 0:
        raise JournalValidationError("Amount must be greater than 0")
    return value


def build_journal_pair(
    kind: EntryType,
    amount,
    counterpart: Counterpart,
    description: str,
    invoice_number: str | None = None,
    notes: str | None = None,
    transaction_date: date | None = None,
    due_date: date | None = None,
) -> tuple[JournalRow, JournalRow]:
    """
    Build the balanced debit/credit rows for one receivable or payable.

    Raises JournalValidationError when the description is empty,
    the amount is missing or not positive, or the counterpart for
    the chosen type is not selected.
    """
    kind = EntryType(kind)
    if kind not in (EntryType.RECEIVABLE, EntryType.PAYABLE):
        raise JournalValidationError(
            f"Journal pairs are built for receivables and payables, not {kind.value}"
        )
    if not (description or "").strip():
        raise JournalValidationError("Description is required")
    value = _require_positive(amount)
    _require_counterpart(counterpart)

    text = amount_string(value)
    is_entity = counterpart.type in (
        CounterpartType.CUSTOMER, CounterpartType.SUPPLIER,
    )
    shared = dict(
        description=description,
        entry_type=kind,
        entity_type=counterpart.type if is_entity else None,
        entity_id=counterpart.id if is_entity else None,
        entity_name=counterpart.name or None,
        project_id=(
            counterpart.id
            if counterpart.type == CounterpartType.PROJECT else None
        ),
        invoice_number=invoice_number or None,
        notes=notes or None,
        transaction_date=transaction_date,
        due_date=due_date,
    )
    chart_account = (
        counterpart.name
        if counterpart.type == CounterpartType.ACCOUNT else None
    )

    if kind == EntryType.RECEIVABLE:
        debit = JournalRow(
            account_name=ACCOUNTS_RECEIVABLE,
            debit_amount=text, credit_amount="0", **shared,
        )
        credit = JournalRow(
            account_name=chart_account or DEFAULT_REVENUE_ACCOUNT,
            debit_amount="0", credit_amount=text, **shared,
        )
    else:
        debit = JournalRow(
            account_name=chart_account or DEFAULT_EXPENSE_ACCOUNT,
            debit_amount=text, credit_amount="0", **shared,
        )
        credit = JournalRow(
            account_name=ACCOUNTS_PAYABLE,
            debit_amount="0", credit_amount=text, **shared,
        )
    return debit, credit


def build_manual_entry(
    direction: EntryDirection,
    amount,
    account_name: str,
    description: str,
    transaction_date: date | None = None,
    entry_type: EntryType = EntryType.MANUAL,
    **extra,
) -> JournalRow:
    """
    Build one unbalanced row for the generic General Ledger form.

    No counter-row is produced; this is the quick-entry path that
    bypasses pairing.
    """
    direction = EntryDirection(direction)
    if not (description or "").strip():
        raise JournalValidationError("Description is required")
    if not (account_name or "").strip():
        raise JournalValidationError("Account name is required")
    text = amount_string(_require_positive(amount))

    return JournalRow(
        account_name=account_name,
        debit_amount=text if direction == EntryDirection.DEBIT else "0",
        credit_amount=text if direction == EntryDirection.CREDIT else "0",
        description=description,
        entry_type=EntryType(entry_type),
        transaction_date=transaction_date,
        **extra,
    )


def check_balanced(rows) -> Decimal:
    """
    Verify a set of rows forms a valid journal and return its total.

    Each row needs exactly one non-zero, non-negative side, and
    the debit total must equal the credit total.
    """
    if len(rows) < 2:
        raise JournalValidationError("A journal needs at least two rows")

    total_debits = Decimal("0")
    total_credits = Decimal("0")
    for row in rows:
        debit = parse_amount(row.debit_amount or "0")
        credit = parse_amount(row.credit_amount or "0")
        if debit < 0 or credit < 0:
            raise JournalValidationError("Amounts cannot be negative")
        if (debit == 0) == (credit == 0):
            raise JournalValidationError(
                f"Row '{row.account_name}' must have exactly one of "
                f"debit or credit set"
            )
        total_debits += debit
        total_credits += credit

    if total_debits != total_credits:
        raise JournalValidationError(
            f"Journal does not balance: "
            f"debits={total_debits}, credits={total_credits}"
        )
    return total_debits
