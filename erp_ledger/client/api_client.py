"""
HTTP client for the ERP ledger API.

Reads go through query() and are cached; writes go through
mutate(), which invalidates the endpoint prefixes it is told
about once the server accepts the request. Every failure surfaces
as ApiError carrying a message, or FormValidationError when the
form was rejected before anything was sent.
"""

import logging

import httpx

from erp_ledger.client.cache import QueryCache
from erp_ledger.models.enums import (
    CounterpartType,
    EntryType,
    PayrollStatus,
    ProformaStatus,
)
from erp_ledger.rules.journal import (
    Counterpart,
    JournalRow,
    JournalValidationError,
    build_journal_pair,
    build_manual_entry,
)
from erp_ledger.rules.validation import (
    LedgerEntryForm,
    ManualEntryForm,
    validate_ledger_form,
    validate_manual_entry,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Request failed"

LEDGER = "/api/general-ledger"
PROFORMAS = "/api/proforma-invoices"
SALES_INVOICES = "/api/sales-invoices"
PAYROLL = "/api/payroll"


class ApiError(Exception):
    """The server rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class FormValidationError(ValueError):
    """A form failed validation; nothing was sent."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


def error_message(response: httpx.Response) -> str:
    """The server's detail or message, else a generic fallback."""
    try:
        body = response.json()
    except ValueError:
        return GENERIC_ERROR
    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, str) and detail:
            return detail
        if isinstance(detail, list) and detail:
            # FastAPI request validation errors
            return "; ".join(str(item.get("msg", item)) for item in detail
                             if isinstance(item, dict)) or GENERIC_ERROR
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return GENERIC_ERROR


ROW_FIELDS = (
    "account_name", "debit_amount", "credit_amount", "entity_type",
    "entity_id", "entity_name", "project_id", "invoice_number", "notes",
)


def _row_payload(row: JournalRow) -> dict:
    payload = {name: getattr(row, name) for name in ROW_FIELDS}
    if row.entity_type is not None:
        payload["entity_type"] = CounterpartType(row.entity_type).value
    return payload


class ErpClient:
    """
    Talks to the API for the ledger, document and payroll pages.

    `http` may be any httpx.Client (a FastAPI TestClient works);
    when omitted one is created for base_url. Requests are never
    retried.
    """

    def __init__(
        self,
        base_url: str,
        cache: QueryCache,
        http: httpx.Client | None = None,
    ):
        self.base_url = base_url
        self.cache = cache
        self.http = http or httpx.Client(base_url=base_url, timeout=30.0)

    def _send(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        try:
            response = self.http.request(method, endpoint, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, endpoint, e)
            raise ApiError(str(e) or GENERIC_ERROR) from e
        if not response.is_success:
            message = error_message(response)
            logger.warning(
                "%s %s returned %d: %s",
                method, endpoint, response.status_code, message,
            )
            raise ApiError(message, response.status_code)
        return response

    @staticmethod
    def _body(response: httpx.Response):
        if not response.content:
            return None
        if response.headers.get("content-type", "").startswith("application/json"):
            return response.json()
        return response.text

    def query(self, endpoint: str, params: dict | None = None):
        """GET endpoint, served from the cache when already fetched."""
        if self.cache.has(endpoint, params):
            return self.cache.get(endpoint, params)
        clean = {k: v for k, v in (params or {}).items() if v is not None}
        data = self._body(self._send("GET", endpoint, params=clean))
        self.cache.set(endpoint, params, data)
        return data

    def mutate(
        self,
        method: str,
        endpoint: str,
        json=None,
        params: dict | None = None,
        invalidates: list[str] | tuple[str, ...] = (),
    ):
        """
        Send a write. On success the listed prefixes are invalidated;
        on failure the cache is left untouched.
        """
        data = self._body(self._send(method, endpoint, json=json, params=params))
        for prefix in invalidates:
            self.cache.invalidate(prefix)
        return data

    def close(self) -> None:
        self.http.close()

    # --- Ledger entry pages ---

    def _post_pair(self, kind: EntryType, form: LedgerEntryForm):
        result = validate_ledger_form(form)
        if not result.ok:
            raise FormValidationError(result.errors)

        account_type = CounterpartType(form.account_type)
        if account_type == CounterpartType.CUSTOMER:
            counterpart_id = form.selected_customer_id
        elif account_type == CounterpartType.SUPPLIER:
            counterpart_id = form.selected_supplier_id
        elif account_type == CounterpartType.PROJECT:
            counterpart_id = form.project_id
        else:
            counterpart_id = None
        name = (
            form.selected_account
            if account_type == CounterpartType.ACCOUNT
            else form.entity_name
        )
        counterpart = Counterpart(
            type=account_type,
            name=name or "",
            id=int(counterpart_id) if counterpart_id not in (None, "") else None,
        )

        try:
            debit, credit = build_journal_pair(
                kind,
                form.amount,
                counterpart,
                form.description,
                invoice_number=form.invoice_number,
                notes=form.notes,
            )
        except JournalValidationError as e:
            raise FormValidationError([str(e)]) from e

        payload = {
            "entry_type": kind.value,
            "reference_type": debit.reference_type,
            "description": form.description,
            "transaction_date": form.transaction_date,
            "due_date": form.due_date or None,
            "entries": [_row_payload(row) for row in (debit, credit)],
        }
        return self.mutate(
            "POST", f"{LEDGER}/journal", json=payload, invalidates=[LEDGER]
        )

    def create_receivable(self, form: LedgerEntryForm):
        return self._post_pair(EntryType.RECEIVABLE, form)

    def create_payable(self, form: LedgerEntryForm):
        return self._post_pair(EntryType.PAYABLE, form)

    def create_manual_entry(self, form: ManualEntryForm):
        """
        Post one row from the generic General Ledger dialog.

        The direction picks which side receives the amount; no
        counter-row is written.
        """
        result = validate_manual_entry(form)
        if not result.ok:
            raise FormValidationError(result.errors)
        try:
            row = build_manual_entry(
                form.direction,
                form.amount,
                form.account_name,
                form.description,
                entry_type=EntryType(form.entry_type),
                entity_name=form.entity_name or None,
                invoice_number=form.invoice_number or None,
                notes=form.notes or None,
            )
        except ValueError as e:
            raise FormValidationError([str(e)]) from e

        payload = {
            "entry_type": row.entry_type.value,
            "reference_type": row.reference_type,
            "account_name": row.account_name,
            "description": row.description,
            "debit_amount": row.debit_amount,
            "credit_amount": row.credit_amount,
            "entity_name": row.entity_name,
            "invoice_number": row.invoice_number,
            "transaction_date": form.transaction_date,
            "notes": row.notes,
        }
        return self.mutate("POST", LEDGER, json=payload, invalidates=[LEDGER])

    # --- Proforma invoices ---

    def approve_proforma(self, proforma_id: int):
        return self.mutate(
            "PUT", f"{PROFORMAS}/{proforma_id}",
            json={"status": ProformaStatus.APPROVED.value},
            invalidates=[PROFORMAS],
        )

    def convert_proforma(self, proforma_id: int):
        return self.mutate(
            "POST", f"{PROFORMAS}/{proforma_id}/convert-to-invoice",
            invalidates=[PROFORMAS, SALES_INVOICES],
        )

    # --- Payroll ---

    def approve_payroll(self, entry_id: int):
        return self.mutate(
            "PUT", f"{PAYROLL}/{entry_id}",
            json={"status": PayrollStatus.APPROVED.value},
            invalidates=[PAYROLL],
        )

    def pay_payroll(self, entry_id: int):
        """Mark an entry paid; the server posts settlement rows to the ledger."""
        return self.mutate(
            "PUT", f"{PAYROLL}/{entry_id}",
            json={"status": PayrollStatus.PAID.value},
            invalidates=[PAYROLL, LEDGER],
        )
