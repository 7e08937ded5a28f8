"""
Tests for the API client, run against the application through
the FastAPI TestClient.
"""

import json
from decimal import Decimal

import httpx
import pytest

from erp_ledger.client import ApiError, ErpClient, FormValidationError, QueryCache
from erp_ledger.rules.transitions import available_actions
from erp_ledger.rules.validation import LedgerEntryForm, ManualEntryForm

WIDGET = {"description": "Widget", "quantity": 2, "unit_price": 50, "tax_rate": 10}


@pytest.fixture
def cache():
    return QueryCache()


@pytest.fixture
def erp(client, cache):
    return ErpClient("http://testserver", cache, http=client)


def receivable_form(**overrides):
    data = dict(
        description="Invoice #1001",
        amount="200",
        transaction_date="2024-03-05",
        account_type="customer",
        selected_customer_id="7",
        entity_name="Acme",
    )
    data.update(overrides)
    return LedgerEntryForm(**data)


class TestQuery:

    def test_second_query_is_served_from_cache(self, erp, cache):
        first = erp.query("/api/general-ledger", {"page": 1})
        erp.http.post("/api/general-ledger", json={
            "account_name": "Petty Cash",
            "description": "Float",
            "debit_amount": "10",
            "transaction_date": "2024-03-01",
        })
        second = erp.query("/api/general-ledger", {"page": 1})
        assert second == first
        assert second["pagination"]["total"] == 0

    def test_failed_query_raises_api_error(self, erp, cache):
        with pytest.raises(ApiError) as excinfo:
            erp.query("/api/payroll/99")
        assert excinfo.value.status_code == 404
        assert "not found" in excinfo.value.message
        assert len(cache) == 0


class TestReceivableAndPayable:

    def test_create_receivable_posts_balanced_pair(self, erp, cache):
        erp.query("/api/general-ledger")
        result = erp.create_receivable(receivable_form())

        rows = result["entries"]
        assert rows[0]["account_name"] == "Accounts Receivable"
        assert rows[1]["account_name"] == "Revenue"
        assert Decimal(rows[0]["debit_amount"]) == Decimal(rows[1]["credit_amount"])
        assert all(r["entity_id"] == 7 for r in rows)
        assert all(r["entity_type"] == "customer" for r in rows)
        assert not cache.has("/api/general-ledger")

    def test_create_payable_for_chart_account(self, erp):
        result = erp.create_payable(receivable_form(
            account_type="account",
            selected_account="Travel Expenses",
            selected_customer_id=None,
        ))
        names = [r["account_name"] for r in result["entries"]]
        assert names == ["Travel Expenses", "Accounts Payable"]

    def test_invalid_form_sends_nothing(self, erp):
        with pytest.raises(FormValidationError) as excinfo:
            erp.create_payable(receivable_form(
                account_type="supplier", amount="0",
            ))
        assert "Please select a supplier" in excinfo.value.errors
        assert "Amount must be greater than 0" in excinfo.value.errors
        assert erp.query("/api/general-ledger")["pagination"]["total"] == 0


class TestManualEntry:

    def test_credit_direction_posts_credit_side(self, erp, cache):
        erp.query("/api/general-ledger")
        row = erp.create_manual_entry(ManualEntryForm(
            account_name="Bank Charges",
            description="March fees",
            amount="12.50",
            direction="credit",
            transaction_date="2024-03-31",
        ))
        assert row["journal_id"] is None
        assert Decimal(row["credit_amount"]) == Decimal("12.50")
        assert Decimal(row["debit_amount"]) == 0
        assert not cache.has("/api/general-ledger")

    def test_invalid_form_sends_nothing(self, erp):
        with pytest.raises(FormValidationError) as excinfo:
            erp.create_manual_entry(ManualEntryForm(
                description="March fees", amount="-1", transaction_date="2024-03-31",
            ))
        assert "Account name is required" in excinfo.value.errors
        assert "Amount must be greater than 0" in excinfo.value.errors
        assert erp.query("/api/general-ledger")["pagination"]["total"] == 0


class TestProformaFlow:

    def test_convert_invalidates_and_refetches_list(self, erp, cache):
        created = erp.mutate("POST", "/api/proforma-invoices", json={
            "invoice_date": "2024-03-01",
            "items": [WIDGET],
        }, invalidates=["/api/proforma-invoices"])
        erp.approve_proforma(created["id"])

        [listed] = erp.query("/api/proforma-invoices")
        assert available_actions("proforma", listed["status"]) == ["convert"]

        result = erp.convert_proforma(created["id"])
        assert result["sales_invoice"]["status"] == "draft"
        assert not cache.has("/api/proforma-invoices")

        [refetched] = erp.query("/api/proforma-invoices")
        assert refetched["status"] == "converted"
        assert available_actions("proforma", refetched["status"]) == []

    def test_approve_sends_status_update(self):
        sent = []

        def handler(request):
            sent.append((request.method, request.url.path, json.loads(request.content)))
            return httpx.Response(200, json={"id": 3, "status": "approved"})

        http = httpx.Client(
            base_url="http://erp.test", transport=httpx.MockTransport(handler)
        )
        ErpClient("http://erp.test", QueryCache(), http=http).approve_proforma(3)
        assert sent == [
            ("PUT", "/api/proforma-invoices/3", {"status": "approved"}),
        ]

    def test_failed_mutation_keeps_cache(self, erp, cache):
        created = erp.mutate("POST", "/api/proforma-invoices", json={
            "invoice_date": "2024-03-01",
            "items": [WIDGET],
        })
        erp.query("/api/proforma-invoices")

        with pytest.raises(ApiError) as excinfo:
            erp.convert_proforma(created["id"])
        assert excinfo.value.status_code == 400
        assert cache.has("/api/proforma-invoices")


class TestPayrollFlow:

    def test_approve_then_pay(self, erp, permanent_employee):
        [entry] = erp.mutate(
            "POST", "/api/payroll/generate",
            json={"month": 3, "year": 2024}, invalidates=["/api/payroll"],
        )
        assert available_actions("payroll", entry["status"]) == [
            "approve", "edit_adjustments",
        ]

        approved = erp.approve_payroll(entry["id"])
        assert "edit_adjustments" not in available_actions("payroll", approved["status"])

        paid = erp.pay_payroll(entry["id"])
        assert paid["status"] == "paid"

    def test_pay_draft_fails(self, erp, permanent_employee):
        [entry] = erp.mutate(
            "POST", "/api/payroll/generate", json={"month": 3, "year": 2024}
        )
        with pytest.raises(ApiError, match="Cannot move payroll entry"):
            erp.pay_payroll(entry["id"])


class TestErrorMessages:

    def _client(self, handler):
        http = httpx.Client(
            base_url="http://erp.test", transport=httpx.MockTransport(handler)
        )
        return ErpClient("http://erp.test", QueryCache(), http=http)

    def test_message_field_is_used(self):
        erp = self._client(
            lambda request: httpx.Response(500, json={"message": "Database down"})
        )
        with pytest.raises(ApiError, match="Database down"):
            erp.query("/api/payroll")

    def test_generic_fallback(self):
        erp = self._client(lambda request: httpx.Response(502, text="Bad gateway"))
        with pytest.raises(ApiError, match="Request failed") as excinfo:
            erp.query("/api/payroll")
        assert excinfo.value.status_code == 502

    def test_connection_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        erp = self._client(refuse)
        with pytest.raises(ApiError) as excinfo:
            erp.query("/api/payroll")
        assert excinfo.value.status_code is None
