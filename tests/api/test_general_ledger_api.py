"""
Tests for general ledger API endpoints.

These test the HTTP layer: status codes, response format, query
parameter names and error handling. Business rules are tested
in test_ledger_service.py.
"""

from decimal import Decimal


def journal_payload(amount="200", entry_type="receivable", when="2024-03-05",
                    debit_account="Accounts Receivable", credit_account="Revenue",
                    credit_amount=None, entity_name="Acme"):
    return {
        "entry_type": entry_type,
        "description": "Invoice #1001",
        "transaction_date": when,
        "entries": [
            {
                "account_name": debit_account,
                "debit_amount": amount,
                "entity_id": 7,
                "entity_name": entity_name,
                "invoice_number": "INV-1001",
            },
            {
                "account_name": credit_account,
                "credit_amount": credit_amount or amount,
                "entity_id": 7,
                "entity_name": entity_name,
                "invoice_number": "INV-1001",
            },
        ],
    }


class TestPostJournal:

    def test_balanced_journal_returns_201(self, client):
        response = client.post("/api/general-ledger/journal", json=journal_payload())
        assert response.status_code == 201

        data = response.json()
        assert Decimal(data["total_amount"]) == Decimal("200")
        assert len(data["entries"]) == 2
        assert {e["journal_id"] for e in data["entries"]} == {data["journal_id"]}

    def test_unbalanced_journal_returns_400(self, client):
        response = client.post(
            "/api/general-ledger/journal",
            json=journal_payload(amount="200", credit_amount="150"),
        )
        assert response.status_code == 400
        assert "does not balance" in response.json()["detail"]
        assert client.get("/api/general-ledger").json()["pagination"]["total"] == 0

    def test_single_row_journal_returns_422(self, client):
        payload = journal_payload()
        payload["entries"] = payload["entries"][:1]
        response = client.post("/api/general-ledger/journal", json=payload)
        assert response.status_code == 422

    def test_negative_amount_returns_422(self, client):
        response = client.post(
            "/api/general-ledger/journal", json=journal_payload(amount="-5")
        )
        assert response.status_code == 422

    def test_unknown_project_returns_404(self, client):
        payload = journal_payload()
        for row in payload["entries"]:
            row["project_id"] = 999
        response = client.post("/api/general-ledger/journal", json=payload)
        assert response.status_code == 404

    def test_sub_cent_amounts_return_422(self, client):
        payload = journal_payload()
        payload["entries"] = [
            {"account_name": "Travel Expenses", "debit_amount": "10.005"},
            {"account_name": "Meals", "debit_amount": "10.005"},
            {"account_name": "Accounts Payable", "credit_amount": "20.01"},
        ]
        payload["entry_type"] = "payable"
        response = client.post("/api/general-ledger/journal", json=payload)
        assert response.status_code == 422
        assert client.get("/api/general-ledger").json()["pagination"]["total"] == 0

    def test_three_row_journal_is_stored_balanced(self, client):
        payload = journal_payload()
        payload["entries"] = [
            {"account_name": "Travel Expenses", "debit_amount": "10.01"},
            {"account_name": "Meals", "debit_amount": "10.00"},
            {"account_name": "Accounts Payable", "credit_amount": "20.01"},
        ]
        payload["entry_type"] = "payable"
        assert client.post(
            "/api/general-ledger/journal", json=payload
        ).status_code == 201

        rows = client.get("/api/general-ledger").json()["data"]
        debits = sum(Decimal(r["debit_amount"]) for r in rows)
        credits = sum(Decimal(r["credit_amount"]) for r in rows)
        assert debits == credits == Decimal("20.01")

    def test_reserved_reference_type_returns_400(self, client):
        payload = journal_payload()
        payload["reference_type"] = "payroll"
        response = client.post("/api/general-ledger/journal", json=payload)
        assert response.status_code == 400
        assert "reserved" in response.json()["detail"]


class TestSingleEntry:

    def test_manual_row_returns_201(self, client):
        response = client.post("/api/general-ledger", json={
            "account_name": "Petty Cash",
            "description": "Cash float",
            "debit_amount": "50",
            "transaction_date": "2024-03-01",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["journal_id"] is None
        assert data["entry_type"] == "manual"
        assert Decimal(data["debit_amount"]) == Decimal("50")

    def test_row_with_both_sides_returns_422(self, client):
        response = client.post("/api/general-ledger", json={
            "account_name": "Petty Cash",
            "description": "Cash float",
            "debit_amount": "50",
            "credit_amount": "50",
            "transaction_date": "2024-03-01",
        })
        assert response.status_code == 422

    def test_sub_cent_manual_row_returns_422(self, client):
        response = client.post("/api/general-ledger", json={
            "account_name": "Petty Cash",
            "description": "Rounding",
            "debit_amount": "0.001",
            "transaction_date": "2024-03-01",
        })
        assert response.status_code == 422

    def test_null_for_required_field_keeps_value(self, client):
        created = client.post("/api/general-ledger", json={
            "account_name": "Petty Cash",
            "description": "Cash float",
            "debit_amount": "50",
            "transaction_date": "2024-03-01",
        }).json()
        response = client.put(f"/api/general-ledger/{created['id']}", json={
            "account_name": None,
            "description": None,
            "debit_amount": None,
            "transaction_date": None,
            "status": None,
            "notes": "Checked",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["account_name"] == "Petty Cash"
        assert data["description"] == "Cash float"
        assert Decimal(data["debit_amount"]) == Decimal("50")
        assert data["transaction_date"] == "2024-03-01"
        assert data["status"] == "pending"
        assert data["notes"] == "Checked"

    def test_update_status(self, client):
        created = client.post(
            "/api/general-ledger/journal", json=journal_payload()
        ).json()
        entry_id = created["entries"][0]["id"]
        response = client.put(
            f"/api/general-ledger/{entry_id}", json={"status": "paid"}
        )
        assert response.status_code == 200
        assert response.json()["status"] == "paid"

    def test_journal_amount_edit_returns_400(self, client):
        created = client.post(
            "/api/general-ledger/journal", json=journal_payload()
        ).json()
        entry_id = created["entries"][0]["id"]
        response = client.put(
            f"/api/general-ledger/{entry_id}", json={"debit_amount": "999"}
        )
        assert response.status_code == 400

    def test_unknown_entry_returns_404(self, client):
        response = client.put("/api/general-ledger/404", json={"notes": "x"})
        assert response.status_code == 404


class TestListEntries:

    def _seed(self, client):
        client.post("/api/general-ledger/journal", json=journal_payload())
        client.post("/api/general-ledger/journal", json=journal_payload(
            amount="80", entry_type="payable", when="2024-04-01",
            debit_account="Operating Expenses",
            credit_account="Accounts Payable", entity_name="Office Co",
        ))

    def test_pagination_envelope(self, client):
        self._seed(client)
        data = client.get("/api/general-ledger", params={"limit": 3}).json()
        assert len(data["data"]) == 3
        assert data["pagination"] == {
            "page": 1, "limit": 3, "total": 4, "totalPages": 2,
        }

    def test_default_limit_is_20(self, client):
        data = client.get("/api/general-ledger").json()
        assert data["pagination"]["limit"] == 20

    def test_camel_case_filters(self, client):
        self._seed(client)
        data = client.get("/api/general-ledger", params={
            "entryType": "payable",
            "startDate": "2024-04-01",
            "accountName": "payable",
        }).json()
        assert data["pagination"]["total"] == 1
        assert data["data"][0]["account_name"] == "Accounts Payable"

    def test_search(self, client):
        self._seed(client)
        data = client.get(
            "/api/general-ledger", params={"search": "office"}
        ).json()
        assert data["pagination"]["total"] == 2

    def test_newest_first(self, client):
        self._seed(client)
        rows = client.get("/api/general-ledger").json()["data"]
        assert rows[0]["transaction_date"] == "2024-04-01"

    def test_receivables_and_payables(self, client):
        self._seed(client)
        receivables = client.get("/api/general-ledger/receivables").json()
        payables = client.get("/api/general-ledger/payables").json()
        assert [r["account_name"] for r in receivables] == ["Accounts Receivable"]
        assert [r["account_name"] for r in payables] == ["Accounts Payable"]


class TestExport:

    def test_csv_export(self, client):
        client.post("/api/general-ledger/journal", json=journal_payload())
        response = client.get(
            "/api/general-ledger/export.csv", params={"entryType": "receivable"}
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")

        lines = response.text.split("\n")
        assert lines[0].startswith('"Date","Type","Account"')
        assert len(lines) == 3
        assert '"Acme","-","INV-1001"' in lines[1]
