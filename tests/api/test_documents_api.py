"""
Tests for credit note and proforma invoice endpoints.
"""

from decimal import Decimal

WIDGET = {"description": "Widget", "quantity": 2, "unit_price": 50, "tax_rate": 10}


def create_proforma(client, status="draft"):
    response = client.post("/api/proforma-invoices", json={
        "invoice_date": "2024-03-01",
        "status": status,
        "items": [WIDGET],
        "discount": "5",
    })
    assert response.status_code == 201
    return response.json()


class TestCreditNotesApi:

    def test_create_computes_totals(self, client):
        response = client.post("/api/credit-notes", json={
            "credit_note_date": "2024-03-10",
            "items": [WIDGET],
            "discount": "5",
            # Client-side totals are ignored
            "total_amount": "1.00",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["credit_note_number"] == "CN-2024-0001"
        assert Decimal(data["subtotal"]) == Decimal("100")
        assert Decimal(data["tax_amount"]) == Decimal("10")
        assert Decimal(data["total_amount"]) == Decimal("105")

    def test_negative_quantity_returns_422(self, client):
        response = client.post("/api/credit-notes", json={
            "credit_note_date": "2024-03-10",
            "items": [{**WIDGET, "quantity": -1}],
        })
        assert response.status_code == 422

    def test_update_and_delete(self, client):
        created = client.post("/api/credit-notes", json={
            "credit_note_date": "2024-03-10",
            "items": [WIDGET],
        }).json()

        updated = client.put(
            f"/api/credit-notes/{created['id']}", json={"status": "issued"}
        )
        assert updated.status_code == 200
        assert updated.json()["status"] == "issued"

        deleted = client.delete(f"/api/credit-notes/{created['id']}")
        assert deleted.status_code == 200
        assert client.get(f"/api/credit-notes/{created['id']}").status_code == 404

    def test_credit_notes_for_unknown_invoice(self, client):
        response = client.get("/api/sales-invoices/99/credit-notes")
        assert response.status_code == 404


class TestProformaApi:

    def test_approve_draft(self, client):
        proforma = create_proforma(client)
        response = client.post(f"/api/proforma-invoices/{proforma['id']}/approve")
        assert response.status_code == 200
        assert response.json()["status"] == "approved"

    def test_approve_rejected_returns_400(self, client):
        proforma = create_proforma(client, status="rejected")
        response = client.post(f"/api/proforma-invoices/{proforma['id']}/approve")
        assert response.status_code == 400

    def test_convert_approved(self, client):
        proforma = create_proforma(client, status="approved")
        response = client.post(
            f"/api/proforma-invoices/{proforma['id']}/convert-to-invoice"
        )
        assert response.status_code == 200

        data = response.json()
        assert data["message"]
        assert data["proforma_invoice"]["status"] == "converted"
        invoice = data["sales_invoice"]
        assert invoice["status"] == "draft"
        assert invoice["proforma_invoice_id"] == proforma["id"]
        assert Decimal(invoice["total_amount"]) == Decimal("105")
        assert Decimal(invoice["paid_amount"]) == 0

    def test_convert_draft_returns_400(self, client):
        proforma = create_proforma(client)
        response = client.post(
            f"/api/proforma-invoices/{proforma['id']}/convert-to-invoice"
        )
        assert response.status_code == 400
        assert "approved" in response.json()["detail"]

    def test_put_converted_status_returns_400(self, client):
        proforma = create_proforma(client, status="approved")
        response = client.put(
            f"/api/proforma-invoices/{proforma['id']}",
            json={"status": "converted"},
        )
        assert response.status_code == 400

    def test_unknown_proforma_returns_404(self, client):
        assert client.post("/api/proforma-invoices/99/approve").status_code == 404

    def test_list_hides_archived(self, client):
        proforma = create_proforma(client)
        client.put(
            f"/api/proforma-invoices/{proforma['id']}",
            json={"is_archived": True},
        )
        assert client.get("/api/proforma-invoices").json() == []
        shown = client.get(
            "/api/proforma-invoices", params={"showArchived": "true"}
        ).json()
        assert [p["id"] for p in shown] == [proforma["id"]]
