"""
Tests for supplier, customer, project and employee endpoints.
"""


def create_supplier(client, name):
    response = client.post("/api/suppliers", json={"name": name})
    assert response.status_code == 201
    return response.json()


class TestSuppliers:

    def test_create_defaults(self, client):
        supplier = create_supplier(client, "Office Co")
        assert supplier["currency"] == "AED"
        assert supplier["payment_terms"] == "30_days"
        assert supplier["is_archived"] is False

    def test_paginated_search(self, client):
        for name in ("Alpha Metals", "Beta Paper", "Alpha Tools"):
            create_supplier(client, name)
        data = client.get(
            "/api/suppliers", params={"search": "alpha", "limit": 1}
        ).json()
        assert data["pagination"] == {
            "page": 1, "limit": 1, "total": 2, "totalPages": 2,
        }
        assert data["data"][0]["name"] == "Alpha Metals"

    def test_archive_hides_supplier(self, client):
        supplier = create_supplier(client, "Old Vendor")
        archived = client.post(f"/api/suppliers/{supplier['id']}/archive")
        assert archived.json()["is_archived"] is True
        assert client.get("/api/suppliers").json()["pagination"]["total"] == 0

        shown = client.get("/api/suppliers", params={"showArchived": "true"}).json()
        assert shown["pagination"]["total"] == 1

        client.post(f"/api/suppliers/{supplier['id']}/unarchive")
        assert client.get("/api/suppliers").json()["pagination"]["total"] == 1

    def test_update(self, client):
        supplier = create_supplier(client, "Office Co")
        response = client.put(
            f"/api/suppliers/{supplier['id']}", json={"vat_number": "100200300400500"}
        )
        assert response.status_code == 200
        assert response.json()["vat_number"] == "100200300400500"

    def test_delete_unreferenced(self, client):
        supplier = create_supplier(client, "Office Co")
        assert client.delete(f"/api/suppliers/{supplier['id']}").status_code == 200
        assert client.get(f"/api/suppliers/{supplier['id']}").status_code == 404

    def test_delete_with_payables_returns_400(self, client):
        supplier = create_supplier(client, "Office Co")
        client.post("/api/general-ledger/journal", json={
            "entry_type": "payable",
            "description": "Paper",
            "transaction_date": "2024-03-01",
            "entries": [
                {"account_name": "Operating Expenses", "debit_amount": "80",
                 "entity_type": "supplier", "entity_id": supplier["id"]},
                {"account_name": "Accounts Payable", "credit_amount": "80",
                 "entity_type": "supplier", "entity_id": supplier["id"]},
            ],
        })
        response = client.delete(f"/api/suppliers/{supplier['id']}")
        assert response.status_code == 400
        assert "archive" in response.json()["detail"]

    def test_manual_row_for_supplier_blocks_delete(self, client):
        supplier = create_supplier(client, "Office Co")
        client.post("/api/general-ledger", json={
            "account_name": "Supplier Advance",
            "description": "Deposit",
            "debit_amount": "40",
            "entity_type": "supplier",
            "entity_id": supplier["id"],
            "transaction_date": "2024-03-01",
        })
        assert client.delete(f"/api/suppliers/{supplier['id']}").status_code == 400

    def test_customer_row_with_same_id_does_not_block_delete(self, client):
        supplier = create_supplier(client, "Office Co")
        client.post("/api/general-ledger/journal", json={
            "entry_type": "payable",
            "description": "Refund owed",
            "transaction_date": "2024-03-01",
            "entries": [
                {"account_name": "Sales Returns", "debit_amount": "15",
                 "entity_type": "customer", "entity_id": supplier["id"]},
                {"account_name": "Accounts Payable", "credit_amount": "15",
                 "entity_type": "customer", "entity_id": supplier["id"]},
            ],
        })
        assert client.delete(f"/api/suppliers/{supplier['id']}").status_code == 200


class TestDirectory:

    def test_customers(self, client):
        response = client.post("/api/customers", json={
            "name": "Acme Trading", "phone": "+971500000001",
        })
        assert response.status_code == 201
        duplicate = client.post("/api/customers", json={
            "name": "Acme Again", "phone": "+971500000001",
        })
        assert duplicate.status_code == 400
        assert [c["name"] for c in client.get("/api/customers").json()] == [
            "Acme Trading"
        ]

    def test_project_with_assignments(self, client):
        employee = client.post("/api/employees", json={
            "employee_code": "CON-9",
            "first_name": "Ada",
            "last_name": "Byron",
            "category": "consultant",
            "salary": "22000",
        }).json()
        response = client.post("/api/projects", json={
            "title": "Data Migration",
            "status": "in_progress",
            "employee_ids": [employee["id"]],
        })
        assert response.status_code == 201
        assert client.get("/api/projects").json()[0]["title"] == "Data Migration"

    def test_project_with_unknown_employee_returns_404(self, client):
        response = client.post("/api/projects", json={
            "title": "Ghost", "employee_ids": [404],
        })
        assert response.status_code == 404

    def test_duplicate_employee_code(self, client):
        payload = {"employee_code": "E1", "first_name": "A", "last_name": "B"}
        assert client.post("/api/employees", json=payload).status_code == 201
        assert client.post("/api/employees", json=payload).status_code == 400
