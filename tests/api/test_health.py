"""
Tests for the health check endpoint.
"""


def test_health_returns_200(client):
    response = client.get("/health")
    assert response.status_code == 200


def test_health_returns_service_info(client):
    data = client.get("/health").json()
    assert data["status"] == "healthy"
    assert data["service"] == "erp-ledger-service"
    assert data["database"] == "healthy"
