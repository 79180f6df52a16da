"""
Tests for credit package administration and the public catalogue.
"""

from uuid import uuid4

from tests.helpers import auth_headers


class TestCreditPackageAdmin:
    """CRUD under /admin/credit-packages"""

    def test_create_package(self, client, admin_headers):
        response = client.post("/api/v1/admin/credit-packages/", json={
            "credits": 5,
            "price": 50000,
            "discount_pct": 0,
            "benefits": {"support": "priority"},
        }, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["credits"] == 5
        assert data["is_active"] is True

    def test_create_requires_admin(self, client, customer):
        response = client.post(
            "/api/v1/admin/credit-packages/",
            json={"credits": 5, "price": 50000},
            headers=auth_headers(customer),
        )

        assert response.status_code == 403

    def test_invalid_discount_rejected(self, client, admin_headers):
        response = client.post(
            "/api/v1/admin/credit-packages/",
            json={"credits": 5, "price": 50000, "discount_pct": 150},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_update_and_toggle(self, client, admin_headers, credit_package):
        """Partial updates keep other fields; deactivated packages leave the catalogue"""
        response = client.patch(
            f"/api/v1/admin/credit-packages/{credit_package.id}",
            json={"price": 90000},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["price"] == 90000
        assert response.json()["credits"] == 10

        response = client.patch(
            f"/api/v1/admin/credit-packages/{credit_package.id}/active",
            json={"is_active": False},
            headers=admin_headers,
        )
        assert response.json()["is_active"] is False
        assert client.get("/api/v1/billing/packages").json() == []

    def test_missing_package(self, client, admin_headers):
        response = client.get(f"/api/v1/admin/credit-packages/{uuid4()}", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Credit package not found"

    def test_delete_package(self, client, admin_headers, credit_package):
        response = client.delete(f"/api/v1/admin/credit-packages/{credit_package.id}", headers=admin_headers)

        assert response.status_code == 204
        assert client.get("/api/v1/admin/credit-packages/", headers=admin_headers).json() == []


class TestPublicCatalogue:

    def test_lists_active_packages_without_auth(self, client, credit_package):
        response = client.get("/api/v1/billing/packages")

        assert response.status_code == 200
        assert [row["id"] for row in response.json()] == [str(credit_package.id)]
