"""
Tests for inspection branch cities.
"""

from tests.helpers import auth_headers


class TestBranchCities:

    def test_create_derives_code(self, client, admin_headers):
        response = client.post("/api/v1/inspection-branches/", json={"city": "Semarang"}, headers=admin_headers)

        assert response.status_code == 201
        assert response.json()["code"] == "SEM"
        assert response.json()["is_active"] is True

    def test_duplicate_code_conflicts(self, client, admin_headers, branch):
        """Yogya shares the YOG code with the existing Yogyakarta branch"""
        response = client.post("/api/v1/inspection-branches/", json={"city": "Yogya"}, headers=admin_headers)

        assert response.status_code == 409

    def test_short_city_rejected(self, client, admin_headers):
        response = client.post("/api/v1/inspection-branches/", json={"city": "AB"}, headers=admin_headers)

        assert response.status_code == 400

    def test_list_requires_login(self, client, customer, branch):
        assert client.get("/api/v1/inspection-branches/").status_code == 401

        rows = client.get("/api/v1/inspection-branches/", headers=auth_headers(customer)).json()
        assert [row["city"] for row in rows] == ["Yogyakarta"]

    def test_rename_and_toggle(self, client, admin_headers, branch):
        response = client.put(
            f"/api/v1/inspection-branches/{branch.id}", json={"city": "Solo"}, headers=admin_headers
        )
        assert response.json()["city"] == "Solo"
        assert response.json()["code"] == "SOL"

        response = client.patch(f"/api/v1/inspection-branches/{branch.id}/toggle-active", headers=admin_headers)
        assert response.json()["is_active"] is False

    def test_delete_returns_deleted_branch(self, client, admin_headers, branch):
        response = client.delete(f"/api/v1/inspection-branches/{branch.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["id"] == str(branch.id)
        assert client.get(f"/api/v1/inspection-branches/{branch.id}", headers=admin_headers).status_code == 404
