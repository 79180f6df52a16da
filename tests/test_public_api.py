"""
Tests for the unauthenticated public endpoints.
"""

from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from app.domain.enums import InspectionStatus, PhotoType, UserRole
from app.infrastructure.orm import InspectionPhotoModel
from tests.helpers import auth_headers


class TestHealth:

    def test_health_up(self, client):
        response = client.get("/api/v1/public/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["database"] == "up"
        assert data["timestamp"]

    def test_health_down_is_cached(self, client):
        """A failed ping is reported and the answer is reused within the TTL"""
        error = OperationalError("SELECT 1", {}, Exception("connection refused"))
        with patch("app.application.use_cases.health_check.ping_database", side_effect=error) as ping:
            first = client.get("/api/v1/public/health").json()
            second = client.get("/api/v1/public/health").json()

        assert first["status"] == "error"
        assert first["database"] == "down"
        assert second == first
        assert ping.call_count == 1


class TestPublicInspections:

    def test_archived_inspection(self, client, make_inspection):
        inspection = make_inspection(InspectionStatus.ARCHIVED)

        response = client.get(f"/api/v1/public/inspections/{inspection.id}")

        assert response.status_code == 200
        assert response.json()["pretty_id"] == inspection.pretty_id

    def test_non_archived_is_hidden(self, client, make_inspection):
        inspection = make_inspection(InspectionStatus.APPROVED)

        assert client.get(f"/api/v1/public/inspections/{inspection.id}").status_code == 404

    def test_no_docs_view_drops_documents(self, client, make_inspection, db_session):
        inspection = make_inspection(InspectionStatus.ARCHIVED)
        db_session.add_all([
            InspectionPhotoModel(inspection_id=inspection.id, type=PhotoType.FIXED, path="https://cdn.test/a", label="Tampak Depan"),
            InspectionPhotoModel(inspection_id=inspection.id, type=PhotoType.DOCUMENT, path="https://cdn.test/b", label="STNK"),
        ])
        db_session.commit()

        full = client.get(f"/api/v1/public/inspections/{inspection.id}").json()
        no_docs = client.get(f"/api/v1/public/inspections/{inspection.id}/no-docs").json()

        assert len(full["photos"]) == 2
        assert [p["label"] for p in no_docs["photos"]] == ["Tampak Depan"]

    def test_latest_archived_uses_front_photo(self, client, make_inspection, db_session):
        inspection = make_inspection(InspectionStatus.ARCHIVED)
        make_inspection(InspectionStatus.NEED_REVIEW)
        db_session.add(InspectionPhotoModel(
            inspection_id=inspection.id, type=PhotoType.FIXED, path="https://cdn.test/front", label="Tampak Depan",
        ))
        db_session.commit()

        rows = client.get("/api/v1/public/latest-archived").json()

        assert len(rows) == 1
        assert rows[0]["merek_kendaraan"] == "Toyota"
        assert rows[0]["photo"]["path"] == "https://cdn.test/front"

    def test_public_change_log(self, client, make_inspection, make_user):
        inspection = make_inspection()
        reviewer = make_user(UserRole.REVIEWER)
        client.put(f"/api/v1/inspections/{inspection.id}", json={"overall_rating": "9"}, headers=auth_headers(reviewer))

        rows = client.get(f"/api/v1/public/inspections/{inspection.id}/changelog").json()

        assert [row["field_name"] for row in rows] == ["overall_rating"]


class TestRootRoutes:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "version" in response.json()
