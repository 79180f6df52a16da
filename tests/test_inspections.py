"""
Tests for the inspection lifecycle: submit, review, approve, archive.
"""

from datetime import datetime
from uuid import uuid4

import pytest

from app.main import app
from app.api.dependencies import get_blockchain_service, get_report_service
from app.domain.enums import InspectionStatus, UserRole
from app.infrastructure.orm import InspectionChangeLogModel, InspectionModel
from tests.helpers import FakeBlockchain, FakeReportService, auth_headers

NEW_INSPECTION = {
    "vehicle_plate_number": "AB 1234 CD",
    "inspection_date": "2026-03-15T09:30:00Z",
    "overall_rating": "8",
    "identity_details": {"namaInspektor": "Budi", "namaCustomer": "Sari", "cabangInspeksi": "Yogyakarta"},
    "vehicle_data": {"merekKendaraan": "Honda", "tipeKendaraan": "Jazz"},
}


@pytest.fixture
def inspector(make_user):
    return make_user(UserRole.INSPECTOR)


@pytest.fixture
def reviewer(make_user):
    return make_user(UserRole.REVIEWER)


def use_archive_services(report=None, blockchain=None):
    report = report or FakeReportService()
    blockchain = blockchain or FakeBlockchain()
    app.dependency_overrides[get_report_service] = lambda: report
    app.dependency_overrides[get_blockchain_service] = lambda: blockchain
    return report, blockchain


class TestCreateInspection:

    def test_create_assigns_pretty_id(self, client, inspector, branch):
        """Pretty ids are {branch code}-{ddmmyyyy}-{sequence}"""
        first = client.post("/api/v1/inspections/", json=NEW_INSPECTION, headers=auth_headers(inspector))
        second = client.post("/api/v1/inspections/", json=NEW_INSPECTION, headers=auth_headers(inspector))

        assert first.status_code == 201
        assert first.json()["pretty_id"] == "YOG-15032026-001"
        assert second.json()["pretty_id"] == "YOG-15032026-002"

    def test_branch_resolved_by_code(self, client, inspector, branch):
        payload = dict(NEW_INSPECTION, identity_details={"cabangInspeksi": "yog"})

        response = client.post("/api/v1/inspections/", json=payload, headers=auth_headers(inspector))

        assert response.status_code == 201
        assert response.json()["pretty_id"].startswith("YOG-")

    def test_unknown_branch(self, client, inspector, branch):
        payload = dict(NEW_INSPECTION, identity_details={"cabangInspeksi": "Atlantis"})

        response = client.post("/api/v1/inspections/", json=payload, headers=auth_headers(inspector))

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot determine branch code from identityDetails."

    def test_customers_cannot_submit(self, client, customer, branch):
        response = client.post("/api/v1/inspections/", json=NEW_INSPECTION, headers=auth_headers(customer))

        assert response.status_code == 403


class TestVisibility:

    def test_customer_sees_archived_only(self, client, customer, make_inspection):
        archived = make_inspection(InspectionStatus.ARCHIVED)
        pending = make_inspection(InspectionStatus.NEED_REVIEW)
        headers = auth_headers(customer)

        listed = client.get("/api/v1/inspections/", headers=headers).json()
        assert [row["id"] for row in listed] == [str(archived.id)]

        assert client.get(f"/api/v1/inspections/{pending.id}", headers=headers).status_code == 403

    def test_staff_filter_by_status(self, client, admin_headers, make_inspection):
        make_inspection(InspectionStatus.ARCHIVED)
        pending = make_inspection(InspectionStatus.NEED_REVIEW)

        response = client.get("/api/v1/inspections/?status=NEED_REVIEW", headers=admin_headers)

        assert [row["id"] for row in response.json()] == [str(pending.id)]

    def test_search_ignores_case_and_spaces(self, client, make_inspection):
        inspection = make_inspection(vehicle_plate_number="AB 1234 CD")

        response = client.get("/api/v1/inspections/search", params={"vehicle_number": "ab1234cd"})

        assert response.status_code == 200
        assert response.json()["id"] == str(inspection.id)

    def test_search_not_found(self, client, make_inspection):
        response = client.get("/api/v1/inspections/search", params={"vehicle_number": "ZZ9999"})

        assert response.status_code == 404

    def test_unknown_inspection(self, client, admin_headers):
        assert client.get(f"/api/v1/inspections/{uuid4()}", headers=admin_headers).status_code == 404


class TestReviewFlow:

    def test_update_records_changes_without_applying(self, client, reviewer, make_inspection, db_session):
        inspection = make_inspection()

        response = client.put(
            f"/api/v1/inspections/{inspection.id}",
            json={"overall_rating": "9", "vehicle_data": {"merekKendaraan": "Toyota", "warnaKendaraan": "Merah"}},
            headers=auth_headers(reviewer),
        )

        assert response.status_code == 200
        assert response.json()["changes"] == 2
        db_session.expire_all()
        assert db_session.get(InspectionModel, inspection.id).overall_rating == "8"
        fields = {log.field_name for log in db_session.query(InspectionChangeLogModel)}
        assert fields == {"overall_rating", "vehicle_data.warnaKendaraan"}

    def test_update_without_changes(self, client, reviewer, make_inspection):
        inspection = make_inspection()

        response = client.put(
            f"/api/v1/inspections/{inspection.id}", json={"overall_rating": "8"}, headers=auth_headers(reviewer)
        )

        assert response.json() == {"message": "No changes detected", "changes": 0}

    def test_changelog_keeps_latest_per_field(self, client, reviewer, make_inspection):
        inspection = make_inspection()
        headers = auth_headers(reviewer)
        client.put(f"/api/v1/inspections/{inspection.id}", json={"overall_rating": "9"}, headers=headers)
        client.put(f"/api/v1/inspections/{inspection.id}", json={"overall_rating": "7"}, headers=headers)

        logs = client.get(f"/api/v1/inspections/{inspection.id}/changelog", headers=headers).json()

        assert len(logs) == 1
        assert logs[0]["new_value"] == "7"

    def test_approve_applies_changes(self, client, reviewer, make_inspection, db_session):
        inspection = make_inspection()
        headers = auth_headers(reviewer)
        client.put(
            f"/api/v1/inspections/{inspection.id}",
            json={"overall_rating": "9", "vehicle_data": {"warnaKendaraan": "Merah"}},
            headers=headers,
        )

        response = client.patch(f"/api/v1/inspections/{inspection.id}/approve", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "APPROVED"
        assert data["overall_rating"] == "9"
        assert data["vehicle_data"] == {"merekKendaraan": "Toyota", "tipeKendaraan": "Avanza", "warnaKendaraan": "Merah"}
        assert data["reviewer_id"] == str(reviewer.id)
        assert db_session.query(InspectionChangeLogModel).count() == 0

    def test_invalid_inspection_date_is_rejected(self, client, reviewer, make_inspection, db_session):
        inspection = make_inspection()
        headers = auth_headers(reviewer)

        response = client.put(
            f"/api/v1/inspections/{inspection.id}", json={"inspection_date": "not-a-date"}, headers=headers
        )

        assert response.status_code == 400
        assert db_session.query(InspectionChangeLogModel).count() == 0
        approve = client.patch(f"/api/v1/inspections/{inspection.id}/approve", headers=headers)
        assert approve.status_code == 200

    def test_offset_inspection_date_is_compared_in_utc(self, client, reviewer, make_inspection, db_session):
        """The same instant written with an offset is not a change"""
        inspection = make_inspection()
        headers = auth_headers(reviewer)

        same = client.put(
            f"/api/v1/inspections/{inspection.id}",
            json={"inspection_date": "2026-01-01T07:00:00+07:00"},
            headers=headers,
        )
        moved = client.put(
            f"/api/v1/inspections/{inspection.id}",
            json={"inspection_date": "2026-01-02T09:30:00+07:00"},
            headers=headers,
        )

        assert same.json()["changes"] == 0
        assert moved.json()["changes"] == 1
        log = db_session.query(InspectionChangeLogModel).one()
        assert log.new_value == "2026-01-02T02:30:00"

        client.patch(f"/api/v1/inspections/{inspection.id}/approve", headers=headers)

        db_session.expire_all()
        assert db_session.get(InspectionModel, inspection.id).inspection_date == datetime(2026, 1, 2, 2, 30)

    def test_approved_inspection_is_locked(self, client, reviewer, make_inspection):
        inspection = make_inspection(InspectionStatus.APPROVED)

        response = client.put(
            f"/api/v1/inspections/{inspection.id}", json={"overall_rating": "5"}, headers=auth_headers(reviewer)
        )

        assert response.status_code == 400

    def test_admin_deletes_change_log(self, client, admin_headers, reviewer, make_inspection, db_session):
        inspection = make_inspection()
        client.put(f"/api/v1/inspections/{inspection.id}", json={"overall_rating": "9"}, headers=auth_headers(reviewer))
        log = db_session.query(InspectionChangeLogModel).one()

        response = client.delete(f"/api/v1/inspections/{inspection.id}/changelog/{log.id}", headers=admin_headers)

        assert response.status_code == 204
        missing = client.delete(f"/api/v1/inspections/{inspection.id}/changelog/{log.id}", headers=admin_headers)
        assert missing.status_code == 404


class TestArchive:

    def test_archive_mints_and_stores_reports(self, client, reviewer, make_inspection):
        inspection = make_inspection(InspectionStatus.APPROVED)
        report, blockchain = use_archive_services()

        response = client.put(f"/api/v1/inspections/{inspection.id}/archive", headers=auth_headers(reviewer))

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ARCHIVED"
        assert data["url_pdf"].endswith(".pdf")
        assert data["url_pdf_no_docs"].endswith("-no-docs.pdf")
        assert data["blockchain_tx_hash"].startswith("tx-")
        assert data["archived_at"] is not None
        assert report.rendered == [(inspection.pretty_id, False), (inspection.pretty_id, True)]
        assert blockchain.minted[0]["pdfHash"] == data["pdf_file_hash"]

    def test_archive_requires_approval(self, client, reviewer, make_inspection):
        inspection = make_inspection(InspectionStatus.NEED_REVIEW)
        use_archive_services()

        response = client.put(f"/api/v1/inspections/{inspection.id}/archive", headers=auth_headers(reviewer))

        assert response.status_code == 400

    def test_mint_failure_marks_fail_archive(self, client, reviewer, make_inspection, db_session):
        """The rendered report is kept so a retry can reuse the record"""
        inspection = make_inspection(InspectionStatus.APPROVED)
        use_archive_services(blockchain=FakeBlockchain(fail=True))

        response = client.put(f"/api/v1/inspections/{inspection.id}/archive", headers=auth_headers(reviewer))

        assert response.status_code == 500
        db_session.expire_all()
        row = db_session.get(InspectionModel, inspection.id)
        assert row.status == InspectionStatus.FAIL_ARCHIVE
        assert row.url_pdf is not None

    def test_render_failure_marks_fail_archive(self, client, reviewer, make_inspection, db_session):
        inspection = make_inspection(InspectionStatus.APPROVED)
        use_archive_services(report=FakeReportService(fail=True))

        response = client.put(f"/api/v1/inspections/{inspection.id}/archive", headers=auth_headers(reviewer))

        assert response.status_code == 500
        db_session.expire_all()
        assert db_session.get(InspectionModel, inspection.id).status == InspectionStatus.FAIL_ARCHIVE

    def test_failed_archive_can_be_retried(self, client, reviewer, make_inspection):
        inspection = make_inspection(InspectionStatus.FAIL_ARCHIVE)
        use_archive_services()

        response = client.put(f"/api/v1/inspections/{inspection.id}/archive", headers=auth_headers(reviewer))

        assert response.json()["status"] == "ARCHIVED"


class TestActivation:

    def test_deactivate_and_activate(self, client, admin_headers, make_inspection):
        inspection = make_inspection(InspectionStatus.ARCHIVED)

        response = client.patch(f"/api/v1/inspections/{inspection.id}/deactivate", headers=admin_headers)
        assert response.json()["status"] == "DEACTIVATED"
        assert response.json()["deactivated_at"] is not None

        response = client.patch(f"/api/v1/inspections/{inspection.id}/activate", headers=admin_headers)
        assert response.json()["status"] == "ARCHIVED"

    def test_deactivate_requires_archived(self, client, admin_headers, make_inspection):
        inspection = make_inspection(InspectionStatus.APPROVED)

        response = client.patch(f"/api/v1/inspections/{inspection.id}/deactivate", headers=admin_headers)

        assert response.status_code == 400
