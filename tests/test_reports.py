"""
Tests for report details and credit-gated downloads.
"""

import httpx
import pytest

from app.main import app
from app.api.dependencies import get_report_service
from app.domain.enums import InspectionStatus, PhotoType, UserRole
from app.infrastructure.external_services.report_pdf_service import ReportPdfService
from app.infrastructure.orm import InspectionPhotoModel, UserModel
from tests.helpers import PDF_BYTES, auth_headers, recording_transport, write_archived_pdf


@pytest.fixture
def archived_report(make_inspection, db_session):
    """Archived inspection whose no-docs PDF sits in the archive directory"""
    inspection = make_inspection(InspectionStatus.ARCHIVED)
    pdf = write_archived_pdf(f"{inspection.id}-1700000000000-no-docs.pdf")
    inspection.url_pdf_no_docs = pdf.public_url
    inspection.pdf_file_hash_no_docs = pdf.sha256
    db_session.commit()
    return inspection


def remote_pdf(status_code, content=b""):
    """Serve remote PDF downloads from a canned response"""
    transport = recording_transport(lambda request: httpx.Response(status_code, content=content))
    app.dependency_overrides[get_report_service] = lambda: ReportPdfService(transport=transport)
    return transport


class TestReportDetail:

    def test_locked_for_customer_without_purchase(self, client, archived_report, make_user):
        user = make_user(credits=3)

        response = client.get(f"/api/v1/reports/{archived_report.id}", headers=auth_headers(user))

        assert response.status_code == 200
        data = response.json()
        assert data["can_download"] is False
        assert data["url_pdf_no_docs"] is None
        assert data["user_credit_balance"] == 3

    def test_summary_photos_in_fixed_order(self, client, archived_report, db_session, admin_headers):
        for label in ("Tampak Belakang", "Interior", "Tampak Depan"):
            db_session.add(InspectionPhotoModel(
                inspection_id=archived_report.id, type=PhotoType.FIXED, path=f"https://cdn.test/{label}", label=label,
            ))
        db_session.commit()

        data = client.get(f"/api/v1/reports/{archived_report.id}", headers=admin_headers).json()

        assert [p["label"] for p in data["photos"]] == ["Tampak Depan", "Tampak Belakang"]
        assert data["can_download"] is True

    def test_not_archived(self, client, make_inspection, admin_headers):
        inspection = make_inspection(InspectionStatus.APPROVED)

        response = client.get(f"/api/v1/reports/{inspection.id}", headers=admin_headers)

        assert response.status_code == 404


class TestReportDownload:

    def test_insufficient_credits(self, client, archived_report, make_user):
        user = make_user(credits=0)

        response = client.post(f"/api/v1/reports/{archived_report.id}/download", headers=auth_headers(user))

        assert response.status_code == 402
        body = response.json()
        assert body["reason"] == "INSUFFICIENT_CREDITS"
        assert body["next"] == "/billing/packages"

    def test_download_charges_once(self, client, archived_report, make_user, db_session):
        """A second download of the same report is free"""
        user = make_user(credits=1)
        headers = auth_headers(user)

        first = client.post(f"/api/v1/reports/{archived_report.id}/download", headers=headers)
        second = client.post(f"/api/v1/reports/{archived_report.id}/download", headers=headers)

        assert first.status_code == 200
        assert first.content == PDF_BYTES
        assert first.headers["content-type"] == "application/pdf"
        assert first.headers["content-disposition"] == f'attachment; filename="{archived_report.pretty_id}.pdf"'
        assert second.status_code == 200
        db_session.expire_all()
        assert db_session.get(UserModel, user.id).credits == 0

        detail = client.get(f"/api/v1/reports/{archived_report.id}", headers=headers).json()
        assert detail["can_download"] is True
        assert detail["url_pdf_no_docs"] == archived_report.url_pdf_no_docs

    def test_staff_download_is_free(self, client, archived_report, make_user):
        reviewer = make_user(UserRole.REVIEWER)

        response = client.post(f"/api/v1/reports/{archived_report.id}/download", headers=auth_headers(reviewer))

        assert response.status_code == 200

    def test_remote_pdf_is_proxied(self, client, make_inspection, make_user):
        inspection = make_inspection(InspectionStatus.ARCHIVED, url_pdf_no_docs="https://files.test/report.pdf")
        transport = remote_pdf(200, b"%PDF remote")
        user = make_user(credits=1)

        response = client.post(f"/api/v1/reports/{inspection.id}/download", headers=auth_headers(user))

        assert response.status_code == 200
        assert response.content == b"%PDF remote"
        assert str(transport.requests[-1].url) == "https://files.test/report.pdf"

    def test_remote_pdf_missing(self, client, make_inspection, admin_headers):
        inspection = make_inspection(InspectionStatus.ARCHIVED, url_pdf_no_docs="https://files.test/gone.pdf")
        remote_pdf(404)

        response = client.post(f"/api/v1/reports/{inspection.id}/download", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "PDF file not found"
