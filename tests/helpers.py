"""Shared test helpers: auth headers and in-memory stand-ins for external services."""

import hashlib
from pathlib import Path

import httpx

from app.core.config import settings
from app.core.security import create_access_token
from app.domain.exceptions import ExternalServiceError, UnauthorizedError
from app.infrastructure.external_services.backblaze_service import BackblazeService
from app.infrastructure.external_services.blockchain_service import BlockchainService
from app.infrastructure.external_services.google_auth_service import GoogleAuthService
from app.infrastructure.external_services.report_pdf_service import ArchivedPdf, ReportPdfService

TEST_PASSWORD = "TestPass123!"
PDF_BYTES = b"%PDF-1.4 test report"


def auth_headers(user) -> dict:
    """Bearer header for a user row."""
    token = create_access_token(str(user.id), {"role": user.role.value, "email": user.email})
    return {"Authorization": f"Bearer {token}"}


def recording_transport(handler) -> httpx.MockTransport:
    """MockTransport that keeps every request it served on ``.requests``."""
    requests = []

    def record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    transport = httpx.MockTransport(record)
    transport.requests = requests
    return transport


class FakeStorage(BackblazeService):
    """Keeps uploads in a dict keyed by file name"""

    def __init__(self):
        super().__init__()
        self.files = {}
        self.deleted = []

    async def upload_file(self, data, file_name, content_type=None):
        self.files[file_name] = data
        return {"file_id": f"id-{file_name}", "file_name": file_name, "url": f"https://cdn.test/{file_name}"}

    async def delete_file(self, file_id, file_name):
        self.deleted.append(file_name)
        self.files.pop(file_name, None)


class FakeReportService(ReportPdfService):
    """Writes a fixed PDF instead of rendering the frontend page"""

    def __init__(self, fail=False):
        super().__init__()
        self.fail = fail
        self.rendered = []

    async def render(self, pretty_id, no_docs=False):
        if self.fail:
            raise ExternalServiceError("renderer down")
        self.rendered.append((pretty_id, no_docs))
        return PDF_BYTES


class FakeBlockchain(BlockchainService):

    def __init__(self, fail=False):
        super().__init__()
        self.fail = fail
        self.minted = []

    async def mint_inspection_nft(self, metadata, plate_number):
        if self.fail:
            raise ExternalServiceError("minting failed")
        self.minted.append(metadata)
        return {"tx_hash": "tx-" + metadata["inspectionId"][:8], "asset_id": "asset-" + metadata["inspectionId"][:8]}


class FakeGoogleAuth(GoogleAuthService):
    """Accepts any ID token except "bad" and returns fixed claims"""

    def __init__(self, google_id="104857600123", email="driver@gmail.com", name=None):
        super().__init__()
        self.claims = {"google_id": google_id, "email": email.lower(), "name": name}

    def verify_id_token(self, token):
        if token == "bad":
            raise UnauthorizedError("Invalid Google token")
        return dict(self.claims)


def write_archived_pdf(file_name: str, data: bytes = PDF_BYTES) -> ArchivedPdf:
    """Place a PDF in the archive directory the way a finished archive run does"""
    directory = Path(settings.PDF_ARCHIVE_DIR)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / file_name
    path.write_bytes(data)
    return ArchivedPdf(
        file_name=file_name,
        path=path,
        public_url=f"{settings.PDF_PUBLIC_BASE_URL}/{file_name}",
        sha256=hashlib.sha256(data).hexdigest(),
    )
