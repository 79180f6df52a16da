"""
Tests for the Backblaze B2 client.
"""

import httpx
import pytest

from app.domain.exceptions import ExternalServiceError, ServiceUnavailableError
from app.infrastructure.external_services import backblaze_service
from app.infrastructure.external_services.backblaze_service import (
    B2_AUTHORIZE_URL,
    BACKOFF_MAX_MS,
    BackblazeService,
    backoff_delay_ms,
)
from tests.helpers import recording_transport

API_URL = "https://api001.backblazeb2.test"
UPLOAD_URL = "https://pod-000.backblazeb2.test/b2api/v2/b2_upload_file/bucket"
GET_UPLOAD_URL = f"{API_URL}/b2api/v2/b2_get_upload_url"
DELETE_URL = f"{API_URL}/b2api/v2/b2_delete_file_version"


def b2_handler(upload_responses=None):
    """Answers authorize and get-upload-url; upload answers are taken in order, the last one repeats."""
    upload_responses = list(upload_responses or [(200, {"fileId": "1", "fileName": "a.jpg"})])

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url == B2_AUTHORIZE_URL:
            return httpx.Response(200, json={
                "apiUrl": API_URL,
                "authorizationToken": "account-token",
                "downloadUrl": "https://f000.backblazeb2.test",
            })
        if url == GET_UPLOAD_URL:
            return httpx.Response(200, json={"uploadUrl": UPLOAD_URL, "authorizationToken": "upload-token"})
        if url == UPLOAD_URL:
            status, body = upload_responses.pop(0) if len(upload_responses) > 1 else upload_responses[0]
            if isinstance(body, dict):
                return httpx.Response(status, json=body)
            return httpx.Response(status, text=body)
        if url == DELETE_URL:
            return httpx.Response(200, json={})
        return httpx.Response(404, json={"code": "not_found"})

    return handler


def make_service(transport=None):
    svc = BackblazeService(transport=transport)
    svc.key_id = "key-id"
    svc.application_key = "app-key"
    svc.bucket_id = "bucket-id"
    svc.bucket_name = "car-photos"
    svc.public_base_url = None
    return svc


def sent_to(transport, url):
    return [request for request in transport.requests if str(request.url) == url]


@pytest.fixture
def no_sleep(monkeypatch):
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr(backblaze_service.asyncio, "sleep", fake_sleep)
    return delays


class TestBackoff:

    def test_delay_is_capped(self):
        assert backoff_delay_ms(0) >= 500
        assert backoff_delay_ms(10) == BACKOFF_MAX_MS


class TestUpload:

    async def test_upload_returns_public_url(self, no_sleep):
        transport = recording_transport(b2_handler([
            (200, {"fileId": "4_z123", "fileName": "inspection-photos/abc/photo.jpg"}),
        ]))
        service = make_service(transport)

        result = await service.upload_file(b"image", "inspection-photos/abc/photo.jpg", "image/jpeg")

        assert result == {
            "file_id": "4_z123",
            "file_name": "inspection-photos/abc/photo.jpg",
            "url": "https://f000.backblazeb2.test/file/car-photos/inspection-photos/abc/photo.jpg",
        }
        upload = sent_to(transport, UPLOAD_URL)[-1]
        assert upload.headers["X-Bz-Content-Sha1"]
        assert upload.headers["Authorization"] == "upload-token"
        assert len(sent_to(transport, B2_AUTHORIZE_URL)) == 1
        assert no_sleep == []

    async def test_authorization_is_cached(self, no_sleep):
        transport = recording_transport(b2_handler())
        service = make_service(transport)

        await service.upload_file(b"one", "a.jpg")
        await service.upload_file(b"two", "a.jpg")

        assert len(sent_to(transport, B2_AUTHORIZE_URL)) == 1

    async def test_retries_then_succeeds(self, no_sleep):
        transport = recording_transport(b2_handler([
            (503, "busy"),
            (200, {"fileId": "2", "fileName": "b.jpg"}),
        ]))
        service = make_service(transport)

        result = await service.upload_file(b"data", "b.jpg")

        assert result["file_id"] == "2"
        assert len(no_sleep) == 1

    async def test_gives_up_after_four_attempts(self, no_sleep):
        transport = recording_transport(b2_handler([(500, "error")]))
        service = make_service(transport)

        with pytest.raises(ExternalServiceError):
            await service.upload_file(b"data", "c.jpg")

        assert len(sent_to(transport, UPLOAD_URL)) == 4
        assert len(no_sleep) == 3

    async def test_unconfigured_service(self):
        svc = BackblazeService()
        svc.key_id = None

        with pytest.raises(ServiceUnavailableError):
            await svc.upload_file(b"data", "d.jpg")


class TestDelete:

    async def test_delete_file_version(self):
        transport = recording_transport(b2_handler())
        service = make_service(transport)

        await service.delete_file("4_z123", "a.jpg")

        assert len(sent_to(transport, DELETE_URL)) == 1

    async def test_delete_skipped_without_ids(self):
        transport = recording_transport(b2_handler())

        await make_service(transport).delete_file(None, None)

        assert transport.requests == []
