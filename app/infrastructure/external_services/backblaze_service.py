"""Backblaze B2 storage service for inspection photos"""

import asyncio
import hashlib
import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional
from urllib.parse import quote

import httpx

from ...core.config import settings
from ...domain.exceptions import ExternalServiceError, ServiceUnavailableError

logger = logging.getLogger(__name__)

B2_AUTHORIZE_URL = "https://api.backblazeb2.com/b2api/v2/b2_authorize_account"
DEFAULT_CONTENT_TYPE = "b2/x-auto"

MAX_RETRIES = 3
BACKOFF_BASE_MS = 500
BACKOFF_MAX_MS = 5000
AUTH_TOKEN_TTL = timedelta(hours=1)


@dataclass
class B2Authorization:
    api_url: str
    authorization_token: str
    download_url: str
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


def backoff_delay_ms(attempt: int) -> int:
    """Exponential backoff with jitter, capped"""
    return min(BACKOFF_BASE_MS * (2 ** attempt) + random.randint(0, 99), BACKOFF_MAX_MS)


class BackblazeService:
    """Thin client over the native B2 API: authorize, get upload url, upload, delete."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport
        self.key_id = settings.BACKBLAZE_APPLICATION_KEY_ID
        self.application_key = settings.BACKBLAZE_APPLICATION_KEY
        self.bucket_id = settings.BACKBLAZE_BUCKET_ID_PHOTOS
        self.bucket_name = settings.BACKBLAZE_BUCKET_NAME_PHOTOS
        self.public_base_url = settings.BACKBLAZE_PUBLIC_BASE_URL
        self.max_retries = MAX_RETRIES
        self._auth: Optional[B2Authorization] = None

    @property
    def is_configured(self) -> bool:
        return all([self.key_id, self.application_key, self.bucket_id, self.bucket_name])

    def _ensure_configured(self) -> None:
        if not self.is_configured:
            raise ServiceUnavailableError("Backblaze credentials are not configured.")

    async def authorize_account(self, force: bool = False) -> B2Authorization:
        """Authorize with B2, reusing the cached token until it expires"""
        self._ensure_configured()
        now = datetime.utcnow()
        if not force and self._auth and self._auth.is_valid(now):
            return self._auth

        async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
            response = await client.get(B2_AUTHORIZE_URL, auth=(self.key_id, self.application_key))

        if response.status_code != 200:
            raise ExternalServiceError(
                f"Backblaze authorization failed: {response.status_code} {response.text[:200]}"
            )
        data = response.json()
        self._auth = B2Authorization(
            api_url=data["apiUrl"],
            authorization_token=data["authorizationToken"],
            download_url=data["downloadUrl"],
            expires_at=now + AUTH_TOKEN_TTL,
        )
        logger.info("Backblaze account authorized, token cached until %s", self._auth.expires_at.isoformat())
        return self._auth

    async def get_upload_url(self) -> Dict[str, str]:
        auth = await self.authorize_account()
        async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
            response = await client.post(
                f"{auth.api_url}/b2api/v2/b2_get_upload_url",
                json={"bucketId": self.bucket_id},
                headers={"Authorization": auth.authorization_token},
            )
        if response.status_code != 200:
            if response.status_code == 401:
                self._auth = None
            raise ExternalServiceError(
                f"Failed to get upload URL: {response.status_code} {response.text[:200]}"
            )
        return response.json()

    async def _upload_once(self, data: bytes, file_name: str, content_type: str) -> Dict[str, str]:
        target = await self.get_upload_url()
        headers = {
            "Authorization": target["authorizationToken"],
            "X-Bz-File-Name": quote(file_name),
            "Content-Type": content_type or DEFAULT_CONTENT_TYPE,
            "X-Bz-Content-Sha1": hashlib.sha1(data).hexdigest(),
        }
        async with httpx.AsyncClient(timeout=60.0, transport=self._transport) as client:
            response = await client.post(target["uploadUrl"], content=data, headers=headers)
        if response.status_code != 200:
            raise ExternalServiceError(f"Backblaze upload failed: {response.status_code} {response.text[:200]}")
        return response.json()

    async def upload_file(self, data: bytes, file_name: str, content_type: Optional[str] = None) -> Dict[str, str]:
        """Upload bytes, retrying the whole get-url/upload sequence on failure.

        Makes ``max_retries + 1`` attempts in total and raises the last error
        when every attempt fails. Returns the B2 file id, the stored file name
        and the public URL.
        """
        self._ensure_configured()
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries + 1):
            try:
                result = await self._upload_once(data, file_name, content_type or DEFAULT_CONTENT_TYPE)
                return {
                    "file_id": result.get("fileId"),
                    "file_name": result.get("fileName", file_name),
                    "url": self.build_public_url(result.get("fileName", file_name)),
                }
            except (httpx.HTTPError, ExternalServiceError) as e:
                last_error = e
                if attempt == self.max_retries:
                    logger.error(
                        "Backblaze upload of %s failed after %d attempts: %s",
                        file_name, attempt + 1, e,
                    )
                    break
                delay_ms = backoff_delay_ms(attempt)
                logger.warning(
                    "Backblaze upload attempt %d failed for %s: %s. Retrying in %dms",
                    attempt + 1, file_name, e, delay_ms,
                )
                await asyncio.sleep(delay_ms / 1000)

        if isinstance(last_error, ExternalServiceError):
            raise last_error
        raise ExternalServiceError(f"Backblaze upload failed: {last_error}")

    async def delete_file(self, file_id: Optional[str], file_name: Optional[str]) -> None:
        """Delete one file version; a no-op when storage is not configured"""
        if not self.is_configured:
            logger.warning("Backblaze not configured, skipping delete of %s", file_name)
            return
        if not file_id or not file_name:
            return

        auth = await self.authorize_account()
        async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
            response = await client.post(
                f"{auth.api_url}/b2api/v2/b2_delete_file_version",
                json={"fileId": file_id, "fileName": file_name},
                headers={"Authorization": auth.authorization_token},
            )
        if response.status_code != 200:
            raise ExternalServiceError(f"Backblaze delete failed: {response.status_code} {response.text[:200]}")
        logger.info("Deleted Backblaze file %s", file_name)

    def build_public_url(self, file_name: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{file_name}"
        download_url = self._auth.download_url if self._auth else ""
        return f"{download_url}/file/{self.bucket_name}/{file_name}"


_backblaze_service: Optional[BackblazeService] = None


def get_backblaze_service() -> BackblazeService:
    """Process-wide instance so the authorization token cache is shared"""
    global _backblaze_service
    if _backblaze_service is None:
        _backblaze_service = BackblazeService()
    return _backblaze_service
