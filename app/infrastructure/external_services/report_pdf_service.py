"""Report PDF rendering and archive storage"""

import hashlib
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from ...core.config import settings
from ...domain.exceptions import ExternalServiceError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass
class ArchivedPdf:
    file_name: str
    path: Path
    public_url: str
    sha256: str


class ReportPdfService:
    """Fetches the printable report from the frontend and stores it on disk"""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport
        self.client_base_url = settings.CLIENT_BASE_URL.rstrip("/")
        self.public_base_url = settings.PDF_PUBLIC_BASE_URL.rstrip("/")
        self.archive_dir = Path(settings.PDF_ARCHIVE_DIR)

    def report_url(self, pretty_id: str, no_docs: bool = False) -> str:
        url = f"{self.client_base_url}/data/{pretty_id}"
        return f"{url}?noDocs=true" if no_docs else url

    async def render(self, pretty_id: str, no_docs: bool = False) -> bytes:
        url = self.report_url(pretty_id, no_docs)
        async with httpx.AsyncClient(timeout=120.0, follow_redirects=True, transport=self._transport) as client:
            try:
                response = await client.get(url, headers={"Accept": "application/pdf"})
            except httpx.HTTPError as e:
                raise ExternalServiceError(f"Report rendering failed for {url}: {e}")
        if response.status_code != 200 or not response.content:
            raise ExternalServiceError(f"Report rendering failed for {url}: {response.status_code}")
        return response.content

    def save(self, data: bytes, file_name: str) -> ArchivedPdf:
        self.archive_dir.mkdir(parents=True, exist_ok=True)
        path = self.archive_dir / file_name
        path.write_bytes(data)
        digest = hashlib.sha256(data).hexdigest()
        logger.info("Saved report %s (sha256 %s)", path, digest)
        return ArchivedPdf(
            file_name=file_name,
            path=path,
            public_url=f"{self.public_base_url}/{file_name}",
            sha256=digest,
        )

    async def render_and_archive(self, inspection_id: str, pretty_id: str, no_docs: bool = False) -> ArchivedPdf:
        data = await self.render(pretty_id, no_docs)
        suffix = "-no-docs" if no_docs else ""
        return self.save(data, f"{inspection_id}-{int(time.time() * 1000)}{suffix}.pdf")

    def local_path_for(self, url: Optional[str]) -> Optional[Path]:
        """Map a stored PDF URL back to the archived file, if it exists"""
        if not url:
            return None
        candidate = self.archive_dir / os.path.basename(url.split("?", 1)[0])
        return candidate if candidate.is_file() else None

    async def fetch_remote(self, url: str) -> bytes:
        """Download a stored PDF from its public URL"""
        async with httpx.AsyncClient(timeout=60.0, follow_redirects=True, transport=self._transport) as client:
            try:
                response = await client.get(url)
            except httpx.HTTPError as e:
                logger.error("Fetching report %s failed: %s", url, e)
                raise NotFoundError("PDF file not found")
        if response.status_code != 200:
            logger.error("Fetching report %s returned %s", url, response.status_code)
            raise NotFoundError("PDF file not found")
        return response.content
