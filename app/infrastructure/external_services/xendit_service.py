"""Xendit invoice service for credit package checkout"""

import base64
import hmac
import logging
from typing import Dict, Optional

import httpx

from ...core.config import settings
from ...domain.exceptions import ExternalServiceError, ServiceUnavailableError

logger = logging.getLogger(__name__)


class XenditService:
    """Xendit payment gateway client"""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport
        self.api_key = settings.XENDIT_API_KEY
        self.api_url = settings.XENDIT_API_URL.rstrip("/")
        self.callback_token = settings.XENDIT_CALLBACK_TOKEN

    def _auth_header(self) -> str:
        # Xendit uses the secret key as the Basic auth username with an empty password
        encoded = base64.b64encode(f"{self.api_key}:".encode("utf-8")).decode("ascii")
        return f"Basic {encoded}"

    async def create_invoice(
        self,
        external_id: str,
        amount: int,
        payer_email: Optional[str],
        description: str,
        success_redirect_url: str,
        failure_redirect_url: str,
        callback_url: Optional[str] = None,
    ) -> Dict[str, str]:
        """Create a hosted invoice, returns its id and payment URL"""
        if not self.api_key:
            raise ServiceUnavailableError("Xendit is not configured.")

        payload = {
            "external_id": external_id,
            "amount": amount,
            "description": description,
            "success_redirect_url": success_redirect_url,
            "failure_redirect_url": failure_redirect_url,
        }
        if payer_email:
            payload["payer_email"] = payer_email
        if callback_url:
            payload["callback_url"] = callback_url

        headers = {"Authorization": self._auth_header(), "Content-Type": "application/json"}
        if self.callback_token:
            headers["X-Callback-Token"] = self.callback_token

        async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
            response = await client.post(f"{self.api_url}/v2/invoices", json=payload, headers=headers)

        if response.status_code not in (200, 201):
            logger.error("Xendit create invoice failed %s: %s", response.status_code, response.text[:500])
            raise ExternalServiceError(f"Xendit error: {response.status_code}")

        data = response.json()
        logger.info("Xendit invoice %s created for %s", data.get("id"), external_id)
        return {"id": data["id"], "invoice_url": data.get("invoice_url")}

    def verify_callback_token(self, token: Optional[str]) -> bool:
        if not self.callback_token or not token:
            return False
        return hmac.compare_digest(token, self.callback_token)
