"""Cardano blockchain service: Blockfrost queries and NFT minting"""

import logging
from typing import Any, Dict, Optional

import httpx

from ...core.config import settings
from ...domain.exceptions import ExternalServiceError, NotFoundError, ServiceUnavailableError

logger = logging.getLogger(__name__)

BLOCKFROST_URLS = {
    "preprod": "https://cardano-preprod.blockfrost.io/api/v0",
    "preview": "https://cardano-preview.blockfrost.io/api/v0",
    "mainnet": "https://cardano-mainnet.blockfrost.io/api/v0",
}


def asset_name_for(plate_number: Optional[str]) -> str:
    plate = (plate_number or "UNKNOWN").replace(" ", "")
    return f"Inspection_{plate}"


class BlockchainService:
    """Reads chain data through Blockfrost and mints through an external signer."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport
        env = (settings.BLOCKFROST_ENV or "preprod").lower()
        if env not in BLOCKFROST_URLS:
            raise ValueError(f"Unsupported BLOCKFROST_ENV: {env}")
        self.env = env
        self.base_url = BLOCKFROST_URLS[env]
        self.project_id = {
            "preprod": settings.BLOCKFROST_API_KEY_PREPROD,
            "preview": settings.BLOCKFROST_API_KEY_PREVIEW,
            "mainnet": settings.BLOCKFROST_API_KEY_MAINNET,
        }[env]
        self.minting_url = settings.CARDANO_MINTING_SERVICE_URL
        self.policy_id = settings.CARDANO_POLICY_ID

    async def _blockfrost_get(self, path: str, not_found_message: str) -> Any:
        if not self.project_id:
            raise ServiceUnavailableError(f"Blockfrost API key for {self.env} is not configured.")

        async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
            try:
                response = await client.get(f"{self.base_url}{path}", headers={"project_id": self.project_id})
            except httpx.HTTPError as e:
                logger.error("Blockfrost request %s failed: %s", path, e)
                raise ExternalServiceError(f"Blockfrost request failed: {e}")

        if response.status_code == 404:
            raise NotFoundError(not_found_message)
        if response.status_code != 200:
            logger.error("Blockfrost %s returned %s: %s", path, response.status_code, response.text[:200])
            raise ExternalServiceError(f"Blockfrost error: {response.status_code}")
        return response.json()

    async def get_transaction_metadata(self, tx_hash: str) -> Any:
        return await self._blockfrost_get(
            f"/txs/{tx_hash}/metadata", f"Metadata for transaction {tx_hash} not found"
        )

    async def get_asset_info(self, asset_id: str) -> Any:
        return await self._blockfrost_get(f"/assets/{asset_id}", f"Asset {asset_id} not found")

    async def mint_inspection_nft(self, metadata: Dict[str, Any], plate_number: Optional[str]) -> Dict[str, str]:
        """Ask the signing service to mint one inspection NFT.

        Returns ``tx_hash`` and ``asset_id`` (policy id + hex asset name).
        """
        if not self.minting_url:
            raise ServiceUnavailableError("Cardano minting service is not configured.")

        asset_name = asset_name_for(plate_number)
        payload = {
            "network": self.env,
            "policyId": self.policy_id,
            "assetName": asset_name,
            "metadata": metadata,
        }
        logger.info("Minting %s on %s", asset_name, self.env)

        async with httpx.AsyncClient(timeout=120.0, transport=self._transport) as client:
            try:
                response = await client.post(self.minting_url, json=payload)
            except httpx.HTTPError as e:
                raise ExternalServiceError(f"Minting request failed: {e}")

        if response.status_code not in (200, 201):
            logger.error("Minting service returned %s: %s", response.status_code, response.text[:200])
            raise ExternalServiceError(f"Minting failed: {response.status_code}")

        data = response.json()
        tx_hash = data.get("txHash") or data.get("tx_hash")
        if not tx_hash:
            raise ExternalServiceError("Minting service response has no transaction hash")

        asset_id = data.get("assetId") or data.get("asset_id")
        if not asset_id:
            policy_id = data.get("policyId") or self.policy_id or ""
            asset_id = policy_id + asset_name.encode("utf-8").hex()

        logger.info("Minted %s in tx %s", asset_id, tx_hash)
        return {"tx_hash": tx_hash, "asset_id": asset_id}
