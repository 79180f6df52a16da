"""Cardano blockchain lookup routes"""

from fastapi import APIRouter, Depends

from ...api.dependencies import get_blockchain_service
from ...infrastructure.external_services.blockchain_service import BlockchainService

router = APIRouter()


@router.get("/metadata/tx/{tx_hash}")
async def get_transaction_metadata(
    tx_hash: str,
    blockchain: BlockchainService = Depends(get_blockchain_service),
):
    """Metadata attached to a transaction, as returned by Blockfrost"""
    return await blockchain.get_transaction_metadata(tx_hash)


@router.get("/nft/{asset_id}")
async def get_nft(
    asset_id: str,
    blockchain: BlockchainService = Depends(get_blockchain_service),
):
    return await blockchain.get_asset_info(asset_id)
