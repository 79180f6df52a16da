"""Customer report DTOs"""

from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from uuid import UUID

from .inspection_dtos import PhotoDto


class ReportDetailDto(BaseModel):
    id: UUID
    pretty_id: str
    vehicle_plate_number: Optional[str] = None
    inspection_date: Optional[datetime] = None
    overall_rating: Optional[str] = None
    merek_kendaraan: Optional[str] = None
    tipe_kendaraan: Optional[str] = None
    nft_asset_id: Optional[str] = None
    blockchain_tx_hash: Optional[str] = None
    archived_at: Optional[datetime] = None
    photos: List[PhotoDto] = []
    can_download: bool
    url_pdf_no_docs: Optional[str] = None
    pdf_file_hash_no_docs: Optional[str] = None
    user_credit_balance: Optional[int] = None
