"""Inspection domain events"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..value_objects.entity_ids import InspectionId, UserId


@dataclass(frozen=True)
class InspectionApproved:
    inspection_id: InspectionId
    reviewer_id: UserId
    applied_changes: int


@dataclass(frozen=True)
class InspectionArchived:
    inspection_id: InspectionId
    nft_asset_id: Optional[str]
    tx_hash: Optional[str]
    archived_at: datetime


@dataclass(frozen=True)
class InspectionArchiveFailed:
    inspection_id: InspectionId
    reason: str


@dataclass(frozen=True)
class InspectionDeactivated:
    inspection_id: InspectionId
    deactivated_at: datetime
