"""Inspection repository interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional, List, Sequence, Tuple

from ..entities.inspection import Inspection
from ..enums import InspectionStatus
from ..value_objects.entity_ids import BranchCityId, InspectionId, UserId


class IInspectionRepository(ABC):

    @abstractmethod
    async def get_by_id(self, inspection_id: InspectionId) -> Optional[Inspection]:
        pass

    @abstractmethod
    async def find_latest_by_plate(self, plate_number: str) -> Optional[Inspection]:
        pass

    @abstractmethod
    async def list(self, statuses: Optional[Sequence[InspectionStatus]] = None) -> List[Inspection]:
        """Inspections newest first, optionally restricted to some statuses"""
        pass

    @abstractmethod
    async def list_latest_archived(self, limit: int = 5) -> List[Inspection]:
        pass

    @abstractmethod
    async def count_created_between(self, start: Optional[datetime], end: Optional[datetime]) -> int:
        """Number of inspections whose created_at falls in [start, end]; open bounds are allowed"""
        pass

    @abstractmethod
    async def count_by_status(
        self,
        start: Optional[datetime],
        end: Optional[datetime],
        branch_city: Optional[str] = None,
    ) -> Dict[InspectionStatus, int]:
        pass

    @abstractmethod
    async def count_by_branch(
        self, start: Optional[datetime], end: Optional[datetime]
    ) -> Dict[BranchCityId, int]:
        pass

    @abstractmethod
    async def count_by_inspector(
        self, start: Optional[datetime], end: Optional[datetime]
    ) -> Dict[UserId, int]:
        pass

    @abstractmethod
    async def count_by_field(
        self, field_name: str, start: Optional[datetime], end: Optional[datetime]
    ) -> List[Tuple[object, int]]:
        """Grouped counts for ``overall_rating``, ``blockchain_status`` or ``vehicle_data.<key>``, largest first"""
        pass

    @abstractmethod
    async def count_in_buckets(self, bucket_starts: Sequence[datetime], end: datetime) -> List[int]:
        """Counts per consecutive bucket; bucket i covers [starts[i], starts[i + 1]), the last one ends at ``end``"""
        pass

    @abstractmethod
    async def next_sequence(self, branch_code: str, date_prefix: str) -> int:
        """Reserve the next daily sequence number for a branch"""
        pass

    @abstractmethod
    async def add(self, inspection: Inspection) -> Inspection:
        pass

    @abstractmethod
    async def update(self, inspection: Inspection) -> Inspection:
        pass
