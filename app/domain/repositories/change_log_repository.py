"""Inspection change log repository interface"""

from abc import ABC, abstractmethod
from typing import Optional, List

from ..entities.inspection import InspectionChangeLog
from ..value_objects.entity_ids import InspectionId


class IChangeLogRepository(ABC):

    @abstractmethod
    async def add(self, log: InspectionChangeLog) -> InspectionChangeLog:
        pass

    @abstractmethod
    async def get_by_id(self, log_id: str) -> Optional[InspectionChangeLog]:
        pass

    @abstractmethod
    async def list_for_inspection(self, inspection_id: InspectionId, newest_first: bool = True) -> List[InspectionChangeLog]:
        pass

    @abstractmethod
    async def delete(self, log_id: str) -> None:
        pass

    @abstractmethod
    async def delete_for_inspection(self, inspection_id: InspectionId) -> int:
        pass
