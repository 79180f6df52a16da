"""Credit consumption ledger interface"""

from abc import ABC, abstractmethod

from ..value_objects.entity_ids import UserId, InspectionId


class ICreditConsumptionRepository(ABC):

    @abstractmethod
    async def exists(self, user_id: UserId, inspection_id: InspectionId) -> bool:
        pass

    @abstractmethod
    async def add(self, user_id: UserId, inspection_id: InspectionId, cost: int) -> None:
        """Insert a consumption row; raises IntegrityError on a duplicate key"""
        pass
