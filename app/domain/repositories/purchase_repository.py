"""Purchase repository interface"""

from abc import ABC, abstractmethod
from typing import Optional, List

from ..entities.purchase import Purchase
from ..value_objects.entity_ids import PurchaseId, UserId


class IPurchaseRepository(ABC):

    @abstractmethod
    async def get_by_id(self, purchase_id: PurchaseId) -> Optional[Purchase]:
        pass

    @abstractmethod
    async def get_by_ext_invoice_id(self, ext_invoice_id: str) -> Optional[Purchase]:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: UserId) -> List[Purchase]:
        pass

    @abstractmethod
    async def add(self, purchase: Purchase) -> Purchase:
        pass

    @abstractmethod
    async def update(self, purchase: Purchase) -> Purchase:
        pass
