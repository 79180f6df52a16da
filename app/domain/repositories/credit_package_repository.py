"""Credit package repository interface"""

from abc import ABC, abstractmethod
from typing import Optional, List

from ..entities.credit_package import CreditPackage
from ..value_objects.entity_ids import CreditPackageId


class ICreditPackageRepository(ABC):

    @abstractmethod
    async def get_by_id(self, package_id: CreditPackageId) -> Optional[CreditPackage]:
        pass

    @abstractmethod
    async def list(self, active_only: bool = False) -> List[CreditPackage]:
        """Packages newest first"""
        pass

    @abstractmethod
    async def add(self, package: CreditPackage) -> CreditPackage:
        pass

    @abstractmethod
    async def update(self, package: CreditPackage) -> CreditPackage:
        pass

    @abstractmethod
    async def delete(self, package_id: CreditPackageId) -> None:
        pass
