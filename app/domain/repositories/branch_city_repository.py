"""Inspection branch city repository interface"""

from abc import ABC, abstractmethod
from typing import Optional, List

from ..entities.branch_city import BranchCity
from ..value_objects.entity_ids import BranchCityId


class IBranchCityRepository(ABC):

    @abstractmethod
    async def get_by_id(self, branch_id: BranchCityId) -> Optional[BranchCity]:
        pass

    @abstractmethod
    async def get_by_city(self, city: str) -> Optional[BranchCity]:
        """Case-insensitive lookup by city name"""
        pass

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[BranchCity]:
        pass

    @abstractmethod
    async def list_all(self) -> List[BranchCity]:
        pass

    @abstractmethod
    async def add(self, branch: BranchCity) -> BranchCity:
        pass

    @abstractmethod
    async def update(self, branch: BranchCity) -> BranchCity:
        pass

    @abstractmethod
    async def delete(self, branch_id: BranchCityId) -> None:
        pass
