"""Inspection branch city use cases"""

import logging
from typing import List, Optional

from ...domain.entities.branch_city import BranchCity, branch_code_for
from ...domain.exceptions import ConflictError, NotFoundError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import BranchCityId
from ...application.dtos.inspection_dtos import BranchCityDto

logger = logging.getLogger(__name__)


class BranchCityUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def _get(self, branch_id: BranchCityId) -> BranchCity:
        branch = await self.unit_of_work.branches.get_by_id(branch_id)
        if not branch:
            raise NotFoundError(f"Inspection branch city with ID {branch_id} not found")
        return branch

    async def _ensure_available(self, city: str, exclude: Optional[BranchCity] = None) -> None:
        for existing in (
            await self.unit_of_work.branches.get_by_city(city),
            await self.unit_of_work.branches.get_by_code(branch_code_for(city)),
        ):
            if existing and (exclude is None or existing.id != exclude.id):
                raise ConflictError(f"Branch city '{city}' or its code already exists")

    async def create(self, city: str) -> BranchCityDto:
        async with self.unit_of_work:
            await self._ensure_available(city.strip())
            branch = await self.unit_of_work.branches.add(BranchCity.create(city))
            logger.info("Branch %s (%s) created", branch.city, branch.code)
            return BranchCityDto.from_entity(branch)

    async def list_all(self) -> List[BranchCityDto]:
        async with self.unit_of_work:
            return [BranchCityDto.from_entity(b) for b in await self.unit_of_work.branches.list_all()]

    async def get(self, branch_id: BranchCityId) -> BranchCityDto:
        async with self.unit_of_work:
            return BranchCityDto.from_entity(await self._get(branch_id))

    async def update(self, branch_id: BranchCityId, city: Optional[str]) -> BranchCityDto:
        async with self.unit_of_work:
            branch = await self._get(branch_id)
            if city is not None and city.strip() != branch.city:
                await self._ensure_available(city.strip(), exclude=branch)
                branch.rename(city)
                await self.unit_of_work.branches.update(branch)
            return BranchCityDto.from_entity(branch)

    async def toggle_active(self, branch_id: BranchCityId) -> BranchCityDto:
        async with self.unit_of_work:
            branch = await self._get(branch_id)
            branch.toggle_active()
            await self.unit_of_work.branches.update(branch)
            return BranchCityDto.from_entity(branch)

    async def delete(self, branch_id: BranchCityId) -> BranchCityDto:
        async with self.unit_of_work:
            branch = await self._get(branch_id)
            await self.unit_of_work.branches.delete(branch_id)
            return BranchCityDto.from_entity(branch)
