"""Admin credit package catalogue use cases"""

import logging
from typing import List

from ...domain.entities.credit_package import CreditPackage
from ...domain.exceptions import NotFoundError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import CreditPackageId
from ...application.dtos.billing_dtos import (
    CreateCreditPackageDto,
    UpdateCreditPackageDto,
    CreditPackageDto,
)

logger = logging.getLogger(__name__)


class CreditPackageUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def _get(self, package_id: CreditPackageId) -> CreditPackage:
        package = await self.unit_of_work.credit_packages.get_by_id(package_id)
        if not package:
            raise NotFoundError("Credit package not found")
        return package

    async def create(self, request: CreateCreditPackageDto) -> CreditPackageDto:
        async with self.unit_of_work:
            package = CreditPackage.create(**request.model_dump())
            await self.unit_of_work.credit_packages.add(package)
            logger.info("Credit package %s created (%d credits)", package.id, package.credits)
            return CreditPackageDto.from_entity(package)

    async def list(self, active_only: bool = False) -> List[CreditPackageDto]:
        async with self.unit_of_work:
            packages = await self.unit_of_work.credit_packages.list(active_only=active_only)
            return [CreditPackageDto.from_entity(package) for package in packages]

    async def get(self, package_id: CreditPackageId) -> CreditPackageDto:
        async with self.unit_of_work:
            return CreditPackageDto.from_entity(await self._get(package_id))

    async def update(self, package_id: CreditPackageId, request: UpdateCreditPackageDto) -> CreditPackageDto:
        async with self.unit_of_work:
            package = await self._get(package_id)
            package.apply_update(request.model_dump(exclude_unset=True))
            await self.unit_of_work.credit_packages.update(package)
            return CreditPackageDto.from_entity(package)

    async def set_active(self, package_id: CreditPackageId, is_active: bool) -> CreditPackageDto:
        async with self.unit_of_work:
            package = await self._get(package_id)
            package.set_active(is_active)
            await self.unit_of_work.credit_packages.update(package)
            return CreditPackageDto.from_entity(package)

    async def delete(self, package_id: CreditPackageId) -> None:
        async with self.unit_of_work:
            await self._get(package_id)
            await self.unit_of_work.credit_packages.delete(package_id)
