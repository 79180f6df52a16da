"""Admin credit package routes"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from ...api.dependencies import get_unit_of_work, get_admin_user
from ...application.use_cases.credit_package_use_cases import CreditPackageUseCase
from ...application.dtos.billing_dtos import (
    CreateCreditPackageDto,
    UpdateCreditPackageDto,
    SetPackageActiveDto,
    CreditPackageDto,
)
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import CreditPackageId

router = APIRouter()


@router.post("/", response_model=CreditPackageDto, status_code=status.HTTP_201_CREATED)
async def create_package(
    request: CreateCreditPackageDto,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await CreditPackageUseCase(unit_of_work).create(request)


@router.get("/", response_model=List[CreditPackageDto])
async def list_packages(
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await CreditPackageUseCase(unit_of_work).list()


@router.get("/{package_id}", response_model=CreditPackageDto)
async def get_package(
    package_id: UUID,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await CreditPackageUseCase(unit_of_work).get(CreditPackageId(package_id))


@router.patch("/{package_id}", response_model=CreditPackageDto)
async def update_package(
    package_id: UUID,
    request: UpdateCreditPackageDto,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await CreditPackageUseCase(unit_of_work).update(CreditPackageId(package_id), request)


@router.patch("/{package_id}/active", response_model=CreditPackageDto)
async def set_package_active(
    package_id: UUID,
    request: SetPackageActiveDto,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await CreditPackageUseCase(unit_of_work).set_active(CreditPackageId(package_id), request.is_active)


@router.delete("/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_package(
    package_id: UUID,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    await CreditPackageUseCase(unit_of_work).delete(CreditPackageId(package_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
