"""Inspection branch city routes"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from ...api.dependencies import get_unit_of_work, get_admin_user, get_current_user
from ...application.use_cases.branch_use_cases import BranchCityUseCase
from ...application.dtos.inspection_dtos import BranchCityDto, CreateBranchCityDto, UpdateBranchCityDto
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import BranchCityId

router = APIRouter()


@router.post("/", response_model=BranchCityDto, status_code=status.HTTP_201_CREATED)
async def create_branch(
    request: CreateBranchCityDto,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await BranchCityUseCase(unit_of_work).create(request.city)


@router.get("/", response_model=List[BranchCityDto])
async def list_branches(
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await BranchCityUseCase(unit_of_work).list_all()


@router.get("/{branch_id}", response_model=BranchCityDto)
async def get_branch(
    branch_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await BranchCityUseCase(unit_of_work).get(BranchCityId(branch_id))


@router.put("/{branch_id}", response_model=BranchCityDto)
async def update_branch(
    branch_id: UUID,
    request: UpdateBranchCityDto,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await BranchCityUseCase(unit_of_work).update(BranchCityId(branch_id), request.city)


@router.patch("/{branch_id}/toggle-active", response_model=BranchCityDto)
async def toggle_branch_active(
    branch_id: UUID,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await BranchCityUseCase(unit_of_work).toggle_active(BranchCityId(branch_id))


@router.delete("/{branch_id}", response_model=BranchCityDto)
async def delete_branch(
    branch_id: UUID,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await BranchCityUseCase(unit_of_work).delete(BranchCityId(branch_id))
