"""Admin user management routes"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from ...api.dependencies import get_unit_of_work, get_admin_user
from ...application.use_cases.user_admin_use_cases import UserAdminUseCase
from ...application.dtos.user_dtos import (
    UserDto,
    UpdateUserRoleDto,
    CreateInspectorDto,
    UpdateUserDto,
    InspectorCreatedResponse,
    GeneratePinResponse,
)
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import UserId

router = APIRouter()


@router.get("/", response_model=List[UserDto])
async def list_users(
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await UserAdminUseCase(unit_of_work).list_users()


@router.get("/inspectors", response_model=List[UserDto])
async def list_inspectors(
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await UserAdminUseCase(unit_of_work).list_inspectors()


@router.post("/inspector", response_model=InspectorCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_inspector(
    request: CreateInspectorDto,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Create an inspector; the generated PIN is only returned here"""
    return await UserAdminUseCase(unit_of_work).create_inspector(request)


@router.get("/{user_id}", response_model=UserDto)
async def get_user(
    user_id: UUID,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await UserAdminUseCase(unit_of_work).get_user(UserId(user_id))


@router.put("/{user_id}/role", response_model=UserDto)
async def update_user_role(
    user_id: UUID,
    request: UpdateUserRoleDto,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await UserAdminUseCase(unit_of_work).change_role(UserId(user_id), request.role)


@router.put("/{user_id}/disable", response_model=UserDto)
async def disable_user(
    user_id: UUID,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await UserAdminUseCase(unit_of_work).set_active(UserId(user_id), False)


@router.put("/{user_id}/enable", response_model=UserDto)
async def enable_user(
    user_id: UUID,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await UserAdminUseCase(unit_of_work).set_active(UserId(user_id), True)


@router.post("/{user_id}/generate-pin", response_model=GeneratePinResponse)
async def generate_inspector_pin(
    user_id: UUID,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    pin = await UserAdminUseCase(unit_of_work).regenerate_pin(UserId(user_id))
    return GeneratePinResponse(pin=pin)


@router.put("/{user_id}", response_model=UserDto)
async def update_user(
    user_id: UUID,
    request: UpdateUserDto,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await UserAdminUseCase(unit_of_work).update_user(UserId(user_id), request)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    await UserAdminUseCase(unit_of_work).delete_user(UserId(user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
