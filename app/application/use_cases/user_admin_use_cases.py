"""Admin user management use cases"""

import logging
from typing import List

from ...domain.entities.user import User
from ...domain.enums import UserRole
from ...domain.exceptions import BadRequestError, ConflictError, NotFoundError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import UserId, BranchCityId
from ...application.dtos.user_dtos import (
    UserDto,
    CreateInspectorDto,
    UpdateUserDto,
    InspectorCreatedResponse,
    PublicInspectorDto,
)
from ...core.security import generate_pin, get_password_hash, verify_password
from .auth_use_cases import ensure_unique_identity

logger = logging.getLogger(__name__)

PIN_GENERATION_ATTEMPTS = 10


async def generate_unique_pin(unit_of_work: IUnitOfWork) -> str:
    """Random 6-digit PIN that no inspector currently uses"""
    existing_hashes = await unit_of_work.users.list_pin_hashes()
    for _ in range(PIN_GENERATION_ATTEMPTS):
        candidate = generate_pin()
        if not any(verify_password(candidate, pin_hash) for pin_hash in existing_hashes):
            return candidate
    raise ConflictError("Could not generate a unique PIN, try again")


class UserAdminUseCase:
    """User management operations for ADMIN and SUPERADMIN"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def _get_user(self, user_id: UserId) -> User:
        user = await self.unit_of_work.users.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user

    async def list_users(self) -> List[UserDto]:
        async with self.unit_of_work:
            users = await self.unit_of_work.users.list_all()
            return [UserDto.from_entity(user) for user in users]

    async def list_inspectors(self) -> List[UserDto]:
        async with self.unit_of_work:
            users = await self.unit_of_work.users.list_by_role(UserRole.INSPECTOR)
            return [UserDto.from_entity(user) for user in users]

    async def get_user(self, user_id: UserId) -> UserDto:
        async with self.unit_of_work:
            return UserDto.from_entity(await self._get_user(user_id))

    async def change_role(self, user_id: UserId, role: UserRole) -> UserDto:
        async with self.unit_of_work:
            user = await self._get_user(user_id)
            user.change_role(role)
            await self.unit_of_work.users.update(user)
            logger.info("User %s role changed to %s", user_id, role.value)
            return UserDto.from_entity(user)

    async def set_active(self, user_id: UserId, is_active: bool) -> UserDto:
        async with self.unit_of_work:
            user = await self._get_user(user_id)
            if is_active:
                user.enable()
            else:
                user.disable()
            await self.unit_of_work.users.update(user)
            return UserDto.from_entity(user)

    async def create_inspector(self, request: CreateInspectorDto) -> InspectorCreatedResponse:
        async with self.unit_of_work:
            email = request.email.lower()
            await ensure_unique_identity(
                self.unit_of_work, email, request.username, request.wallet_address
            )
            branch_id = await self._resolve_branch(request.inspection_branch_city_id)

            pin = await generate_unique_pin(self.unit_of_work)
            user = User.create(
                email=email,
                username=request.username,
                name=request.name,
                role=UserRole.INSPECTOR,
                wallet_address=request.wallet_address,
            )
            user.inspection_branch_city_id = branch_id
            user.set_pin_hash(get_password_hash(pin))
            await self.unit_of_work.users.add(user)

            logger.info("Inspector %s created", user.id)
            return InspectorCreatedResponse(**UserDto.from_entity(user).model_dump(), pin=pin)

    async def regenerate_pin(self, user_id: UserId) -> str:
        async with self.unit_of_work:
            user = await self._get_user(user_id)
            if user.role != UserRole.INSPECTOR:
                raise BadRequestError("PIN can only be generated for inspectors")
            pin = await generate_unique_pin(self.unit_of_work)
            user.set_pin_hash(get_password_hash(pin))
            await self.unit_of_work.users.update(user)
            return pin

    async def update_user(self, user_id: UserId, request: UpdateUserDto) -> UserDto:
        changes = request.model_dump(exclude_unset=True)
        async with self.unit_of_work:
            user = await self._get_user(user_id)
            if "email" in changes and changes["email"]:
                changes["email"] = changes["email"].lower()
            await ensure_unique_identity(
                self.unit_of_work,
                changes.get("email"),
                changes.get("username"),
                changes.get("wallet_address"),
                exclude=user,
            )
            if "inspection_branch_city_id" in changes:
                changes["inspection_branch_city_id"] = await self._resolve_branch(
                    changes["inspection_branch_city_id"]
                )

            for name, value in changes.items():
                setattr(user, name, value)
            await self.unit_of_work.users.update(user)
            return UserDto.from_entity(user)

    async def delete_user(self, user_id: UserId) -> None:
        async with self.unit_of_work:
            await self._get_user(user_id)
            await self.unit_of_work.users.delete(user_id)
            logger.info("User %s deleted", user_id)

    async def _resolve_branch(self, branch_uuid):
        if branch_uuid is None:
            return None
        branch_id = BranchCityId(branch_uuid)
        if not await self.unit_of_work.branches.get_by_id(branch_id):
            raise NotFoundError(f"Inspection branch with ID {branch_uuid} not found")
        return branch_id


class ListPublicInspectorsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self) -> List[PublicInspectorDto]:
        async with self.unit_of_work:
            inspectors = await self.unit_of_work.users.list_by_role(UserRole.INSPECTOR)
            branches = {branch.id: branch.city for branch in await self.unit_of_work.branches.list_all()}
            return [
                PublicInspectorDto(
                    id=user.id.value,
                    name=user.name,
                    email=user.email,
                    username=user.username,
                    wallet_address=user.wallet_address,
                    inspection_branch_city=branches.get(user.inspection_branch_city_id),
                )
                for user in inspectors
            ]
