"""API dependencies: authentication, role guards and service factories"""

from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..core.security import decode_access_token
from ..db.database import get_db
from ..domain.entities.user import User
from ..domain.enums import UserRole
from ..domain.exceptions import ForbiddenError, UnauthorizedError
from ..domain.repositories.unit_of_work import IUnitOfWork
from ..domain.value_objects.entity_ids import UserId
from ..infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl
from ..infrastructure.external_services.backblaze_service import BackblazeService, get_backblaze_service
from ..infrastructure.external_services.blockchain_service import BlockchainService
from ..infrastructure.external_services.google_auth_service import GoogleAuthService
from ..infrastructure.external_services.report_pdf_service import ReportPdfService
from ..infrastructure.external_services.xendit_service import XenditService


# auto_error is off so a missing header is reported as 401 rather than 403
security = HTTPBearer(auto_error=False)


def get_unit_of_work(db: Session = Depends(get_db)) -> IUnitOfWork:
    """Get unit of work"""
    return UnitOfWorkImpl(db)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Unauthorized")
    return credentials.credentials


async def get_current_user(
    token: str = Depends(get_bearer_token),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
) -> User:
    """Get current authenticated user"""
    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        raise UnauthorizedError("Invalid or expired token")

    async with unit_of_work:
        if await unit_of_work.token_blacklist.is_blacklisted(token):
            raise UnauthorizedError("Token has been revoked")
        try:
            user_id = UserId.from_str(payload["sub"])
        except ValueError:
            raise UnauthorizedError("Invalid or expired token")
        user = await unit_of_work.users.get_by_id(user_id)

    if not user or not user.is_active:
        raise UnauthorizedError("User not found or inactive")
    return user


def require_roles(*roles: UserRole) -> Callable:
    """Dependency passing only users whose role is listed; no roles means any user"""

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if roles and current_user.role not in roles:
            raise ForbiddenError(
                f"Role {current_user.role.value} is not allowed to access this resource"
            )
        return current_user

    return role_checker


get_admin_user = require_roles(UserRole.ADMIN, UserRole.SUPERADMIN)


def get_google_auth_service() -> GoogleAuthService:
    return GoogleAuthService()


def get_storage_service() -> BackblazeService:
    """Get the shared Backblaze client"""
    return get_backblaze_service()


def get_xendit_service() -> XenditService:
    return XenditService()


def get_blockchain_service() -> BlockchainService:
    return BlockchainService()


def get_report_service() -> ReportPdfService:
    return ReportPdfService()
