"""Authentication use cases: register, login, Google sign-in, refresh, logout"""

import logging
from datetime import datetime
from typing import Optional

from ...domain.entities.user import User
from ...domain.enums import UserRole
from ...domain.exceptions import ConflictError, UnauthorizedError
from ...domain.value_objects.entity_ids import UserId
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...infrastructure.external_services.google_auth_service import GoogleAuthService
from ...application.dtos.user_dtos import (
    RegisterUserDto,
    LoginUserDto,
    InspectorLoginDto,
    UserDto,
    LoginResponse,
)
from ...core.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    create_refresh_token,
    verify_refresh_token,
    hash_refresh_token,
    verify_refresh_token_hash,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


async def ensure_unique_identity(
    unit_of_work: IUnitOfWork,
    email: Optional[str],
    username: Optional[str],
    wallet_address: Optional[str],
    exclude: Optional[User] = None,
) -> None:
    """Raise ConflictError when another user already holds the email, username or wallet"""
    checks = (
        ("Email", email, unit_of_work.users.get_by_email),
        ("Username", username, unit_of_work.users.get_by_username),
        ("Wallet address", wallet_address, unit_of_work.users.get_by_wallet_address),
    )
    for label, value, lookup in checks:
        if not value:
            continue
        existing = await lookup(value)
        if existing and (exclude is None or existing.id != exclude.id):
            raise ConflictError(f"{label} already registered")


async def issue_tokens(unit_of_work: IUnitOfWork, user: User) -> LoginResponse:
    """Sign a token pair and remember the refresh token's hash on the user"""
    subject = str(user.id)
    access_token = create_access_token(subject, user.token_claims())
    refresh_token = create_refresh_token(subject)

    user.refresh_token_hash = hash_refresh_token(refresh_token)
    user.updated_at = datetime.utcnow()
    await unit_of_work.users.update(user)

    return LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=UserDto.from_entity(user),
    )


class RegisterUserUseCase:
    """Customer self-registration"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: RegisterUserDto) -> UserDto:
        async with self.unit_of_work:
            email = request.email.lower()
            await ensure_unique_identity(
                self.unit_of_work, email, request.username, request.wallet_address
            )

            user = User.create(
                email=email,
                username=request.username,
                name=request.name,
                hashed_password=get_password_hash(request.password),
                role=UserRole.CUSTOMER,
                wallet_address=request.wallet_address,
            )
            user = await self.unit_of_work.users.add(user)
            await self.unit_of_work.commit()

            logger.info("Registered user %s", user.id)
            return UserDto.from_entity(user)


class LoginUserUseCase:
    """Email-or-username plus password login"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: LoginUserDto) -> LoginResponse:
        async with self.unit_of_work:
            identifier = request.login_identifier.strip()
            if "@" in identifier:
                user = await self.unit_of_work.users.get_by_email(identifier.lower())
            else:
                user = await self.unit_of_work.users.get_by_username(identifier)

            if not user or not user.is_active:
                raise UnauthorizedError(INVALID_CREDENTIALS)
            if not verify_password(request.password, user.password):
                raise UnauthorizedError(INVALID_CREDENTIALS)

            response = await issue_tokens(self.unit_of_work, user)
            await self.unit_of_work.commit()

            logger.info("User %s logged in", user.id)
            return response


class InspectorLoginUseCase:
    """Inspector login with email and 6-digit PIN"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: InspectorLoginDto) -> LoginResponse:
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_email(request.email.lower())
            if (
                not user
                or not user.is_active
                or user.role != UserRole.INSPECTOR
                or not user.pin
                or not verify_password(request.pin, user.pin)
            ):
                raise UnauthorizedError(INVALID_CREDENTIALS)

            response = await issue_tokens(self.unit_of_work, user)
            await self.unit_of_work.commit()

            logger.info("Inspector %s logged in", user.id)
            return response


class GoogleLoginUseCase:
    """Find-or-create a user from a verified Google ID token"""

    def __init__(self, unit_of_work: IUnitOfWork, google_auth: GoogleAuthService):
        self.unit_of_work = unit_of_work
        self.google_auth = google_auth

    async def execute(self, token: str) -> LoginResponse:
        info = self.google_auth.verify_id_token(token)
        google_id = info["google_id"]

        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_google_id(google_id)

            if not user:
                user = await self.unit_of_work.users.get_by_email(info["email"])
                if user:
                    user.link_google(google_id)
                    await self.unit_of_work.users.update(user)
                else:
                    user = User.create(
                        email=info["email"],
                        name=info.get("name") or f"User_{google_id[:6]}",
                        role=UserRole.CUSTOMER,
                        google_id=google_id,
                    )
                    user = await self.unit_of_work.users.add(user)
                    logger.info("Created user %s from Google sign-in", user.id)

            if not user.is_active:
                raise UnauthorizedError(INVALID_CREDENTIALS)

            response = await issue_tokens(self.unit_of_work, user)
            await self.unit_of_work.commit()
            return response


class RefreshTokenUseCase:
    """Rotate a refresh token"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, refresh_token: str) -> LoginResponse:
        subject = verify_refresh_token(refresh_token)
        if not subject:
            raise UnauthorizedError("Invalid refresh token")

        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_id(UserId.from_str(subject))
            if not user or not user.is_active:
                raise UnauthorizedError("Invalid refresh token")
            if not verify_refresh_token_hash(refresh_token, user.refresh_token_hash):
                raise UnauthorizedError("Invalid refresh token")

            response = await issue_tokens(self.unit_of_work, user)
            await self.unit_of_work.commit()
            return response


class LogoutUseCase:
    """Blacklist the access token and forget the refresh token"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user: User, access_token: str, expires_at: datetime) -> None:
        async with self.unit_of_work:
            await self.unit_of_work.token_blacklist.add(access_token, expires_at)
            user.refresh_token_hash = None
            user.updated_at = datetime.utcnow()
            await self.unit_of_work.users.update(user)
            await self.unit_of_work.commit()

        logger.info("User %s logged out", user.id)
