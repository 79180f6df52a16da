"""Authentication routes"""

from fastapi import APIRouter, Depends, status

from ...api.dependencies import (
    get_unit_of_work,
    get_current_user,
    get_bearer_token,
    get_google_auth_service,
)
from ...application.use_cases.auth_use_cases import (
    RegisterUserUseCase,
    LoginUserUseCase,
    InspectorLoginUseCase,
    GoogleLoginUseCase,
    RefreshTokenUseCase,
    LogoutUseCase,
)
from ...application.dtos.user_dtos import (
    RegisterUserDto,
    LoginUserDto,
    InspectorLoginDto,
    GoogleLoginDto,
    RefreshTokenDto,
    UserDto,
    LoginResponse,
    CheckTokenResponse,
    MessageResponse,
)
from ...core.security import decode_access_token, token_expiry
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...infrastructure.external_services.google_auth_service import GoogleAuthService

router = APIRouter()


@router.post("/register", response_model=UserDto, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: RegisterUserDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Register a new customer account"""
    return await RegisterUserUseCase(unit_of_work).execute(user_data)


@router.post("/login", response_model=LoginResponse)
async def login_user(
    login_data: LoginUserDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Login with email or username and password"""
    return await LoginUserUseCase(unit_of_work).execute(login_data)


@router.post("/login/inspector", response_model=LoginResponse)
async def login_inspector(
    login_data: InspectorLoginDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Inspector login with email and PIN"""
    return await InspectorLoginUseCase(unit_of_work).execute(login_data)


@router.post("/google", response_model=LoginResponse)
async def google_login(
    request: GoogleLoginDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    google_auth: GoogleAuthService = Depends(get_google_auth_service),
):
    """Sign in with a Google ID token"""
    return await GoogleLoginUseCase(unit_of_work, google_auth).execute(request.id_token)


@router.post("/refresh", response_model=LoginResponse)
async def refresh_token(
    request: RefreshTokenDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Exchange a refresh token for a new token pair"""
    return await RefreshTokenUseCase(unit_of_work).execute(request.refresh_token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: str = Depends(get_bearer_token),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Revoke the presented access token"""
    payload = decode_access_token(token)
    await LogoutUseCase(unit_of_work).execute(current_user, token, token_expiry(payload))
    return MessageResponse(message="Logged out successfully")


@router.get("/profile", response_model=UserDto)
async def get_profile(current_user: User = Depends(get_current_user)):
    """Get current user profile"""
    return UserDto.from_entity(current_user)


@router.get("/check-token", response_model=CheckTokenResponse)
async def check_token(current_user: User = Depends(get_current_user)):
    return CheckTokenResponse(valid=True, user_id=current_user.id.value, role=current_user.role)
