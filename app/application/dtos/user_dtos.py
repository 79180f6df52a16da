"""User and authentication DTOs for API layer"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from ...domain.enums import UserRole


class RegisterUserDto(BaseModel):
    """DTO for customer self-registration"""
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=8)
    name: Optional[str] = None
    wallet_address: Optional[str] = None


class LoginUserDto(BaseModel):
    """DTO for login with email or username"""
    login_identifier: str = Field(..., min_length=1)
    password: str


class InspectorLoginDto(BaseModel):
    """DTO for inspector PIN login"""
    email: EmailStr
    pin: str = Field(..., min_length=6, max_length=6)


class GoogleLoginDto(BaseModel):
    """DTO for Google sign-in with an ID token"""
    id_token: str


class RefreshTokenDto(BaseModel):
    """DTO for refresh token request"""
    refresh_token: str


class UserDto(BaseModel):
    """DTO for user response"""
    id: UUID
    email: Optional[str] = None
    username: Optional[str] = None
    name: Optional[str] = None
    role: UserRole
    wallet_address: Optional[str] = None
    is_active: bool
    credits: int = 0
    inspection_branch_city_id: Optional[UUID] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_entity(cls, user) -> 'UserDto':
        """Convert domain entity to DTO"""
        return cls(
            id=user.id.value,
            email=user.email,
            username=user.username,
            name=user.name,
            role=user.role,
            wallet_address=user.wallet_address,
            is_active=user.is_active,
            credits=user.credits,
            inspection_branch_city_id=(
                user.inspection_branch_city_id.value if user.inspection_branch_city_id else None
            ),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class LoginResponse(BaseModel):
    """Tokens plus the authenticated user"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserDto


class CheckTokenResponse(BaseModel):
    valid: bool = True
    user_id: UUID
    role: UserRole


class MessageResponse(BaseModel):
    message: str


class UpdateUserRoleDto(BaseModel):
    role: UserRole


class CreateInspectorDto(BaseModel):
    """DTO for an admin creating an inspector account"""
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50)
    name: str = Field(..., min_length=1)
    wallet_address: Optional[str] = None
    inspection_branch_city_id: Optional[UUID] = None


class UpdateUserDto(BaseModel):
    """Partial update by an admin"""
    email: Optional[EmailStr] = None
    username: Optional[str] = Field(default=None, min_length=3, max_length=50)
    name: Optional[str] = None
    wallet_address: Optional[str] = None
    inspection_branch_city_id: Optional[UUID] = None


class InspectorCreatedResponse(UserDto):
    """Inspector plus the plain PIN, shown only once"""
    pin: str


class GeneratePinResponse(BaseModel):
    pin: str


class PublicInspectorDto(BaseModel):
    id: UUID
    name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    wallet_address: Optional[str] = None
    inspection_branch_city: Optional[str] = None
