"""User entity with business logic"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..value_objects.entity_ids import UserId, BranchCityId
from ..enums import UserRole, STAFF_REVIEW_ROLES
from ..exceptions import InsufficientCreditsError, BadRequestError, ConflictError


@dataclass
class User:
    id: UserId
    email: Optional[str] = None
    username: Optional[str] = None
    name: Optional[str] = None
    password: Optional[str] = None
    pin: Optional[str] = None
    google_id: Optional[str] = None
    wallet_address: Optional[str] = None
    role: UserRole = UserRole.CUSTOMER
    is_active: bool = True
    credits: int = 0
    refresh_token_hash: Optional[str] = None
    inspection_branch_city_id: Optional[BranchCityId] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def create(
        cls,
        email: Optional[str],
        username: Optional[str] = None,
        name: Optional[str] = None,
        hashed_password: Optional[str] = None,
        role: UserRole = UserRole.CUSTOMER,
        wallet_address: Optional[str] = None,
        google_id: Optional[str] = None,
    ) -> 'User':
        """Factory method to create a new user with proper defaults"""
        now = datetime.utcnow()
        return cls(
            id=UserId.generate(),
            email=email.lower() if email else None,
            username=username,
            name=name,
            password=hashed_password,
            google_id=google_id,
            wallet_address=wallet_address,
            role=role,
            created_at=now,
            updated_at=now,
        )

    def change_role(self, role: UserRole) -> None:
        self.role = role
        self.updated_at = datetime.utcnow()

    def disable(self) -> None:
        self.is_active = False
        self.refresh_token_hash = None
        self.updated_at = datetime.utcnow()

    def enable(self) -> None:
        self.is_active = True
        self.updated_at = datetime.utcnow()

    def set_pin_hash(self, pin_hash: str) -> None:
        """Business logic: only inspectors log in with a PIN"""
        if self.role != UserRole.INSPECTOR:
            raise BadRequestError("PIN can only be set for inspectors")
        self.pin = pin_hash
        self.updated_at = datetime.utcnow()

    def link_google(self, google_id: str) -> None:
        if self.google_id and self.google_id != google_id:
            raise ConflictError("Email is already linked to a different Google account")
        self.google_id = google_id
        self.updated_at = datetime.utcnow()

    def add_credits(self, amount: int) -> None:
        if amount <= 0:
            raise BadRequestError("Credit amount must be positive")
        self.credits += amount
        self.updated_at = datetime.utcnow()

    def spend_credits(self, cost: int) -> None:
        """Business logic: a balance never goes negative"""
        if self.credits < cost:
            raise InsufficientCreditsError()
        self.credits -= cost
        self.updated_at = datetime.utcnow()

    @property
    def display_name(self) -> str:
        return self.name or self.username or self.email or str(self.id)

    @property
    def is_customer(self) -> bool:
        return self.role == UserRole.CUSTOMER

    @property
    def can_review(self) -> bool:
        return self.role in STAFF_REVIEW_ROLES

    def token_claims(self) -> dict:
        """Public claims embedded in the access token"""
        return {
            "email": self.email,
            "role": self.role.value,
            "name": self.name,
            "username": self.username,
        }
