"""User repository implementation"""

from typing import Optional, List
from sqlalchemy import func
from sqlalchemy.orm import Session

from ...domain.repositories.user_repository import IUserRepository
from ...domain.entities.user import User
from ...domain.value_objects.entity_ids import UserId, BranchCityId
from ...domain.enums import UserRole
from ..orm.user_model import UserModel


class UserRepositoryImpl(IUserRepository):
    """Repository implementation for User aggregate"""

    def __init__(self, session: Session):
        self.session = session

    def _get_model(self, user_id: UserId) -> Optional[UserModel]:
        return self.session.query(UserModel).filter(UserModel.id == user_id.value).first()

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        """Get user by ID"""
        model = self._get_model(user_id)
        return self._map_to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email, case-insensitive"""
        model = self.session.query(UserModel).filter(func.lower(UserModel.email) == email.lower()).first()
        return self._map_to_entity(model) if model else None

    async def get_by_username(self, username: str) -> Optional[User]:
        model = self.session.query(UserModel).filter(UserModel.username == username).first()
        return self._map_to_entity(model) if model else None

    async def get_by_google_id(self, google_id: str) -> Optional[User]:
        model = self.session.query(UserModel).filter(UserModel.google_id == google_id).first()
        return self._map_to_entity(model) if model else None

    async def get_by_wallet_address(self, wallet_address: str) -> Optional[User]:
        model = self.session.query(UserModel).filter(UserModel.wallet_address == wallet_address).first()
        return self._map_to_entity(model) if model else None

    async def list_all(self) -> List[User]:
        models = self.session.query(UserModel).order_by(UserModel.created_at.desc()).all()
        return [self._map_to_entity(model) for model in models]

    async def list_by_role(self, role: UserRole) -> List[User]:
        models = (
            self.session.query(UserModel)
            .filter(UserModel.role == role)
            .order_by(UserModel.name.asc())
            .all()
        )
        return [self._map_to_entity(model) for model in models]

    async def list_pin_hashes(self) -> List[str]:
        rows = (
            self.session.query(UserModel.pin)
            .filter(UserModel.role == UserRole.INSPECTOR, UserModel.pin.isnot(None))
            .all()
        )
        return [row[0] for row in rows]

    async def add(self, user: User) -> User:
        """Add a new user"""
        model = UserModel(id=user.id.value, created_at=user.created_at)
        self._update_model_from_entity(model, user)
        self.session.add(model)
        self.session.flush()
        return user

    async def update(self, user: User) -> User:
        """Update an existing user"""
        existing = self._get_model(user.id)
        if existing:
            self._update_model_from_entity(existing, user)
            self.session.flush()
        return user

    async def delete(self, user_id: UserId) -> None:
        """Delete user"""
        model = self._get_model(user_id)
        if model:
            self.session.delete(model)
            self.session.flush()

    def _update_model_from_entity(self, model: UserModel, user: User) -> None:
        """Update ORM model from domain entity"""
        model.email = user.email
        model.username = user.username
        model.name = user.name
        model.password = user.password
        model.pin = user.pin
        model.google_id = user.google_id
        model.wallet_address = user.wallet_address
        model.role = user.role
        model.is_active = user.is_active
        model.credits = user.credits
        model.refresh_token_hash = user.refresh_token_hash
        model.inspection_branch_city_id = (
            user.inspection_branch_city_id.value if user.inspection_branch_city_id else None
        )
        model.updated_at = user.updated_at

    def _map_to_entity(self, model: UserModel) -> User:
        """Map ORM model to domain entity"""
        return User(
            id=UserId(model.id),
            email=model.email,
            username=model.username,
            name=model.name,
            password=model.password,
            pin=model.pin,
            google_id=model.google_id,
            wallet_address=model.wallet_address,
            role=UserRole(model.role),
            is_active=model.is_active,
            credits=model.credits or 0,
            refresh_token_hash=model.refresh_token_hash,
            inspection_branch_city_id=(
                BranchCityId(model.inspection_branch_city_id) if model.inspection_branch_city_id else None
            ),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
