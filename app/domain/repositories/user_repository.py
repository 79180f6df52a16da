"""User repository interface"""

from abc import ABC, abstractmethod
from typing import Optional, List

from ..entities.user import User
from ..enums import UserRole
from ..value_objects.entity_ids import UserId


class IUserRepository(ABC):

    @abstractmethod
    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_google_id(self, google_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_wallet_address(self, wallet_address: str) -> Optional[User]:
        pass

    @abstractmethod
    async def list_all(self) -> List[User]:
        pass

    @abstractmethod
    async def list_by_role(self, role: UserRole) -> List[User]:
        pass

    @abstractmethod
    async def list_pin_hashes(self) -> List[str]:
        """PIN hashes of every inspector, used to keep PINs unique"""
        pass

    @abstractmethod
    async def add(self, user: User) -> User:
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        pass

    @abstractmethod
    async def delete(self, user_id: UserId) -> None:
        pass
