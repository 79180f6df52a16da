"""Blacklisted access token interface"""

from abc import ABC, abstractmethod
from datetime import datetime


class ITokenBlacklistRepository(ABC):

    @abstractmethod
    async def add(self, token: str, expires_at: datetime) -> None:
        pass

    @abstractmethod
    async def is_blacklisted(self, token: str) -> bool:
        pass

    @abstractmethod
    async def purge_expired(self, now: datetime) -> int:
        pass
