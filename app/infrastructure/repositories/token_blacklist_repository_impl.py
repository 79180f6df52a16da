"""Blacklisted token repository implementation"""

from datetime import datetime
from sqlalchemy.orm import Session

from ...domain.repositories.token_blacklist_repository import ITokenBlacklistRepository
from ..orm.user_model import BlacklistedTokenModel


class TokenBlacklistRepositoryImpl(ITokenBlacklistRepository):

    def __init__(self, session: Session):
        self.session = session

    async def add(self, token: str, expires_at: datetime) -> None:
        exists = self.session.query(BlacklistedTokenModel.id).filter(BlacklistedTokenModel.token == token).first()
        if exists is None:
            self.session.add(BlacklistedTokenModel(token=token, expires_at=expires_at))
            self.session.flush()

    async def is_blacklisted(self, token: str) -> bool:
        return (
            self.session.query(BlacklistedTokenModel.id)
            .filter(BlacklistedTokenModel.token == token, BlacklistedTokenModel.expires_at > datetime.utcnow())
            .first()
            is not None
        )

    async def purge_expired(self, now: datetime) -> int:
        deleted = (
            self.session.query(BlacklistedTokenModel)
            .filter(BlacklistedTokenModel.expires_at <= now)
            .delete(synchronize_session=False)
        )
        self.session.flush()
        return deleted
