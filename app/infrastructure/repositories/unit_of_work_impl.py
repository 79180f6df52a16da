"""Unit of Work implementation with async context support"""

from sqlalchemy.orm import Session

from ...domain.repositories.unit_of_work import IUnitOfWork
from .user_repository_impl import UserRepositoryImpl
from .inspection_repository_impl import InspectionRepositoryImpl
from .change_log_repository_impl import ChangeLogRepositoryImpl
from .photo_repository_impl import PhotoRepositoryImpl
from .branch_city_repository_impl import BranchCityRepositoryImpl
from .inspection_target_repository_impl import InspectionTargetRepositoryImpl
from .credit_package_repository_impl import CreditPackageRepositoryImpl
from .purchase_repository_impl import PurchaseRepositoryImpl
from .credit_consumption_repository_impl import CreditConsumptionRepositoryImpl
from .webhook_event_repository_impl import WebhookEventRepositoryImpl
from .token_blacklist_repository_impl import TokenBlacklistRepositoryImpl


class UnitOfWorkImpl(IUnitOfWork):

    def __init__(self, session: Session):
        self.session = session
        self.users = UserRepositoryImpl(session)
        self.inspections = InspectionRepositoryImpl(session)
        self.change_logs = ChangeLogRepositoryImpl(session)
        self.photos = PhotoRepositoryImpl(session)
        self.branches = BranchCityRepositoryImpl(session)
        self.targets = InspectionTargetRepositoryImpl(session)
        self.credit_packages = CreditPackageRepositoryImpl(session)
        self.purchases = PurchaseRepositoryImpl(session)
        self.credit_consumptions = CreditConsumptionRepositoryImpl(session)
        self.webhook_events = WebhookEventRepositoryImpl(session)
        self.token_blacklist = TokenBlacklistRepositoryImpl(session)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        # One instance may span several blocks per request; each clean exit commits
        if exc_type:
            await self.rollback()
        else:
            await self.commit()

    async def commit(self) -> None:
        """Commit transaction"""
        try:
            self.session.commit()
        except Exception:
            self.rollback_sync()
            raise

    async def rollback(self) -> None:
        """Rollback transaction"""
        self.rollback_sync()

    def rollback_sync(self) -> None:
        """Synchronous rollback helper"""
        self.session.rollback()
