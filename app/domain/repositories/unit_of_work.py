"""Unit of Work interface for transaction management"""

from abc import ABC, abstractmethod

from .user_repository import IUserRepository
from .inspection_repository import IInspectionRepository
from .change_log_repository import IChangeLogRepository
from .photo_repository import IPhotoRepository
from .branch_city_repository import IBranchCityRepository
from .inspection_target_repository import IInspectionTargetRepository
from .credit_package_repository import ICreditPackageRepository
from .purchase_repository import IPurchaseRepository
from .credit_consumption_repository import ICreditConsumptionRepository
from .webhook_event_repository import IWebhookEventRepository
from .token_blacklist_repository import ITokenBlacklistRepository


class IUnitOfWork(ABC):
    """Unit of Work interface for managing transactions across repositories"""

    users: IUserRepository
    inspections: IInspectionRepository
    change_logs: IChangeLogRepository
    photos: IPhotoRepository
    branches: IBranchCityRepository
    targets: IInspectionTargetRepository
    credit_packages: ICreditPackageRepository
    purchases: IPurchaseRepository
    credit_consumptions: ICreditConsumptionRepository
    webhook_events: IWebhookEventRepository
    token_blacklist: ITokenBlacklistRepository

    @abstractmethod
    async def __aenter__(self):
        """Enter async context"""
        pass

    @abstractmethod
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context"""
        pass

    @abstractmethod
    async def commit(self):
        """Commit transaction"""
        pass

    @abstractmethod
    async def rollback(self):
        """Rollback transaction"""
        pass
