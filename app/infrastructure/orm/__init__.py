"""Infrastructure ORM Models"""

from .user_model import UserModel, BlacklistedTokenModel
from .inspection_model import (
    InspectionBranchCityModel,
    InspectionModel,
    InspectionPhotoModel,
    InspectionChangeLogModel,
    InspectionSequenceModel,
    InspectionTargetModel,
)
from .billing_model import CreditPackageModel, PurchaseModel, CreditConsumptionModel, WebhookEventModel

__all__ = [
    'UserModel',
    'BlacklistedTokenModel',
    'InspectionBranchCityModel',
    'InspectionModel',
    'InspectionPhotoModel',
    'InspectionChangeLogModel',
    'InspectionSequenceModel',
    'InspectionTargetModel',
    'CreditPackageModel',
    'PurchaseModel',
    'CreditConsumptionModel',
    'WebhookEventModel',
]
