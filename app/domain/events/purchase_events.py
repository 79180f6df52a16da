"""Purchase domain events"""

from dataclasses import dataclass
from datetime import datetime

from ..value_objects.entity_ids import PurchaseId, UserId


@dataclass(frozen=True)
class PurchasePaid:
    purchase_id: PurchaseId
    user_id: UserId
    credits_granted: int
    paid_at: datetime
