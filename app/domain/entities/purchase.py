"""Purchase entity with payment lifecycle"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List

from ..value_objects.entity_ids import PurchaseId, UserId, CreditPackageId
from ..enums import PurchaseStatus, PaymentGateway
from ..events.purchase_events import PurchasePaid


@dataclass
class Purchase:
    id: PurchaseId
    user_id: UserId
    package_id: CreditPackageId
    amount: int
    status: PurchaseStatus = PurchaseStatus.PENDING
    gateway: PaymentGateway = PaymentGateway.XENDIT
    ext_invoice_id: Optional[str] = None
    payment_url: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    # Domain events
    _events: List = field(default_factory=list, init=False)

    @classmethod
    def create(cls, user_id: UserId, package_id: CreditPackageId, amount: int) -> 'Purchase':
        """Factory method for a pending checkout"""
        now = datetime.utcnow()
        return cls(
            id=PurchaseId.generate(),
            user_id=user_id,
            package_id=package_id,
            amount=amount,
            status=PurchaseStatus.PENDING,
            gateway=PaymentGateway.XENDIT,
            # Placeholder until the gateway returns the real invoice id
            ext_invoice_id=f"temp_{int(now.timestamp() * 1000)}",
            created_at=now,
            updated_at=now,
        )

    def attach_invoice(self, invoice_id: str, payment_url: Optional[str]) -> None:
        self.ext_invoice_id = invoice_id
        self.payment_url = payment_url
        self.updated_at = datetime.utcnow()

    @property
    def is_paid(self) -> bool:
        return self.status == PurchaseStatus.PAID

    def mark_paid(self, credits_granted: int) -> None:
        """Business logic: pending purchase becomes paid"""
        if self.is_paid:
            raise ValueError("Purchase already paid")
        now = datetime.utcnow()
        self.status = PurchaseStatus.PAID
        self.paid_at = now
        self.updated_at = now
        self._events.append(PurchasePaid(
            purchase_id=self.id,
            user_id=self.user_id,
            credits_granted=credits_granted,
            paid_at=now,
        ))

    def get_events(self) -> List:
        """Get and clear domain events"""
        events = self._events.copy()
        self._events.clear()
        return events
