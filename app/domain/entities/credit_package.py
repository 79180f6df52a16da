"""Credit package entity"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..value_objects.entity_ids import CreditPackageId
from ..exceptions import BadRequestError


@dataclass
class CreditPackage:
    id: CreditPackageId
    credits: int
    price: int
    discount_pct: int = 0
    benefits: Optional[Dict[str, Any]] = None
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        self._validate()

    def _validate(self) -> None:
        if self.credits < 1:
            raise BadRequestError("credits must not be less than 1")
        if self.price < 0:
            raise BadRequestError("price must not be less than 0")
        if not 0 <= self.discount_pct <= 100:
            raise BadRequestError("discount_pct must be between 0 and 100")

    @classmethod
    def create(
        cls,
        credits: int,
        price: int,
        discount_pct: int = 0,
        benefits: Optional[Dict[str, Any]] = None,
        is_active: bool = True,
    ) -> 'CreditPackage':
        now = datetime.utcnow()
        return cls(
            id=CreditPackageId.generate(),
            credits=credits,
            price=price,
            discount_pct=discount_pct,
            benefits=benefits,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )

    def apply_update(self, changes: Dict[str, Any]) -> None:
        """Business logic: partial update, at least one field required"""
        if not changes:
            raise BadRequestError("No fields provided for update")
        for name, value in changes.items():
            setattr(self, name, value)
        self._validate()
        self.updated_at = datetime.utcnow()

    def set_active(self, is_active: bool) -> None:
        self.is_active = is_active
        self.updated_at = datetime.utcnow()
