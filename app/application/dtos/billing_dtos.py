"""Credit package, checkout and purchase DTOs"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from datetime import datetime
from uuid import UUID

from ...domain.enums import PurchaseStatus, PaymentGateway


class CreateCreditPackageDto(BaseModel):
    credits: int = Field(..., ge=1)
    price: int = Field(..., ge=0)
    discount_pct: int = Field(default=0, ge=0, le=100)
    benefits: Optional[Dict[str, Any]] = None
    is_active: bool = True


class UpdateCreditPackageDto(BaseModel):
    credits: Optional[int] = Field(default=None, ge=1)
    price: Optional[int] = Field(default=None, ge=0)
    discount_pct: Optional[int] = Field(default=None, ge=0, le=100)
    benefits: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class SetPackageActiveDto(BaseModel):
    is_active: bool


class CreditPackageDto(BaseModel):
    id: UUID
    credits: int
    price: int
    discount_pct: int
    benefits: Optional[Dict[str, Any]] = None
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, package) -> 'CreditPackageDto':
        return cls(
            id=package.id.value,
            credits=package.credits,
            price=package.price,
            discount_pct=package.discount_pct,
            benefits=package.benefits,
            is_active=package.is_active,
            created_at=package.created_at,
            updated_at=package.updated_at,
        )


class CheckoutDto(BaseModel):
    package_id: UUID


class CheckoutResponse(BaseModel):
    purchase_id: UUID
    ext_invoice_id: str
    payment_url: Optional[str] = None


class PurchaseDto(BaseModel):
    id: UUID
    package_id: UUID
    amount: int
    status: PurchaseStatus
    gateway: PaymentGateway
    ext_invoice_id: Optional[str] = None
    payment_url: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, purchase) -> 'PurchaseDto':
        return cls(
            id=purchase.id.value,
            package_id=purchase.package_id.value,
            amount=purchase.amount,
            status=purchase.status,
            gateway=purchase.gateway,
            ext_invoice_id=purchase.ext_invoice_id,
            payment_url=purchase.payment_url,
            paid_at=purchase.paid_at,
            created_at=purchase.created_at,
        )


class CreditBalanceResponse(BaseModel):
    credits: int


class WebhookAck(BaseModel):
    ok: bool
