"""Credit and billing ORM Models"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, Uuid, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship

from ...db.models import Base
from ...domain.enums import PurchaseStatus, PaymentGateway
from .types import JsonDocument


class CreditPackageModel(Base):
    __tablename__ = 'credit_packages'

    id = Column(Uuid, primary_key=True, default=uuid4)
    credits = Column(Integer, nullable=False)
    price = Column(Integer, nullable=False)  # Rupiah
    discount_pct = Column(Integer, default=0, nullable=False)
    benefits = Column(JsonDocument, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    purchases = relationship('PurchaseModel', back_populates='package')


class PurchaseModel(Base):
    __tablename__ = 'purchases'

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    package_id = Column(Uuid, ForeignKey('credit_packages.id'), nullable=False)
    amount = Column(Integer, nullable=False)
    status = Column(SQLEnum(PurchaseStatus, name='purchase_status'), default=PurchaseStatus.PENDING, nullable=False)
    gateway = Column(SQLEnum(PaymentGateway, name='payment_gateway'), default=PaymentGateway.XENDIT, nullable=False)
    ext_invoice_id = Column(String, unique=True, nullable=True, index=True)
    payment_url = Column(String, nullable=True)
    paid_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    package = relationship('CreditPackageModel', back_populates='purchases')


class CreditConsumptionModel(Base):
    __tablename__ = 'credit_consumptions'

    id = Column(Uuid, primary_key=True, default=uuid4)
    unique_key = Column(String, unique=True, nullable=False)  # "{user_id}:{inspection_id}"
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    inspection_id = Column(Uuid, ForeignKey('inspections.id', ondelete='CASCADE'), nullable=False, index=True)
    cost = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class WebhookEventModel(Base):
    __tablename__ = 'webhook_events'

    id = Column(Uuid, primary_key=True, default=uuid4)
    dedupe_key = Column(String, unique=True, nullable=False)
    gateway = Column(String, nullable=False)
    ext_invoice_id = Column(String, nullable=True, index=True)
    event_type = Column(String, nullable=True)
    payload = Column(JsonDocument, nullable=True)
    headers = Column(JsonDocument, nullable=True)
    payload_hash = Column(String(64), nullable=True)
    attempts = Column(Integer, default=1, nullable=False)
    processed_at = Column(DateTime, nullable=True)
    result = Column(String, nullable=True)
    error = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
