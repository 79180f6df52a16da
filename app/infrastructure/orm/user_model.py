"""User ORM Model"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship

from ...db.models import Base
from ...domain.enums import UserRole


class UserModel(Base):
    __tablename__ = 'users'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    email = Column(String, unique=True, index=True, nullable=True)
    username = Column(String, unique=True, index=True, nullable=True)
    name = Column(String, nullable=True)
    password = Column(String, nullable=True)
    pin = Column(String, nullable=True)
    google_id = Column(String, unique=True, nullable=True)
    wallet_address = Column(String, unique=True, nullable=True)
    role = Column(SQLEnum(UserRole, name='role'), default=UserRole.CUSTOMER, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    credits = Column(Integer, default=0, nullable=False)
    refresh_token_hash = Column(String, nullable=True)
    inspection_branch_city_id = Column(
        Uuid, ForeignKey('inspection_branch_city.id', ondelete='SET NULL'), nullable=True
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    inspection_branch_city = relationship('InspectionBranchCityModel', back_populates='inspectors')
    inspections = relationship(
        'InspectionModel', back_populates='inspector', foreign_keys='InspectionModel.inspector_id'
    )


class BlacklistedTokenModel(Base):
    __tablename__ = 'blacklisted_tokens'

    id = Column(Uuid, primary_key=True, default=uuid4)
    token = Column(String, unique=True, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
