"""Inspection ORM Models"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    Column, Integer, String, DateTime, Date, Boolean, ForeignKey, Uuid,
    UniqueConstraint, Enum as SQLEnum,
)
from sqlalchemy.orm import relationship

from ...db.models import Base
from ...domain.enums import InspectionStatus, PhotoType, TargetPeriod
from .types import JsonDocument


class InspectionBranchCityModel(Base):
    __tablename__ = 'inspection_branch_city'

    id = Column(Uuid, primary_key=True, default=uuid4)
    city = Column(String, unique=True, nullable=False)
    code = Column(String(3), unique=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    inspections = relationship('InspectionModel', back_populates='branch_city')
    inspectors = relationship('UserModel', back_populates='inspection_branch_city')


class InspectionModel(Base):
    __tablename__ = 'inspections'

    id = Column(Uuid, primary_key=True, default=uuid4)
    pretty_id = Column(String, unique=True, nullable=False, index=True)
    inspector_id = Column(Uuid, ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    reviewer_id = Column(Uuid, ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    branch_city_id = Column(Uuid, ForeignKey('inspection_branch_city.id', ondelete='SET NULL'), nullable=True)

    vehicle_plate_number = Column(String(15), nullable=True, index=True)
    inspection_date = Column(DateTime, nullable=True)
    overall_rating = Column(String, nullable=True)

    # Form sections
    identity_details = Column(JsonDocument, nullable=True)
    vehicle_data = Column(JsonDocument, nullable=True)
    equipment_checklist = Column(JsonDocument, nullable=True)
    inspection_summary = Column(JsonDocument, nullable=True)
    detailed_assessment = Column(JsonDocument, nullable=True)
    body_paint_thickness = Column(JsonDocument, nullable=True)
    notes_font_sizes = Column(JsonDocument, nullable=True)

    status = Column(
        SQLEnum(InspectionStatus, name='inspection_status'),
        default=InspectionStatus.NEED_REVIEW, nullable=False, index=True,
    )

    # Report and blockchain
    url_pdf = Column(String(255), nullable=True)
    url_pdf_no_docs = Column(String(255), nullable=True)
    pdf_file_hash = Column(String(255), nullable=True)
    pdf_file_hash_no_docs = Column(String(255), nullable=True)
    nft_asset_id = Column(String(255), unique=True, nullable=True)
    blockchain_tx_hash = Column(String(255), unique=True, nullable=True)

    archived_at = Column(DateTime, nullable=True)
    deactivated_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    inspector = relationship('UserModel', foreign_keys=[inspector_id], back_populates='inspections')
    reviewer = relationship('UserModel', foreign_keys=[reviewer_id])
    branch_city = relationship('InspectionBranchCityModel', back_populates='inspections')
    photos = relationship(
        'InspectionPhotoModel', back_populates='inspection',
        cascade='all, delete-orphan', order_by='InspectionPhotoModel.created_at',
    )
    change_logs = relationship('InspectionChangeLogModel', back_populates='inspection', cascade='all, delete-orphan')


class InspectionPhotoModel(Base):
    __tablename__ = 'inspection_photos'

    id = Column(Uuid, primary_key=True, default=uuid4)
    inspection_id = Column(Uuid, ForeignKey('inspections.id', ondelete='CASCADE'), nullable=False, index=True)
    type = Column(SQLEnum(PhotoType, name='photo_type'), nullable=False)
    path = Column(String, nullable=False)
    label = Column(String, nullable=False)
    original_label = Column(String, nullable=True)
    category = Column(String, nullable=True)
    is_mandatory = Column(Boolean, default=False, nullable=False)
    need_attention = Column(Boolean, default=False, nullable=False)
    backblaze_file_id = Column(String, nullable=True)
    backblaze_file_name = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    inspection = relationship('InspectionModel', back_populates='photos')


class InspectionChangeLogModel(Base):
    __tablename__ = 'inspection_change_logs'

    id = Column(Uuid, primary_key=True, default=uuid4)
    inspection_id = Column(Uuid, ForeignKey('inspections.id', ondelete='CASCADE'), nullable=False, index=True)
    changed_by_user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    field_name = Column(String, nullable=False)
    old_value = Column(JsonDocument, nullable=True)
    new_value = Column(JsonDocument, nullable=True)
    changed_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    inspection = relationship('InspectionModel', back_populates='change_logs')


class InspectionSequenceModel(Base):
    __tablename__ = 'inspection_sequences'

    branch_code = Column(String(3), primary_key=True)
    date_prefix = Column(String(8), primary_key=True)
    next_sequence = Column(Integer, default=1, nullable=False)


class InspectionTargetModel(Base):
    __tablename__ = 'inspection_targets'
    __table_args__ = (UniqueConstraint('period', 'target_date', name='uq_inspection_targets_period_date'),)

    id = Column(Uuid, primary_key=True, default=uuid4)
    target_value = Column(Integer, nullable=False)
    period = Column(SQLEnum(TargetPeriod, name='target_period'), nullable=False)
    target_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
