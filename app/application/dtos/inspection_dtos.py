"""Inspection, photo and change log DTOs"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime
from uuid import UUID

from ...domain.enums import InspectionStatus, PhotoType


class CreateInspectionDto(BaseModel):
    """DTO for submitting a new inspection"""
    vehicle_plate_number: Optional[str] = Field(default=None, max_length=15)
    inspection_date: Optional[str] = None
    overall_rating: Optional[str] = None
    identity_details: Dict[str, Any]
    vehicle_data: Optional[Dict[str, Any]] = None
    equipment_checklist: Optional[Dict[str, Any]] = None
    inspection_summary: Optional[Dict[str, Any]] = None
    detailed_assessment: Optional[Dict[str, Any]] = None
    body_paint_thickness: Optional[Dict[str, Any]] = None
    notes_font_sizes: Optional[Dict[str, Any]] = None
    inspector_id: Optional[UUID] = None


class UpdateInspectionDto(BaseModel):
    """Proposed edits; they are logged and applied on approval"""
    vehicle_plate_number: Optional[str] = Field(default=None, max_length=15)
    inspection_date: Optional[str] = None
    overall_rating: Optional[str] = None
    identity_details: Optional[Dict[str, Any]] = None
    vehicle_data: Optional[Dict[str, Any]] = None
    equipment_checklist: Optional[Dict[str, Any]] = None
    inspection_summary: Optional[Dict[str, Any]] = None
    detailed_assessment: Optional[Dict[str, Any]] = None
    body_paint_thickness: Optional[Dict[str, Any]] = None
    notes_font_sizes: Optional[Dict[str, Any]] = None


class CreatedResponse(BaseModel):
    id: UUID
    pretty_id: Optional[str] = None


class UpdateInspectionResponse(BaseModel):
    message: str
    changes: int


class PhotoDto(BaseModel):
    id: UUID
    inspection_id: UUID
    type: PhotoType
    path: str
    label: str
    original_label: Optional[str] = None
    category: Optional[str] = None
    is_mandatory: bool = False
    need_attention: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, photo) -> 'PhotoDto':
        return cls(
            id=photo.id.value,
            inspection_id=photo.inspection_id.value,
            type=photo.type,
            path=photo.path,
            label=photo.label,
            original_label=photo.original_label,
            category=photo.category,
            is_mandatory=photo.is_mandatory,
            need_attention=photo.need_attention,
            created_at=photo.created_at,
            updated_at=photo.updated_at,
        )


class InspectionDto(BaseModel):
    """Full inspection response"""
    id: UUID
    pretty_id: str
    status: InspectionStatus
    inspector_id: Optional[UUID] = None
    reviewer_id: Optional[UUID] = None
    branch_city_id: Optional[UUID] = None
    vehicle_plate_number: Optional[str] = None
    inspection_date: Optional[datetime] = None
    overall_rating: Optional[str] = None
    identity_details: Optional[Dict[str, Any]] = None
    vehicle_data: Optional[Dict[str, Any]] = None
    equipment_checklist: Optional[Dict[str, Any]] = None
    inspection_summary: Optional[Dict[str, Any]] = None
    detailed_assessment: Optional[Dict[str, Any]] = None
    body_paint_thickness: Optional[Dict[str, Any]] = None
    notes_font_sizes: Optional[Dict[str, Any]] = None
    url_pdf: Optional[str] = None
    url_pdf_no_docs: Optional[str] = None
    pdf_file_hash: Optional[str] = None
    pdf_file_hash_no_docs: Optional[str] = None
    nft_asset_id: Optional[str] = None
    blockchain_tx_hash: Optional[str] = None
    archived_at: Optional[datetime] = None
    deactivated_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    photos: List[PhotoDto] = []

    @classmethod
    def from_entity(cls, inspection, photos=None) -> 'InspectionDto':
        """Convert domain entity (and optionally its photos) to DTO"""
        return cls(
            id=inspection.id.value,
            pretty_id=inspection.pretty_id,
            status=inspection.status,
            inspector_id=inspection.inspector_id.value if inspection.inspector_id else None,
            reviewer_id=inspection.reviewer_id.value if inspection.reviewer_id else None,
            branch_city_id=inspection.branch_city_id.value if inspection.branch_city_id else None,
            vehicle_plate_number=inspection.vehicle_plate_number,
            inspection_date=inspection.inspection_date,
            overall_rating=inspection.overall_rating,
            identity_details=inspection.identity_details,
            vehicle_data=inspection.vehicle_data,
            equipment_checklist=inspection.equipment_checklist,
            inspection_summary=inspection.inspection_summary,
            detailed_assessment=inspection.detailed_assessment,
            body_paint_thickness=inspection.body_paint_thickness,
            notes_font_sizes=inspection.notes_font_sizes,
            url_pdf=inspection.url_pdf,
            url_pdf_no_docs=inspection.url_pdf_no_docs,
            pdf_file_hash=inspection.pdf_file_hash,
            pdf_file_hash_no_docs=inspection.pdf_file_hash_no_docs,
            nft_asset_id=inspection.nft_asset_id,
            blockchain_tx_hash=inspection.blockchain_tx_hash,
            archived_at=inspection.archived_at,
            deactivated_at=inspection.deactivated_at,
            created_at=inspection.created_at,
            updated_at=inspection.updated_at,
            photos=[PhotoDto.from_entity(photo) for photo in (photos or [])],
        )


class LatestArchivedDto(BaseModel):
    id: UUID
    pretty_id: str
    vehicle_plate_number: Optional[str] = None
    merek_kendaraan: Optional[str] = None
    tipe_kendaraan: Optional[str] = None
    photo: Optional[PhotoDto] = None


class PhotoMetadataItem(BaseModel):
    """One entry of the JSON metadata array sent with a photo batch"""
    label: Optional[str] = None
    needAttention: Optional[bool] = None
    category: Optional[str] = None
    isMandatory: Optional[bool] = None


class ChangeLogDto(BaseModel):
    id: UUID
    inspection_id: UUID
    changed_by_user_id: UUID
    field_name: str
    old_value: Any = None
    new_value: Any = None
    changed_at: datetime

    @classmethod
    def from_entity(cls, log) -> 'ChangeLogDto':
        return cls(
            id=UUID(log.id),
            inspection_id=log.inspection_id.value,
            changed_by_user_id=log.changed_by_user_id.value,
            field_name=log.field_name,
            old_value=log.old_value,
            new_value=log.new_value,
            changed_at=log.changed_at,
        )


class BranchCityDto(BaseModel):
    id: UUID
    city: str
    code: str
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, branch) -> 'BranchCityDto':
        return cls(
            id=branch.id.value,
            city=branch.city,
            code=branch.code,
            is_active=branch.is_active,
            created_at=branch.created_at,
            updated_at=branch.updated_at,
        )


class CreateBranchCityDto(BaseModel):
    city: str = Field(..., min_length=3)


class UpdateBranchCityDto(BaseModel):
    city: Optional[str] = Field(default=None, min_length=3)
