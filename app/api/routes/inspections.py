"""Inspection routes: lifecycle, photos and change log"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status

from ...api.dependencies import (
    get_unit_of_work,
    get_current_user,
    require_roles,
    get_storage_service,
    get_report_service,
    get_blockchain_service,
)
from ...application.use_cases.inspection_use_cases import (
    CreateInspectionUseCase,
    UpdateInspectionUseCase,
    InspectionQueryUseCase,
    ApproveInspectionUseCase,
    InspectionActivationUseCase,
    ChangeLogUseCase,
)
from ...application.use_cases.archive_inspection import ArchiveInspectionUseCase
from ...application.use_cases.photo_use_cases import PhotoUseCase, UploadedPhoto
from ...application.dtos.inspection_dtos import (
    CreateInspectionDto,
    UpdateInspectionDto,
    CreatedResponse,
    UpdateInspectionResponse,
    InspectionDto,
    PhotoDto,
    ChangeLogDto,
    LatestArchivedDto,
)
from ...domain.entities.user import User
from ...domain.enums import InspectionStatus, PhotoType, UserRole
from ...domain.exceptions import BadRequestError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import InspectionId, PhotoId
from ...infrastructure.external_services.backblaze_service import BackblazeService
from ...infrastructure.external_services.blockchain_service import BlockchainService
from ...infrastructure.external_services.report_pdf_service import ReportPdfService

router = APIRouter()

allow_submit = require_roles(UserRole.ADMIN, UserRole.INSPECTOR)
allow_review = require_roles(UserRole.ADMIN, UserRole.REVIEWER)
allow_admin = require_roles(UserRole.ADMIN)


async def _read_upload(upload: UploadFile) -> UploadedPhoto:
    return UploadedPhoto(data=await upload.read(), filename=upload.filename, content_type=upload.content_type)


def _parse_flag(value: Optional[str]) -> Optional[bool]:
    if value is None or value == "":
        return None
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise BadRequestError("needAttention must be 'true' or 'false'")


@router.post("/", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_inspection(
    request: CreateInspectionDto,
    current_user: User = Depends(allow_submit),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Submit a new inspection for review"""
    return await CreateInspectionUseCase(unit_of_work).execute(request, current_user)


@router.get("/", response_model=List[InspectionDto])
async def list_inspections(
    status_filter: Optional[InspectionStatus] = Query(default=None, alias="status"),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """List inspections visible to the caller, newest first"""
    return await InspectionQueryUseCase(unit_of_work).list(current_user.role, status_filter)


@router.get("/search", response_model=InspectionDto)
async def search_by_vehicle_number(
    vehicle_number: str = Query(...),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Newest inspection for a plate number, ignoring case and spaces"""
    return await InspectionQueryUseCase(unit_of_work).search_by_plate(vehicle_number)


@router.get("/latest-archived", response_model=List[LatestArchivedDto])
async def latest_archived(unit_of_work: IUnitOfWork = Depends(get_unit_of_work)):
    return await InspectionQueryUseCase(unit_of_work).latest_archived()


@router.get("/{inspection_id}", response_model=InspectionDto)
async def get_inspection(
    inspection_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await InspectionQueryUseCase(unit_of_work).get(InspectionId(inspection_id), current_user.role)


@router.put("/{inspection_id}", response_model=UpdateInspectionResponse)
async def update_inspection(
    inspection_id: UUID,
    request: UpdateInspectionDto,
    current_user: User = Depends(allow_review),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Log proposed changes; they are applied when the inspection is approved"""
    return await UpdateInspectionUseCase(unit_of_work).execute(
        InspectionId(inspection_id), request, current_user
    )


@router.patch("/{inspection_id}/approve", response_model=InspectionDto)
async def approve_inspection(
    inspection_id: UUID,
    current_user: User = Depends(allow_review),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await ApproveInspectionUseCase(unit_of_work).execute(InspectionId(inspection_id), current_user)


@router.put("/{inspection_id}/archive", response_model=InspectionDto)
async def archive_inspection(
    inspection_id: UUID,
    current_user: User = Depends(allow_review),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    report_service: ReportPdfService = Depends(get_report_service),
    blockchain_service: BlockchainService = Depends(get_blockchain_service),
):
    """Render the report PDFs and mint the inspection NFT"""
    use_case = ArchiveInspectionUseCase(unit_of_work, report_service, blockchain_service)
    return await use_case.execute(InspectionId(inspection_id))


@router.patch("/{inspection_id}/deactivate", response_model=InspectionDto)
async def deactivate_inspection(
    inspection_id: UUID,
    current_user: User = Depends(allow_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await InspectionActivationUseCase(unit_of_work).deactivate(InspectionId(inspection_id))


@router.patch("/{inspection_id}/activate", response_model=InspectionDto)
async def activate_inspection(
    inspection_id: UUID,
    current_user: User = Depends(allow_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await InspectionActivationUseCase(unit_of_work).activate(InspectionId(inspection_id))


# Change log

@router.get("/{inspection_id}/changelog", response_model=List[ChangeLogDto])
async def get_change_log(
    inspection_id: UUID,
    current_user: User = Depends(allow_review),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Latest pending change for each field"""
    return await ChangeLogUseCase(unit_of_work).latest(InspectionId(inspection_id))


@router.delete("/{inspection_id}/changelog/{changelog_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_change_log(
    inspection_id: UUID,
    changelog_id: UUID,
    current_user: User = Depends(allow_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    await ChangeLogUseCase(unit_of_work).delete(InspectionId(inspection_id), str(changelog_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Photos

async def _add_photos(
    photo_type: PhotoType,
    inspection_id: UUID,
    photos: Optional[List[UploadFile]],
    metadata: Optional[str],
    unit_of_work: IUnitOfWork,
    storage: BackblazeService,
) -> List[PhotoDto]:
    files = [await _read_upload(upload) for upload in (photos or [])]
    return await PhotoUseCase(unit_of_work, storage).add_batch(
        InspectionId(inspection_id), photo_type, files, metadata
    )


@router.post("/{inspection_id}/photos/fixed", response_model=List[PhotoDto], status_code=status.HTTP_201_CREATED)
async def add_fixed_photos(
    inspection_id: UUID,
    photos: Optional[List[UploadFile]] = File(default=None),
    metadata: Optional[str] = Form(default=None),
    current_user: User = Depends(allow_submit),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    storage: BackblazeService = Depends(get_storage_service),
):
    return await _add_photos(PhotoType.FIXED, inspection_id, photos, metadata, unit_of_work, storage)


@router.post("/{inspection_id}/photos/dynamic", response_model=List[PhotoDto], status_code=status.HTTP_201_CREATED)
async def add_dynamic_photos(
    inspection_id: UUID,
    photos: Optional[List[UploadFile]] = File(default=None),
    metadata: Optional[str] = Form(default=None),
    current_user: User = Depends(allow_submit),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    storage: BackblazeService = Depends(get_storage_service),
):
    return await _add_photos(PhotoType.DYNAMIC, inspection_id, photos, metadata, unit_of_work, storage)


@router.post("/{inspection_id}/photos/document", response_model=List[PhotoDto], status_code=status.HTTP_201_CREATED)
async def add_document_photos(
    inspection_id: UUID,
    photos: Optional[List[UploadFile]] = File(default=None),
    metadata: Optional[str] = Form(default=None),
    current_user: User = Depends(allow_submit),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    storage: BackblazeService = Depends(get_storage_service),
):
    return await _add_photos(PhotoType.DOCUMENT, inspection_id, photos, metadata, unit_of_work, storage)


@router.get("/{inspection_id}/photos", response_model=List[PhotoDto])
async def list_photos(
    inspection_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    storage: BackblazeService = Depends(get_storage_service),
):
    return await PhotoUseCase(unit_of_work, storage).list(InspectionId(inspection_id))


@router.put("/{inspection_id}/photos/{photo_id}", response_model=PhotoDto)
async def update_photo(
    inspection_id: UUID,
    photo_id: UUID,
    label: Optional[str] = Form(default=None),
    needAttention: Optional[str] = Form(default=None),
    photo: Optional[UploadFile] = File(default=None),
    current_user: User = Depends(allow_submit),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    storage: BackblazeService = Depends(get_storage_service),
):
    """Update label or attention flag, optionally replacing the file"""
    new_file = await _read_upload(photo) if photo is not None and photo.filename else None
    return await PhotoUseCase(unit_of_work, storage).update(
        InspectionId(inspection_id),
        PhotoId(photo_id),
        label=label or None,
        need_attention=_parse_flag(needAttention),
        new_file=new_file,
    )


@router.delete("/{inspection_id}/photos/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_photo(
    inspection_id: UUID,
    photo_id: UUID,
    current_user: User = Depends(allow_submit),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    storage: BackblazeService = Depends(get_storage_service),
):
    await PhotoUseCase(unit_of_work, storage).delete(InspectionId(inspection_id), PhotoId(photo_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
