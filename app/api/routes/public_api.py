"""Unauthenticated public routes"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...api.dependencies import get_unit_of_work
from ...application.use_cases.health_check import HealthCheckUseCase
from ...application.use_cases.inspection_use_cases import InspectionQueryUseCase, ChangeLogUseCase
from ...application.use_cases.user_admin_use_cases import ListPublicInspectorsUseCase
from ...application.dtos.inspection_dtos import InspectionDto, LatestArchivedDto, ChangeLogDto
from ...application.dtos.user_dtos import PublicInspectorDto
from ...db.database import get_db
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import InspectionId

router = APIRouter()


@router.get("/health")
def health(db: Session = Depends(get_db)):
    """Database reachability, cached briefly"""
    return HealthCheckUseCase(db).execute()


@router.get("/users/inspectors", response_model=List[PublicInspectorDto])
async def list_inspectors(unit_of_work: IUnitOfWork = Depends(get_unit_of_work)):
    return await ListPublicInspectorsUseCase(unit_of_work).execute()


@router.get("/latest-archived", response_model=List[LatestArchivedDto])
async def latest_archived(unit_of_work: IUnitOfWork = Depends(get_unit_of_work)):
    return await InspectionQueryUseCase(unit_of_work).latest_archived()


@router.get("/inspections/{inspection_id}", response_model=InspectionDto)
async def get_archived_inspection(
    inspection_id: UUID,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await InspectionQueryUseCase(unit_of_work).get_archived(InspectionId(inspection_id))


@router.get("/inspections/{inspection_id}/no-docs", response_model=InspectionDto)
async def get_archived_inspection_without_documents(
    inspection_id: UUID,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Same as the public inspection view with document photos removed"""
    return await InspectionQueryUseCase(unit_of_work).get_archived(
        InspectionId(inspection_id), include_documents=False
    )


@router.get("/inspections/{inspection_id}/changelog", response_model=List[ChangeLogDto])
async def get_public_change_log(
    inspection_id: UUID,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await ChangeLogUseCase(unit_of_work).latest(InspectionId(inspection_id))
