"""Inspection lifecycle use cases"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from ...domain.entities.inspection import Inspection, InspectionChangeLog, normalize_inspection_date
from ...domain.entities.branch_city import BranchCity
from ...domain.entities.user import User
from ...domain.enums import InspectionStatus, UserRole, STAFF_REVIEW_ROLES
from ...domain.exceptions import BadRequestError, NotFoundError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import InspectionId, UserId, BranchCityId
from ...application.dtos.inspection_dtos import (
    CreateInspectionDto,
    UpdateInspectionDto,
    CreatedResponse,
    UpdateInspectionResponse,
    InspectionDto,
    LatestArchivedDto,
    PhotoDto,
    ChangeLogDto,
)

logger = logging.getLogger(__name__)

FRONT_VIEW_LABEL = "Tampak Depan"


def parse_inspection_date(value: Optional[str]) -> datetime:
    """ISO date or datetime as naive UTC; now when absent"""
    if not value:
        return datetime.utcnow()
    return normalize_inspection_date(value)


def format_pretty_id(branch_code: str, inspection_date: datetime, sequence: int) -> str:
    return f"{branch_code}-{inspection_date.strftime('%d%m%Y')}-{sequence:03d}"


def latest_change_per_field(logs: List[InspectionChangeLog]) -> List[InspectionChangeLog]:
    """Keep the newest entry for each field name, newest first"""
    latest: Dict[str, InspectionChangeLog] = {}
    for log in sorted(logs, key=lambda entry: entry.changed_at, reverse=True):
        latest.setdefault(log.field_name, log)
    return list(latest.values())


async def load_inspection(unit_of_work: IUnitOfWork, inspection_id: InspectionId) -> Inspection:
    inspection = await unit_of_work.inspections.get_by_id(inspection_id)
    if not inspection:
        raise NotFoundError(f"Inspection with ID {inspection_id} not found")
    return inspection


async def inspection_with_photos(unit_of_work: IUnitOfWork, inspection: Inspection) -> InspectionDto:
    photos = await unit_of_work.photos.list_for_inspection(inspection.id)
    return InspectionDto.from_entity(inspection, photos)


class CreateInspectionUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def _resolve_branch(self, identity_details: Dict[str, Any]) -> BranchCity:
        """Match identityDetails.cabangInspeksi by id, then city name, then code"""
        raw = identity_details.get("cabangInspeksi") if identity_details else None
        if isinstance(raw, str) and raw.strip():
            value = raw.strip()
            branch = None
            try:
                branch = await self.unit_of_work.branches.get_by_id(BranchCityId(UUID(value)))
            except ValueError:
                pass
            if not branch:
                branch = await self.unit_of_work.branches.get_by_city(value)
            if not branch and len(value) >= 3:
                branch = await self.unit_of_work.branches.get_by_code(value[:3].upper())
            if branch:
                return branch
        raise BadRequestError("Cannot determine branch code from identityDetails.")

    async def execute(self, request: CreateInspectionDto, current_user: User) -> CreatedResponse:
        inspection_date = parse_inspection_date(request.inspection_date)
        inspector_id = UserId(request.inspector_id) if request.inspector_id else current_user.id

        async with self.unit_of_work:
            branch = await self._resolve_branch(request.identity_details)

            date_prefix = inspection_date.strftime("%d%m%Y")
            sequence = await self.unit_of_work.inspections.next_sequence(branch.code, date_prefix)
            pretty_id = format_pretty_id(branch.code, inspection_date, sequence)

            documents = request.model_dump(
                include={
                    "vehicle_plate_number",
                    "overall_rating",
                    "identity_details",
                    "vehicle_data",
                    "equipment_checklist",
                    "inspection_summary",
                    "detailed_assessment",
                    "body_paint_thickness",
                    "notes_font_sizes",
                }
            )
            inspection = Inspection.create(
                pretty_id=pretty_id,
                inspector_id=inspector_id,
                branch_city_id=branch.id,
                inspection_date=inspection_date,
                **documents,
            )
            await self.unit_of_work.inspections.add(inspection)

            logger.info("Inspection %s created as %s", inspection.id, pretty_id)
            return CreatedResponse(id=inspection.id.value, pretty_id=pretty_id)


class UpdateInspectionUseCase:
    """Record proposed edits as change logs; the inspection itself is untouched"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(
        self, inspection_id: InspectionId, request: UpdateInspectionDto, current_user: User
    ) -> UpdateInspectionResponse:
        updates = request.model_dump(exclude_unset=True)

        async with self.unit_of_work:
            inspection = await load_inspection(self.unit_of_work, inspection_id)
            changes = inspection.diff_changes(updates)

            for field_name, old_value, new_value in changes:
                await self.unit_of_work.change_logs.add(InspectionChangeLog(
                    inspection_id=inspection.id,
                    changed_by_user_id=current_user.id,
                    field_name=field_name,
                    old_value=old_value,
                    new_value=new_value,
                ))

        if not changes:
            return UpdateInspectionResponse(message="No changes detected", changes=0)
        return UpdateInspectionResponse(
            message=f"{len(changes)} change(s) recorded for review", changes=len(changes)
        )


class InspectionQueryUseCase:
    """Read access with role-based visibility"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def list(self, role: UserRole, status: Optional[InspectionStatus] = None) -> List[InspectionDto]:
        if role in STAFF_REVIEW_ROLES:
            statuses = [status] if status else None
        else:
            statuses = [InspectionStatus.ARCHIVED]

        async with self.unit_of_work:
            inspections = await self.unit_of_work.inspections.list(statuses)
            return [await inspection_with_photos(self.unit_of_work, i) for i in inspections]

    async def get(self, inspection_id: InspectionId, role: UserRole) -> InspectionDto:
        async with self.unit_of_work:
            inspection = await load_inspection(self.unit_of_work, inspection_id)
            inspection.ensure_visible_to(role)
            return await inspection_with_photos(self.unit_of_work, inspection)

    async def get_archived(self, inspection_id: InspectionId, include_documents: bool = True) -> InspectionDto:
        """Public view: ARCHIVED only, documents optionally stripped"""
        async with self.unit_of_work:
            inspection = await self.unit_of_work.inspections.get_by_id(inspection_id)
            if not inspection or inspection.status != InspectionStatus.ARCHIVED:
                raise NotFoundError(f"Inspection with ID {inspection_id} not found")
            photos = await self.unit_of_work.photos.list_for_inspection(inspection.id)
            if not include_documents:
                photos = [photo for photo in photos if not photo.is_document]
            return InspectionDto.from_entity(inspection, photos)

    async def search_by_plate(self, vehicle_number: str) -> InspectionDto:
        if not vehicle_number or not vehicle_number.strip():
            raise BadRequestError("vehicle_number is required")
        async with self.unit_of_work:
            inspection = await self.unit_of_work.inspections.find_latest_by_plate(vehicle_number)
            if not inspection:
                raise NotFoundError(f"Inspection with vehicle number {vehicle_number} not found")
            return await inspection_with_photos(self.unit_of_work, inspection)

    async def latest_archived(self, limit: int = 5) -> List[LatestArchivedDto]:
        async with self.unit_of_work:
            result = []
            for inspection in await self.unit_of_work.inspections.list_latest_archived(limit):
                photos = await self.unit_of_work.photos.list_for_inspection(inspection.id)
                front = next((p for p in photos if p.label == FRONT_VIEW_LABEL), None)
                vehicle = inspection.vehicle_data or {}
                result.append(LatestArchivedDto(
                    id=inspection.id.value,
                    pretty_id=inspection.pretty_id,
                    vehicle_plate_number=inspection.vehicle_plate_number,
                    merek_kendaraan=vehicle.get("merekKendaraan"),
                    tipe_kendaraan=vehicle.get("tipeKendaraan"),
                    photo=PhotoDto.from_entity(front) if front else None,
                ))
            return result


class ApproveInspectionUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, inspection_id: InspectionId, reviewer: User) -> InspectionDto:
        async with self.unit_of_work:
            inspection = await load_inspection(self.unit_of_work, inspection_id)
            logs = await self.unit_of_work.change_logs.list_for_inspection(inspection.id, newest_first=False)

            inspection.approve(reviewer.id, logs)
            await self.unit_of_work.inspections.update(inspection)
            await self.unit_of_work.change_logs.delete_for_inspection(inspection.id)

            for event in inspection.get_events():
                logger.info("%s: %s", type(event).__name__, event)
            return await inspection_with_photos(self.unit_of_work, inspection)


class InspectionActivationUseCase:
    """Deactivate and reactivate archived inspections"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def deactivate(self, inspection_id: InspectionId) -> InspectionDto:
        async with self.unit_of_work:
            inspection = await load_inspection(self.unit_of_work, inspection_id)
            inspection.deactivate()
            await self.unit_of_work.inspections.update(inspection)
            for event in inspection.get_events():
                logger.info("%s: %s", type(event).__name__, event)
            return await inspection_with_photos(self.unit_of_work, inspection)

    async def activate(self, inspection_id: InspectionId) -> InspectionDto:
        async with self.unit_of_work:
            inspection = await load_inspection(self.unit_of_work, inspection_id)
            inspection.activate()
            await self.unit_of_work.inspections.update(inspection)
            return await inspection_with_photos(self.unit_of_work, inspection)


class ChangeLogUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def latest(self, inspection_id: InspectionId) -> List[ChangeLogDto]:
        async with self.unit_of_work:
            await load_inspection(self.unit_of_work, inspection_id)
            logs = await self.unit_of_work.change_logs.list_for_inspection(inspection_id)
            return [ChangeLogDto.from_entity(log) for log in latest_change_per_field(logs)]

    async def delete(self, inspection_id: InspectionId, changelog_id: str) -> None:
        async with self.unit_of_work:
            log = await self.unit_of_work.change_logs.get_by_id(changelog_id)
            if not log or log.inspection_id != inspection_id:
                raise NotFoundError(
                    f"Change log with ID {changelog_id} not found for inspection {inspection_id}"
                )
            await self.unit_of_work.change_logs.delete(changelog_id)
