"""Inspection photo use cases backed by Backblaze storage"""

import json
import logging
import os
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ...core.config import settings
from ...domain.entities.photo import Photo
from ...domain.enums import PhotoType
from ...domain.exceptions import BadRequestError, NotFoundError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import InspectionId, PhotoId
from ...infrastructure.external_services.backblaze_service import BackblazeService
from ...application.dtos.inspection_dtos import PhotoDto

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_LABEL = "Dokumen"


@dataclass
class UploadedPhoto:
    data: bytes
    filename: Optional[str]
    content_type: Optional[str]


def storage_file_name(inspection_id: InspectionId, original_name: Optional[str]) -> str:
    ext = os.path.splitext(original_name or "")[1].lower()
    return f"inspection-photos/{inspection_id}/{uuid.uuid4()}{ext}"


def parse_photo_metadata(raw: Optional[str], file_count: int, photo_type: PhotoType) -> List[Dict[str, Any]]:
    """Validate the metadata JSON array sent alongside a batch of photos.

    Returns one normalised dict per file with ``label``, ``need_attention``,
    ``category`` and ``is_mandatory``.
    """
    if not raw:
        raise BadRequestError("Metadata is required")
    try:
        entries = json.loads(raw)
    except json.JSONDecodeError:
        raise BadRequestError("Invalid metadata JSON format")
    if not isinstance(entries, list):
        raise BadRequestError("Metadata must be a JSON array")
    if len(entries) != file_count:
        raise BadRequestError(
            f"Metadata count ({len(entries)}) does not match file count ({file_count})"
        )

    parsed = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise BadRequestError(f"Invalid metadata entry at index {index}")

        label = entry.get("label")
        if photo_type == PhotoType.DOCUMENT and label in (None, ""):
            label = DEFAULT_DOCUMENT_LABEL
        if not isinstance(label, str) or not label.strip():
            raise BadRequestError(f"Invalid metadata entry at index {index}: label is required")

        need_attention = entry.get("needAttention")
        if need_attention is not None and not isinstance(need_attention, bool):
            raise BadRequestError(f"Invalid metadata entry at index {index}: needAttention must be a boolean")

        category = entry.get("category")
        if category is not None and not isinstance(category, str):
            raise BadRequestError(f"Invalid metadata entry at index {index}: category must be a string")

        is_mandatory = entry.get("isMandatory")
        if is_mandatory is not None and not isinstance(is_mandatory, bool):
            raise BadRequestError(f"Invalid metadata entry at index {index}: isMandatory must be a boolean")

        parsed.append({
            "label": label,
            "need_attention": bool(need_attention),
            "category": category,
            "is_mandatory": bool(is_mandatory),
        })
    return parsed


def check_upload_limits(files: List[UploadedPhoto]) -> None:
    if not files:
        raise BadRequestError("No photos uploaded")
    if len(files) > settings.MAX_FILES_PER_UPLOAD:
        raise BadRequestError(f"Too many files, the limit is {settings.MAX_FILES_PER_UPLOAD}")
    for upload in files:
        if len(upload.data) > settings.MAX_FILE_SIZE:
            raise BadRequestError(f"File {upload.filename} exceeds the maximum size")


class PhotoUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, storage: BackblazeService):
        self.unit_of_work = unit_of_work
        self.storage = storage

    async def _ensure_inspection(self, inspection_id: InspectionId) -> None:
        if not await self.unit_of_work.inspections.get_by_id(inspection_id):
            raise NotFoundError(f"Inspection with ID {inspection_id} not found")

    async def _get_photo(self, inspection_id: InspectionId, photo_id: PhotoId) -> Photo:
        photo = await self.unit_of_work.photos.get_by_id(photo_id)
        if not photo or photo.inspection_id != inspection_id:
            raise NotFoundError(f"Photo with ID {photo_id} not found for inspection {inspection_id}")
        return photo

    async def add_batch(
        self,
        inspection_id: InspectionId,
        photo_type: PhotoType,
        files: List[UploadedPhoto],
        metadata: Optional[str],
    ) -> List[PhotoDto]:
        async with self.unit_of_work:
            await self._ensure_inspection(inspection_id)
        check_upload_limits(files)
        entries = parse_photo_metadata(metadata, len(files), photo_type)

        uploaded = []
        for upload, entry in zip(files, entries):
            stored = await self.storage.upload_file(
                upload.data, storage_file_name(inspection_id, upload.filename), upload.content_type
            )
            uploaded.append((stored, entry))

        async with self.unit_of_work:
            photos = []
            for stored, entry in uploaded:
                photo = Photo.create(
                    inspection_id=inspection_id,
                    photo_type=photo_type,
                    path=stored["url"],
                    backblaze_file_id=stored["file_id"],
                    backblaze_file_name=stored["file_name"],
                    **entry,
                )
                photos.append(await self.unit_of_work.photos.add(photo))

        logger.info("Added %d %s photo(s) to inspection %s", len(photos), photo_type.value, inspection_id)
        return [PhotoDto.from_entity(photo) for photo in photos]

    async def list(self, inspection_id: InspectionId) -> List[PhotoDto]:
        async with self.unit_of_work:
            await self._ensure_inspection(inspection_id)
            photos = await self.unit_of_work.photos.list_for_inspection(inspection_id)
            return [PhotoDto.from_entity(photo) for photo in photos]

    async def update(
        self,
        inspection_id: InspectionId,
        photo_id: PhotoId,
        label: Optional[str] = None,
        need_attention: Optional[bool] = None,
        new_file: Optional[UploadedPhoto] = None,
    ) -> PhotoDto:
        async with self.unit_of_work:
            photo = await self._get_photo(inspection_id, photo_id)
        if label is None and need_attention is None and new_file is None:
            return PhotoDto.from_entity(photo)

        old_file = (photo.backblaze_file_id, photo.backblaze_file_name)
        stored = None
        if new_file is not None:
            check_upload_limits([new_file])
            stored = await self.storage.upload_file(
                new_file.data, storage_file_name(inspection_id, new_file.filename), new_file.content_type
            )

        async with self.unit_of_work:
            photo = await self._get_photo(inspection_id, photo_id)
            photo.update_details(label=label, need_attention=need_attention)
            if stored:
                photo.replace_file(stored["url"], stored["file_id"], stored["file_name"])
            await self.unit_of_work.photos.update(photo)

        if stored and old_file[0]:
            try:
                await self.storage.delete_file(*old_file)
            except Exception as e:
                logger.warning("Could not delete replaced file %s: %s", old_file[1], e)
        return PhotoDto.from_entity(photo)

    async def delete(self, inspection_id: InspectionId, photo_id: PhotoId) -> None:
        async with self.unit_of_work:
            photo = await self._get_photo(inspection_id, photo_id)
        await self.storage.delete_file(photo.backblaze_file_id, photo.backblaze_file_name)
        async with self.unit_of_work:
            await self.unit_of_work.photos.delete(photo_id)
        logger.info("Deleted photo %s from inspection %s", photo_id, inspection_id)
