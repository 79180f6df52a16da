"""Photo repository implementation"""

from typing import Optional, List
from sqlalchemy.orm import Session

from ...domain.repositories.photo_repository import IPhotoRepository
from ...domain.entities.photo import Photo
from ...domain.value_objects.entity_ids import PhotoId, InspectionId
from ...domain.enums import PhotoType
from ..orm.inspection_model import InspectionPhotoModel


class PhotoRepositoryImpl(IPhotoRepository):

    def __init__(self, session: Session):
        self.session = session

    def _get_model(self, photo_id: PhotoId) -> Optional[InspectionPhotoModel]:
        return self.session.query(InspectionPhotoModel).filter(InspectionPhotoModel.id == photo_id.value).first()

    async def get_by_id(self, photo_id: PhotoId) -> Optional[Photo]:
        model = self._get_model(photo_id)
        return self._map_to_entity(model) if model else None

    async def list_for_inspection(self, inspection_id: InspectionId) -> List[Photo]:
        models = (
            self.session.query(InspectionPhotoModel)
            .filter(InspectionPhotoModel.inspection_id == inspection_id.value)
            .order_by(InspectionPhotoModel.created_at.asc())
            .all()
        )
        return [self._map_to_entity(model) for model in models]

    async def add(self, photo: Photo) -> Photo:
        model = InspectionPhotoModel(
            id=photo.id.value,
            inspection_id=photo.inspection_id.value,
            type=photo.type,
            created_at=photo.created_at,
        )
        self._update_model_from_entity(model, photo)
        self.session.add(model)
        self.session.flush()
        return photo

    async def update(self, photo: Photo) -> Photo:
        existing = self._get_model(photo.id)
        if existing:
            self._update_model_from_entity(existing, photo)
            self.session.flush()
        return photo

    async def delete(self, photo_id: PhotoId) -> None:
        model = self._get_model(photo_id)
        if model:
            self.session.delete(model)
            self.session.flush()

    def _update_model_from_entity(self, model: InspectionPhotoModel, photo: Photo) -> None:
        model.path = photo.path
        model.label = photo.label
        model.original_label = photo.original_label
        model.category = photo.category
        model.is_mandatory = photo.is_mandatory
        model.need_attention = photo.need_attention
        model.backblaze_file_id = photo.backblaze_file_id
        model.backblaze_file_name = photo.backblaze_file_name
        model.updated_at = photo.updated_at

    def _map_to_entity(self, model: InspectionPhotoModel) -> Photo:
        return Photo(
            id=PhotoId(model.id),
            inspection_id=InspectionId(model.inspection_id),
            type=PhotoType(model.type),
            path=model.path,
            label=model.label,
            original_label=model.original_label,
            category=model.category,
            is_mandatory=model.is_mandatory,
            need_attention=model.need_attention,
            backblaze_file_id=model.backblaze_file_id,
            backblaze_file_name=model.backblaze_file_name,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
