"""Photo repository interface"""

from abc import ABC, abstractmethod
from typing import Optional, List

from ..entities.photo import Photo
from ..value_objects.entity_ids import PhotoId, InspectionId


class IPhotoRepository(ABC):

    @abstractmethod
    async def get_by_id(self, photo_id: PhotoId) -> Optional[Photo]:
        pass

    @abstractmethod
    async def list_for_inspection(self, inspection_id: InspectionId) -> List[Photo]:
        """Photos of one inspection, oldest first"""
        pass

    @abstractmethod
    async def add(self, photo: Photo) -> Photo:
        pass

    @abstractmethod
    async def update(self, photo: Photo) -> Photo:
        pass

    @abstractmethod
    async def delete(self, photo_id: PhotoId) -> None:
        pass
