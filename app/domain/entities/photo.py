"""Inspection photo entity"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..value_objects.entity_ids import PhotoId, InspectionId
from ..enums import PhotoType


# Labels that mark a photo as a vehicle document; hidden from the public no-docs view
DOCUMENT_MARKERS = ("stnk", "bpkb", "dokumen", "documents", "foto dokumen")


@dataclass
class Photo:
    id: PhotoId
    inspection_id: InspectionId
    type: PhotoType
    path: str
    label: str
    original_label: Optional[str] = None
    category: Optional[str] = None
    is_mandatory: bool = False
    need_attention: bool = False
    backblaze_file_id: Optional[str] = None
    backblaze_file_name: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def create(
        cls,
        inspection_id: InspectionId,
        photo_type: PhotoType,
        path: str,
        label: str,
        category: Optional[str] = None,
        is_mandatory: bool = False,
        need_attention: bool = False,
        backblaze_file_id: Optional[str] = None,
        backblaze_file_name: Optional[str] = None,
    ) -> 'Photo':
        now = datetime.utcnow()
        return cls(
            id=PhotoId.generate(),
            inspection_id=inspection_id,
            type=photo_type,
            path=path,
            label=label,
            original_label=label,
            category=category,
            is_mandatory=is_mandatory,
            need_attention=need_attention,
            backblaze_file_id=backblaze_file_id,
            backblaze_file_name=backblaze_file_name,
            created_at=now,
            updated_at=now,
        )

    def update_details(self, label: Optional[str] = None, need_attention: Optional[bool] = None) -> bool:
        """Apply label/flag edits, returns whether anything changed"""
        changed = False
        if label is not None and label != self.label:
            self.label = label
            changed = True
        if need_attention is not None and need_attention != self.need_attention:
            self.need_attention = need_attention
            changed = True
        if changed:
            self.updated_at = datetime.utcnow()
        return changed

    def replace_file(self, path: str, file_id: str, file_name: str) -> None:
        self.path = path
        self.backblaze_file_id = file_id
        self.backblaze_file_name = file_name
        self.updated_at = datetime.utcnow()

    @property
    def is_document(self) -> bool:
        if self.type == PhotoType.DOCUMENT:
            return True
        haystack = f"{self.label or ''} {self.category or ''}".lower()
        return any(marker in haystack for marker in DOCUMENT_MARKERS)
