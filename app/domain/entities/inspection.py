"""Inspection aggregate with review/archive lifecycle"""

from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
import json
import uuid

from ..value_objects.entity_ids import InspectionId, UserId, BranchCityId
from ..enums import InspectionStatus, UserRole, STAFF_REVIEW_ROLES, LOCKED_INSPECTION_STATUSES
from ..exceptions import BadRequestError, ForbiddenError
from ..events.inspection_events import (
    InspectionApproved,
    InspectionArchived,
    InspectionArchiveFailed,
    InspectionDeactivated,
)


# Columns holding free-form JSON documents; their changes are logged per key
JSON_FIELDS = (
    "identity_details",
    "vehicle_data",
    "equipment_checklist",
    "inspection_summary",
    "detailed_assessment",
    "body_paint_thickness",
    "notes_font_sizes",
)

SCALAR_FIELDS = ("vehicle_plate_number", "inspection_date", "overall_rating")


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


def normalize_inspection_date(value: str) -> datetime:
    """ISO date or datetime as naive UTC"""
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise BadRequestError(f"Invalid inspection_date: {value}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


@dataclass
class InspectionChangeLog:
    inspection_id: InspectionId
    changed_by_user_id: UserId
    field_name: str
    old_value: Any = None
    new_value: Any = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    changed_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Inspection:
    id: InspectionId
    pretty_id: str
    status: InspectionStatus = InspectionStatus.NEED_REVIEW
    inspector_id: Optional[UserId] = None
    reviewer_id: Optional[UserId] = None
    branch_city_id: Optional[BranchCityId] = None
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
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    # Domain events
    _events: List = field(default_factory=list, init=False)

    @classmethod
    def create(
        cls,
        pretty_id: str,
        inspector_id: Optional[UserId],
        branch_city_id: Optional[BranchCityId],
        inspection_date: datetime,
        **documents: Any,
    ) -> 'Inspection':
        """Factory method for a freshly submitted inspection"""
        now = datetime.utcnow()
        return cls(
            id=InspectionId.generate(),
            pretty_id=pretty_id,
            status=InspectionStatus.NEED_REVIEW,
            inspector_id=inspector_id,
            branch_city_id=branch_city_id,
            inspection_date=inspection_date,
            created_at=now,
            updated_at=now,
            **documents,
        )

    # Visibility

    def is_visible_to(self, role: UserRole) -> bool:
        return role in STAFF_REVIEW_ROLES or self.status == InspectionStatus.ARCHIVED

    def ensure_visible_to(self, role: UserRole) -> None:
        if not self.is_visible_to(role):
            raise ForbiddenError("You do not have permission to view this inspection")

    # Review

    def diff_changes(self, updates: Dict[str, Any]) -> List[Tuple[str, Any, Any]]:
        """Business logic: list (field_name, old, new) for every value that would change.

        JSON documents are compared key by key and reported with dot-path names.
        """
        if self.status in LOCKED_INSPECTION_STATUSES:
            raise BadRequestError(
                f"Inspection with status {self.status.value} can no longer be edited"
            )

        changes: List[Tuple[str, Any, Any]] = []
        for name in SCALAR_FIELDS:
            if name not in updates:
                continue
            old, new = getattr(self, name), updates[name]
            if name == "inspection_date":
                old = old.isoformat() if old else None
                if isinstance(new, str) and new.strip():
                    new = normalize_inspection_date(new)
                new = new.isoformat() if isinstance(new, datetime) else None
            if _canonical(old) != _canonical(new):
                changes.append((name, old, new))

        for name in JSON_FIELDS:
            new_doc = updates.get(name)
            if new_doc is None:
                continue
            old_doc = getattr(self, name) or {}
            if not isinstance(new_doc, dict) or not isinstance(old_doc, dict):
                if _canonical(old_doc) != _canonical(new_doc):
                    changes.append((name, old_doc, new_doc))
                continue
            for key, new_value in new_doc.items():
                old_value = old_doc.get(key)
                if _canonical(old_value) != _canonical(new_value):
                    changes.append((f"{name}.{key}", old_value, new_value))
        return changes

    def apply_change(self, field_name: str, value: Any) -> None:
        """Write one logged change back into the aggregate."""
        head, _, rest = field_name.partition(".")
        if head not in SCALAR_FIELDS and head not in JSON_FIELDS:
            raise BadRequestError(f"Unknown inspection field: {head}")

        if not rest:
            if head == "inspection_date" and isinstance(value, str):
                value = normalize_inspection_date(value)
            setattr(self, head, deepcopy(value))
            return

        document = deepcopy(getattr(self, head) or {})
        node = document
        path = rest.split(".")
        for key in path[:-1]:
            child = node.get(key)
            if not isinstance(child, dict):
                child = {}
                node[key] = child
            node = child
        node[path[-1]] = deepcopy(value)
        setattr(self, head, document)

    def approve(self, reviewer_id: UserId, change_logs: List[InspectionChangeLog]) -> None:
        """Business logic: apply pending edits oldest first, then approve"""
        if self.status not in (InspectionStatus.NEED_REVIEW, InspectionStatus.FAIL_ARCHIVE):
            raise BadRequestError(
                f"Inspection cannot be approved from status {self.status.value}"
            )
        for log in sorted(change_logs, key=lambda entry: entry.changed_at):
            self.apply_change(log.field_name, log.new_value)

        self.status = InspectionStatus.APPROVED
        self.reviewer_id = reviewer_id
        self.updated_at = datetime.utcnow()
        self._events.append(InspectionApproved(
            inspection_id=self.id,
            reviewer_id=reviewer_id,
            applied_changes=len(change_logs),
        ))

    # Archiving

    def start_archiving(self) -> None:
        if self.status not in (InspectionStatus.APPROVED, InspectionStatus.FAIL_ARCHIVE):
            raise BadRequestError(
                f"Inspection must be APPROVED before archiving, current status {self.status.value}"
            )
        self.status = InspectionStatus.ARCHIVING
        self.updated_at = datetime.utcnow()

    def attach_report(self, url_pdf: str, pdf_hash: str, url_pdf_no_docs: str, pdf_hash_no_docs: str) -> None:
        self.url_pdf = url_pdf
        self.pdf_file_hash = pdf_hash
        self.url_pdf_no_docs = url_pdf_no_docs
        self.pdf_file_hash_no_docs = pdf_hash_no_docs
        self.updated_at = datetime.utcnow()

    def complete_archive(self, nft_asset_id: Optional[str], tx_hash: Optional[str]) -> None:
        now = datetime.utcnow()
        self.status = InspectionStatus.ARCHIVED
        self.nft_asset_id = nft_asset_id
        self.blockchain_tx_hash = tx_hash
        self.archived_at = now
        self.updated_at = now
        self._events.append(InspectionArchived(
            inspection_id=self.id,
            nft_asset_id=nft_asset_id,
            tx_hash=tx_hash,
            archived_at=now,
        ))

    def fail_archive(self, reason: str) -> None:
        self.status = InspectionStatus.FAIL_ARCHIVE
        self.updated_at = datetime.utcnow()
        self._events.append(InspectionArchiveFailed(inspection_id=self.id, reason=reason))

    def deactivate(self) -> None:
        if self.status != InspectionStatus.ARCHIVED:
            raise BadRequestError(
                f"Only ARCHIVED inspections can be deactivated, current status {self.status.value}"
            )
        now = datetime.utcnow()
        self.status = InspectionStatus.DEACTIVATED
        self.deactivated_at = now
        self.updated_at = now
        self._events.append(InspectionDeactivated(inspection_id=self.id, deactivated_at=now))

    def activate(self) -> None:
        if self.status != InspectionStatus.DEACTIVATED:
            raise BadRequestError(
                f"Only DEACTIVATED inspections can be activated, current status {self.status.value}"
            )
        self.status = InspectionStatus.ARCHIVED
        self.deactivated_at = None
        self.updated_at = datetime.utcnow()

    def nft_metadata(self, pdf_url: str, pdf_hash: str) -> Dict[str, Any]:
        """Metadata written on-chain; empty values are left out"""
        vehicle = self.vehicle_data or {}
        metadata = {
            "inspectionId": str(self.id),
            "inspectionDate": self.inspection_date.isoformat() if self.inspection_date else None,
            "vehicleNumber": self.vehicle_plate_number,
            "vehicleBrand": vehicle.get("merekKendaraan"),
            "vehicleModel": vehicle.get("tipeKendaraan"),
            "vehicleYear": vehicle.get("tahun"),
            "vehicleColor": vehicle.get("warnaKendaraan"),
            "overallRating": self.overall_rating,
            "pdfUrl": pdf_url,
            "pdfHash": pdf_hash,
            "inspectorId": str(self.inspector_id) if self.inspector_id else None,
        }
        return {key: value for key, value in metadata.items() if value is not None}

    def get_events(self) -> List:
        """Get and clear domain events"""
        events = self._events.copy()
        self._events.clear()
        return events
