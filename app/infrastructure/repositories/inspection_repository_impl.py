"""Inspection repository implementation"""

from datetime import datetime
from typing import Dict, Optional, List, Sequence, Tuple
from sqlalchemy import and_, case, func, select
from sqlalchemy.orm import Session

from ...domain.repositories.inspection_repository import IInspectionRepository
from ...domain.entities.inspection import Inspection, JSON_FIELDS
from ...domain.value_objects.entity_ids import InspectionId, UserId, BranchCityId
from ...domain.enums import InspectionStatus
from ..orm.inspection_model import InspectionModel, InspectionSequenceModel, InspectionBranchCityModel


# Columns copied one-to-one between the entity and the model
_PLAIN_COLUMNS = (
    "pretty_id",
    "vehicle_plate_number",
    "inspection_date",
    "overall_rating",
    "url_pdf",
    "url_pdf_no_docs",
    "pdf_file_hash",
    "pdf_file_hash_no_docs",
    "nft_asset_id",
    "blockchain_tx_hash",
    "archived_at",
    "deactivated_at",
    "updated_at",
) + JSON_FIELDS


class InspectionRepositoryImpl(IInspectionRepository):
    """Repository implementation for Inspection aggregate"""

    def __init__(self, session: Session):
        self.session = session

    def _get_model(self, inspection_id: InspectionId) -> Optional[InspectionModel]:
        return self.session.query(InspectionModel).filter(InspectionModel.id == inspection_id.value).first()

    async def get_by_id(self, inspection_id: InspectionId) -> Optional[Inspection]:
        model = self._get_model(inspection_id)
        return self._map_to_entity(model) if model else None

    async def find_latest_by_plate(self, plate_number: str) -> Optional[Inspection]:
        normalized = plate_number.replace(" ", "").lower()
        model = (
            self.session.query(InspectionModel)
            .filter(func.lower(func.replace(InspectionModel.vehicle_plate_number, " ", "")) == normalized)
            .order_by(InspectionModel.created_at.desc())
            .first()
        )
        return self._map_to_entity(model) if model else None

    async def list(self, statuses: Optional[Sequence[InspectionStatus]] = None) -> List[Inspection]:
        query = self.session.query(InspectionModel)
        if statuses:
            query = query.filter(InspectionModel.status.in_(list(statuses)))
        models = query.order_by(InspectionModel.created_at.desc()).all()
        return [self._map_to_entity(model) for model in models]

    async def list_latest_archived(self, limit: int = 5) -> List[Inspection]:
        models = (
            self.session.query(InspectionModel)
            .filter(InspectionModel.status == InspectionStatus.ARCHIVED)
            .order_by(InspectionModel.archived_at.desc(), InspectionModel.created_at.desc())
            .limit(limit)
            .all()
        )
        return [self._map_to_entity(model) for model in models]

    def _within(self, statement, start: Optional[datetime], end: Optional[datetime], branch_city: Optional[str] = None):
        if start is not None:
            statement = statement.where(InspectionModel.created_at >= start)
        if end is not None:
            statement = statement.where(InspectionModel.created_at <= end)
        if branch_city:
            statement = statement.join(
                InspectionBranchCityModel, InspectionModel.branch_city_id == InspectionBranchCityModel.id
            ).where(func.lower(InspectionBranchCityModel.city) == branch_city.lower())
        return statement

    def _grouped_counts(
        self, expression, start: Optional[datetime], end: Optional[datetime], branch_city: Optional[str] = None
    ) -> List[Tuple[object, int]]:
        """GROUP BY over a labelled subquery so computed expressions group the same on every dialect"""
        inner = self._within(
            select(expression.label("grp")).select_from(InspectionModel), start, end, branch_city
        ).subquery()
        total = func.count().label("total")
        rows = self.session.execute(
            select(inner.c.grp, total).group_by(inner.c.grp).order_by(total.desc())
        ).all()
        return [(group, count) for group, count in rows]

    async def count_created_between(self, start: Optional[datetime], end: Optional[datetime]) -> int:
        statement = self._within(select(func.count(InspectionModel.id)), start, end)
        return self.session.execute(statement).scalar_one()

    async def count_by_status(
        self,
        start: Optional[datetime],
        end: Optional[datetime],
        branch_city: Optional[str] = None,
    ) -> Dict[InspectionStatus, int]:
        return dict(self._grouped_counts(InspectionModel.status, start, end, branch_city))

    async def count_by_branch(
        self, start: Optional[datetime], end: Optional[datetime]
    ) -> Dict[BranchCityId, int]:
        rows = self._grouped_counts(InspectionModel.branch_city_id, start, end)
        return {BranchCityId(branch_id): count for branch_id, count in rows if branch_id is not None}

    async def count_by_inspector(
        self, start: Optional[datetime], end: Optional[datetime]
    ) -> Dict[UserId, int]:
        rows = self._grouped_counts(InspectionModel.inspector_id, start, end)
        return {UserId(inspector_id): count for inspector_id, count in rows if inspector_id is not None}

    async def count_by_field(
        self, field_name: str, start: Optional[datetime], end: Optional[datetime]
    ) -> List[Tuple[object, int]]:
        if field_name == "overall_rating":
            expression = InspectionModel.overall_rating
        elif field_name == "blockchain_status":
            expression = case(
                (and_(InspectionModel.nft_asset_id.isnot(None), InspectionModel.nft_asset_id != ""), "minted"),
                else_="not_minted",
            )
        elif field_name.startswith("vehicle_data."):
            expression = InspectionModel.vehicle_data[field_name.split(".", 1)[1]].as_string()
        else:
            raise ValueError(f"Unsupported dashboard grouping: {field_name}")
        return self._grouped_counts(expression, start, end)

    async def count_in_buckets(self, bucket_starts: Sequence[datetime], end: datetime) -> List[int]:
        counts = [0] * len(bucket_starts)
        if not bucket_starts:
            return counts
        if len(bucket_starts) == 1:
            counts[0] = await self.count_created_between(bucket_starts[0], end)
            return counts

        # first matching WHEN wins, so each row lands in the bucket before the next start
        bucket = case(
            *[(InspectionModel.created_at < next_start, index) for index, next_start in enumerate(bucket_starts[1:])],
            else_=len(bucket_starts) - 1,
        )
        for index, count in self._grouped_counts(bucket, bucket_starts[0], end):
            counts[index] += count
        return counts

    async def next_sequence(self, branch_code: str, date_prefix: str) -> int:
        """Upsert the (branch, day) counter inside the caller's transaction"""
        row = (
            self.session.query(InspectionSequenceModel)
            .filter(
                InspectionSequenceModel.branch_code == branch_code,
                InspectionSequenceModel.date_prefix == date_prefix,
            )
            .with_for_update()
            .first()
        )
        if row is None:
            row = InspectionSequenceModel(branch_code=branch_code, date_prefix=date_prefix, next_sequence=1)
            self.session.add(row)
        else:
            row.next_sequence += 1
        self.session.flush()
        return row.next_sequence

    async def add(self, inspection: Inspection) -> Inspection:
        model = InspectionModel(id=inspection.id.value, created_at=inspection.created_at)
        self._update_model_from_entity(model, inspection)
        self.session.add(model)
        self.session.flush()
        return inspection

    async def update(self, inspection: Inspection) -> Inspection:
        existing = self._get_model(inspection.id)
        if existing:
            self._update_model_from_entity(existing, inspection)
            self.session.flush()
        return inspection

    def _update_model_from_entity(self, model: InspectionModel, inspection: Inspection) -> None:
        for name in _PLAIN_COLUMNS:
            setattr(model, name, getattr(inspection, name))
        model.status = inspection.status
        model.inspector_id = inspection.inspector_id.value if inspection.inspector_id else None
        model.reviewer_id = inspection.reviewer_id.value if inspection.reviewer_id else None
        model.branch_city_id = inspection.branch_city_id.value if inspection.branch_city_id else None

    def _map_to_entity(self, model: InspectionModel) -> Inspection:
        inspection = Inspection(
            id=InspectionId(model.id),
            pretty_id=model.pretty_id,
            status=InspectionStatus(model.status),
            inspector_id=UserId(model.inspector_id) if model.inspector_id else None,
            reviewer_id=UserId(model.reviewer_id) if model.reviewer_id else None,
            branch_city_id=BranchCityId(model.branch_city_id) if model.branch_city_id else None,
            created_at=model.created_at,
        )
        for name in _PLAIN_COLUMNS:
            if name != "pretty_id":
                setattr(inspection, name, getattr(model, name))
        return inspection
