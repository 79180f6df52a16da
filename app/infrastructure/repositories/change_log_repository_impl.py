"""Inspection change log repository implementation"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy.orm import Session

from ...domain.repositories.change_log_repository import IChangeLogRepository
from ...domain.entities.inspection import InspectionChangeLog
from ...domain.value_objects.entity_ids import InspectionId, UserId
from ..orm.inspection_model import InspectionChangeLogModel


class ChangeLogRepositoryImpl(IChangeLogRepository):

    def __init__(self, session: Session):
        self.session = session

    def _get_model(self, log_id: str) -> Optional[InspectionChangeLogModel]:
        try:
            key = UUID(str(log_id))
        except ValueError:
            return None
        return self.session.query(InspectionChangeLogModel).filter(InspectionChangeLogModel.id == key).first()

    async def add(self, log: InspectionChangeLog) -> InspectionChangeLog:
        model = InspectionChangeLogModel(
            id=UUID(log.id),
            inspection_id=log.inspection_id.value,
            changed_by_user_id=log.changed_by_user_id.value,
            field_name=log.field_name,
            old_value=log.old_value,
            new_value=log.new_value,
            changed_at=log.changed_at,
        )
        self.session.add(model)
        self.session.flush()
        return log

    async def get_by_id(self, log_id: str) -> Optional[InspectionChangeLog]:
        model = self._get_model(log_id)
        return self._map_to_entity(model) if model else None

    async def list_for_inspection(self, inspection_id: InspectionId, newest_first: bool = True) -> List[InspectionChangeLog]:
        order = InspectionChangeLogModel.changed_at.desc() if newest_first else InspectionChangeLogModel.changed_at.asc()
        models = (
            self.session.query(InspectionChangeLogModel)
            .filter(InspectionChangeLogModel.inspection_id == inspection_id.value)
            .order_by(order)
            .all()
        )
        return [self._map_to_entity(model) for model in models]

    async def delete(self, log_id: str) -> None:
        model = self._get_model(log_id)
        if model:
            self.session.delete(model)
            self.session.flush()

    async def delete_for_inspection(self, inspection_id: InspectionId) -> int:
        deleted = (
            self.session.query(InspectionChangeLogModel)
            .filter(InspectionChangeLogModel.inspection_id == inspection_id.value)
            .delete(synchronize_session=False)
        )
        self.session.flush()
        return deleted

    def _map_to_entity(self, model: InspectionChangeLogModel) -> InspectionChangeLog:
        return InspectionChangeLog(
            id=str(model.id),
            inspection_id=InspectionId(model.inspection_id),
            changed_by_user_id=UserId(model.changed_by_user_id),
            field_name=model.field_name,
            old_value=model.old_value,
            new_value=model.new_value,
            changed_at=model.changed_at,
        )
