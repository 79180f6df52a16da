"""Inspection target repository implementation"""

from datetime import date, datetime
from typing import Optional
from sqlalchemy.orm import Session

from ...domain.repositories.inspection_target_repository import IInspectionTargetRepository
from ...domain.enums import TargetPeriod
from ..orm.inspection_model import InspectionTargetModel


class InspectionTargetRepositoryImpl(IInspectionTargetRepository):

    def __init__(self, session: Session):
        self.session = session

    def _get_model(self, period: TargetPeriod, target_date: date) -> Optional[InspectionTargetModel]:
        return (
            self.session.query(InspectionTargetModel)
            .filter(InspectionTargetModel.period == period, InspectionTargetModel.target_date == target_date)
            .first()
        )

    async def upsert(self, period: TargetPeriod, target_date: date, target_value: int) -> int:
        model = self._get_model(period, target_date)
        if model is None:
            model = InspectionTargetModel(period=period, target_date=target_date, target_value=target_value)
            self.session.add(model)
        else:
            model.target_value = target_value
            model.updated_at = datetime.utcnow()
        self.session.flush()
        return model.target_value

    async def get_value(self, period: TargetPeriod, target_date: date) -> Optional[int]:
        model = self._get_model(period, target_date)
        return model.target_value if model else None
