"""Inspection branch city repository implementation"""

from typing import Optional, List
from sqlalchemy import func
from sqlalchemy.orm import Session

from ...domain.repositories.branch_city_repository import IBranchCityRepository
from ...domain.entities.branch_city import BranchCity
from ...domain.value_objects.entity_ids import BranchCityId
from ..orm.inspection_model import InspectionBranchCityModel


class BranchCityRepositoryImpl(IBranchCityRepository):

    def __init__(self, session: Session):
        self.session = session

    def _get_model(self, branch_id: BranchCityId) -> Optional[InspectionBranchCityModel]:
        return (
            self.session.query(InspectionBranchCityModel)
            .filter(InspectionBranchCityModel.id == branch_id.value)
            .first()
        )

    async def get_by_id(self, branch_id: BranchCityId) -> Optional[BranchCity]:
        model = self._get_model(branch_id)
        return self._map_to_entity(model) if model else None

    async def get_by_city(self, city: str) -> Optional[BranchCity]:
        model = (
            self.session.query(InspectionBranchCityModel)
            .filter(func.lower(InspectionBranchCityModel.city) == city.strip().lower())
            .first()
        )
        return self._map_to_entity(model) if model else None

    async def get_by_code(self, code: str) -> Optional[BranchCity]:
        model = (
            self.session.query(InspectionBranchCityModel)
            .filter(InspectionBranchCityModel.code == code.upper())
            .first()
        )
        return self._map_to_entity(model) if model else None

    async def list_all(self) -> List[BranchCity]:
        models = self.session.query(InspectionBranchCityModel).order_by(InspectionBranchCityModel.city.asc()).all()
        return [self._map_to_entity(model) for model in models]

    async def add(self, branch: BranchCity) -> BranchCity:
        model = InspectionBranchCityModel(id=branch.id.value, created_at=branch.created_at)
        self._update_model_from_entity(model, branch)
        self.session.add(model)
        self.session.flush()
        return branch

    async def update(self, branch: BranchCity) -> BranchCity:
        existing = self._get_model(branch.id)
        if existing:
            self._update_model_from_entity(existing, branch)
            self.session.flush()
        return branch

    async def delete(self, branch_id: BranchCityId) -> None:
        model = self._get_model(branch_id)
        if model:
            self.session.delete(model)
            self.session.flush()

    def _update_model_from_entity(self, model: InspectionBranchCityModel, branch: BranchCity) -> None:
        model.city = branch.city
        model.code = branch.code
        model.is_active = branch.is_active
        model.updated_at = branch.updated_at

    def _map_to_entity(self, model: InspectionBranchCityModel) -> BranchCity:
        return BranchCity(
            id=BranchCityId(model.id),
            city=model.city,
            code=model.code,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
