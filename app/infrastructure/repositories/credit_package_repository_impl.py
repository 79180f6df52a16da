"""Credit package repository implementation"""

from typing import Optional, List
from sqlalchemy.orm import Session

from ...domain.repositories.credit_package_repository import ICreditPackageRepository
from ...domain.entities.credit_package import CreditPackage
from ...domain.value_objects.entity_ids import CreditPackageId
from ..orm.billing_model import CreditPackageModel


class CreditPackageRepositoryImpl(ICreditPackageRepository):

    def __init__(self, session: Session):
        self.session = session

    def _get_model(self, package_id: CreditPackageId) -> Optional[CreditPackageModel]:
        return self.session.query(CreditPackageModel).filter(CreditPackageModel.id == package_id.value).first()

    async def get_by_id(self, package_id: CreditPackageId) -> Optional[CreditPackage]:
        model = self._get_model(package_id)
        return self._map_to_entity(model) if model else None

    async def list(self, active_only: bool = False) -> List[CreditPackage]:
        query = self.session.query(CreditPackageModel)
        if active_only:
            query = query.filter(CreditPackageModel.is_active.is_(True))
        models = query.order_by(CreditPackageModel.created_at.desc()).all()
        return [self._map_to_entity(model) for model in models]

    async def add(self, package: CreditPackage) -> CreditPackage:
        model = CreditPackageModel(id=package.id.value, created_at=package.created_at)
        self._update_model_from_entity(model, package)
        self.session.add(model)
        self.session.flush()
        return package

    async def update(self, package: CreditPackage) -> CreditPackage:
        existing = self._get_model(package.id)
        if existing:
            self._update_model_from_entity(existing, package)
            self.session.flush()
        return package

    async def delete(self, package_id: CreditPackageId) -> None:
        model = self._get_model(package_id)
        if model:
            self.session.delete(model)
            self.session.flush()

    def _update_model_from_entity(self, model: CreditPackageModel, package: CreditPackage) -> None:
        model.credits = package.credits
        model.price = package.price
        model.discount_pct = package.discount_pct
        model.benefits = package.benefits
        model.is_active = package.is_active
        model.updated_at = package.updated_at

    def _map_to_entity(self, model: CreditPackageModel) -> CreditPackage:
        return CreditPackage(
            id=CreditPackageId(model.id),
            credits=model.credits,
            price=model.price,
            discount_pct=model.discount_pct,
            benefits=model.benefits,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
