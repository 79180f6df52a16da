"""Purchase repository implementation"""

from typing import Optional, List
from sqlalchemy.orm import Session

from ...domain.repositories.purchase_repository import IPurchaseRepository
from ...domain.entities.purchase import Purchase
from ...domain.value_objects.entity_ids import PurchaseId, UserId, CreditPackageId
from ...domain.enums import PurchaseStatus, PaymentGateway
from ..orm.billing_model import PurchaseModel


class PurchaseRepositoryImpl(IPurchaseRepository):

    def __init__(self, session: Session):
        self.session = session

    def _get_model(self, purchase_id: PurchaseId) -> Optional[PurchaseModel]:
        return self.session.query(PurchaseModel).filter(PurchaseModel.id == purchase_id.value).first()

    async def get_by_id(self, purchase_id: PurchaseId) -> Optional[Purchase]:
        model = self._get_model(purchase_id)
        return self._map_to_entity(model) if model else None

    async def get_by_ext_invoice_id(self, ext_invoice_id: str) -> Optional[Purchase]:
        model = self.session.query(PurchaseModel).filter(PurchaseModel.ext_invoice_id == ext_invoice_id).first()
        return self._map_to_entity(model) if model else None

    async def list_for_user(self, user_id: UserId) -> List[Purchase]:
        models = (
            self.session.query(PurchaseModel)
            .filter(PurchaseModel.user_id == user_id.value)
            .order_by(PurchaseModel.created_at.desc())
            .all()
        )
        return [self._map_to_entity(model) for model in models]

    async def add(self, purchase: Purchase) -> Purchase:
        model = PurchaseModel(
            id=purchase.id.value,
            user_id=purchase.user_id.value,
            package_id=purchase.package_id.value,
            created_at=purchase.created_at,
        )
        self._update_model_from_entity(model, purchase)
        self.session.add(model)
        self.session.flush()
        return purchase

    async def update(self, purchase: Purchase) -> Purchase:
        existing = self._get_model(purchase.id)
        if existing:
            self._update_model_from_entity(existing, purchase)
            self.session.flush()
        return purchase

    def _update_model_from_entity(self, model: PurchaseModel, purchase: Purchase) -> None:
        model.amount = purchase.amount
        model.status = purchase.status
        model.gateway = purchase.gateway
        model.ext_invoice_id = purchase.ext_invoice_id
        model.payment_url = purchase.payment_url
        model.paid_at = purchase.paid_at
        model.updated_at = purchase.updated_at

    def _map_to_entity(self, model: PurchaseModel) -> Purchase:
        return Purchase(
            id=PurchaseId(model.id),
            user_id=UserId(model.user_id),
            package_id=CreditPackageId(model.package_id),
            amount=model.amount,
            status=PurchaseStatus(model.status),
            gateway=PaymentGateway(model.gateway),
            ext_invoice_id=model.ext_invoice_id,
            payment_url=model.payment_url,
            paid_at=model.paid_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
