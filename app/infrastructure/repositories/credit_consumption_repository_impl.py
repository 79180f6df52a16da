"""Credit consumption ledger implementation"""

from sqlalchemy.orm import Session

from ...domain.repositories.credit_consumption_repository import ICreditConsumptionRepository
from ...domain.value_objects.entity_ids import UserId, InspectionId
from ..orm.billing_model import CreditConsumptionModel


def consumption_key(user_id: UserId, inspection_id: InspectionId) -> str:
    return f"{user_id}:{inspection_id}"


class CreditConsumptionRepositoryImpl(ICreditConsumptionRepository):

    def __init__(self, session: Session):
        self.session = session

    async def exists(self, user_id: UserId, inspection_id: InspectionId) -> bool:
        key = consumption_key(user_id, inspection_id)
        return (
            self.session.query(CreditConsumptionModel.id)
            .filter(CreditConsumptionModel.unique_key == key)
            .first()
            is not None
        )

    async def add(self, user_id: UserId, inspection_id: InspectionId, cost: int) -> None:
        self.session.add(CreditConsumptionModel(
            unique_key=consumption_key(user_id, inspection_id),
            user_id=user_id.value,
            inspection_id=inspection_id.value,
            cost=cost,
        ))
        # Flush now so a duplicate key surfaces as IntegrityError here
        self.session.flush()
