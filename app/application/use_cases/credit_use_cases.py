"""Credit ledger: one charge per user and inspection"""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

from ...domain.exceptions import BadRequestError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import UserId, InspectionId

logger = logging.getLogger(__name__)


@dataclass
class ChargeResult:
    charged: bool
    balance: int


class CreditUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def has_consumption(self, user_id: UserId, inspection_id: InspectionId) -> bool:
        async with self.unit_of_work:
            return await self.unit_of_work.credit_consumptions.exists(user_id, inspection_id)

    async def balance(self, user_id: UserId) -> int:
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_id(user_id)
            return user.credits if user else 0

    async def charge_once(self, user_id: UserId, inspection_id: InspectionId, cost: int = 1) -> ChargeResult:
        """Charge ``cost`` credits unless this inspection was already paid for.

        Raises InsufficientCreditsError when the balance is too low.
        """
        try:
            async with self.unit_of_work:
                user = await self.unit_of_work.users.get_by_id(user_id)
                if not user:
                    raise BadRequestError("User not found")
                if await self.unit_of_work.credit_consumptions.exists(user_id, inspection_id):
                    return ChargeResult(charged=False, balance=user.credits)

                user.spend_credits(cost)
                await self.unit_of_work.users.update(user)
                await self.unit_of_work.credit_consumptions.add(user_id, inspection_id, cost)
        except IntegrityError:
            # A concurrent request recorded the same consumption first
            logger.info("Consumption for %s:%s already recorded", user_id, inspection_id)
            return ChargeResult(charged=False, balance=await self.balance(user_id))

        logger.info("Charged %d credit(s) to user %s for inspection %s", cost, user_id, inspection_id)
        return ChargeResult(charged=True, balance=user.credits)
