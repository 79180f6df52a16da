"""Credit package checkout and Xendit payment processing"""

import logging
from typing import Any, Dict, List, Optional

from ...core.config import settings
from ...domain.entities.purchase import Purchase
from ...domain.entities.user import User
from ...domain.enums import PaymentGateway
from ...domain.exceptions import BadRequestError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import CreditPackageId
from ...infrastructure.external_services.xendit_service import XenditService
from ...application.dtos.billing_dtos import CheckoutResponse, PurchaseDto

logger = logging.getLogger(__name__)

PAID_STATUSES = ("PAID", "SETTLED")


class CheckoutUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, xendit: XenditService):
        self.unit_of_work = unit_of_work
        self.xendit = xendit

    async def execute(self, user: User, package_id: CreditPackageId) -> CheckoutResponse:
        async with self.unit_of_work:
            package = await self.unit_of_work.credit_packages.get_by_id(package_id)
            if not package or not package.is_active:
                raise BadRequestError("Package not available")

            purchase = Purchase.create(user_id=user.id, package_id=package.id, amount=package.price)
            await self.unit_of_work.purchases.add(purchase)

        invoice = await self.xendit.create_invoice(
            external_id=str(purchase.id),
            amount=purchase.amount,
            payer_email=user.email,
            description=f"Credit package {package.credits} credits",
            success_redirect_url=settings.PAYMENT_RETURN_URL,
            failure_redirect_url=settings.PAYMENT_RETURN_URL,
            callback_url=settings.PAYMENT_WEBHOOK_URL,
        )

        async with self.unit_of_work:
            purchase.attach_invoice(invoice["id"], invoice.get("invoice_url"))
            await self.unit_of_work.purchases.update(purchase)

        logger.info("Checkout %s created invoice %s for user %s", purchase.id, invoice["id"], user.id)
        return CheckoutResponse(
            purchase_id=purchase.id.value,
            ext_invoice_id=purchase.ext_invoice_id,
            payment_url=purchase.payment_url,
        )


class MarkPurchasePaidUseCase:
    """Settle a purchase and grant its credits, idempotently"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, ext_invoice_id: str) -> bool:
        """Returns False when the purchase was already paid"""
        async with self.unit_of_work:
            purchase = await self.unit_of_work.purchases.get_by_ext_invoice_id(ext_invoice_id)
            if not purchase:
                raise BadRequestError(f"Purchase with invoice {ext_invoice_id} not found")
            if purchase.is_paid:
                logger.info("Purchase %s already paid, skipping", purchase.id)
                return False

            package = await self.unit_of_work.credit_packages.get_by_id(purchase.package_id)
            user = await self.unit_of_work.users.get_by_id(purchase.user_id)
            if not package or not user:
                raise BadRequestError(f"Purchase {purchase.id} references missing data")

            purchase.mark_paid(package.credits)
            user.add_credits(package.credits)
            await self.unit_of_work.purchases.update(purchase)
            await self.unit_of_work.users.update(user)

            for event in purchase.get_events():
                logger.info("%s: %s", type(event).__name__, event)
            return True


class XenditWebhookUseCase:
    """Record, dedupe and apply Xendit invoice callbacks"""

    def __init__(self, unit_of_work: IUnitOfWork, xendit: XenditService):
        self.unit_of_work = unit_of_work
        self.xendit = xendit

    async def execute(
        self,
        body: Dict[str, Any],
        headers: Dict[str, Any],
        callback_token: Optional[str],
    ) -> Dict[str, bool]:
        if not self.xendit.verify_callback_token(callback_token):
            logger.warning("Rejected Xendit webhook with invalid callback token")
            return {"ok": False}

        data = body.get("data") if isinstance(body.get("data"), dict) else body
        invoice_id = data.get("id")
        if not invoice_id:
            return {"ok": True}
        status = str(data.get("status") or "").upper()

        async with self.unit_of_work:
            event_id, duplicate = await self.unit_of_work.webhook_events.record_new_or_duplicate(
                dedupe_key=f"xendit:{invoice_id}:{status}",
                gateway=PaymentGateway.XENDIT.value,
                ext_invoice_id=invoice_id,
                event_type=status or None,
                payload=body,
                headers=headers,
            )
        if duplicate:
            logger.info("Duplicate Xendit webhook for %s (%s)", invoice_id, status)
            return {"ok": True}

        try:
            if status in PAID_STATUSES:
                await MarkPurchasePaidUseCase(self.unit_of_work).execute(invoice_id)
                result = "paid"
            else:
                result = f"ignored:{status or 'UNKNOWN'}"
            async with self.unit_of_work:
                await self.unit_of_work.webhook_events.mark_processed(event_id, result)
            logger.info("Processed Xendit webhook for %s: %s", invoice_id, result)
        except Exception as e:
            logger.error("Xendit webhook for %s failed: %s", invoice_id, e, exc_info=True)
            async with self.unit_of_work:
                await self.unit_of_work.webhook_events.mark_error(event_id, str(e))
        return {"ok": True}


class ListMyPurchasesUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user: User) -> List[PurchaseDto]:
        async with self.unit_of_work:
            purchases = await self.unit_of_work.purchases.list_for_user(user.id)
            return [PurchaseDto.from_entity(purchase) for purchase in purchases]
