"""Billing routes: package catalogue, checkout and Xendit webhook"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request

from ...api.dependencies import get_unit_of_work, get_current_user, get_xendit_service
from ...application.use_cases.billing_use_cases import (
    CheckoutUseCase,
    XenditWebhookUseCase,
    ListMyPurchasesUseCase,
)
from ...application.use_cases.credit_package_use_cases import CreditPackageUseCase
from ...application.use_cases.credit_use_cases import CreditUseCase
from ...application.dtos.billing_dtos import (
    CheckoutDto,
    CheckoutResponse,
    CreditPackageDto,
    CreditBalanceResponse,
    PurchaseDto,
    WebhookAck,
)
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import CreditPackageId
from ...infrastructure.external_services.xendit_service import XenditService

logger = logging.getLogger(__name__)

router = APIRouter()
me_router = APIRouter()


@router.get("/packages", response_model=List[CreditPackageDto])
async def list_active_packages(unit_of_work: IUnitOfWork = Depends(get_unit_of_work)):
    """Active credit packages, newest first"""
    return await CreditPackageUseCase(unit_of_work).list(active_only=True)


@router.post("/checkout", response_model=CheckoutResponse)
async def checkout(
    request: CheckoutDto,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    xendit: XenditService = Depends(get_xendit_service),
):
    """Create a purchase and its Xendit invoice"""
    return await CheckoutUseCase(unit_of_work, xendit).execute(current_user, CreditPackageId(request.package_id))


@router.post("/webhook/xendit", response_model=WebhookAck)
async def xendit_webhook(
    request: Request,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    xendit: XenditService = Depends(get_xendit_service),
):
    """Xendit invoice callback; always answers 200"""
    try:
        body = await request.json()
    except ValueError:
        logger.warning("Xendit webhook with unreadable body")
        body = {}
    if not isinstance(body, dict):
        body = {}

    headers = {key: value for key, value in request.headers.items() if key.lower() != "x-callback-token"}
    result = await XenditWebhookUseCase(unit_of_work, xendit).execute(
        body, headers, request.headers.get("x-callback-token")
    )
    return WebhookAck(**result)


@router.get("/purchases/me", response_model=List[PurchaseDto])
async def my_purchases(
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await ListMyPurchasesUseCase(unit_of_work).execute(current_user)


@me_router.get("/credits", response_model=CreditBalanceResponse)
async def my_credits(
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Current credit balance"""
    return CreditBalanceResponse(credits=await CreditUseCase(unit_of_work).balance(current_user.id))
