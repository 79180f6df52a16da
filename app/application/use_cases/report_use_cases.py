"""Customer-facing report access with credit-gated downloads"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ...domain.entities.inspection import Inspection
from ...domain.entities.user import User
from ...domain.enums import InspectionStatus
from ...domain.exceptions import (
    InsufficientCreditsError,
    NotFoundError,
    PaymentRequiredError,
)
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import InspectionId
from ...infrastructure.external_services.report_pdf_service import ReportPdfService
from ...application.dtos.inspection_dtos import PhotoDto
from ...application.dtos.report_dtos import ReportDetailDto
from .credit_use_cases import CreditUseCase

logger = logging.getLogger(__name__)

SUMMARY_PHOTO_LABELS = (
    "Tampak Depan",
    "Tampak Samping Kanan",
    "Tampak Samping Kiri",
    "Tampak Belakang",
)
BILLING_PACKAGES_PATH = "/billing/packages"


@dataclass
class ReportDownload:
    """Where the no-docs PDF lives: a remote URL or a local archive file"""
    filename: str
    remote_url: Optional[str] = None
    local_path: Optional[Path] = None


class ReportUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, report_service: ReportPdfService):
        self.unit_of_work = unit_of_work
        self.report_service = report_service
        self.credits = CreditUseCase(unit_of_work)

    async def _archived(self, inspection_id: InspectionId) -> Inspection:
        inspection = await self.unit_of_work.inspections.get_by_id(inspection_id)
        if not inspection or inspection.status != InspectionStatus.ARCHIVED:
            raise NotFoundError("Inspection not found")
        return inspection

    async def detail(self, inspection_id: InspectionId, user: User) -> ReportDetailDto:
        async with self.unit_of_work:
            inspection = await self._archived(inspection_id)
            photos = await self.unit_of_work.photos.list_for_inspection(inspection.id)

        summary_photos = sorted(
            (photo for photo in photos if photo.label in SUMMARY_PHOTO_LABELS),
            key=lambda photo: SUMMARY_PHOTO_LABELS.index(photo.label),
        )
        if user.is_customer:
            can_download = await self.credits.has_consumption(user.id, inspection.id)
            balance = await self.credits.balance(user.id)
        else:
            can_download, balance = True, None

        vehicle = inspection.vehicle_data or {}
        return ReportDetailDto(
            id=inspection.id.value,
            pretty_id=inspection.pretty_id,
            vehicle_plate_number=inspection.vehicle_plate_number,
            inspection_date=inspection.inspection_date,
            overall_rating=inspection.overall_rating,
            merek_kendaraan=vehicle.get("merekKendaraan"),
            tipe_kendaraan=vehicle.get("tipeKendaraan"),
            nft_asset_id=inspection.nft_asset_id,
            blockchain_tx_hash=inspection.blockchain_tx_hash,
            archived_at=inspection.archived_at,
            photos=[PhotoDto.from_entity(photo) for photo in summary_photos],
            can_download=can_download,
            url_pdf_no_docs=inspection.url_pdf_no_docs if can_download else None,
            pdf_file_hash_no_docs=inspection.pdf_file_hash_no_docs if can_download else None,
            user_credit_balance=balance,
        )

    async def prepare_download(self, inspection_id: InspectionId, user: User) -> ReportDownload:
        """Charge the customer once, then locate the no-docs PDF"""
        async with self.unit_of_work:
            inspection = await self._archived(inspection_id)
        if not inspection.url_pdf_no_docs:
            raise NotFoundError("Report PDF not available")

        if user.is_customer:
            try:
                result = await self.credits.charge_once(user.id, inspection.id)
            except InsufficientCreditsError:
                raise PaymentRequiredError(
                    "Insufficient credits",
                    payload={"reason": "INSUFFICIENT_CREDITS", "next": BILLING_PACKAGES_PATH},
                )
            if result.charged:
                logger.info("User %s unlocked report %s", user.id, inspection.pretty_id)

        filename = f"{inspection.pretty_id}.pdf"
        url = inspection.url_pdf_no_docs
        if url.startswith(("http://", "https://")):
            local = self.report_service.local_path_for(url)
            if local:
                return ReportDownload(filename=filename, local_path=local)
            return ReportDownload(filename=filename, remote_url=url)

        local = self.report_service.local_path_for(url)
        if not local:
            raise NotFoundError("PDF file not found")
        return ReportDownload(filename=filename, local_path=local)
