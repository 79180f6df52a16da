"""Archive an approved inspection: render the report, then mint its NFT"""

import logging

from ...domain.enums import InspectionStatus
from ...domain.exceptions import ArchiveFailedError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import InspectionId
from ...infrastructure.external_services.blockchain_service import BlockchainService
from ...infrastructure.external_services.report_pdf_service import ReportPdfService
from ...application.dtos.inspection_dtos import InspectionDto
from .inspection_use_cases import load_inspection, inspection_with_photos

logger = logging.getLogger(__name__)


class ArchiveInspectionUseCase:

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        report_service: ReportPdfService,
        blockchain_service: BlockchainService,
    ):
        self.unit_of_work = unit_of_work
        self.report_service = report_service
        self.blockchain_service = blockchain_service

    async def execute(self, inspection_id: InspectionId) -> InspectionDto:
        # The ARCHIVING status is committed before any slow external work starts
        async with self.unit_of_work:
            inspection = await load_inspection(self.unit_of_work, inspection_id)
            inspection.start_archiving()
            await self.unit_of_work.inspections.update(inspection)
        logger.info("Archiving inspection %s (%s)", inspection.id, inspection.pretty_id)

        try:
            full = await self.report_service.render_and_archive(str(inspection.id), inspection.pretty_id)
            no_docs = await self.report_service.render_and_archive(
                str(inspection.id), inspection.pretty_id, no_docs=True
            )
        except Exception as e:
            logger.error("Report rendering for %s failed: %s", inspection.id, e, exc_info=True)
            await self._fail(inspection_id, f"Report rendering failed: {e}", keep_report=None)
            raise ArchiveFailedError(f"Failed to archive inspection {inspection_id}: {e}")

        report = (full.public_url, full.sha256, no_docs.public_url, no_docs.sha256)
        try:
            minted = await self.blockchain_service.mint_inspection_nft(
                inspection.nft_metadata(full.public_url, full.sha256),
                inspection.vehicle_plate_number,
            )
        except Exception as e:
            logger.error("Minting for %s failed: %s", inspection.id, e, exc_info=True)
            await self._fail(inspection_id, f"Minting failed: {e}", keep_report=report)
            raise ArchiveFailedError(f"Failed to archive inspection {inspection_id}: {e}")

        async with self.unit_of_work:
            inspection = await load_inspection(self.unit_of_work, inspection_id)
            inspection.attach_report(*report)
            inspection.complete_archive(minted["asset_id"], minted["tx_hash"])
            await self.unit_of_work.inspections.update(inspection)
            for event in inspection.get_events():
                logger.info("%s: %s", type(event).__name__, event)
            return await inspection_with_photos(self.unit_of_work, inspection)

    async def _fail(self, inspection_id: InspectionId, reason: str, keep_report=None) -> None:
        async with self.unit_of_work:
            inspection = await self.unit_of_work.inspections.get_by_id(inspection_id)
            if not inspection or inspection.status != InspectionStatus.ARCHIVING:
                return
            if keep_report:
                inspection.attach_report(*keep_report)
            inspection.fail_archive(reason)
            await self.unit_of_work.inspections.update(inspection)
            for event in inspection.get_events():
                logger.warning("%s: %s", type(event).__name__, event)
