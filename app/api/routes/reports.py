"""Customer report routes"""

from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, Response

from ...api.dependencies import get_unit_of_work, get_current_user, get_report_service
from ...application.use_cases.report_use_cases import ReportUseCase
from ...application.dtos.report_dtos import ReportDetailDto
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import InspectionId
from ...infrastructure.external_services.report_pdf_service import ReportPdfService

router = APIRouter()

PDF_MEDIA_TYPE = "application/pdf"


@router.get("/{inspection_id}", response_model=ReportDetailDto)
async def get_report(
    inspection_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    report_service: ReportPdfService = Depends(get_report_service),
):
    """Report summary; the PDF link is only shown once it is unlocked"""
    return await ReportUseCase(unit_of_work, report_service).detail(InspectionId(inspection_id), current_user)


@router.post("/{inspection_id}/download")
async def download_report(
    inspection_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    report_service: ReportPdfService = Depends(get_report_service),
):
    """Download the no-docs PDF, charging a customer one credit the first time"""
    download = await ReportUseCase(unit_of_work, report_service).prepare_download(
        InspectionId(inspection_id), current_user
    )
    disposition = f'attachment; filename="{download.filename}"'

    if download.local_path is not None:
        return FileResponse(
            download.local_path,
            media_type=PDF_MEDIA_TYPE,
            headers={"Content-Disposition": disposition},
        )

    content = await report_service.fetch_remote(download.remote_url)
    return Response(
        content=content,
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": disposition},
    )
