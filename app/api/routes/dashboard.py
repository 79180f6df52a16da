"""Dashboard statistics routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies import get_unit_of_work, require_roles, get_admin_user
from ...application.use_cases.dashboard_use_cases import DashboardUseCase
from ...application.dtos.dashboard_dtos import (
    MainStatsDto,
    OrderTrendResponse,
    BranchDistributionResponse,
    InspectorPerformanceResponse,
    SetInspectionTargetDto,
    InspectionTargetDto,
    TargetStatsResponse,
    ReviewStatsResponse,
    DistributionItem,
)
from ...domain.entities.user import User
from ...domain.enums import TimePeriod, TrendRangeType, UserRole
from ...domain.repositories.unit_of_work import IUnitOfWork

router = APIRouter()

allow_stats = require_roles(UserRole.ADMIN, UserRole.SUPERADMIN, UserRole.REVIEWER)


class PeriodQuery:
    """Shared period filter query parameters"""

    def __init__(
        self,
        period: TimePeriod = Query(default=TimePeriod.ALL_TIME),
        start_date: Optional[str] = Query(default=None),
        end_date: Optional[str] = Query(default=None),
    ):
        self.period = period
        self.start_date = start_date
        self.end_date = end_date


@router.get("/main-stats", response_model=MainStatsDto)
async def main_stats(
    query: PeriodQuery = Depends(),
    year: Optional[int] = Query(default=None),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    branch_city: Optional[str] = Query(default=None),
    current_user: User = Depends(allow_stats),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Inspection counts per status"""
    return await DashboardUseCase(unit_of_work).main_stats(
        query.period, query.start_date, query.end_date, year, month, branch_city
    )


@router.get("/order-trend", response_model=OrderTrendResponse)
async def order_trend(
    range_type: TrendRangeType = Query(default=TrendRangeType.LAST_7_DAYS),
    start_date: Optional[str] = Query(default=None),
    end_date: Optional[str] = Query(default=None),
    timezone: Optional[str] = Query(default=None),
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Inspection counts bucketed over time in the given timezone"""
    return await DashboardUseCase(unit_of_work).order_trend(range_type, start_date, end_date, timezone)


@router.get("/branch-distribution", response_model=BranchDistributionResponse)
async def branch_distribution(
    query: PeriodQuery = Depends(),
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await DashboardUseCase(unit_of_work).branch_distribution(
        query.period, query.start_date, query.end_date
    )


@router.get("/inspector-performance", response_model=InspectorPerformanceResponse)
async def inspector_performance(
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await DashboardUseCase(unit_of_work).inspector_performance()


@router.post("/inspection-target", response_model=InspectionTargetDto)
async def set_inspection_target(
    request: SetInspectionTargetDto,
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await DashboardUseCase(unit_of_work).set_target(
        request.period, request.target_value, request.target_date
    )


@router.get("/inspection-target-stats", response_model=TargetStatsResponse)
async def inspection_target_stats(
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await DashboardUseCase(unit_of_work).target_stats()


@router.get("/review-stats", response_model=ReviewStatsResponse)
async def review_stats(
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await DashboardUseCase(unit_of_work).review_stats()


@router.get("/overall-value-distribution", response_model=List[DistributionItem])
async def overall_value_distribution(
    query: PeriodQuery = Depends(),
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await DashboardUseCase(unit_of_work).distribution(
        "overall_rating", query.period, query.start_date, query.end_date
    )


@router.get("/car-brand-distribution", response_model=List[DistributionItem])
async def car_brand_distribution(
    query: PeriodQuery = Depends(),
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await DashboardUseCase(unit_of_work).distribution(
        "vehicle_data.merekKendaraan", query.period, query.start_date, query.end_date, limit=10
    )


@router.get("/production-year-distribution", response_model=List[DistributionItem])
async def production_year_distribution(
    query: PeriodQuery = Depends(),
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await DashboardUseCase(unit_of_work).distribution(
        "vehicle_data.tahun", query.period, query.start_date, query.end_date
    )


@router.get("/transmission-type-distribution", response_model=List[DistributionItem])
async def transmission_type_distribution(
    query: PeriodQuery = Depends(),
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await DashboardUseCase(unit_of_work).distribution(
        "vehicle_data.transmisi", query.period, query.start_date, query.end_date
    )


@router.get("/blockchain-status", response_model=List[DistributionItem])
async def blockchain_status_distribution(
    query: PeriodQuery = Depends(),
    admin: User = Depends(get_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await DashboardUseCase(unit_of_work).distribution(
        "blockchain_status", query.period, query.start_date, query.end_date
    )
