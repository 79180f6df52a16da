"""Dashboard DTOs"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime

from ...domain.enums import TargetPeriod


class MainStatsDto(BaseModel):
    totalOrders: int
    needReview: int
    approved: int
    archived: int
    failArchive: int
    deactivated: int


class TrendBucketDto(BaseModel):
    period_label: str
    period_start: datetime
    period_end: datetime
    count: int


class TrendSummaryDto(BaseModel):
    total_orders: int
    actual_start_date_used: datetime
    actual_end_date_used: datetime


class OrderTrendResponse(BaseModel):
    data: List[TrendBucketDto]
    summary: TrendSummaryDto


class BranchDistributionItem(BaseModel):
    branch: str
    count: int
    percentage: str
    change: str


class BranchDistributionResponse(BaseModel):
    total: int
    totalChange: str
    branchDistribution: List[BranchDistributionItem]


class InspectorPerformanceItem(BaseModel):
    inspector: str
    totalInspections: int
    monthlyInspections: int
    weeklyInspections: int
    dailyInspections: int


class InspectorPerformanceResponse(BaseModel):
    data: List[InspectorPerformanceItem]


class SetInspectionTargetDto(BaseModel):
    period: TargetPeriod
    target_value: int = Field(..., ge=0)
    target_date: Optional[date] = None


class InspectionTargetDto(BaseModel):
    period: TargetPeriod
    target_date: date
    target_value: int


class TargetStatsItem(BaseModel):
    totalInspections: int
    targetInspections: int
    percentageMet: str


class TargetStatsResponse(BaseModel):
    allTime: TargetStatsItem
    thisYear: TargetStatsItem
    thisMonth: TargetStatsItem
    thisWeek: TargetStatsItem
    today: TargetStatsItem


class ReviewStatsItem(BaseModel):
    total: int
    approved: int
    needReview: int
    percentageReviewed: str


class ReviewStatsResponse(BaseModel):
    allTime: ReviewStatsItem
    thisMonth: ReviewStatsItem
    thisWeek: ReviewStatsItem
    today: ReviewStatsItem


class DistributionItem(BaseModel):
    label: str
    count: int
