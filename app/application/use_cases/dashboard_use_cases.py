"""Dashboard statistics: period ranges, trend buckets and distributions

All timestamps are stored as naive UTC. Trend buckets are computed in the
caller's timezone and converted back to UTC for the response. Counting runs
as GROUP BY queries in the repository; this module only fills empty buckets
and merges labels.
"""

import calendar
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ...core.config import settings
from ...domain.enums import InspectionStatus, TargetPeriod, TimePeriod, TrendRangeType, UserRole
from ...domain.exceptions import BadRequestError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...application.dtos.dashboard_dtos import (
    MainStatsDto,
    TrendBucketDto,
    TrendSummaryDto,
    OrderTrendResponse,
    BranchDistributionItem,
    BranchDistributionResponse,
    InspectorPerformanceItem,
    InspectorPerformanceResponse,
    InspectionTargetDto,
    TargetStatsItem,
    TargetStatsResponse,
    ReviewStatsItem,
    ReviewStatsResponse,
    DistributionItem,
)

logger = logging.getLogger(__name__)

INDONESIAN_MONTHS = ["Jan", "Feb", "Mar", "Apr", "Mei", "Jun", "Jul", "Ags", "Sep", "Okt", "Nov", "Des"]
END_OF_DAY = time(23, 59, 59, 999000)

DateRange = Tuple[Optional[datetime], Optional[datetime]]


def _parse_day(value: str, label: str) -> date:
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        raise BadRequestError(f"Invalid {label}: {value}")


def get_date_range(
    period,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    year: Optional[int] = None,
    month: Optional[int] = None,
    reference: Optional[datetime] = None,
) -> DateRange:
    """Inclusive (start, end) bounds for a dashboard period.

    Explicit start and end dates always win. ALL_TIME has no bounds and
    anything unrecognised falls back to the current day.
    """
    if start_date and end_date:
        return (
            datetime.combine(_parse_day(start_date, "start_date"), time.min),
            datetime.combine(_parse_day(end_date, "end_date"), END_OF_DAY),
        )

    now = reference or datetime.utcnow()
    target_year = year or now.year
    target_month = month or now.month
    period = getattr(period, "value", period)

    if period == TimePeriod.ALL_TIME.value:
        return None, None
    if period == TimePeriod.YEAR.value:
        return datetime(target_year, 1, 1), datetime.combine(date(target_year, 12, 31), END_OF_DAY)
    if period == TimePeriod.MONTH.value:
        last_day = calendar.monthrange(target_year, target_month)[1]
        return (
            datetime(target_year, target_month, 1),
            datetime.combine(date(target_year, target_month, last_day), END_OF_DAY),
        )

    day = min(now.day, calendar.monthrange(target_year, target_month)[1])
    anchor = date(target_year, target_month, day)
    if period == TimePeriod.WEEK.value:
        monday = anchor - timedelta(days=anchor.weekday())
        return datetime.combine(monday, time.min), datetime.combine(monday + timedelta(days=6), END_OF_DAY)
    return datetime.combine(anchor, time.min), datetime.combine(anchor, END_OF_DAY)


def previous_date_range(period: TimePeriod, start: Optional[datetime], end: Optional[datetime]) -> DateRange:
    """The equivalent range one period earlier; unbounded for ALL_TIME"""
    if start is None or end is None:
        return None, None
    if period == TimePeriod.YEAR:
        return datetime(start.year - 1, 1, 1), datetime.combine(date(end.year - 1, 12, 31), END_OF_DAY)
    if period == TimePeriod.MONTH:
        prev_end = start.date() - timedelta(days=1)
        return datetime(prev_end.year, prev_end.month, 1), datetime.combine(prev_end, END_OF_DAY)
    if period == TimePeriod.WEEK:
        return start - timedelta(days=7), end - timedelta(days=7)
    if period == TimePeriod.DAY:
        return start - timedelta(days=1), end - timedelta(days=1)
    return None, None


def calculate_percentage(part: int, total: int) -> str:
    if total == 0:
        return "0.00%"
    return f"{part / total * 100:.2f}%"


def format_change(current: int, previous: int) -> str:
    if previous > 0:
        value = (current - previous) / previous * 100
        return f"{'+' if value > 0 else ''}{value:.1f}%"
    if current > 0:
        return "+100%"
    return "0%"


def resolve_timezone(name: Optional[str]) -> ZoneInfo:
    try:
        return ZoneInfo(name or settings.DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        raise BadRequestError(f"Invalid timezone: {name}")


# Order trend

@dataclass
class TrendBucket:
    key: object
    label: str
    start: datetime
    end: datetime
    count: int = 0


def _to_utc(local: datetime) -> datetime:
    return local.astimezone(timezone.utc)


def _local(day: date, at: time, tz: ZoneInfo) -> datetime:
    return datetime.combine(day, at, tzinfo=tz)


def _add_months(day: date, months: int) -> date:
    index = day.year * 12 + day.month - 1 + months
    return date(index // 12, index % 12 + 1, 1)


def _daily_buckets(first: date, last: date, tz: ZoneInfo, label_format: str) -> List[TrendBucket]:
    buckets = []
    day = first
    while day <= last:
        buckets.append(TrendBucket(
            key=day,
            label=day.strftime(label_format),
            start=_to_utc(_local(day, time.min, tz)),
            end=_to_utc(_local(day, END_OF_DAY, tz)),
        ))
        day += timedelta(days=1)
    return buckets


def build_trend_buckets(
    range_type: TrendRangeType,
    tz: ZoneInfo,
    now: datetime,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> Tuple[List[TrendBucket], datetime, datetime]:
    """Empty buckets for a trend range plus the UTC bounds actually used.

    ``now`` must be timezone-aware.
    """
    today = now.astimezone(tz).date()

    if range_type == TrendRangeType.TODAY:
        midnight = _local(today, time.min, tz)
        buckets = []
        for hour in range(0, 24, 2):
            slot_start = midnight + timedelta(hours=hour)
            buckets.append(TrendBucket(
                key=hour // 2,
                label=f"{hour:02d}:00-{hour + 2:02d}:00",
                start=_to_utc(slot_start),
                end=_to_utc(slot_start + timedelta(hours=2)),
            ))
        return buckets, _to_utc(midnight), _to_utc(_local(today, END_OF_DAY, tz))

    if range_type in (
        TrendRangeType.LAST_7_DAYS,
        TrendRangeType.LAST_30_DAYS,
        TrendRangeType.MONTH_TO_DATE,
        TrendRangeType.CUSTOM,
    ):
        if range_type == TrendRangeType.CUSTOM:
            if not start_date or not end_date:
                raise BadRequestError("start_date and end_date are required for custom range_type.")
            first, last = _parse_day(start_date, "start_date"), _parse_day(end_date, "end_date")
            if first > last:
                raise BadRequestError("start_date cannot be after end_date.")
        elif range_type == TrendRangeType.LAST_7_DAYS:
            first, last = today - timedelta(days=6), today
        elif range_type == TrendRangeType.LAST_30_DAYS:
            first, last = today - timedelta(days=29), today
        else:
            first, last = today.replace(day=1), today

        label_format = "%d-%m-%Y" if range_type == TrendRangeType.LAST_7_DAYS else "%d"
        buckets = _daily_buckets(first, last, tz, label_format)
        return buckets, buckets[0].start, buckets[-1].end

    if range_type == TrendRangeType.LAST_12_MONTHS:
        first = _add_months(today.replace(day=1), -11)
    elif range_type == TrendRangeType.YEAR_TO_DATE:
        first = date(today.year, 1, 1)
    elif range_type == TrendRangeType.LAST_3_YEARS:
        first = date(today.year - 2, 1, 1)
    else:
        raise BadRequestError(f"Unsupported range_type: {range_type}")

    range_end = _to_utc(_local(today, END_OF_DAY, tz))
    buckets = []
    month_start = first
    while month_start <= today:
        next_month = _add_months(month_start, 1)
        if (month_start.year, month_start.month) == (today.year, today.month):
            bucket_end = range_end
        else:
            bucket_end = _to_utc(_local(next_month - timedelta(days=1), END_OF_DAY, tz))
        label = INDONESIAN_MONTHS[month_start.month - 1]
        if range_type == TrendRangeType.LAST_3_YEARS:
            label = f"{label} {month_start.year}"
        buckets.append(TrendBucket(
            key=(month_start.year, month_start.month),
            label=label,
            start=_to_utc(_local(month_start, time.min, tz)),
            end=bucket_end,
        ))
        month_start = next_month
    return buckets, buckets[0].start, range_end


def _naive_utc(moment: datetime) -> datetime:
    return moment.astimezone(timezone.utc).replace(tzinfo=None)




def merge_counts(rows: Iterable[Tuple[object, int]]) -> Counter:
    """Fold grouped rows into string labels; empty labels are skipped"""
    counts = Counter()
    for value, count in rows:
        if value not in (None, ""):
            counts[str(value)] += count
    return counts


class DashboardUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def main_stats(
        self,
        period: TimePeriod = TimePeriod.ALL_TIME,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
        branch_city: Optional[str] = None,
    ) -> MainStatsDto:
        start, end = get_date_range(period, start_date, end_date, year, month)
        async with self.unit_of_work:
            statuses = await self.unit_of_work.inspections.count_by_status(start, end, branch_city)
        return MainStatsDto(
            totalOrders=sum(statuses.values()),
            needReview=statuses.get(InspectionStatus.NEED_REVIEW, 0),
            approved=statuses.get(InspectionStatus.APPROVED, 0),
            archived=statuses.get(InspectionStatus.ARCHIVED, 0),
            failArchive=statuses.get(InspectionStatus.FAIL_ARCHIVE, 0),
            deactivated=statuses.get(InspectionStatus.DEACTIVATED, 0),
        )

    async def order_trend(
        self,
        range_type: TrendRangeType,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        tz_name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> OrderTrendResponse:
        tz = resolve_timezone(tz_name)
        now = now or datetime.now(timezone.utc)
        buckets, range_start, range_end = build_trend_buckets(range_type, tz, now, start_date, end_date)

        async with self.unit_of_work:
            counts = await self.unit_of_work.inspections.count_in_buckets(
                [_naive_utc(b.start) for b in buckets], _naive_utc(range_end)
            )
        for bucket, count in zip(buckets, counts):
            bucket.count = count

        return OrderTrendResponse(
            data=[
                TrendBucketDto(period_label=b.label, period_start=b.start, period_end=b.end, count=b.count)
                for b in buckets
            ],
            summary=TrendSummaryDto(
                total_orders=sum(b.count for b in buckets),
                actual_start_date_used=range_start,
                actual_end_date_used=range_end,
            ),
        )

    async def branch_distribution(
        self,
        period: TimePeriod = TimePeriod.ALL_TIME,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> BranchDistributionResponse:
        start, end = get_date_range(period, start_date, end_date)
        prev_start, prev_end = previous_date_range(period, start, end)
        has_previous = prev_start is not None or prev_end is not None

        async with self.unit_of_work:
            current = await self.unit_of_work.inspections.count_by_branch(start, end)
            previous = await self.unit_of_work.inspections.count_by_branch(prev_start, prev_end) if has_previous else {}
            total = await self.unit_of_work.inspections.count_created_between(start, end)
            previous_total = (
                await self.unit_of_work.inspections.count_created_between(prev_start, prev_end) if has_previous else 0
            )
            branches = await self.unit_of_work.branches.list_all()

        items = []
        for branch in branches:
            count = current.get(branch.id, 0)
            items.append(BranchDistributionItem(
                branch=branch.city,
                count=count,
                percentage=f"{count / total * 100:.1f}%" if total else "0.0%",
                change=format_change(count, previous.get(branch.id, 0)),
            ))
        return BranchDistributionResponse(
            total=total,
            totalChange=format_change(total, previous_total),
            branchDistribution=items,
        )

    async def inspector_performance(self) -> InspectorPerformanceResponse:
        async with self.unit_of_work:
            inspectors = await self.unit_of_work.users.list_by_role(UserRole.INSPECTOR)
            total = await self.unit_of_work.inspections.count_by_inspector(None, None)
            monthly = await self.unit_of_work.inspections.count_by_inspector(*get_date_range(TimePeriod.MONTH))
            weekly = await self.unit_of_work.inspections.count_by_inspector(*get_date_range(TimePeriod.WEEK))
            daily = await self.unit_of_work.inspections.count_by_inspector(*get_date_range(TimePeriod.DAY))

        return InspectorPerformanceResponse(data=[
            InspectorPerformanceItem(
                inspector=inspector.name,
                totalInspections=total.get(inspector.id, 0),
                monthlyInspections=monthly.get(inspector.id, 0),
                weeklyInspections=weekly.get(inspector.id, 0),
                dailyInspections=daily.get(inspector.id, 0),
            )
            for inspector in inspectors
            if inspector.name
        ])

    async def set_target(
        self, period: TargetPeriod, target_value: int, target_date: Optional[date] = None
    ) -> InspectionTargetDto:
        reference = datetime.combine(target_date, time.min) if target_date else None
        start, _ = get_date_range(period, reference=reference)
        async with self.unit_of_work:
            value = await self.unit_of_work.targets.upsert(period, start.date(), target_value)
        logger.info("Inspection target %s for %s set to %d", period.value, start.date(), value)
        return InspectionTargetDto(period=period, target_date=start.date(), target_value=value)

    async def target_stats(self) -> TargetStatsResponse:

        async def stats_for(period: Optional[TargetPeriod]) -> TargetStatsItem:
            async with self.unit_of_work:
                if period is None:
                    total = await self.unit_of_work.inspections.count_created_between(None, None)
                    target = 0
                else:
                    start, end = get_date_range(period)
                    total = await self.unit_of_work.inspections.count_created_between(start, end)
                    target = await self.unit_of_work.targets.get_value(period, start.date()) or 0
            return TargetStatsItem(
                totalInspections=total,
                targetInspections=target,
                percentageMet=calculate_percentage(total, target),
            )

        return TargetStatsResponse(
            allTime=await stats_for(None),
            thisYear=await stats_for(TargetPeriod.YEAR),
            thisMonth=await stats_for(TargetPeriod.MONTH),
            thisWeek=await stats_for(TargetPeriod.WEEK),
            today=await stats_for(TargetPeriod.DAY),
        )

    async def review_stats(self) -> ReviewStatsResponse:

        async def stats_for(start: Optional[datetime], end: Optional[datetime]) -> ReviewStatsItem:
            async with self.unit_of_work:
                statuses = await self.unit_of_work.inspections.count_by_status(start, end)
            total = sum(statuses.values())
            approved = statuses.get(InspectionStatus.APPROVED, 0)
            return ReviewStatsItem(
                total=total,
                approved=approved,
                needReview=statuses.get(InspectionStatus.NEED_REVIEW, 0),
                percentageReviewed=calculate_percentage(approved, total),
            )

        return ReviewStatsResponse(
            allTime=await stats_for(None, None),
            thisMonth=await stats_for(*get_date_range(TimePeriod.MONTH)),
            thisWeek=await stats_for(*get_date_range(TimePeriod.WEEK)),
            today=await stats_for(*get_date_range(TimePeriod.DAY)),
        )

    async def distribution(
        self,
        field_name: str,
        period: TimePeriod = TimePeriod.ALL_TIME,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[DistributionItem]:
        """Grouped counts of one inspection field in the range, largest first"""
        start, end = get_date_range(period, start_date, end_date)
        async with self.unit_of_work:
            rows = await self.unit_of_work.inspections.count_by_field(field_name, start, end)
        counts = merge_counts(rows)
        return [DistributionItem(label=label, count=count) for label, count in counts.most_common(limit)]
