"""
Tests for dashboard statistics.
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from app.application.use_cases.dashboard_use_cases import (
    DashboardUseCase,
    build_trend_buckets,
    calculate_percentage,
    format_change,
    get_date_range,
    previous_date_range,
    resolve_timezone,
)
from app.domain.enums import InspectionStatus, TimePeriod, TrendRangeType, UserRole
from app.domain.exceptions import BadRequestError
from app.infrastructure.orm import InspectionBranchCityModel
from app.infrastructure.repositories.inspection_repository_impl import InspectionRepositoryImpl
from app.infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl
from tests.helpers import auth_headers

JAKARTA = ZoneInfo("Asia/Jakarta")


class TestDateRanges:

    def test_explicit_dates_win(self):
        start, end = get_date_range(TimePeriod.YEAR, "2026-02-01", "2026-02-10")

        assert start == datetime(2026, 2, 1)
        assert end.date() == date(2026, 2, 10)
        assert end.hour == 23

    def test_all_time_is_unbounded(self):
        assert get_date_range(TimePeriod.ALL_TIME) == (None, None)

    def test_month_of_leap_year(self):
        start, end = get_date_range(TimePeriod.MONTH, year=2028, month=2)

        assert start == datetime(2028, 2, 1)
        assert end.date() == date(2028, 2, 29)

    def test_week_starts_on_monday(self):
        start, end = get_date_range(TimePeriod.WEEK, reference=datetime(2026, 10, 18, 12))

        assert start == datetime(2026, 10, 12)
        assert end.date() == date(2026, 10, 18)

    def test_previous_month_range(self):
        start, end = get_date_range(TimePeriod.MONTH, year=2026, month=3)

        prev_start, prev_end = previous_date_range(TimePeriod.MONTH, start, end)

        assert prev_start == datetime(2026, 2, 1)
        assert prev_end.date() == date(2026, 2, 28)

    def test_invalid_date(self):
        with pytest.raises(BadRequestError):
            get_date_range(TimePeriod.DAY, "not-a-date", "2026-01-01")


class TestFormatting:

    def test_percentage(self):
        assert calculate_percentage(1, 3) == "33.33%"
        assert calculate_percentage(5, 0) == "0.00%"

    def test_change(self):
        assert format_change(15, 10) == "+50.0%"
        assert format_change(5, 10) == "-50.0%"
        assert format_change(3, 0) == "+100%"
        assert format_change(0, 0) == "0%"

    def test_unknown_timezone(self):
        with pytest.raises(BadRequestError):
            resolve_timezone("Mars/Olympus")


class TestTrendBuckets:

    NOW = datetime(2026, 10, 18, 3, 0, tzinfo=timezone.utc)

    def test_today_has_twelve_slots(self):
        buckets, start, end = build_trend_buckets(TrendRangeType.TODAY, JAKARTA, self.NOW)

        assert len(buckets) == 12
        assert buckets[0].label == "00:00-02:00"
        # Midnight in Jakarta is 17:00 UTC the day before
        assert start == datetime(2026, 10, 17, 17, tzinfo=timezone.utc)

    def test_last_7_days_labels(self):
        buckets, _, _ = build_trend_buckets(TrendRangeType.LAST_7_DAYS, JAKARTA, self.NOW)

        assert [b.label for b in buckets][-1] == "18-10-2026"
        assert len(buckets) == 7

    def test_last_12_months(self):
        buckets, _, _ = build_trend_buckets(TrendRangeType.LAST_12_MONTHS, JAKARTA, self.NOW)

        assert len(buckets) == 12
        assert buckets[0].label == "Nov"
        assert buckets[-1].label == "Okt"

    def test_last_3_years_labels_include_year(self):
        buckets, _, _ = build_trend_buckets(TrendRangeType.LAST_3_YEARS, JAKARTA, self.NOW)

        assert buckets[0].label == "Jan 2024"
        assert buckets[-1].label == "Okt 2026"

    def test_custom_requires_dates(self):
        with pytest.raises(BadRequestError):
            build_trend_buckets(TrendRangeType.CUSTOM, JAKARTA, self.NOW)

    def test_custom_rejects_reversed_dates(self):
        with pytest.raises(BadRequestError):
            build_trend_buckets(TrendRangeType.CUSTOM, JAKARTA, self.NOW, "2026-10-10", "2026-10-01")

    async def test_counts_use_local_day(self, db_session, make_inspection):
        """20:00 UTC on the 17th is already the 18th in Jakarta"""
        make_inspection(created_at=datetime(2026, 10, 17, 20, 0))
        make_inspection(created_at=datetime(2026, 10, 16, 12, 0))

        trend = await DashboardUseCase(UnitOfWorkImpl(db_session)).order_trend(
            TrendRangeType.LAST_7_DAYS, tz_name="Asia/Jakarta", now=self.NOW
        )

        counts = {bucket.period_label: bucket.count for bucket in trend.data}
        assert counts["18-10-2026"] == 1
        assert counts["16-10-2026"] == 1
        assert trend.summary.total_orders == 2


class TestInspectionAggregates:
    """Grouped counts computed by the database"""

    @pytest.fixture
    def repository(self, db_session):
        return InspectionRepositoryImpl(db_session)

    async def test_buckets_split_on_next_start(self, repository, make_inspection):
        starts = [datetime(2026, 10, 1), datetime(2026, 10, 2), datetime(2026, 10, 3)]
        make_inspection(created_at=datetime(2026, 9, 30, 23, 59))
        make_inspection(created_at=datetime(2026, 10, 1, 0, 0))
        make_inspection(created_at=datetime(2026, 10, 2, 0, 0))
        make_inspection(created_at=datetime(2026, 10, 2, 23, 59))
        make_inspection(created_at=datetime(2026, 10, 3, 12, 0))
        make_inspection(created_at=datetime(2026, 10, 4, 0, 0))

        counts = await repository.count_in_buckets(starts, datetime(2026, 10, 3, 23, 59, 59))

        assert counts == [1, 2, 1]

    async def test_single_bucket(self, repository, make_inspection):
        make_inspection(created_at=datetime(2026, 10, 1, 8, 0))

        assert await repository.count_in_buckets([datetime(2026, 10, 1)], datetime(2026, 10, 1, 23, 59)) == [1]

    async def test_status_counts_for_one_branch(self, repository, make_inspection, db_session):
        other = InspectionBranchCityModel(city="Semarang", code="SEM")
        db_session.add(other)
        db_session.commit()
        make_inspection(InspectionStatus.ARCHIVED)
        make_inspection(InspectionStatus.NEED_REVIEW)
        make_inspection(InspectionStatus.NEED_REVIEW, branch_city_id=other.id)

        counts = await repository.count_by_status(None, None, branch_city="yogyakarta")

        assert counts == {InspectionStatus.ARCHIVED: 1, InspectionStatus.NEED_REVIEW: 1}

    async def test_vehicle_field_groups(self, repository, make_inspection):
        make_inspection(vehicle_data={"transmisi": "Manual"})
        make_inspection(vehicle_data={"transmisi": "Manual"})
        make_inspection(vehicle_data={"transmisi": "Otomatis"})
        make_inspection(vehicle_data={})

        rows = await repository.count_by_field("vehicle_data.transmisi", None, None)

        assert rows[0] == ("Manual", 2)
        assert ("Otomatis", 1) in rows

    async def test_unknown_field(self, repository):
        with pytest.raises(ValueError):
            await repository.count_by_field("vehicle_data", None, None)

    def test_production_year_merges_numbers_and_strings(self, client, admin_headers, make_inspection):
        make_inspection(vehicle_data={"tahun": 2020})
        make_inspection(vehicle_data={"tahun": "2020"})
        make_inspection(vehicle_data={"tahun": 2018})

        rows = client.get("/api/v1/dashboard/production-year-distribution", headers=admin_headers).json()

        assert rows == [{"label": "2020", "count": 2}, {"label": "2018", "count": 1}]


class TestDashboardRoutes:

    def test_main_stats_counts_statuses(self, client, admin_headers, make_inspection):
        make_inspection(InspectionStatus.NEED_REVIEW)
        make_inspection(InspectionStatus.ARCHIVED)
        make_inspection(InspectionStatus.ARCHIVED)

        response = client.get("/api/v1/dashboard/main-stats", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["totalOrders"] == 3
        assert data["archived"] == 2
        assert data["needReview"] == 1

    def test_reviewer_may_read_main_stats_only(self, client, make_user):
        headers = auth_headers(make_user(UserRole.REVIEWER))

        assert client.get("/api/v1/dashboard/main-stats", headers=headers).status_code == 200
        assert client.get("/api/v1/dashboard/review-stats", headers=headers).status_code == 403

    def test_branch_distribution(self, client, admin_headers, make_inspection, branch):
        make_inspection()
        make_inspection()

        response = client.get("/api/v1/dashboard/branch-distribution", headers=admin_headers)

        data = response.json()
        assert data["total"] == 2
        assert data["branchDistribution"] == [
            {"branch": "Yogyakarta", "count": 2, "percentage": "100.0%", "change": "+100%"}
        ]

    def test_car_brand_distribution(self, client, admin_headers, make_inspection):
        make_inspection(vehicle_data={"merekKendaraan": "Honda"})
        make_inspection(vehicle_data={"merekKendaraan": "Honda"})
        make_inspection(vehicle_data={"merekKendaraan": "Toyota"})
        make_inspection(vehicle_data={})

        response = client.get("/api/v1/dashboard/car-brand-distribution", headers=admin_headers)

        assert response.json() == [{"label": "Honda", "count": 2}, {"label": "Toyota", "count": 1}]

    def test_blockchain_status(self, client, admin_headers, make_inspection):
        make_inspection(InspectionStatus.ARCHIVED, nft_asset_id="asset-1")
        make_inspection()

        rows = client.get("/api/v1/dashboard/blockchain-status", headers=admin_headers).json()

        assert sorted((row["label"], row["count"]) for row in rows) == [("minted", 1), ("not_minted", 1)]

    def test_inspector_performance(self, client, admin_headers, make_user, make_inspection):
        inspector = make_user(UserRole.INSPECTOR, name="Budi")
        make_inspection(inspector_id=inspector.id, created_at=datetime.utcnow())
        make_inspection(inspector_id=inspector.id, created_at=datetime.utcnow() - timedelta(days=400))

        data = client.get("/api/v1/dashboard/inspector-performance", headers=admin_headers).json()["data"]

        assert data == [{
            "inspector": "Budi",
            "totalInspections": 2,
            "monthlyInspections": 1,
            "weeklyInspections": 1,
            "dailyInspections": 1,
        }]

    def test_targets(self, client, admin_headers, make_inspection):
        """The month target applies to this month's stats; all-time has none"""
        make_inspection(created_at=datetime.utcnow())

        response = client.post(
            "/api/v1/dashboard/inspection-target",
            json={"period": "MONTH", "target_value": 4},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["target_date"].endswith("-01")

        stats = client.get("/api/v1/dashboard/inspection-target-stats", headers=admin_headers).json()
        assert stats["thisMonth"] == {"totalInspections": 1, "targetInspections": 4, "percentageMet": "25.00%"}
        assert stats["allTime"]["targetInspections"] == 0

    def test_review_stats(self, client, admin_headers, make_inspection):
        make_inspection(InspectionStatus.APPROVED, created_at=datetime.utcnow())
        make_inspection(InspectionStatus.NEED_REVIEW, created_at=datetime.utcnow())

        stats = client.get("/api/v1/dashboard/review-stats", headers=admin_headers).json()

        assert stats["allTime"] == {"total": 2, "approved": 1, "needReview": 1, "percentageReviewed": "50.00%"}

    def test_invalid_timezone_on_trend(self, client, admin_headers):
        response = client.get("/api/v1/dashboard/order-trend?timezone=Nowhere/City", headers=admin_headers)

        assert response.status_code == 400
