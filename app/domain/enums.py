"""
Domain Enums - Business domain enumerations
"""

from enum import Enum


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    SUPERADMIN = "SUPERADMIN"
    REVIEWER = "REVIEWER"
    INSPECTOR = "INSPECTOR"
    CUSTOMER = "CUSTOMER"
    DEVELOPER = "DEVELOPER"


class InspectionStatus(str, Enum):
    NEED_REVIEW = "NEED_REVIEW"
    APPROVED = "APPROVED"
    ARCHIVING = "ARCHIVING"
    ARCHIVED = "ARCHIVED"
    FAIL_ARCHIVE = "FAIL_ARCHIVE"
    DEACTIVATED = "DEACTIVATED"


class PhotoType(str, Enum):
    FIXED = "FIXED"
    DYNAMIC = "DYNAMIC"
    DOCUMENT = "DOCUMENT"


class PurchaseStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    EXPIRED = "EXPIRED"


class PaymentGateway(str, Enum):
    XENDIT = "XENDIT"


class TargetPeriod(str, Enum):
    YEAR = "YEAR"
    MONTH = "MONTH"
    WEEK = "WEEK"
    DAY = "DAY"


class TimePeriod(str, Enum):
    """Period filter accepted by the dashboard endpoints"""
    ALL_TIME = "ALL_TIME"
    YEAR = "YEAR"
    MONTH = "MONTH"
    WEEK = "WEEK"
    DAY = "DAY"


class TrendRangeType(str, Enum):
    TODAY = "today"
    LAST_7_DAYS = "last_7_days"
    LAST_30_DAYS = "last_30_days"
    MONTH_TO_DATE = "month_to_date"
    LAST_12_MONTHS = "last_12_months"
    YEAR_TO_DATE = "year_to_date"
    LAST_3_YEARS = "last_3_years"
    CUSTOM = "custom"


# Roles allowed to see inspections in any status
STAFF_REVIEW_ROLES = (UserRole.ADMIN, UserRole.SUPERADMIN, UserRole.REVIEWER)

# Statuses an inspection may no longer be edited in
LOCKED_INSPECTION_STATUSES = (
    InspectionStatus.APPROVED,
    InspectionStatus.ARCHIVING,
    InspectionStatus.ARCHIVED,
)
