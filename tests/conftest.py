"""
Test configuration and shared fixtures.

This file contains:
- Environment setup done before the application is imported
- Database and client fixtures
- User and token factories shared across test files
"""

import os
import tempfile

os.environ.setdefault("TESTING", "true")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-jwt-refresh-secret")
os.environ.setdefault("XENDIT_CALLBACK_TOKEN", "test-callback-token")
os.environ.setdefault("XENDIT_API_KEY", "xnd_test_key")
os.environ.setdefault("PDF_ARCHIVE_DIR", tempfile.mkdtemp(prefix="pdfarchived-"))
os.environ.setdefault("PDF_PUBLIC_BASE_URL", "http://testserver/pdfarchived")

from datetime import datetime
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.security import get_password_hash
from app.db.database import SessionLocal, engine
from app.db.models import Base
from app.domain.enums import UserRole, InspectionStatus
from app.application.use_cases.health_check import reset_health_cache
from app.infrastructure.orm import (
    UserModel,
    InspectionBranchCityModel,
    InspectionModel,
    CreditPackageModel,
)
from tests.helpers import TEST_PASSWORD, auth_headers


@pytest.fixture
def db_session():
    """Create all tables for one test and drop them afterwards."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """Create a test client for the app."""
    reset_health_cache()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory inserting a user row and returning it."""

    def _make_user(role=UserRole.CUSTOMER, email=None, username=None, credits=0, is_active=True, **fields):
        suffix = uuid4().hex[:8]
        user = UserModel(
            email=email or f"{role.value.lower()}-{suffix}@example.com",
            username=username or f"{role.value.lower()}_{suffix}",
            name=fields.pop("name", f"{role.value.title()} {suffix}"),
            password=get_password_hash(TEST_PASSWORD),
            role=role,
            credits=credits,
            is_active=is_active,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def customer(make_user):
    return make_user(UserRole.CUSTOMER)


@pytest.fixture
def branch(db_session):
    """Yogyakarta branch with code YOG."""
    row = InspectionBranchCityModel(city="Yogyakarta", code="YOG")
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture
def make_inspection(db_session, branch):
    """Factory inserting an inspection row."""
    counter = {"n": 0}

    def _make_inspection(status=InspectionStatus.NEED_REVIEW, **fields):
        counter["n"] += 1
        row = InspectionModel(
            pretty_id=fields.pop("pretty_id", f"YOG-01012026-{counter['n']:03d}"),
            branch_city_id=fields.pop("branch_city_id", branch.id),
            vehicle_plate_number=fields.pop("vehicle_plate_number", f"AB {1000 + counter['n']} XY"),
            inspection_date=fields.pop("inspection_date", datetime(2026, 1, 1)),
            overall_rating=fields.pop("overall_rating", "8"),
            identity_details=fields.pop(
                "identity_details", {"namaInspektor": "Inspector", "namaCustomer": "Customer", "cabangInspeksi": "Yogyakarta"}
            ),
            vehicle_data=fields.pop("vehicle_data", {"merekKendaraan": "Toyota", "tipeKendaraan": "Avanza"}),
            status=status,
            **fields,
        )
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        return row

    return _make_inspection


@pytest.fixture
def credit_package(db_session):
    row = CreditPackageModel(credits=10, price=100000, discount_pct=10, benefits={"note": "best value"})
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row
