# backend/tests/conftest.py
"""
Pytest configuration for the Linglix backend.

Every test gets a fresh in-memory SQLite database. The ``client`` fixture
routes the FastAPI app's ``get_db`` dependency to the same session the
test uses, so rows created through ``db`` are visible over HTTP.
"""

import os

# Set test configuration BEFORE any linglix imports
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from linglix.api.dependencies.database import get_db
from linglix.core.enums import ApprovalStatus
from linglix.database import Base
from linglix.domain.availability_engine import day_of_week
from linglix.main import app
from linglix.models import RecurringAvailability, TutorProfile
from linglix.utils.time_utils import utc_now

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=test_engine, expire_on_commit=False
)


@pytest.fixture(scope="function")
def db():
    """Create a new database session for each test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db: Session):
    """Create a test client with the test database."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


@pytest.fixture
def make_tutor(db: Session) -> Callable[..., TutorProfile]:
    """Factory for tutor profiles; approved and active unless told otherwise."""
    counter = {"n": 0}

    def _make(
        *,
        hourly_rate: Decimal = Decimal("60.00"),
        is_active: bool = True,
        approval_status: ApprovalStatus = ApprovalStatus.APPROVED,
    ) -> TutorProfile:
        counter["n"] += 1
        tutor = TutorProfile(
            user_id=f"user-{counter['n']}",
            display_name=f"Tutor {counter['n']}",
            hourly_rate=hourly_rate,
            is_active=is_active,
            approval_status=approval_status.value,
        )
        db.add(tutor)
        db.commit()
        return tutor

    return _make


@pytest.fixture
def tutor(make_tutor) -> TutorProfile:
    return make_tutor()


@pytest.fixture
def add_window(db: Session) -> Callable[..., RecurringAvailability]:
    def _add(
        tutor_id: str,
        day: int,
        start_time: str = "09:00",
        end_time: str = "17:00",
        is_active: bool = True,
    ) -> RecurringAvailability:
        window = RecurringAvailability(
            tutor_id=tutor_id,
            day_of_week=day,
            start_time=start_time,
            end_time=end_time,
            is_active=is_active,
        )
        db.add(window)
        db.commit()
        return window

    return _add


@pytest.fixture
def weekly_availability(tutor: TutorProfile, add_window) -> TutorProfile:
    """The default tutor with 09:00-17:00 UTC every day of the week."""
    for day in range(7):
        add_window(tutor.id, day)
    return tutor


@pytest.fixture
def booking_day() -> date:
    """A UTC date comfortably inside the advance-booking window."""
    return (utc_now() + timedelta(days=7)).date()


@pytest.fixture
def slot_at(booking_day: date) -> Callable[..., datetime]:
    def _at(hour: int, minute: int = 0, day: date = None) -> datetime:
        d = day or booking_day
        return datetime(d.year, d.month, d.day, hour, minute, tzinfo=timezone.utc)

    return _at


@pytest.fixture
def booking_weekday(booking_day: date) -> int:
    return day_of_week(booking_day)
