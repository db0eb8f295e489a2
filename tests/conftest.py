"""
Shared pytest fixtures.

Every test runs against a fresh in-memory SQLite database; the schema is
created before and dropped after each test.
"""

import os
from datetime import datetime
from decimal import Decimal

import pytest

# Must be set before medcare.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("STRICT_STATUS_TRANSITIONS", "true")

from fastapi.testclient import TestClient  # noqa: E402

from medcare import config  # noqa: E402
from medcare.database import Base, SessionLocal, engine, get_db  # noqa: E402
from medcare.domain.appointments.service import AppointmentService  # noqa: E402
from medcare.main import app  # noqa: E402
from medcare.models import Doctor, MedicalService  # noqa: E402


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def db_session():
    """Session bound to a freshly created schema."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def strict_transitions(monkeypatch):
    """Strict lifecycle unless a test opts out."""
    monkeypatch.setattr(config, "STRICT_STATUS_TRANSITIONS", True)


# ============================================================================
# TEST DATA FIXTURES
# ============================================================================


@pytest.fixture
def make_doctor(db_session):
    def _make(name="Dr. House", specialization="Diagnostics", work_hours="09:00-17:00"):
        doctor = Doctor(name=name, specialization=specialization, work_hours=work_hours)
        db_session.add(doctor)
        db_session.commit()
        db_session.refresh(doctor)
        return doctor

    return _make


@pytest.fixture
def make_service(db_session):
    def _make(name="Consultation", price="50.00", duration=30):
        service = MedicalService(name=name, price=Decimal(price), duration=duration)
        db_session.add(service)
        db_session.commit()
        db_session.refresh(service)
        return service

    return _make


@pytest.fixture
def doctor(make_doctor):
    """D1: works 09:00-17:00."""
    return make_doctor()


@pytest.fixture
def service(make_service):
    """S1: 30 minute consultation."""
    return make_service()


@pytest.fixture
def scheduler(db_session):
    return AppointmentService(db_session)


@pytest.fixture
def day():
    """Build naive datetimes on a fixed Monday."""

    def _at(hour, minute=0):
        return datetime(2024, 1, 15, hour, minute)

    return _at


# ============================================================================
# API FIXTURES
# ============================================================================


@pytest.fixture
def client():
    """TestClient with a fresh schema; each request gets its own session."""
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
        Base.metadata.drop_all(bind=engine)
