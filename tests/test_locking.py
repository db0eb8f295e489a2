"""
Concurrency tests for the per-doctor exclusive sections.

Booking races run against a file-backed SQLite database so each worker thread
gets its own connection, as separate requests would.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from medcare.database import Base
from medcare.domain.appointments.locking import DoctorLockRegistry
from medcare.domain.appointments.service import AppointmentService
from medcare.exceptions import SlotConflictError
from medcare.models import Appointment, Doctor, MedicalService

WORKERS = 8
SLOT = datetime(2024, 1, 15, 10, 0)


@pytest.fixture
def file_sessions(tmp_path):
    """Session factory over a throwaway SQLite file shared by all threads."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'concurrency.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        engine.dispose()


@pytest.fixture
def seeded_ids(file_sessions):
    """Two doctors and one 30 minute service; returns their ids."""
    db = file_sessions()
    try:
        doctors = [
            Doctor(name=f"Dr. {n}", specialization="GP", work_hours="09:00-17:00")
            for n in ("House", "Grey")
        ]
        service = MedicalService(name="Consultation", price=Decimal("50.00"), duration=30)
        db.add_all([*doctors, service])
        db.commit()
        return [d.id for d in doctors], service.id
    finally:
        db.close()


def _race(file_sessions, bookings):
    """Start every booking at once; each returns 'ok' or 'conflict'."""
    barrier = threading.Barrier(len(bookings))

    def book(patient_name, doctor_id, service_id):
        db = file_sessions()
        try:
            barrier.wait()
            AppointmentService(db).create_appointment(patient_name, doctor_id, service_id, SLOT)
            return "ok"
        except SlotConflictError:
            return "conflict"
        finally:
            db.close()

    with ThreadPoolExecutor(max_workers=len(bookings)) as executor:
        futures = [executor.submit(book, *args) for args in bookings]
        return [f.result() for f in futures]


class TestConcurrentBooking:
    def test_only_one_booking_wins_the_same_slot(self, file_sessions, seeded_ids):
        (doctor_id, _), service_id = seeded_ids
        bookings = [(f"Patient {i}", doctor_id, service_id) for i in range(WORKERS)]

        results = _race(file_sessions, bookings)

        assert results.count("ok") == 1
        assert results.count("conflict") == WORKERS - 1

        db = file_sessions()
        try:
            assert db.query(Appointment).filter(Appointment.doctor_id == doctor_id).count() == 1
        finally:
            db.close()

    def test_different_doctors_do_not_block_each_other(self, file_sessions, seeded_ids):
        doctor_ids, service_id = seeded_ids
        bookings = [(f"Patient {d}", d, service_id) for d in doctor_ids]

        assert _race(file_sessions, bookings) == ["ok", "ok"]


class TestDoctorLockRegistry:
    def test_same_doctor_is_serialized(self):
        registry = DoctorLockRegistry()
        counter = {"value": 0}

        def increment():
            with registry.hold(1):
                current = counter["value"]
                time.sleep(0.001)
                counter["value"] = current + 1

        with ThreadPoolExecutor(max_workers=WORKERS) as executor:
            for _ in range(50):
                executor.submit(increment)

        assert counter["value"] == 50

    def test_reentrant_for_the_holding_thread(self):
        registry = DoctorLockRegistry()

        with registry.hold(1, 2):
            with registry.hold(2):
                entered = True

        assert entered

    def test_duplicate_ids_are_taken_once(self):
        registry = DoctorLockRegistry()

        with registry.hold(3, 3, 3):
            pass

        def take():
            with registry.hold(3):
                return True

        # Fully released, so another thread gets it straight away
        with ThreadPoolExecutor(max_workers=1) as executor:
            assert executor.submit(take).result(timeout=5)
