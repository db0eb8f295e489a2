"""
Availability Checker

Decides whether a doctor can take an appointment at a given time by combining:
- the doctor's daily working-hours window
- the doctor's existing blocking (non-cancelled) appointments

Read-only: nothing here mutates the session.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...exceptions import NotFoundError, ValidationFailure
from ...models import Appointment
from ..doctors.repository import DoctorRepository
from .repository import AppointmentRepository

logger = logging.getLogger(__name__)


def intervals_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Half-open overlap test: [a_start, a_end) and [b_start, b_end) intersect"""
    return a_start < b_end and b_start < a_end


def occupied_interval(start: datetime, duration_minutes: int) -> tuple[datetime, datetime]:
    return start, start + timedelta(minutes=duration_minutes)


class AvailabilityChecker:
    """Pure predicate over the doctor directory and the appointment store"""

    def __init__(self, db: Session):
        self.db = db
        self.doctors = DoctorRepository()
        self.appointments = AppointmentRepository()

    def is_available(
        self,
        doctor_id: int,
        candidate_start: datetime,
        duration_minutes: int,
        exclude_appointment_id: Optional[int] = None,
    ) -> bool:
        """
        Check whether [candidate_start, candidate_start + duration) is bookable.

        Args:
            doctor_id: doctor to check
            candidate_start: proposed start (naive local time)
            duration_minutes: positive duration
            exclude_appointment_id: appointment to ignore (when moving it)

        Returns:
            True iff the interval fits the working-hours window and overlaps
            no blocking appointment of the doctor

        Raises:
            NotFoundError: unknown doctor
            ValidationFailure: non-positive duration
        """
        return self.check(doctor_id, candidate_start, duration_minutes, exclude_appointment_id)[0]

    def find_conflicts(
        self,
        doctor_id: int,
        candidate_start: datetime,
        duration_minutes: int,
        exclude_appointment_id: Optional[int] = None,
    ) -> list[Appointment]:
        """Blocking appointments of the doctor overlapping the candidate interval"""
        self._validate_duration(duration_minutes)
        start, end = occupied_interval(candidate_start, duration_minutes)
        return self.appointments.find_by_doctor_and_range(
            self.db, doctor_id, start, end, exclude_appointment_id=exclude_appointment_id
        )

    def check(
        self,
        doctor_id: int,
        candidate_start: datetime,
        duration_minutes: int,
        exclude_appointment_id: Optional[int] = None,
    ) -> tuple[bool, list[Appointment]]:
        """
        Run the availability algorithm.

        Returns:
            (available, conflicting appointments). The conflict list is empty
            when the slot is rejected by working hours alone.
        """
        doctor = self.doctors.get_doctor_by_id(self.db, doctor_id)
        if not doctor:
            raise NotFoundError("Doctor", doctor_id)

        self._validate_duration(duration_minutes)

        # 1. Working-hours window (fail closed on malformed data)
        window = doctor.working_hours
        if window is None:
            logger.warning(
                f"⚠️ Doctor {doctor_id} has malformed working hours '{doctor.work_hours}'; "
                "treating as unavailable"
            )
            return False, []

        start, end = occupied_interval(candidate_start, duration_minutes)
        if not window.contains(start, end):
            logger.debug(
                f"Doctor {doctor_id}: {start:%Y-%m-%d %H:%M}-{end:%H:%M} outside window {window}"
            )
            return False, []

        # 2. Overlap with blocking appointments
        conflicts = self.appointments.find_by_doctor_and_range(
            self.db, doctor_id, start, end, exclude_appointment_id=exclude_appointment_id
        )
        return not conflicts, conflicts

    @staticmethod
    def _validate_duration(duration_minutes) -> None:
        if (
            not isinstance(duration_minutes, int)
            or isinstance(duration_minutes, bool)
            or duration_minutes <= 0
        ):
            raise ValidationFailure("Duration must be a positive number of minutes")
