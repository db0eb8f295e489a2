"""Appointment service - Scheduling orchestration for appointments"""

import logging
from datetime import datetime
from typing import Optional, Union

from sqlalchemy.orm import Session

from ...exceptions import NotFoundError, SlotConflictError, ValidationFailure
from ...models import Appointment, AppointmentStatus, MedicalService
from ...shared.validators import validate_required_text
from ...utils.sanitization import sanitize_text_field
from ..catalog.repository import MedicalServiceRepository
from ..doctors.repository import DoctorRepository
from ..reports.statistics import DoctorCount, ServiceCount, count_by_doctor, count_by_service
from . import lifecycle
from .availability import AvailabilityChecker, occupied_interval
from .locking import doctor_locks
from .repository import AppointmentRepository

logger = logging.getLogger(__name__)


class AppointmentService:
    """
    Service layer for appointment scheduling.

    The only component that mutates an appointment's status, start time,
    doctor or service. Every time-affecting write re-validates the slot with
    the AvailabilityChecker inside the doctor's exclusive section.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.doctor_repo = DoctorRepository()
        self.service_repo = MedicalServiceRepository()
        self.availability = AvailabilityChecker(db)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_appointment(self, appointment_id: int) -> Appointment:
        """Get a specific appointment"""
        appointment = self.repo.find_by_id(self.db, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    def list_appointments(self) -> list[Appointment]:
        """Get all appointments in insertion order"""
        return self.repo.find_all(self.db)

    def list_appointments_in_range(self, start: datetime, end: datetime) -> list[Appointment]:
        """Get appointments starting within [start, end] inclusive"""
        start = self._require_naive(start, "start")
        end = self._require_naive(end, "end")
        if start > end:
            raise ValidationFailure("Range start must not be after range end")
        return self.repo.find_by_date_range(self.db, start, end)

    def check_availability(
        self, doctor_id: int, date_time: datetime, duration_minutes: int
    ) -> bool:
        """Check whether a doctor can take an appointment of the given length"""
        date_time = self._require_naive(date_time, "dateTime")
        return self.availability.is_available(doctor_id, date_time, duration_minutes)

    def most_requested_doctors(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> list[DoctorCount]:
        """Doctors ordered by number of appointments, most requested first"""
        return count_by_doctor(self._appointments_for_statistics(start, end))

    def most_requested_services(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> list[ServiceCount]:
        """Medical services ordered by number of appointments, most requested first"""
        return count_by_service(self._appointments_for_statistics(start, end))

    def _appointments_for_statistics(
        self, start: Optional[datetime], end: Optional[datetime]
    ) -> list[Appointment]:
        if start is None and end is None:
            return self.repo.find_all(self.db)
        if start is None or end is None:
            raise ValidationFailure("Both start and end are required to filter statistics")
        return self.list_appointments_in_range(start, end)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_appointment(
        self, patient_name: str, doctor_id: int, service_id: int, date_time: datetime
    ) -> Appointment:
        """
        Book a new appointment.

        Raises:
            ValidationFailure: empty patient name or timezone-aware start
            NotFoundError: unknown doctor or service
            SlotConflictError: outside working hours or overlapping a booking
        """
        patient_name = self._clean_patient_name(patient_name)
        date_time = self._require_naive(date_time, "dateTime")
        service = self._get_medical_service(service_id)

        with doctor_locks.hold(doctor_id):
            try:
                self._lock_doctor(doctor_id)
                self._ensure_slot_available(doctor_id, date_time, service)

                _, end_time = occupied_interval(date_time, service.duration)
                appointment = Appointment(
                    patient_name=patient_name,
                    doctor_id=doctor_id,
                    service_id=service.id,
                    date_time=date_time,
                    end_time=end_time,
                    status=lifecycle.INITIAL_STATUS.value,
                )
                appointment = self.repo.save(self.db, appointment)
            except Exception:
                # Releases the doctor row lock and discards pending changes
                self.db.rollback()
                raise

        logger.info(
            f"✅ Appointment {appointment.id} booked: doctor {doctor_id}, "
            f"{date_time:%Y-%m-%d %H:%M}-{end_time:%H:%M}"
        )
        return appointment

    def update_appointment(
        self,
        appointment_id: int,
        patient_name: Optional[str] = None,
        doctor_id: Optional[int] = None,
        service_id: Optional[int] = None,
        date_time: Optional[datetime] = None,
        status: Optional[Union[str, AppointmentStatus]] = None,
    ) -> Appointment:
        """
        Replace an appointment's fields.

        Omitted fields keep their stored value. The slot is re-validated
        (excluding this appointment) only when doctor, service or start time
        actually change; patient-name and status edits never hit the slot check.

        Stored values are re-read after the doctor locks are taken. If another
        writer reassigned the appointment in the meantime, the locks are
        swapped for the new doctor and the read is repeated.
        """
        if patient_name is not None:
            patient_name = self._clean_patient_name(patient_name)
        if date_time is not None:
            date_time = self._require_naive(date_time, "dateTime")
        requested_service = (
            self._get_medical_service(service_id) if service_id is not None else None
        )

        locked_doctor_id = self.get_appointment(appointment_id).doctor_id
        while True:
            target_doctor_id = doctor_id if doctor_id is not None else locked_doctor_id
            with doctor_locks.hold(locked_doctor_id, target_doctor_id):
                existing = self.repo.find_by_id(self.db, appointment_id, refresh=True)
                if not existing:
                    raise NotFoundError("Appointment", appointment_id)
                if existing.doctor_id == locked_doctor_id:
                    return self._apply_update(
                        existing,
                        patient_name=patient_name,
                        doctor_id=target_doctor_id,
                        service=requested_service if requested_service else existing.service,
                        date_time=date_time if date_time is not None else existing.date_time,
                        status=status,
                    )
            logger.info(
                f"🔄 Appointment {appointment_id} moved to doctor {existing.doctor_id} "
                f"concurrently; retrying update"
            )
            locked_doctor_id = existing.doctor_id

    def update_status(
        self, appointment_id: int, new_status: Union[str, AppointmentStatus]
    ) -> Appointment:
        """Apply a lifecycle transition; the slot itself never moves"""
        appointment = self.get_appointment(appointment_id)
        appointment = self._update_in_place(appointment, status=new_status)
        logger.info(f"📋 Appointment {appointment_id} status -> {appointment.status}")
        return appointment

    def delete_appointment(self, appointment_id: int) -> None:
        """Remove an appointment unconditionally"""
        if not self.repo.exists_by_id(self.db, appointment_id):
            raise NotFoundError("Appointment", appointment_id)
        self.repo.delete_by_id(self.db, appointment_id)
        logger.info(f"🗑️ Appointment {appointment_id} deleted")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _update_in_place(
        self,
        appointment: Appointment,
        status: Optional[Union[str, AppointmentStatus]] = None,
        patient_name: Optional[str] = None,
    ) -> Appointment:
        """
        Apply edits that leave the slot where it is.

        Reviving a cancelled appointment (possible only with lenient
        transitions) re-claims its slot, so that case is validated inside the
        doctor's exclusive section.
        """
        target = lifecycle.parse_status(status) if status is not None else None
        reclaims_slot = (
            target is not None and not appointment.is_blocking and lifecycle.is_blocking(target)
        )
        lock_ids = (appointment.doctor_id,) if reclaims_slot else ()

        with doctor_locks.hold(*lock_ids):
            try:
                if target is not None:
                    lifecycle.apply_transition(appointment, target)
                if reclaims_slot:
                    self._lock_doctor(appointment.doctor_id)
                    self._ensure_slot_available(
                        appointment.doctor_id,
                        appointment.date_time,
                        appointment.service,
                        exclude_id=appointment.id,
                    )
                if patient_name is not None:
                    appointment.patient_name = patient_name
                return self.repo.save(self.db, appointment)
            except Exception:
                self.db.rollback()
                raise

    def _apply_update(
        self,
        existing: Appointment,
        patient_name: Optional[str],
        doctor_id: int,
        service: MedicalService,
        date_time: datetime,
        status: Optional[Union[str, AppointmentStatus]],
    ) -> Appointment:
        """Write an update while the old and new doctors' locks are held"""
        slot_changed = (
            doctor_id != existing.doctor_id
            or service.id != existing.service_id
            or date_time != existing.date_time
        )
        if not slot_changed:
            return self._update_in_place(existing, status=status, patient_name=patient_name)

        try:
            self._lock_doctor(doctor_id)
            if status is not None:
                lifecycle.apply_transition(existing, status)

            # A cancelled appointment holds no slot, so moving it needs no check
            if existing.is_blocking:
                self._ensure_slot_available(doctor_id, date_time, service, exclude_id=existing.id)

            _, end_time = occupied_interval(date_time, service.duration)
            if patient_name is not None:
                existing.patient_name = patient_name
            existing.doctor_id = doctor_id
            existing.service_id = service.id
            existing.date_time = date_time
            existing.end_time = end_time

            appointment = self.repo.save(self.db, existing)
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"✅ Appointment {appointment.id} moved: doctor {doctor_id}, "
            f"{date_time:%Y-%m-%d %H:%M}-{end_time:%H:%M}"
        )
        return appointment

    def _ensure_slot_available(
        self,
        doctor_id: int,
        date_time: datetime,
        service: MedicalService,
        exclude_id: Optional[int] = None,
    ) -> None:
        available, conflicts = self.availability.check(
            doctor_id, date_time, service.duration, exclude_appointment_id=exclude_id
        )
        if available:
            return

        start, end = occupied_interval(date_time, service.duration)
        conflicting_ids = [a.id for a in conflicts]
        logger.warning(
            f"⚠️ Slot rejected for doctor {doctor_id} at {start:%Y-%m-%d %H:%M} "
            f"({service.duration} min); conflicts: {conflicting_ids or 'working hours'}"
        )
        raise SlotConflictError(doctor_id, start, end, conflicting_ids)

    def _lock_doctor(self, doctor_id: int) -> None:
        if not self.doctor_repo.lock_doctor(self.db, doctor_id):
            raise NotFoundError("Doctor", doctor_id)

    def _get_medical_service(self, service_id: int) -> MedicalService:
        service = self.service_repo.get_service_by_id(self.db, service_id)
        if not service:
            raise NotFoundError("Medical service", service_id)
        return service

    @staticmethod
    def _clean_patient_name(patient_name: Optional[str]) -> str:
        try:
            return validate_required_text(sanitize_text_field(patient_name), "patientName")
        except ValueError as e:
            raise ValidationFailure(str(e))

    @staticmethod
    def _require_naive(value: datetime, field_name: str) -> datetime:
        if not isinstance(value, datetime):
            raise ValidationFailure(f"{field_name} must be a date and time")
        if value.tzinfo is not None:
            raise ValidationFailure(
                f"{field_name} must be a local date and time without a timezone offset"
            )
        return value
