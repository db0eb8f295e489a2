"""Doctor service - Business logic for the doctor directory"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...exceptions import NotFoundError, ValidationFailure
from ...models import Doctor
from ...shared.validators import parse_working_hours, validate_required_text
from ...utils.sanitization import sanitize_text_field
from .repository import DoctorRepository

logger = logging.getLogger(__name__)


class DoctorService:
    """Service layer for doctor directory operations"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = DoctorRepository()

    def get_doctors(self) -> list[Doctor]:
        """Get all doctors"""
        return self.repo.get_doctors(self.db)

    def get_doctor(self, doctor_id: int) -> Doctor:
        """Get a specific doctor"""
        doctor = self.repo.get_doctor_by_id(self.db, doctor_id)
        if not doctor:
            raise NotFoundError("Doctor", doctor_id)
        return doctor

    def get_doctors_by_specialization(self, specialization: str) -> list[Doctor]:
        """Get doctors by specialization tag"""
        return self.repo.get_doctors_by_specialization(self.db, sanitize_text_field(specialization))

    def create_doctor(self, name: str, specialization: str, work_hours: str) -> Doctor:
        """Create a new doctor; working hours are validated once here"""
        doctor_data = {
            "name": self._require_text(name, "name"),
            "specialization": self._require_text(specialization, "specialization"),
            "work_hours": self._normalize_work_hours(work_hours),
        }

        doctor = self.repo.create_doctor(self.db, **doctor_data)
        logger.info(f"✅ Doctor {doctor.id} created ({doctor.specialization}, {doctor.work_hours})")
        return doctor

    def update_doctor(
        self,
        doctor_id: int,
        name: Optional[str] = None,
        specialization: Optional[str] = None,
        work_hours: Optional[str] = None,
    ) -> Doctor:
        """Update a doctor"""
        doctor = self.get_doctor(doctor_id)

        updates = {}
        if name is not None:
            updates["name"] = self._require_text(name, "name")
        if specialization is not None:
            updates["specialization"] = self._require_text(specialization, "specialization")
        if work_hours is not None:
            updates["work_hours"] = self._normalize_work_hours(work_hours)

        return self.repo.update_doctor(self.db, doctor, **updates)

    def delete_doctor(self, doctor_id: int) -> dict:
        """Delete a doctor that no appointment references"""
        doctor = self.get_doctor(doctor_id)
        if self.repo.has_appointments(self.db, doctor_id):
            raise ValidationFailure(
                f"Doctor {doctor_id} still has appointments and cannot be deleted"
            )
        self.repo.delete_doctor(self.db, doctor)
        logger.info(f"🗑️ Doctor {doctor_id} deleted")
        return {"message": "Doctor deleted successfully"}

    @staticmethod
    def _normalize_work_hours(work_hours: str) -> str:
        try:
            return str(parse_working_hours(work_hours))
        except ValueError as e:
            raise ValidationFailure(str(e))

    @staticmethod
    def _require_text(value: Optional[str], field_name: str) -> str:
        try:
            return validate_required_text(sanitize_text_field(value), field_name)
        except ValueError as e:
            raise ValidationFailure(str(e))
