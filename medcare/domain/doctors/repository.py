"""Doctor repository - Database operations for the doctor directory"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, Doctor


class DoctorRepository:
    """Repository for doctor database operations"""

    @staticmethod
    def get_doctors(db: Session) -> list[Doctor]:
        """Get all doctors in insertion order"""
        return db.query(Doctor).order_by(Doctor.id).all()

    @staticmethod
    def get_doctor_by_id(db: Session, doctor_id: int) -> Optional[Doctor]:
        """Get a specific doctor by ID"""
        return db.query(Doctor).filter(Doctor.id == doctor_id).first()

    @staticmethod
    def get_doctors_by_specialization(db: Session, specialization: str) -> list[Doctor]:
        """Get doctors with an exact specialization tag"""
        return (
            db.query(Doctor)
            .filter(Doctor.specialization == specialization)
            .order_by(Doctor.id)
            .all()
        )

    @staticmethod
    def lock_doctor(db: Session, doctor_id: int) -> Optional[Doctor]:
        """
        Load a doctor with a row lock (SELECT ... FOR UPDATE).
        Concurrent schedulers for the same doctor wait here until the holder commits.
        Backends without row locks (SQLite) ignore the clause.
        """
        return db.query(Doctor).filter(Doctor.id == doctor_id).with_for_update().first()

    @staticmethod
    def create_doctor(db: Session, **doctor_data) -> Doctor:
        """Create a new doctor"""
        doctor = Doctor(**doctor_data)
        db.add(doctor)
        db.commit()
        db.refresh(doctor)
        return doctor

    @staticmethod
    def update_doctor(db: Session, doctor: Doctor, **updates) -> Doctor:
        """Update a doctor with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(doctor, key):
                setattr(doctor, key, value)

        db.commit()
        db.refresh(doctor)
        return doctor

    @staticmethod
    def delete_doctor(db: Session, doctor: Doctor) -> None:
        """Delete a doctor"""
        db.delete(doctor)
        db.commit()

    @staticmethod
    def has_appointments(db: Session, doctor_id: int) -> bool:
        """Check whether any appointment references the doctor"""
        return (
            db.query(Appointment.id).filter(Appointment.doctor_id == doctor_id).first()
            is not None
        )
