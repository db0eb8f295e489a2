"""Medical service repository - Database operations for the service catalog"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, MedicalService


class MedicalServiceRepository:
    """Repository for medical service database operations"""

    @staticmethod
    def get_services(db: Session) -> list[MedicalService]:
        """Get all medical services in insertion order"""
        return db.query(MedicalService).order_by(MedicalService.id).all()

    @staticmethod
    def get_service_by_id(db: Session, service_id: int) -> Optional[MedicalService]:
        """Get a specific medical service by ID"""
        return db.query(MedicalService).filter(MedicalService.id == service_id).first()

    @staticmethod
    def create_service(db: Session, **service_data) -> MedicalService:
        """Create a new medical service"""
        service = MedicalService(**service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: MedicalService, **updates) -> MedicalService:
        """Update a medical service with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(service, key):
                setattr(service, key, value)

        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def delete_service(db: Session, service: MedicalService) -> None:
        """Delete a medical service"""
        db.delete(service)
        db.commit()

    @staticmethod
    def is_referenced(db: Session, service_id: int) -> bool:
        """Check whether any appointment references the service"""
        return (
            db.query(Appointment.id).filter(Appointment.service_id == service_id).first()
            is not None
        )
