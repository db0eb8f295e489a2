"""Service catalog - Business logic for medical services"""

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from ...exceptions import NotFoundError, ValidationFailure
from ...models import MedicalService
from ...shared.validators import validate_required_text
from ...utils.sanitization import sanitize_text_field
from .repository import MedicalServiceRepository

logger = logging.getLogger(__name__)


class MedicalServiceService:
    """Service layer for the medical service catalog"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MedicalServiceRepository()

    def get_services(self) -> list[MedicalService]:
        """Get all medical services"""
        return self.repo.get_services(self.db)

    def get_service(self, service_id: int) -> MedicalService:
        """Get a specific medical service"""
        service = self.repo.get_service_by_id(self.db, service_id)
        if not service:
            raise NotFoundError("Medical service", service_id)
        return service

    def create_service(self, name: str, price: Decimal, duration: int) -> MedicalService:
        """Create a new medical service"""
        self._validate_price(price)
        self._validate_duration(duration)

        service = self.repo.create_service(
            self.db,
            name=self._require_name(name),
            price=Decimal(price),
            duration=duration,
        )
        logger.info(f"✅ Medical service {service.id} created ({service.duration} min)")
        return service

    def update_service(
        self,
        service_id: int,
        name: Optional[str] = None,
        price: Optional[Decimal] = None,
        duration: Optional[int] = None,
    ) -> MedicalService:
        """
        Update a medical service.

        The duration of a service that appointments already reference is
        frozen: it defines their booked intervals.
        """
        service = self.get_service(service_id)

        updates = {}
        if name is not None:
            updates["name"] = self._require_name(name)
        if price is not None:
            self._validate_price(price)
            updates["price"] = Decimal(price)
        if duration is not None and duration != service.duration:
            self._validate_duration(duration)
            if self.repo.is_referenced(self.db, service_id):
                raise ValidationFailure(
                    f"Medical service {service_id} is referenced by appointments; "
                    "its duration cannot change"
                )
            updates["duration"] = duration

        return self.repo.update_service(self.db, service, **updates)

    def delete_service(self, service_id: int) -> dict:
        """Delete a medical service that no appointment references"""
        service = self.get_service(service_id)
        if self.repo.is_referenced(self.db, service_id):
            raise ValidationFailure(
                f"Medical service {service_id} is referenced by appointments and cannot be deleted"
            )
        self.repo.delete_service(self.db, service)
        logger.info(f"🗑️ Medical service {service_id} deleted")
        return {"message": "Medical service deleted successfully"}

    @staticmethod
    def _require_name(name: Optional[str]) -> str:
        try:
            return validate_required_text(sanitize_text_field(name), "name")
        except ValueError as e:
            raise ValidationFailure(str(e))

    @staticmethod
    def _validate_price(price) -> None:
        if price is None or Decimal(price) < 0:
            raise ValidationFailure("Price must not be negative")

    @staticmethod
    def _validate_duration(duration) -> None:
        if not isinstance(duration, int) or isinstance(duration, bool) or duration <= 0:
            raise ValidationFailure("Duration must be a positive number of minutes")
