"""Doctor router - FastAPI endpoints for the doctor directory"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...database import get_db
from ..appointments.service import AppointmentService
from .schemas import AvailabilityResponse, DoctorCreate, DoctorResponse, DoctorUpdate
from .service import DoctorService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/doctors", tags=["Doctors"])


def get_doctor_service(db: Session = Depends(get_db)) -> DoctorService:
    """Dependency injection for DoctorService"""
    return DoctorService(db)


def get_scheduling_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for availability checks"""
    return AppointmentService(db)


@router.get("", response_model=list[DoctorResponse])
async def get_doctors(
    service: DoctorService = Depends(get_doctor_service),
):
    """Get all doctors"""
    return [DoctorResponse.from_doctor(d) for d in service.get_doctors()]


@router.get("/specialization/{specialization}", response_model=list[DoctorResponse])
async def get_doctors_by_specialization(
    specialization: str,
    service: DoctorService = Depends(get_doctor_service),
):
    """Get doctors with the given specialization"""
    doctors = service.get_doctors_by_specialization(specialization)
    return [DoctorResponse.from_doctor(d) for d in doctors]


@router.get("/{doctor_id}", response_model=DoctorResponse)
async def get_doctor(
    doctor_id: int,
    service: DoctorService = Depends(get_doctor_service),
):
    """Get a specific doctor"""
    return DoctorResponse.from_doctor(service.get_doctor(doctor_id))


@router.get("/{doctor_id}/availability", response_model=AvailabilityResponse)
async def check_doctor_availability(
    doctor_id: int,
    dateTime: datetime = Query(..., description="Candidate start (local time)"),
    duration: int = Query(..., description="Duration in minutes"),
    scheduler: AppointmentService = Depends(get_scheduling_service),
):
    """Check whether the doctor can take an appointment at dateTime"""
    available = scheduler.check_availability(doctor_id, dateTime, duration)
    return AvailabilityResponse(
        doctorId=doctor_id,
        dateTime=dateTime.isoformat(),
        duration=duration,
        available=available,
    )


@router.post("", response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
async def create_doctor(
    data: DoctorCreate,
    service: DoctorService = Depends(get_doctor_service),
):
    """Create a new doctor"""
    doctor = service.create_doctor(data.name, data.specialization, data.workHours)
    return DoctorResponse.from_doctor(doctor)


@router.put("/{doctor_id}", response_model=DoctorResponse)
async def update_doctor(
    doctor_id: int,
    data: DoctorUpdate,
    service: DoctorService = Depends(get_doctor_service),
):
    """Update a doctor"""
    doctor = service.update_doctor(
        doctor_id,
        name=data.name,
        specialization=data.specialization,
        work_hours=data.workHours,
    )
    return DoctorResponse.from_doctor(doctor)


@router.delete("/{doctor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_doctor(
    doctor_id: int,
    service: DoctorService = Depends(get_doctor_service),
):
    """Delete a doctor"""
    service.delete_doctor(doctor_id)


__all__ = [
    "router",
    "get_doctors",
    "get_doctors_by_specialization",
    "get_doctor",
    "check_doctor_availability",
    "create_doctor",
    "update_doctor",
    "delete_doctor",
]
