"""Appointment router - FastAPI endpoints for scheduling"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatusUpdate,
    AppointmentUpdate,
)
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


@router.get("", response_model=list[AppointmentResponse])
async def get_appointments(
    service: AppointmentService = Depends(get_appointment_service),
):
    """Get all appointments"""
    return [AppointmentResponse.from_appointment(a) for a in service.list_appointments()]


@router.get("/date-range", response_model=list[AppointmentResponse])
async def get_appointments_by_date_range(
    start: datetime = Query(..., description="Range start (inclusive)"),
    end: datetime = Query(..., description="Range end (inclusive)"),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Get appointments starting within [start, end]"""
    appointments = service.list_appointments_in_range(start, end)
    return [AppointmentResponse.from_appointment(a) for a in appointments]


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Get a specific appointment"""
    return AppointmentResponse.from_appointment(service.get_appointment(appointment_id))


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    data: AppointmentCreate,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Book a new appointment (status NEW)"""
    appointment = service.create_appointment(
        data.patientName, data.doctorId, data.serviceId, data.dateTime
    )
    return AppointmentResponse.from_appointment(appointment)


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Update an appointment; moving it re-checks availability"""
    appointment = service.update_appointment(
        appointment_id,
        patient_name=data.patientName,
        doctor_id=data.doctorId,
        service_id=data.serviceId,
        date_time=data.dateTime,
        status=data.status,
    )
    return AppointmentResponse.from_appointment(appointment)


@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: int,
    data: AppointmentStatusUpdate,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Change the lifecycle status of an appointment"""
    appointment = service.update_status(appointment_id, data.status)
    return AppointmentResponse.from_appointment(appointment)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: int,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Delete an appointment"""
    service.delete_appointment(appointment_id)


__all__ = [
    "router",
    "get_appointment_service",
    "get_appointments",
    "get_appointments_by_date_range",
    "get_appointment",
    "create_appointment",
    "update_appointment",
    "update_appointment_status",
    "delete_appointment",
]
