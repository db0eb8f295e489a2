"""Appointment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import AppointmentStatus
from ...shared.validators import validate_required_text
from ..catalog.schemas import MedicalServiceResponse
from ..doctors.schemas import DoctorResponse


class AppointmentCreate(BaseModel):
    """Schema for booking a new appointment"""

    patientName: str
    doctorId: int
    serviceId: int
    dateTime: datetime

    @field_validator("patientName")
    @classmethod
    def validate_patient_name(cls, v):
        return validate_required_text(v, "patientName")


class AppointmentUpdate(BaseModel):
    """Schema for updating an appointment; omitted fields keep their value"""

    patientName: Optional[str] = None
    doctorId: Optional[int] = None
    serviceId: Optional[int] = None
    dateTime: Optional[datetime] = None
    status: Optional[AppointmentStatus] = None

    @field_validator("patientName")
    @classmethod
    def validate_patient_name(cls, v):
        if v is None:
            return v
        return validate_required_text(v, "patientName")


class AppointmentStatusUpdate(BaseModel):
    """Schema for a status transition"""

    status: AppointmentStatus


class AppointmentResponse(BaseModel):
    """Schema for appointment response"""

    id: int
    patientName: str
    doctor: DoctorResponse
    service: MedicalServiceResponse
    dateTime: datetime
    endTime: datetime
    status: AppointmentStatus

    @classmethod
    def from_appointment(cls, appointment) -> "AppointmentResponse":
        return cls(
            id=appointment.id,
            patientName=appointment.patient_name,
            doctor=DoctorResponse.from_doctor(appointment.doctor),
            service=MedicalServiceResponse.model_validate(appointment.service),
            dateTime=appointment.date_time,
            endTime=appointment.end_time,
            status=appointment.status,
        )
