"""Report schemas - plain structured data handed to the JSON, CSV and XML outputs"""

from datetime import datetime

from pydantic import BaseModel

from ..appointments.schemas import AppointmentResponse
from ..catalog.schemas import MedicalServiceResponse
from ..doctors.schemas import DoctorResponse


class DoctorStatistic(BaseModel):
    doctor: DoctorResponse
    count: int


class ServiceStatistic(BaseModel):
    service: MedicalServiceResponse
    count: int


class ReportResponse(BaseModel):
    """Appointments in a period plus popularity statistics over the same period"""

    startDate: datetime
    endDate: datetime
    appointments: list[AppointmentResponse]
    doctorStatistics: list[DoctorStatistic]
    serviceStatistics: list[ServiceStatistic]
