"""Report service - Builds period reports from the scheduling core"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from ...exceptions import ValidationFailure
from ..appointments.schemas import AppointmentResponse
from ..appointments.service import AppointmentService
from ..catalog.schemas import MedicalServiceResponse
from ..doctors.schemas import DoctorResponse
from .exporters import export_csv, export_xml
from .schemas import DoctorStatistic, ReportResponse, ServiceStatistic
from .statistics import count_by_doctor, count_by_service

logger = logging.getLogger(__name__)


class ReportService:
    """Service layer for statistics reports"""

    def __init__(self, db: Session):
        self.db = db
        self.appointments = AppointmentService(db)

    def generate_report(self, start_date: datetime, end_date: datetime) -> ReportResponse:
        """
        Collect the appointments starting in [start_date, end_date] and rank
        doctors and services by how often they were booked in that period.
        """
        if start_date > end_date:
            raise ValidationFailure("Report start date must not be after end date")

        appointments = self.appointments.list_appointments_in_range(start_date, end_date)

        report = ReportResponse(
            startDate=start_date,
            endDate=end_date,
            appointments=[AppointmentResponse.from_appointment(a) for a in appointments],
            doctorStatistics=[
                DoctorStatistic(doctor=DoctorResponse.from_doctor(row.doctor), count=row.count)
                for row in count_by_doctor(appointments)
            ],
            serviceStatistics=[
                ServiceStatistic(
                    service=MedicalServiceResponse.model_validate(row.service), count=row.count
                )
                for row in count_by_service(appointments)
            ],
        )

        logger.info(
            f"📊 Report {start_date:%Y-%m-%d} - {end_date:%Y-%m-%d}: "
            f"{len(appointments)} appointments"
        )
        return report

    def export_csv(self, start_date: datetime, end_date: datetime) -> str:
        return export_csv(self.generate_report(start_date, end_date))

    def export_xml(self, start_date: datetime, end_date: datetime) -> bytes:
        return export_xml(self.generate_report(start_date, end_date))
