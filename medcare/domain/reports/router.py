"""Report router - Statistics, period reports and file exports"""

import logging
from datetime import datetime
from io import BytesIO, StringIO
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ...database import get_db
from ..appointments.service import AppointmentService
from ..catalog.schemas import MedicalServiceResponse
from ..doctors.schemas import DoctorResponse
from .schemas import DoctorStatistic, ReportResponse, ServiceStatistic
from .service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    """Dependency injection for ReportService"""
    return ReportService(db)


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    return AppointmentService(db)


@router.get("/doctors/most-requested", response_model=list[DoctorStatistic])
async def get_most_requested_doctors(
    start: Optional[datetime] = Query(None, description="Optional period start"),
    end: Optional[datetime] = Query(None, description="Optional period end"),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Doctors ordered by appointment count, most requested first"""
    return [
        DoctorStatistic(doctor=DoctorResponse.from_doctor(row.doctor), count=row.count)
        for row in service.most_requested_doctors(start, end)
    ]


@router.get("/services/most-requested", response_model=list[ServiceStatistic])
async def get_most_requested_services(
    start: Optional[datetime] = Query(None, description="Optional period start"),
    end: Optional[datetime] = Query(None, description="Optional period end"),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Medical services ordered by appointment count, most requested first"""
    return [
        ServiceStatistic(
            service=MedicalServiceResponse.model_validate(row.service), count=row.count
        )
        for row in service.most_requested_services(start, end)
    ]


@router.get("", response_model=ReportResponse)
async def get_report(
    startDate: datetime = Query(..., description="Period start (inclusive)"),
    endDate: datetime = Query(..., description="Period end (inclusive)"),
    service: ReportService = Depends(get_report_service),
):
    """Appointments and statistics for a period"""
    return service.generate_report(startDate, endDate)


@router.get("/export/csv")
async def export_report_csv(
    startDate: datetime = Query(...),
    endDate: datetime = Query(...),
    service: ReportService = Depends(get_report_service),
):
    """Download the period report as CSV"""
    content = service.export_csv(startDate, endDate)
    logger.info(f"📄 CSV report exported ({len(content)} chars)")
    return StreamingResponse(
        StringIO(content),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=report.csv"},
    )


@router.get("/export/xml")
async def export_report_xml(
    startDate: datetime = Query(...),
    endDate: datetime = Query(...),
    service: ReportService = Depends(get_report_service),
):
    """Download the period report as XML"""
    content = service.export_xml(startDate, endDate)
    logger.info(f"📄 XML report exported ({len(content)} bytes)")
    return StreamingResponse(
        BytesIO(content),
        media_type="application/xml",
        headers={"Content-Disposition": "attachment; filename=report.xml"},
    )


__all__ = [
    "router",
    "get_report_service",
    "get_most_requested_doctors",
    "get_most_requested_services",
    "get_report",
    "export_report_csv",
    "export_report_xml",
]
