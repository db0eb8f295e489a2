"""
Report formatters.

Pure serialization of an already computed ReportResponse; the row order of
the statistics sections is exactly the aggregator's order.
"""

import csv
import xml.etree.ElementTree as ET
from io import StringIO

from ... import config
from .schemas import ReportResponse

APPOINTMENT_HEADER = [
    "ID",
    "Patient Name",
    "Doctor",
    "Specialization",
    "Date & Time",
    "Service",
    "Price",
    "Duration",
    "Status",
]
DOCTOR_HEADER = ["Doctor", "Specialization", "Appointments"]
SERVICE_HEADER = ["Service", "Price", "Duration", "Appointments"]


def _format_price(price) -> str:
    return f"{price:.2f}"


def export_csv(report: ReportResponse) -> str:
    """Render a report as CSV: appointments, then doctor and service statistics"""
    date_format = config.REPORT_DATE_FORMAT
    output = StringIO()
    writer = csv.writer(output)

    writer.writerow(APPOINTMENT_HEADER)
    for appointment in report.appointments:
        writer.writerow(
            [
                appointment.id,
                appointment.patientName,
                appointment.doctor.name,
                appointment.doctor.specialization,
                appointment.dateTime.strftime(date_format),
                appointment.service.name,
                _format_price(appointment.service.price),
                appointment.service.duration,
                appointment.status.value,
            ]
        )

    writer.writerow([])
    writer.writerow(["Doctor Statistics"])
    writer.writerow(DOCTOR_HEADER)
    for row in report.doctorStatistics:
        writer.writerow([row.doctor.name, row.doctor.specialization, row.count])

    writer.writerow([])
    writer.writerow(["Service Statistics"])
    writer.writerow(SERVICE_HEADER)
    for row in report.serviceStatistics:
        writer.writerow(
            [row.service.name, _format_price(row.service.price), row.service.duration, row.count]
        )

    return output.getvalue()


def _add_element(parent: ET.Element, name: str, value) -> ET.Element:
    element = ET.SubElement(parent, name)
    element.text = str(value)
    return element


def export_xml(report: ReportResponse) -> bytes:
    """Render the report period and statistics as an XML document"""
    date_format = config.REPORT_DATE_FORMAT
    root = ET.Element("statisticsReport")

    period = ET.SubElement(root, "reportPeriod")
    _add_element(period, "startDate", report.startDate.strftime(date_format))
    _add_element(period, "endDate", report.endDate.strftime(date_format))
    _add_element(period, "appointmentsCount", len(report.appointments))

    doctors = ET.SubElement(root, "topDoctors")
    for row in report.doctorStatistics:
        doctor = ET.SubElement(doctors, "doctor", id=str(row.doctor.id))
        _add_element(doctor, "name", row.doctor.name)
        _add_element(doctor, "specialization", row.doctor.specialization)
        _add_element(doctor, "appointmentsCount", row.count)

    services = ET.SubElement(root, "topServices")
    for row in report.serviceStatistics:
        service = ET.SubElement(services, "service", id=str(row.service.id))
        _add_element(service, "name", row.service.name)
        _add_element(service, "price", _format_price(row.service.price))
        _add_element(service, "duration", row.service.duration)
        _add_element(service, "appointmentsCount", row.count)

    return ET.tostring(root, encoding="utf-8", xml_declaration=True)
