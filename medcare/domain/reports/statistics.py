"""
Statistics Aggregator

Popularity counts derived from a set of appointments. Counts are keyed by the
doctor/service id; the full record is only attached to the output rows.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from ...models import Appointment, Doctor, MedicalService


@dataclass(frozen=True)
class DoctorCount:
    doctor: Doctor
    count: int


@dataclass(frozen=True)
class ServiceCount:
    service: MedicalService
    count: int


def _count_by(
    appointments: Iterable[Appointment],
    key: Callable[[Appointment], int],
    record: Callable[[Appointment], Any],
) -> list[tuple[Any, int]]:
    # dicts keep insertion order, so ties stay in order of first occurrence
    counts: dict[int, int] = {}
    records: dict[int, Any] = {}
    for appointment in appointments:
        identity = key(appointment)
        if identity not in counts:
            counts[identity] = 0
            records[identity] = record(appointment)
        counts[identity] += 1

    # sorted() is stable: equal counts keep first-occurrence order
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [(records[identity], count) for identity, count in ordered]


def count_by_doctor(appointments: Iterable[Appointment]) -> list[DoctorCount]:
    """Doctors by number of appointments, descending"""
    return [
        DoctorCount(doctor=doctor, count=count)
        for doctor, count in _count_by(appointments, lambda a: a.doctor_id, lambda a: a.doctor)
    ]


def count_by_service(appointments: Iterable[Appointment]) -> list[ServiceCount]:
    """Medical services by number of appointments, descending"""
    return [
        ServiceCount(service=service, count=count)
        for service, count in _count_by(
            appointments, lambda a: a.service_id, lambda a: a.service
        )
    ]
