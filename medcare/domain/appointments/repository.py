"""Appointment repository - Database operations for appointments"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import NON_BLOCKING_STATUSES, Appointment


class AppointmentRepository:
    """Repository for appointment database operations (the appointment store)"""

    @staticmethod
    def _query(db: Session):
        return db.query(Appointment).options(
            joinedload(Appointment.doctor), joinedload(Appointment.service)
        )

    @staticmethod
    def save(db: Session, appointment: Appointment) -> Appointment:
        """Insert or update an appointment"""
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def find_by_id(
        db: Session, appointment_id: int, refresh: bool = False
    ) -> Optional[Appointment]:
        """
        Get a specific appointment by ID.

        With refresh=True the row is re-read and overwrites any copy already
        loaded in the session, so writes committed elsewhere are seen.
        """
        query = AppointmentRepository._query(db).filter(Appointment.id == appointment_id)
        if refresh:
            query = query.populate_existing()
        return query.first()

    @staticmethod
    def exists_by_id(db: Session, appointment_id: int) -> bool:
        """Check whether an appointment exists"""
        return (
            db.query(Appointment.id).filter(Appointment.id == appointment_id).first() is not None
        )

    @staticmethod
    def delete_by_id(db: Session, appointment_id: int) -> None:
        """Delete an appointment by ID"""
        db.query(Appointment).filter(Appointment.id == appointment_id).delete(
            synchronize_session=False
        )
        db.commit()

    @staticmethod
    def find_all(db: Session) -> list[Appointment]:
        """Get all appointments in insertion order"""
        return AppointmentRepository._query(db).order_by(Appointment.id).all()

    @staticmethod
    def find_by_date_range(db: Session, start: datetime, end: datetime) -> list[Appointment]:
        """Get appointments whose start timestamp falls in [start, end] inclusive"""
        return (
            AppointmentRepository._query(db)
            .filter(Appointment.date_time >= start, Appointment.date_time <= end)
            .order_by(Appointment.id)
            .all()
        )

    @staticmethod
    def find_by_doctor_and_range(
        db: Session,
        doctor_id: int,
        start: datetime,
        end: datetime,
        exclude_appointment_id: Optional[int] = None,
        blocking_only: bool = True,
    ) -> list[Appointment]:
        """
        Get a doctor's appointments whose occupied interval intersects [start, end).

        Half-open overlap: [a, b) and [c, d) overlap iff a < d and c < b.
        Cancelled appointments are skipped unless blocking_only is False.
        """
        query = db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.date_time < end,
            Appointment.end_time > start,
        )

        if blocking_only:
            query = query.filter(Appointment.status.notin_(NON_BLOCKING_STATUSES))

        if exclude_appointment_id is not None:
            query = query.filter(Appointment.id != exclude_appointment_id)

        return query.order_by(Appointment.date_time).all()
