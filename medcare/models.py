import enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base
from .shared.validators import try_parse_working_hours


class AppointmentStatus(str, enum.Enum):
    NEW = "NEW"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Statuses that do not hold their slot against new bookings
NON_BLOCKING_STATUSES = frozenset({AppointmentStatus.CANCELLED.value})


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    specialization = Column(String(255), nullable=False, index=True)
    work_hours = Column(String(20), nullable=False)  # HH:MM-HH:MM, same window every day

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    appointments = relationship("Appointment", back_populates="doctor")

    @property
    def working_hours(self):
        """Parsed TimeWindow, or None when the stored string is malformed"""
        return try_parse_working_hours(self.work_hours)


class MedicalService(Base):
    __tablename__ = "medical_services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    duration = Column(Integer, nullable=False)  # minutes

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    appointments = relationship("Appointment", back_populates="service")


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    patient_name = Column(String(255), nullable=False)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("medical_services.id"), nullable=False, index=True)

    # Occupied interval [date_time, end_time); end_time = date_time + service.duration
    date_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)

    # Lifecycle: NEW -> CONFIRMED -> COMPLETED, CANCELLED from NEW or CONFIRMED
    status = Column(String(20), default=AppointmentStatus.NEW.value, nullable=False, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    doctor = relationship("Doctor", back_populates="appointments")
    service = relationship("MedicalService", back_populates="appointments")

    @property
    def is_blocking(self) -> bool:
        return self.status not in NON_BLOCKING_STATUSES
