"""Doctor domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.validators import parse_working_hours, validate_required_text


def _normalize_work_hours(v: str) -> str:
    # Raises ValueError (-> 422) for malformed windows
    return str(parse_working_hours(v))


class DoctorCreate(BaseModel):
    """Schema for creating a new doctor"""

    name: str
    specialization: str
    workHours: str

    @field_validator("name", "specialization")
    @classmethod
    def validate_text(cls, v, info):
        return validate_required_text(v, info.field_name)

    @field_validator("workHours")
    @classmethod
    def validate_work_hours(cls, v):
        return _normalize_work_hours(v)


class DoctorUpdate(BaseModel):
    """Schema for updating an existing doctor"""

    name: Optional[str] = None
    specialization: Optional[str] = None
    workHours: Optional[str] = None

    @field_validator("name", "specialization")
    @classmethod
    def validate_text(cls, v, info):
        if v is None:
            return v
        return validate_required_text(v, info.field_name)

    @field_validator("workHours")
    @classmethod
    def validate_work_hours(cls, v):
        if v is None:
            return v
        return _normalize_work_hours(v)


class DoctorResponse(BaseModel):
    """Schema for doctor response"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    specialization: str
    workHours: str

    @classmethod
    def from_doctor(cls, doctor) -> "DoctorResponse":
        return cls(
            id=doctor.id,
            name=doctor.name,
            specialization=doctor.specialization,
            workHours=doctor.work_hours,
        )


class AvailabilityResponse(BaseModel):
    """Schema for a doctor availability check"""

    doctorId: int
    dateTime: str
    duration: int
    available: bool
