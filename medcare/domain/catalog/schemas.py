"""Service catalog schemas - Pydantic models for validation"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.validators import validate_required_text


class MedicalServiceCreate(BaseModel):
    """Schema for creating a new medical service"""

    name: str
    price: Decimal
    duration: int

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_required_text(v, "name")

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v < 0:
            raise ValueError("Price must not be negative")
        return v

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        if v <= 0:
            raise ValueError("Duration must be a positive number of minutes")
        return v


class MedicalServiceUpdate(BaseModel):
    """Schema for updating an existing medical service"""

    name: Optional[str] = None
    price: Optional[Decimal] = None
    duration: Optional[int] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        return validate_required_text(v, "name")

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v is not None and v < 0:
            raise ValueError("Price must not be negative")
        return v

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Duration must be a positive number of minutes")
        return v


class MedicalServiceResponse(BaseModel):
    """Schema for medical service response"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: Decimal
    duration: int
