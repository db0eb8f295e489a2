"""Medical service router - FastAPI endpoints for the service catalog"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import MedicalServiceCreate, MedicalServiceResponse, MedicalServiceUpdate
from .service import MedicalServiceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/medical-services", tags=["Medical Services"])


def get_medical_service_service(db: Session = Depends(get_db)) -> MedicalServiceService:
    """Dependency injection for MedicalServiceService"""
    return MedicalServiceService(db)


@router.get("", response_model=list[MedicalServiceResponse])
async def get_medical_services(
    service: MedicalServiceService = Depends(get_medical_service_service),
):
    """Get all medical services"""
    return service.get_services()


@router.get("/{service_id}", response_model=MedicalServiceResponse)
async def get_medical_service(
    service_id: int,
    service: MedicalServiceService = Depends(get_medical_service_service),
):
    """Get a specific medical service"""
    return service.get_service(service_id)


@router.post("", response_model=MedicalServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_medical_service(
    data: MedicalServiceCreate,
    service: MedicalServiceService = Depends(get_medical_service_service),
):
    """Create a new medical service"""
    return service.create_service(data.name, data.price, data.duration)


@router.put("/{service_id}", response_model=MedicalServiceResponse)
async def update_medical_service(
    service_id: int,
    data: MedicalServiceUpdate,
    service: MedicalServiceService = Depends(get_medical_service_service),
):
    """Update a medical service"""
    return service.update_service(service_id, data.name, data.price, data.duration)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_medical_service(
    service_id: int,
    service: MedicalServiceService = Depends(get_medical_service_service),
):
    """Delete a medical service"""
    service.delete_service(service_id)


__all__ = [
    "router",
    "get_medical_services",
    "get_medical_service",
    "create_medical_service",
    "update_medical_service",
    "delete_medical_service",
]
