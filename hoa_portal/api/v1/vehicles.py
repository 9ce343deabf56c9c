"""Vehicle registration and permit endpoints"""

from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from hoa_portal.api.dependencies import get_current_user_id, get_request_id, get_vehicle_service
from hoa_portal.api.errors import to_http_error
from hoa_portal.api.v1.schemas import PermitRequest, VehicleSchema
from hoa_portal.domain.exceptions import DomainException
from hoa_portal.domain.forms import VehicleForm
from hoa_portal.domain.vehicles import VehicleService
from hoa_portal.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/vehicles", response_model=List[VehicleSchema])
def list_vehicles(
    user_id: str = Depends(get_current_user_id),
    service: VehicleService = Depends(get_vehicle_service),
):
    """Admins get every registration; residents only their active ones"""
    vehicles = service.list_all() if service.users.is_admin(user_id) else service.list_for_user(user_id)
    return [VehicleSchema.model_validate(v) for v in vehicles]


@router.post("/vehicles", response_model=VehicleSchema, status_code=201)
def register_vehicle(
    form: VehicleForm,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: VehicleService = Depends(get_vehicle_service),
    db: Session = Depends(get_db),
):
    try:
        vehicle = service.register_vehicle(form, user_id)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_error(e, get_request_id(request))
    return VehicleSchema.model_validate(vehicle)


@router.post("/vehicles/{vehicle_id}/permit", response_model=VehicleSchema)
def issue_permit(
    vehicle_id: str,
    request_body: PermitRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: VehicleService = Depends(get_vehicle_service),
    db: Session = Depends(get_db),
):
    try:
        vehicle = service.issue_permit(vehicle_id, request_body.permit_number, user_id)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_error(e, get_request_id(request))
    return VehicleSchema.model_validate(vehicle)


@router.delete("/vehicles/{vehicle_id}", status_code=204)
def remove_vehicle(
    vehicle_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: VehicleService = Depends(get_vehicle_service),
):
    try:
        service.remove_vehicle(vehicle_id, user_id)
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))
