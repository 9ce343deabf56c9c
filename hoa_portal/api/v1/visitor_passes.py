"""Visitor pass endpoints"""

from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from hoa_portal.api.dependencies import get_current_user_id, get_request_id, get_visitor_pass_service
from hoa_portal.api.errors import to_http_error
from hoa_portal.api.v1.schemas import PassStatusRequest, VisitorPassSchema
from hoa_portal.domain.exceptions import DomainException
from hoa_portal.domain.forms import VisitorPassForm
from hoa_portal.domain.visitor_passes import VisitorPassService
from hoa_portal.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/visitor-passes", response_model=List[VisitorPassSchema])
def list_visitor_passes(
    user_id: str = Depends(get_current_user_id),
    service: VisitorPassService = Depends(get_visitor_pass_service),
):
    passes = service.list_all() if service.users.is_admin(user_id) else service.list_for_user(user_id)
    return [VisitorPassSchema.model_validate(p) for p in passes]


@router.post("/visitor-passes", response_model=VisitorPassSchema, status_code=201)
def request_visitor_pass(
    form: VisitorPassForm,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: VisitorPassService = Depends(get_visitor_pass_service),
    db: Session = Depends(get_db),
):
    try:
        visitor_pass = service.request_pass(form, user_id)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_error(e, get_request_id(request))
    return VisitorPassSchema.model_validate(visitor_pass)


@router.post("/visitor-passes/{pass_id}/status", response_model=VisitorPassSchema)
def update_visitor_pass_status(
    pass_id: str,
    request_body: PassStatusRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: VisitorPassService = Depends(get_visitor_pass_service),
    db: Session = Depends(get_db),
):
    """Admin review: approve, reject, expire or cancel a pass and notify the resident"""
    try:
        visitor_pass = service.update_status(pass_id, request_body.status, user_id, request_body.notes)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_error(e, get_request_id(request))
    return VisitorPassSchema.model_validate(visitor_pass)


@router.post("/visitor-passes/{pass_id}/cancel", status_code=204)
def cancel_visitor_pass(
    pass_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: VisitorPassService = Depends(get_visitor_pass_service),
):
    try:
        service.cancel_pass(pass_id, user_id)
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))
