"""Announcement endpoints; posting fans out to every resident"""

from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from hoa_portal.api.dependencies import get_announcement_service, get_current_user_id, get_request_id
from hoa_portal.api.errors import to_http_error
from hoa_portal.api.v1.schemas import AnnouncementCreatedResponse, AnnouncementSchema
from hoa_portal.domain.announcements import AnnouncementService
from hoa_portal.domain.exceptions import DomainException
from hoa_portal.domain.forms import AnnouncementForm
from hoa_portal.infrastructure.database.session import get_db
from hoa_portal.infrastructure.observability.logging import log_fan_out

router = APIRouter()


@router.get("/announcements", response_model=List[AnnouncementSchema])
def list_announcements(service: AnnouncementService = Depends(get_announcement_service)):
    return [AnnouncementSchema.model_validate(a) for a in service.list_announcements()]


@router.post("/announcements", response_model=AnnouncementCreatedResponse, status_code=201)
def create_announcement(
    form: AnnouncementForm,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: AnnouncementService = Depends(get_announcement_service),
    db: Session = Depends(get_db),
):
    """
    Publish an announcement (admin only).

    Flow:
    1. Validate the form and the caller's admin role
    2. Store the announcement
    3. Notify every resident
    """
    request_id = get_request_id(request)
    try:
        announcement, notified = service.add_announcement(form, user_id)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_error(e, request_id)

    log_fan_out(request_id, "announcements", "announcement", notified)
    return AnnouncementCreatedResponse(
        announcement=AnnouncementSchema.model_validate(announcement),
        notified_count=notified,
    )


@router.put("/announcements/{announcement_id}", response_model=AnnouncementSchema)
def update_announcement(
    announcement_id: str,
    form: AnnouncementForm,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: AnnouncementService = Depends(get_announcement_service),
):
    try:
        announcement = service.update_announcement(announcement_id, form, user_id)
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))
    return AnnouncementSchema.model_validate(announcement)


@router.delete("/announcements/{announcement_id}", status_code=204)
def delete_announcement(
    announcement_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: AnnouncementService = Depends(get_announcement_service),
):
    try:
        service.delete_announcement(announcement_id, user_id)
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))
