"""Notification inbox endpoints for the current user"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from hoa_portal.api.dependencies import get_current_user_id, get_notification_service, get_request_id
from hoa_portal.api.errors import to_http_error
from hoa_portal.api.v1.schemas import (
    ActionResultSchema,
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationSchema,
)
from hoa_portal.domain.exceptions import DomainException
from hoa_portal.domain.notifications import NotificationService
from hoa_portal.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/notifications", response_model=NotificationListResponse)
def list_notifications(
    user_id: str = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
):
    """
    Current user's notifications, newest first.

    Returns:
        Notifications plus the unread badge count
    """
    notifications = service.list_notifications(user_id)
    return NotificationListResponse(
        user_id=user_id,
        unread_count=sum(1 for n in notifications if not n.is_read),
        notifications=[NotificationSchema.model_validate(n) for n in notifications],
    )


@router.post("/notifications/read-all", response_model=MarkAllReadResponse)
def mark_all_notifications_read(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
    db: Session = Depends(get_db),
):
    try:
        updated = service.mark_all_as_read(user_id)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_error(e, get_request_id(request))

    message = f"{updated} notifications marked as read." if updated else "No unread notifications to mark."
    return MarkAllReadResponse(updated_count=updated, message=message)


@router.post("/notifications/{notification_id}/read", response_model=ActionResultSchema)
def mark_notification_read(
    notification_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
    db: Session = Depends(get_db),
):
    """Soft failure (success=false) when the notification is missing or not the caller's"""
    try:
        result = service.mark_as_read(notification_id, user_id)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_error(e, get_request_id(request))
    return ActionResultSchema(success=result.success, message=result.message)


@router.post("/notifications/{notification_id}/archive", response_model=ActionResultSchema)
def archive_notification(
    notification_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
    db: Session = Depends(get_db),
):
    try:
        result = service.archive_notification(notification_id, user_id)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_error(e, get_request_id(request))
    return ActionResultSchema(success=result.success, message=result.message)
