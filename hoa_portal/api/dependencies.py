"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from hoa_portal.domain.announcements import AnnouncementService
from hoa_portal.domain.notifications import NotificationService
from hoa_portal.domain.vehicles import VehicleService
from hoa_portal.domain.visitor_passes import VisitorPassService
from hoa_portal.config import settings
from hoa_portal.infrastructure.database.repositories import NotificationRepository
from hoa_portal.infrastructure.database.session import get_db
from hoa_portal.infrastructure.observability.metrics import (
    record_notification_created,
    record_notifications_read,
)
from hoa_portal.portal import Portal


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_current_user_id(x_user_id: str = Header(default="", alias="X-User-ID")) -> str:
    """Caller identity, resolved upstream and forwarded in X-User-ID"""
    if not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-ID header")
    return x_user_id


def get_portal(request: Request) -> Portal:
    return request.app.state.portal


def get_notification_service(
    portal: Portal = Depends(get_portal),
    db: Session = Depends(get_db),
) -> NotificationService:
    """Notification service over the configured backend"""
    if portal.notification_backend == "database":
        store = NotificationRepository(db)
    else:
        store = portal.notification_store
    return NotificationService(
        store,
        on_created=record_notification_created,
        on_read=record_notifications_read,
    )


def get_announcement_service(
    portal: Portal = Depends(get_portal),
    notifications: NotificationService = Depends(get_notification_service),
) -> AnnouncementService:
    return AnnouncementService(
        portal.announcements,
        portal.users,
        notifications,
        preview_chars=settings.announcement_preview_chars,
    )


def get_vehicle_service(
    portal: Portal = Depends(get_portal),
    notifications: NotificationService = Depends(get_notification_service),
) -> VehicleService:
    return VehicleService(portal.vehicles, portal.users, notifications)


def get_visitor_pass_service(
    portal: Portal = Depends(get_portal),
    notifications: NotificationService = Depends(get_notification_service),
) -> VisitorPassService:
    return VisitorPassService(portal.visitor_passes, portal.users, notifications)
