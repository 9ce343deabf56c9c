"""Data access layer for notifications"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from hoa_portal.domain.exceptions import ConcurrencyConflictError
from hoa_portal.domain.models import Notification, NotificationType
from hoa_portal.infrastructure.database.models import NotificationRecord

UPDATABLE_FIELDS = {"is_read", "archived_at"}


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo on the way back
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_domain(row: NotificationRecord) -> Notification:
    return Notification(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        message=row.message,
        type=NotificationType(row.type),
        link=row.link,
        is_read=row.is_read,
        version=row.version,
        created_at=_as_utc(row.created_at),
        archived_at=_as_utc(row.archived_at),
    )


class NotificationRepository:
    """SQLAlchemy implementation of the notification store contract"""

    def __init__(self, db: Session):
        self.db = db

    def append(self, notification: Notification) -> str:
        """Persist a new notification"""
        db_notification = NotificationRecord(
            id=notification.id,
            user_id=notification.user_id,
            title=notification.title,
            message=notification.message,
            type=notification.type.value,
            link=notification.link,
            is_read=notification.is_read,
            version=notification.version,
            created_at=notification.created_at,
            archived_at=notification.archived_at,
        )
        self.db.add(db_notification)
        self.db.flush()
        return db_notification.id

    def query_by_owner(self, user_id: str) -> List[Notification]:
        """Fetch a user's notifications in insertion order"""
        rows = (
            self.db.query(NotificationRecord)
            .filter(NotificationRecord.user_id == user_id)
            .order_by(NotificationRecord.pk.asc())
            .all()
        )
        return [_to_domain(row) for row in rows]

    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        row = (
            self.db.query(NotificationRecord)
            .filter(NotificationRecord.id == notification_id)
            .first()
        )
        return _to_domain(row) if row is not None else None

    def update_by_id(
        self,
        notification_id: str,
        patch: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> bool:
        """Versioned partial update; no-op when the id is absent"""
        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")

        query = self.db.query(NotificationRecord).filter(NotificationRecord.id == notification_id)
        if expected_version is not None:
            query = query.filter(NotificationRecord.version == expected_version)

        values = {getattr(NotificationRecord, k): v for k, v in patch.items()}
        values[NotificationRecord.version] = NotificationRecord.version + 1
        updated = query.update(values, synchronize_session=False)
        # Loaded rows in the identity map are stale after a bulk UPDATE
        self.db.expire_all()

        if updated:
            return True
        if expected_version is not None and self.get_by_id(notification_id) is not None:
            raise ConcurrencyConflictError(
                f"{notification_id} changed since version {expected_version}"
            )
        return False
