"""Notification delivery and read-state tracking"""

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Protocol

from hoa_portal.domain.exceptions import ConcurrencyConflictError, InvalidInputError
from hoa_portal.domain.models import ActionResult, Notification, NotificationType
from hoa_portal.utils.date_utils import utc_now

NOT_FOUND_MESSAGE = "Notification not found or access denied."


class NotificationStore(Protocol):
    """Persistence contract the notification service writes through"""

    def append(self, notification: Notification) -> str:
        ...

    def query_by_owner(self, user_id: str) -> List[Notification]:
        """All notifications for a user, in insertion order"""
        ...

    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        ...

    def update_by_id(
        self,
        notification_id: str,
        patch: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> bool:
        """
        Apply a partial update and bump the version.

        Returns False when the id is absent. Raises ConcurrencyConflictError
        when expected_version is given and no longer matches.
        """
        ...


def new_notification_id() -> str:
    return f"notif-{uuid.uuid4().hex}"


class NotificationService:
    """Creates per-user notifications and tracks Unread -> Read transitions"""

    def __init__(
        self,
        store: NotificationStore,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_notification_id,
        on_created: Optional[Callable[[Notification], None]] = None,
        on_read: Optional[Callable[[str, int], None]] = None,
    ):
        self.store = store
        self.clock = clock
        self.id_factory = id_factory
        # Observers for metrics; on_read receives (mode, count)
        self.on_created = on_created or (lambda notification: None)
        self.on_read = on_read or (lambda mode, count: None)

    def create_notification(
        self,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType | str = NotificationType.GENERAL,
        link: Optional[str] = None,
    ) -> Notification:
        """
        Append a new unread notification for user_id.

        No deduplication: identical calls produce distinct notifications.

        Raises:
            InvalidInputError: empty user_id/title/message or unknown type
        """
        for name, value in (("user_id", user_id), ("title", title), ("message", message)):
            if not value or not value.strip():
                raise InvalidInputError(f"{name} must not be empty")
        try:
            notification_type = NotificationType(type)
        except ValueError as e:
            raise InvalidInputError(f"Unknown notification type: {type!r}") from e

        notification = Notification(
            id=self.id_factory(),
            user_id=user_id,
            title=title,
            message=message,
            type=notification_type,
            link=link,
            is_read=False,
            created_at=self.clock(),
        )
        notification.id = self.store.append(notification)

        self.on_created(notification)
        logging.info(
            "Notification created",
            extra={
                "notification_id": notification.id,
                "user_id": user_id,
                "notification_type": notification_type.value,
            },
        )
        return notification

    def list_notifications(self, user_id: str) -> List[Notification]:
        """
        Visible notifications for user_id, newest first.

        Equal timestamps keep the most recently inserted first.
        """
        owned = [n for n in self.store.query_by_owner(user_id) if n.user_id == user_id]
        visible = [n for n in reversed(owned) if n.archived_at is None]
        return sorted(visible, key=lambda n: n.created_at, reverse=True)

    def unread_count(self, user_id: str) -> int:
        return sum(1 for n in self.list_notifications(user_id) if not n.is_read)

    def mark_as_read(self, notification_id: str, user_id: str) -> ActionResult:
        notification = self._get_owned(notification_id, user_id)
        if notification is None:
            return ActionResult(success=False, message=NOT_FOUND_MESSAGE)
        if notification.is_read:
            return ActionResult(success=True)

        if self._apply(notification, {"is_read": True}, lambda n: n.is_read):
            self.on_read("single", 1)
            logging.info(
                "Notification marked as read",
                extra={"notification_id": notification_id, "user_id": user_id},
            )
        elif self.store.get_by_id(notification_id) is None:
            # Removed between the ownership check and the write
            return ActionResult(success=False, message=NOT_FOUND_MESSAGE)
        return ActionResult(success=True)

    def mark_all_as_read(self, user_id: str) -> int:
        """Mark every unread notification of user_id as read; returns how many changed"""
        updated = 0
        for notification in self.list_notifications(user_id):
            if notification.is_read:
                continue
            if self._apply(notification, {"is_read": True}, lambda n: n.is_read):
                updated += 1

        if updated:
            self.on_read("bulk", updated)
            logging.info(
                "Notifications marked as read",
                extra={"user_id": user_id, "updated_count": updated},
            )
        return updated

    def archive_notification(self, notification_id: str, user_id: str) -> ActionResult:
        """Hide a notification from listings while keeping it stored"""
        notification = self._get_owned(notification_id, user_id)
        if notification is None:
            return ActionResult(success=False, message=NOT_FOUND_MESSAGE)
        if notification.archived_at is None:
            self._apply(
                notification,
                {"archived_at": self.clock()},
                lambda n: n.archived_at is not None,
            )
        return ActionResult(success=True)

    def _get_owned(self, notification_id: str, user_id: str) -> Optional[Notification]:
        notification = self.store.get_by_id(notification_id)
        if notification is None or notification.user_id != user_id:
            return None
        return notification

    def _apply(
        self,
        notification: Notification,
        patch: Dict[str, Any],
        already_applied: Callable[[Notification], bool],
    ) -> bool:
        """
        Versioned update with a single re-read on conflict.

        Returns True if this call performed the transition, False if the
        record vanished or a concurrent writer already applied it.
        """
        try:
            return self.store.update_by_id(notification.id, patch, expected_version=notification.version)
        except ConcurrencyConflictError:
            fresh = self.store.get_by_id(notification.id)
            if fresh is None or already_applied(fresh):
                return False
            return self.store.update_by_id(fresh.id, patch, expected_version=fresh.version)
