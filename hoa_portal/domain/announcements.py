"""Community announcements with resident fan-out"""

import uuid
from datetime import date, datetime
from typing import Callable, List, Tuple

from hoa_portal.domain.exceptions import NotFoundError, PermissionDeniedError
from hoa_portal.domain.forms import AnnouncementForm, parse_form
from hoa_portal.domain.models import Announcement, NotificationType, User, UserRole
from hoa_portal.domain.notifications import NotificationService
from hoa_portal.domain.repositories import Repository, UserLookup
from hoa_portal.utils.date_utils import utc_now

EVENT_PLACEHOLDER_IMAGE = "https://placehold.co/600x200.png"


def preview(content: str, limit: int) -> str:
    """Truncate to limit characters, marking the cut with an ellipsis"""
    return content[:limit] + ("..." if len(content) > limit else "")


class AnnouncementService:
    """Admin CRUD over announcements; posting notifies every resident"""

    def __init__(
        self,
        repository: Repository[Announcement],
        users: UserLookup,
        notifications: NotificationService,
        clock: Callable[[], datetime] = utc_now,
        preview_chars: int = 100,
    ):
        self.repository = repository
        self.users = users
        self.notifications = notifications
        self.clock = clock
        self.preview_chars = preview_chars

    def list_announcements(self) -> List[Announcement]:
        """Newest posting date first; same-day posts keep the latest added first"""
        return sorted(reversed(self.repository.list_all()), key=lambda a: a.date, reverse=True)

    def add_announcement(self, values, admin_user_id: str) -> Tuple[Announcement, int]:
        """
        Publish an announcement and notify all residents.

        Returns:
            (announcement, number of residents notified)
        """
        form = parse_form(AnnouncementForm, values)
        admin = self._require_admin(admin_user_id)

        announcement = Announcement(
            id=f"ann-{uuid.uuid4().hex}",
            title=form.title,
            content=form.content,
            type=form.type,
            date=self._today(),
            author=form.author or admin.full_name,
            image_url=self._image_for(form, None),
        )
        self.repository.append(announcement)

        residents = self.users.with_role(UserRole.HOA)
        for resident in residents:
            self.notifications.create_notification(
                user_id=resident.id,
                title=f"New {announcement.type}: {announcement.title}",
                message=preview(announcement.content, self.preview_chars),
                type=NotificationType.ANNOUNCEMENT,
                link="/community-feed",
            )

        return announcement, len(residents)

    def update_announcement(self, announcement_id: str, values, admin_user_id: str) -> Announcement:
        """Replace editable fields; the id and posting date are kept"""
        form = parse_form(AnnouncementForm, values)
        self._require_admin(admin_user_id)

        existing = self.repository.get_by_id(announcement_id)
        if existing is None:
            raise NotFoundError("Announcement not found.")

        self.repository.update_by_id(
            announcement_id,
            {
                "title": form.title,
                "content": form.content,
                "type": form.type,
                "author": form.author or existing.author,
                "image_url": self._image_for(form, existing.image_url),
            },
        )
        return self.repository.get_by_id(announcement_id)

    def delete_announcement(self, announcement_id: str, admin_user_id: str) -> None:
        self._require_admin(admin_user_id)
        if not self.repository.delete_by_id(announcement_id):
            raise NotFoundError("Announcement not found.")

    def _require_admin(self, user_id: str) -> User:
        user = self.users.get_by_id(user_id)
        if user is None or user.role != UserRole.ADMIN:
            raise PermissionDeniedError("Unauthorized: Admin privileges required.")
        return user

    def _image_for(self, form: AnnouncementForm, current: str | None) -> str | None:
        if form.image_url is not None:
            return str(form.image_url)
        if form.type == "event":
            return current or EVENT_PLACEHOLDER_IMAGE
        return None

    def _today(self) -> date:
        return self.clock().date()
