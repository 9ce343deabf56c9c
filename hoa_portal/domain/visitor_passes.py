"""Visitor pass requests and admin review"""

import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from hoa_portal.domain.exceptions import InvalidInputError, NotFoundError, PermissionDeniedError
from hoa_portal.domain.forms import VisitorPassForm, parse_form
from hoa_portal.domain.models import NotificationType, VisitorPass, VisitorPassStatus
from hoa_portal.domain.notifications import NotificationService
from hoa_portal.domain.repositories import Repository, UserLookup
from hoa_portal.utils.date_utils import utc_now


def _newest_first(passes: List[VisitorPass]) -> List[VisitorPass]:
    return sorted(reversed(passes), key=lambda p: p.requested_at, reverse=True)


class VisitorPassService:
    def __init__(
        self,
        repository: Repository[VisitorPass],
        users: UserLookup,
        notifications: NotificationService,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.users = users
        self.notifications = notifications
        self.clock = clock

    def request_pass(self, values, user_id: str) -> VisitorPass:
        """File a pending pass and let the admin know"""
        form = parse_form(VisitorPassForm, values)
        resident = self.users.get_by_id(user_id)
        if resident is None:
            raise NotFoundError("User not found.")

        visitor_pass = VisitorPass(
            id=f"vp-{uuid.uuid4().hex}",
            user_id=resident.id,
            user_name=resident.full_name,
            visitor_name=form.visitor_name,
            visit_date=form.visit_date,
            visit_start_time=form.visit_start_time,
            duration_hours=form.duration_hours,
            vehicle_plate=form.vehicle_plate,
            requested_at=self.clock(),
        )
        self.repository.append(visitor_pass)

        admin = self.users.first_admin()
        if admin is not None:
            self.notifications.create_notification(
                user_id=admin.id,
                title="New Visitor Pass Request",
                message=f"{resident.full_name} requested a pass for {visitor_pass.visitor_name}.",
                type=NotificationType.VISITOR_PASS,
                link="/admin/visitor-passes",
            )
        return visitor_pass

    def list_for_user(self, user_id: str) -> List[VisitorPass]:
        return _newest_first(self.repository.find(lambda p: p.user_id == user_id))

    def list_all(self) -> List[VisitorPass]:
        return _newest_first(self.repository.list_all())

    def update_status(
        self,
        pass_id: str,
        status: VisitorPassStatus | str,
        admin_user_id: str,
        notes: Optional[str] = None,
    ) -> VisitorPass:
        try:
            status = VisitorPassStatus(status)
        except ValueError as e:
            raise InvalidInputError(f"Unknown visitor pass status: {status!r}") from e

        visitor_pass = self.repository.get_by_id(pass_id)
        if visitor_pass is None:
            raise NotFoundError("Visitor pass not found.")
        if not self.users.is_admin(admin_user_id):
            raise PermissionDeniedError("Unauthorized: Admin privileges required.")

        self.repository.update_by_id(
            pass_id,
            {
                "status": status,
                "processed_by_user_id": admin_user_id,
                "processed_at": self.clock(),
                "notes": notes,
            },
            expected_version=visitor_pass.version,
        )

        message = f"Your visitor pass request for {visitor_pass.visitor_name} has been {status.value}."
        if notes:
            message += f" Notes: {notes}"
        self.notifications.create_notification(
            user_id=visitor_pass.user_id,
            title=f"Visitor Pass {status.value.capitalize()}",
            message=message,
            type=NotificationType.VISITOR_PASS,
            link="/visitor-passes",
        )
        logging.info(
            "Visitor pass status changed",
            extra={"pass_id": pass_id, "status": status.value, "admin_user_id": admin_user_id},
        )
        return self.repository.get_by_id(pass_id)

    def cancel_pass(self, pass_id: str, user_id: str) -> None:
        """Residents may withdraw their own requests while still pending"""
        visitor_pass = self.repository.get_by_id(pass_id)
        if visitor_pass is None or visitor_pass.user_id != user_id:
            raise NotFoundError("Visitor pass not found or you do not have permission to cancel it.")
        if visitor_pass.status != VisitorPassStatus.PENDING:
            raise InvalidInputError("Only pending visitor passes can be cancelled.")

        self.repository.update_by_id(
            pass_id,
            {"status": VisitorPassStatus.CANCELLED},
            expected_version=visitor_pass.version,
        )
