"""Vehicle registration and parking permits"""

import logging
import uuid
from datetime import datetime
from typing import Callable, List

from hoa_portal.domain.exceptions import InvalidInputError, NotFoundError, PermissionDeniedError
from hoa_portal.domain.forms import VehicleForm, parse_form
from hoa_portal.domain.models import NotificationType, VehicleRegistration, VehicleStatus
from hoa_portal.domain.notifications import NotificationService
from hoa_portal.domain.repositories import Repository, UserLookup
from hoa_portal.utils.date_utils import utc_now


def _newest_first(vehicles: List[VehicleRegistration]) -> List[VehicleRegistration]:
    return sorted(reversed(vehicles), key=lambda v: v.registered_at, reverse=True)


class VehicleService:
    """
    Lifecycle: pending_permit -> active (permit issued) -> inactive (removed).

    Removal keeps the record for history and clears the permit.
    """

    def __init__(
        self,
        repository: Repository[VehicleRegistration],
        users: UserLookup,
        notifications: NotificationService,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.users = users
        self.notifications = notifications
        self.clock = clock

    def register_vehicle(self, values, user_id: str) -> VehicleRegistration:
        form = parse_form(VehicleForm, values)
        owner = self.users.get_by_id(user_id)
        if owner is None:
            raise NotFoundError("User not found.")

        plate = form.license_plate.lower()
        duplicate = self.repository.find(
            lambda v: v.user_id == user_id
            and v.license_plate.lower() == plate
            and v.status != VehicleStatus.INACTIVE
        )
        if duplicate:
            raise InvalidInputError("This license plate is already registered to your account.")

        vehicle = VehicleRegistration(
            id=f"vr-{uuid.uuid4().hex}",
            user_id=owner.id,
            user_name=owner.full_name,
            make=form.make,
            model=form.model,
            year=form.year,
            color=form.color,
            license_plate=form.license_plate,
            registered_at=self.clock(),
        )
        self.repository.append(vehicle)

        admin = self.users.first_admin()
        if admin is not None:
            self.notifications.create_notification(
                user_id=admin.id,
                title="New Vehicle Registered",
                message=f"{owner.full_name} registered a {vehicle.make} {vehicle.model}.",
                type=NotificationType.VEHICLE_REGISTRATION,
                link="/admin/vehicle-registrations",
            )
        return vehicle

    def list_for_user(self, user_id: str) -> List[VehicleRegistration]:
        return _newest_first(
            self.repository.find(lambda v: v.user_id == user_id and v.status != VehicleStatus.INACTIVE)
        )

    def list_all(self) -> List[VehicleRegistration]:
        return _newest_first(self.repository.list_all())

    def issue_permit(self, vehicle_id: str, permit_number: str, admin_user_id: str) -> VehicleRegistration:
        vehicle = self.repository.get_by_id(vehicle_id)
        if vehicle is None:
            raise NotFoundError("Vehicle not found.")
        if not self.users.is_admin(admin_user_id):
            raise PermissionDeniedError("Unauthorized: Admin privileges required.")
        permit_number = (permit_number or "").strip()
        if not permit_number:
            raise InvalidInputError("Permit number cannot be empty.")

        self.repository.update_by_id(
            vehicle_id,
            {
                "permit_number": permit_number,
                "permit_issued_at": self.clock(),
                "status": VehicleStatus.ACTIVE,
            },
            expected_version=vehicle.version,
        )

        self.notifications.create_notification(
            user_id=vehicle.user_id,
            title="Vehicle Permit Issued",
            message=f"Permit {permit_number} has been issued for your {vehicle.make} {vehicle.model}.",
            type=NotificationType.VEHICLE_REGISTRATION,
            link="/vehicle-registration",
        )
        logging.info(
            "Vehicle permit issued",
            extra={"vehicle_id": vehicle_id, "user_id": vehicle.user_id, "admin_user_id": admin_user_id},
        )
        return self.repository.get_by_id(vehicle_id)

    def remove_vehicle(self, vehicle_id: str, requesting_user_id: str) -> None:
        """Owners remove their own vehicles; admins may remove any"""
        vehicle = self.repository.get_by_id(vehicle_id)
        if vehicle is None:
            raise NotFoundError("Vehicle not found.")
        requester = self.users.get_by_id(requesting_user_id)
        if requester is None:
            raise NotFoundError("Requesting user not found.")
        if vehicle.user_id != requesting_user_id and not self.users.is_admin(requesting_user_id):
            raise PermissionDeniedError("You do not have permission to delete this vehicle registration.")

        self.repository.update_by_id(
            vehicle_id,
            {"status": VehicleStatus.INACTIVE, "permit_number": None, "permit_issued_at": None},
            expected_version=vehicle.version,
        )
