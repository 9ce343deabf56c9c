"""Unit tests for vehicle registration and permits"""

import pytest
from hoa_portal.domain.exceptions import InvalidInputError, NotFoundError, PermissionDeniedError
from hoa_portal.domain.models import NotificationType, VehicleStatus
from hoa_portal.domain.vehicles import VehicleService
from hoa_portal.infrastructure.memory import VehicleRepository

SEDAN = {"make": "Toyota", "model": "Camry", "year": "2021", "color": "Silver", "license_plate": "ABC-123"}


@pytest.fixture
def service(users, notification_service, clock) -> VehicleService:
    return VehicleService(VehicleRepository(), users, notification_service, clock=clock)


def test_register_vehicle_notifies_admin(service, notification_service):
    vehicle = service.register_vehicle(SEDAN, "res-1")

    assert vehicle.status == VehicleStatus.PENDING_PERMIT
    assert vehicle.user_name == "Ana Reyes"
    assert vehicle.permit_number is None

    notification = notification_service.list_notifications("admin-1")[0]
    assert notification.title == "New Vehicle Registered"
    assert notification.message == "Ana Reyes registered a Toyota Camry."
    assert notification.type == NotificationType.VEHICLE_REGISTRATION
    assert notification.link == "/admin/vehicle-registrations"


def test_register_duplicate_plate_rejected(service):
    service.register_vehicle(SEDAN, "res-1")

    with pytest.raises(InvalidInputError):
        service.register_vehicle({**SEDAN, "license_plate": "abc-123"}, "res-1")

    # Another resident may register the same plate
    assert service.register_vehicle(SEDAN, "res-2").license_plate == "ABC-123"


@pytest.mark.parametrize(
    "override",
    [{"year": "1899"}, {"year": "21"}, {"make": "T"}, {"license_plate": "X" * 16}, {"color": ""}],
)
def test_register_vehicle_validates_form(service, override):
    with pytest.raises(InvalidInputError):
        service.register_vehicle({**SEDAN, **override}, "res-1")


def test_register_vehicle_unknown_user(service):
    with pytest.raises(NotFoundError):
        service.register_vehicle(SEDAN, "ghost")


def test_issue_permit_activates_and_notifies_owner(service, notification_service):
    vehicle = service.register_vehicle(SEDAN, "res-1")

    issued = service.issue_permit(vehicle.id, " P-0042 ", "admin-1")

    assert issued.status == VehicleStatus.ACTIVE
    assert issued.permit_number == "P-0042"
    assert issued.permit_issued_at is not None

    notification = notification_service.list_notifications("res-1")[0]
    assert notification.title == "Vehicle Permit Issued"
    assert notification.message == "Permit P-0042 has been issued for your Toyota Camry."
    assert notification.link == "/vehicle-registration"


def test_issue_permit_errors(service):
    vehicle = service.register_vehicle(SEDAN, "res-1")

    with pytest.raises(NotFoundError):
        service.issue_permit("vr-missing", "P-1", "admin-1")
    with pytest.raises(PermissionDeniedError):
        service.issue_permit(vehicle.id, "P-1", "res-1")
    with pytest.raises(InvalidInputError):
        service.issue_permit(vehicle.id, "   ", "admin-1")


def test_remove_vehicle_by_owner_clears_permit(service):
    vehicle = service.register_vehicle(SEDAN, "res-1")
    service.issue_permit(vehicle.id, "P-7", "admin-1")

    service.remove_vehicle(vehicle.id, "res-1")

    stored = service.repository.get_by_id(vehicle.id)
    assert stored.status == VehicleStatus.INACTIVE
    assert stored.permit_number is None
    assert service.list_for_user("res-1") == []
    assert [v.id for v in service.list_all()] == [vehicle.id]

    # Plate is free again once the old registration is inactive
    service.register_vehicle(SEDAN, "res-1")


def test_remove_vehicle_permissions(service):
    vehicle = service.register_vehicle(SEDAN, "res-1")

    with pytest.raises(PermissionDeniedError):
        service.remove_vehicle(vehicle.id, "res-2")
    with pytest.raises(NotFoundError):
        service.remove_vehicle(vehicle.id, "ghost")

    service.remove_vehicle(vehicle.id, "admin-1")
    assert service.repository.get_by_id(vehicle.id).status == VehicleStatus.INACTIVE


def test_list_vehicles_newest_first(service, clock):
    older = service.register_vehicle(SEDAN, "res-1")
    clock.advance(hours=1)
    newer = service.register_vehicle({**SEDAN, "license_plate": "XYZ-789"}, "res-1")

    assert [v.id for v in service.list_for_user("res-1")] == [newer.id, older.id]
