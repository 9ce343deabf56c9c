"""In-memory repositories keyed by id

Each repository owns one collection. Reads hand out copies so callers can
only change stored records through update_by_id, which bumps the record's
version and rejects stale writes.
"""

import threading
from dataclasses import replace
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from hoa_portal.domain.exceptions import ConcurrencyConflictError
from hoa_portal.domain.models import (
    Announcement,
    BillingAccount,
    Notification,
    User,
    UserRole,
    VehicleRegistration,
    VisitorPass,
)

T = TypeVar("T")


class InMemoryRepository(Generic[T]):
    """Dict-backed store with insertion order and optimistic versioning"""

    def __init__(self):
        self._records: Dict[str, T] = {}
        self._lock = threading.Lock()

    def append(self, record: T) -> str:
        with self._lock:
            if record.id in self._records:
                raise ValueError(f"Duplicate id: {record.id}")
            self._records[record.id] = replace(record)
        return record.id

    def get_by_id(self, record_id: str) -> Optional[T]:
        with self._lock:
            record = self._records.get(record_id)
            return replace(record) if record is not None else None

    def list_all(self) -> List[T]:
        with self._lock:
            return [replace(r) for r in self._records.values()]

    def find(self, predicate: Callable[[T], bool]) -> List[T]:
        return [r for r in self.list_all() if predicate(r)]

    def update_by_id(
        self,
        record_id: str,
        patch: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> bool:
        with self._lock:
            current = self._records.get(record_id)
            if current is None:
                return False

            version = getattr(current, "version", None)
            if expected_version is not None and version != expected_version:
                raise ConcurrencyConflictError(
                    f"{record_id} is at version {version}, expected {expected_version}"
                )

            changes = dict(patch)
            if version is not None:
                changes["version"] = version + 1
            self._records[record_id] = replace(current, **changes)
            return True

    def delete_by_id(self, record_id: str) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None

    def __len__(self) -> int:
        return len(self._records)


class InMemoryNotificationStore(InMemoryRepository[Notification]):
    """Notification store used by default and in unit tests"""

    def query_by_owner(self, user_id: str) -> List[Notification]:
        return self.find(lambda n: n.user_id == user_id)


class UserDirectory(InMemoryRepository[User]):
    """Resident and staff accounts"""

    def with_role(self, role: UserRole) -> List[User]:
        return self.find(lambda u: u.role == role)

    def first_admin(self) -> Optional[User]:
        admins = self.with_role(UserRole.ADMIN)
        return admins[0] if admins else None

    def is_admin(self, user_id: str) -> bool:
        user = self.get_by_id(user_id)
        return user is not None and user.role == UserRole.ADMIN


class BillingAccountRepository(InMemoryRepository[BillingAccount]):
    """Billing records, one per resident property"""

    def for_user(self, user_id: str) -> List[BillingAccount]:
        return self.find(lambda a: a.user_id == user_id)


class AnnouncementRepository(InMemoryRepository[Announcement]):
    pass


class VehicleRepository(InMemoryRepository[VehicleRegistration]):
    pass


class VisitorPassRepository(InMemoryRepository[VisitorPass]):
    pass
