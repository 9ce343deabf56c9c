"""Persistence contracts the domain services are written against"""

from typing import Any, Callable, Dict, List, Optional, Protocol, TypeVar

from hoa_portal.domain.models import User, UserRole

T = TypeVar("T")


class Repository(Protocol[T]):
    """Id-keyed collection; reads return copies, writes go through update_by_id"""

    def append(self, record: T) -> str:
        ...

    def get_by_id(self, record_id: str) -> Optional[T]:
        ...

    def list_all(self) -> List[T]:
        ...

    def find(self, predicate: Callable[[T], bool]) -> List[T]:
        ...

    def update_by_id(
        self,
        record_id: str,
        patch: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> bool:
        ...

    def delete_by_id(self, record_id: str) -> bool:
        ...


class UserLookup(Protocol):
    def get_by_id(self, user_id: str) -> Optional[User]:
        ...

    def with_role(self, role: UserRole) -> List[User]:
        ...

    def first_admin(self) -> Optional[User]:
        ...

    def is_admin(self, user_id: str) -> bool:
        ...
