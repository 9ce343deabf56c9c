"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from hoa_portal.api.main import create_app
from hoa_portal.domain.models import User, UserRole
from hoa_portal.domain.notifications import NotificationService
from hoa_portal.infrastructure.database.models import Base
from hoa_portal.infrastructure.database.session import get_db
from hoa_portal.infrastructure.memory import InMemoryNotificationStore, UserDirectory
from hoa_portal.infrastructure.seed import seed_demo_data
from hoa_portal.portal import Portal


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeClock:
    """Deterministic clock; time only moves when a test advances it"""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 6, 15, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def store() -> InMemoryNotificationStore:
    return InMemoryNotificationStore()


@pytest.fixture
def notification_service(store: InMemoryNotificationStore, clock: FakeClock) -> NotificationService:
    return NotificationService(store, clock=clock)


@pytest.fixture
def users() -> UserDirectory:
    """Two residents, one admin, one staff member"""
    directory = UserDirectory()
    directory.append(User("res-1", "ana@example.com", "Ana", "Reyes", UserRole.HOA, "1 Elm St"))
    directory.append(User("res-2", "ben@example.com", "Ben", "Okafor", UserRole.HOA, "2 Elm St"))
    directory.append(User("admin-1", "office@example.com", "Office", "Manager", UserRole.ADMIN))
    directory.append(User("staff-1", "guard@example.com", "Gate", "Guard", UserRole.STAFF))
    return directory


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def portal() -> Portal:
    """Fresh demo portal with in-memory notifications"""
    portal = Portal()
    seed_demo_data(portal)
    return portal


@pytest.fixture
def client(db: Session, portal: Portal) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app(portal)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)
