# tests/conftest.py
"""
Shared fixtures for the BookMe test suite.

Every test gets its own in-memory SQLite database (one shared connection
via StaticPool) with the schema created from the models. The app under
test is built with ``create_app`` and its ``get_db`` dependency is pointed
at the same session the fixtures write through.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Iterator

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest
from sqlalchemy.orm import Session

from bookme.auth import create_access_token
from bookme.core.config import Settings
from bookme.database import Base, Database, get_db
from bookme.main import create_app
from bookme.models.booking import Booking, BookingStatus
from bookme.models.service import Service
from bookme.models.user import User

TEST_SETTINGS = Settings(
    environment="test",
    database_url="sqlite://",
    log_level="WARNING",
    slow_request_threshold_ms=10_000,
)


@pytest.fixture
def settings() -> Settings:
    return TEST_SETTINGS


@pytest.fixture
def database() -> Iterator[Database]:
    database = Database(TEST_SETTINGS)
    database.create_all()
    yield database
    Base.metadata.drop_all(bind=database.engine)
    database.dispose()


@pytest.fixture(scope="function")
def db(database: Database) -> Iterator[Session]:
    """Create a new database session for each test."""
    session = database.session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def app(database: Database, db: Session) -> Iterator[FastAPI]:
    application = create_app(TEST_SETTINGS, database=database)

    def override_get_db():
        yield db

    application.dependency_overrides[get_db] = override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Create a test client with the test database."""
    test_client = TestClient(app)
    yield test_client
    test_client.close()


def _make_user(db: Session, email: str, display_name: str, **overrides) -> User:
    user = User(
        email=email,
        display_name=display_name,
        avatar=overrides.pop("avatar", None),
        rating=overrides.pop("rating", Decimal("4.50")),
        review_count=overrides.pop("review_count", 12),
        **overrides,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def provider(db: Session) -> User:
    """A user offering services."""
    return _make_user(
        db, "pat.provider@example.com", "Pat Provider", avatar="https://cdn.example.com/pat.png"
    )


@pytest.fixture
def requester(db: Session) -> User:
    return _make_user(db, "riley.requester@example.com", "Riley Requester", rating=Decimal("0"))


@pytest.fixture
def outsider(db: Session) -> User:
    """A user who is party to none of the fixture bookings."""
    return _make_user(db, "olive.outsider@example.com", "Olive Outsider")


@pytest.fixture
def active_service(db: Session, provider: User) -> Service:
    service = Service(
        provider_id=provider.id,
        title="Guitar lesson",
        description="One-on-one acoustic guitar lesson",
        duration=60,
        price=Decimal("45.00"),
        category="music",
        location="Brooklyn, NY",
        is_active=True,
    )
    db.add(service)
    db.commit()
    return service


@pytest.fixture
def inactive_service(db: Session, provider: User) -> Service:
    service = Service(
        provider_id=provider.id,
        title="Retired workshop",
        duration=90,
        price=Decimal("80.00"),
        is_active=False,
    )
    db.add(service)
    db.commit()
    return service


@pytest.fixture
def make_booking(db: Session) -> Callable[..., Booking]:
    """Insert a booking directly, bypassing the service layer."""

    def _make(
        service: Service,
        requester: User,
        status: BookingStatus = BookingStatus.PENDING,
        created_at: datetime | None = None,
        message: str | None = "Looking forward to it",
    ) -> Booking:
        booking = Booking(
            service_id=service.id,
            requester_id=requester.id,
            provider_id=service.provider_id,
            message=message,
            status=status.value,
        )
        if created_at is not None:
            booking.created_at = created_at
        db.add(booking)
        db.commit()
        return booking

    return _make


@pytest.fixture
def pending_booking(make_booking, active_service: Service, requester: User) -> Booking:
    return make_booking(active_service, requester)


@pytest.fixture
def confirmed_booking(make_booking, active_service: Service, requester: User) -> Booking:
    return make_booking(active_service, requester, status=BookingStatus.CONFIRMED)


@pytest.fixture
def auth_headers_for() -> Callable[[User], dict]:
    """Build bearer headers for any user."""

    def _headers(user: User, expires_delta: timedelta | None = None) -> dict:
        token = create_access_token(
            data={"sub": user.id}, expires_delta=expires_delta, settings=TEST_SETTINGS
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def auth_headers_provider(auth_headers_for, provider: User) -> dict:
    return auth_headers_for(provider)


@pytest.fixture
def auth_headers_requester(auth_headers_for, requester: User) -> dict:
    return auth_headers_for(requester)


@pytest.fixture
def auth_headers_outsider(auth_headers_for, outsider: User) -> dict:
    return auth_headers_for(outsider)
