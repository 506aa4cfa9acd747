"""Test configuration and fixtures."""

import os

# Settings are read at import time; point them at an in-memory database first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENABLE_WORKERS"] = "false"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["JWT_AUDIENCE"] = "authenticated"
os.environ["RESEND_API_KEY"] = ""

from datetime import datetime, timedelta  # noqa: E402
from uuid import UUID  # noqa: E402

import jwt  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.core.database import Base, async_session_factory, engine  # noqa: E402
from app.models import *  # noqa: E402,F403 - Import all models
from app.models.account import AppRole, User, UserRole  # noqa: E402
from app.models.destination import Destination  # noqa: E402
from app.models.tour import Tour  # noqa: E402
from app.routers.booking import get_notification_service  # noqa: E402


class RecordingNotificationService:
    """Stands in for the email service and remembers what it was asked to send."""

    def __init__(self):
        self.sent = []

    async def send_booking_notifications(self, details):
        self.sent.append(details)
        return {"customer": True, "admin": True}


def make_token(user_id: UUID, secret: str = "test-jwt-secret", expires_in: int = 3600, **claims) -> str:
    payload = {
        "sub": str(user_id),
        "aud": "authenticated",
        "exp": datetime.utcnow() + timedelta(seconds=expires_in),
        **claims,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create the schema on the application engine and tear it down afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    # Drops the single in-memory connection so the next test starts clean
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine):
    """Create a test database session."""
    async with async_session_factory() as session:
        yield session


@pytest.fixture
def notifications():
    return RecordingNotificationService()


@pytest_asyncio.fixture(scope="function")
async def test_app(test_engine, notifications):
    """The real application with the email service replaced."""
    from app.main import create_app

    app = create_app()
    app.dependency_overrides[get_notification_service] = lambda: notifications

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def create_user(test_session):
    """Factory that inserts an account, optionally granting admin."""

    async def _create(email: str, admin: bool = False, phone: str | None = None) -> User:
        user = User(email=email, phone=phone)
        test_session.add(user)
        await test_session.flush()
        if admin:
            test_session.add(UserRole(user_id=user.id, role=AppRole.ADMIN.value))
        await test_session.commit()
        return user

    return _create


@pytest_asyncio.fixture
async def customer(create_user):
    return await create_user("ayesha@example.com")


@pytest_asyncio.fixture
async def other_customer(create_user):
    return await create_user("bilal@example.com")


@pytest_asyncio.fixture
async def admin(create_user):
    return await create_user("admin@industours.pk", admin=True)


@pytest.fixture
def customer_headers(customer):
    return {"Authorization": f"Bearer {make_token(customer.id)}"}


@pytest.fixture
def other_customer_headers(other_customer):
    return {"Authorization": f"Bearer {make_token(other_customer.id)}"}


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {make_token(admin.id)}"}


@pytest_asyncio.fixture
async def destination(test_session):
    destination = Destination(name="Hunza Valley", location="Gilgit-Baltistan", is_featured=True)
    test_session.add(destination)
    await test_session.commit()
    return destination


@pytest_asyncio.fixture
async def tour(test_session, destination):
    """A discounted, active tour: 15,000 list, 12,000 sale."""
    tour = Tour(
        title="Hunza Valley Explorer",
        duration="5 Days",
        price=15000,
        discount_price=12000,
        is_featured=True,
        is_active=True,
        destination_id=destination.id,
    )
    test_session.add(tour)
    await test_session.commit()
    return tour


@pytest.fixture
def booking_payload(tour):
    """A valid booking funnel submission for the sample tour."""
    return {
        "tour_id": str(tour.id),
        "customer_name": "Ayesha Khan",
        "customer_email": "Ayesha@Example.com",
        "customer_phone": "+92 300 1234567",
        "travel_date": "2025-06-15",
        "num_travelers": 3,
        "special_requests": "Window seats please",
    }
