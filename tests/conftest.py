import os

# Must be set before the app modules read their configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from starlette.websockets import WebSocketState  # noqa: E402

from app.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Booking, Service, Stylist, StylistService, User  # noqa: E402
from app.security_utils import create_session_token, hash_password_bcrypt  # noqa: E402

PASSWORD = "secret123"
# Every fixture user shares this password
PASSWORD_HASH = hash_password_bcrypt(PASSWORD)


class FakeConnection:
    """Stands in for a WebSocket in the connection registry"""

    def __init__(self, open_: bool = True, fail: bool = False):
        state = WebSocketState.CONNECTED if open_ else WebSocketState.DISCONNECTED
        self.client_state = state
        self.application_state = state
        self.fail = fail
        self.sent = []

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("socket went away")
        self.sent.append(message)


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_session_token(user)}"}


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def registry():
    app.state.connection_registry.clear()
    yield app.state.connection_registry
    app.state.connection_registry.clear()


@pytest.fixture
def client(session_factory, registry):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    def _make(name="Jane Client", email="client@example.com", role="client", phone_number=None):
        user = User(
            name=name,
            email=email,
            password=PASSWORD_HASH,
            role=role,
            phone_number=phone_number,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user(name="Admin", email="admin@afrogents.com", role="admin")


@pytest.fixture
def client_user(make_user):
    return make_user(name="Michael Johnson", email="michael@example.com", phone_number="+971 50 123 4567")


@pytest.fixture
def other_client(make_user):
    return make_user(name="David Williams", email="david@example.com")


@pytest.fixture
def make_service(db_session):
    def _make(name="Haircut & Trim", price=200, duration=45, category="Hair", is_active=True):
        service = Service(
            name=name,
            description=f"{name} service",
            price=price,
            duration=duration,
            category=category,
            is_active=is_active,
        )
        db_session.add(service)
        db_session.commit()
        db_session.refresh(service)
        return service

    return _make


@pytest.fixture
def service(make_service):
    return make_service()


@pytest.fixture
def stylist(db_session, service):
    stylist = Stylist(name="Claude Njeam", title="Master Barber", rating=4.8)
    db_session.add(stylist)
    db_session.flush()
    db_session.add(StylistService(stylist_id=stylist.id, service_id=service.id))
    db_session.commit()
    db_session.refresh(stylist)
    return stylist


@pytest.fixture
def make_booking(db_session, stylist, service):
    def _make(client=None, status="pending", date=datetime(2025, 4, 8), time_start="10:00 AM",
              time_end="10:45 AM", service_id=None, client_name="Michael Johnson"):
        booking = Booking(
            client_name=client_name,
            client_contact="+971 50 123 4567",
            client_location="Dubai, UAE",
            client_id=client.id if client else None,
            stylist_id=stylist.id,
            service_id=service_id or service.id,
            date=date,
            time_start=time_start,
            time_end=time_end,
            status=status,
            payment_method="cash",
            payment_status="pending",
        )
        db_session.add(booking)
        db_session.commit()
        db_session.refresh(booking)
        return booking

    return _make


@pytest.fixture
def booking(make_booking, client_user):
    return make_booking(client=client_user)
