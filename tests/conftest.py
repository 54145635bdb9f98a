"""
Shared fixtures: in-memory database, pinned clock, recording notification
sender and a TestClient wired to all of them.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from natours_core.auth import TokenIssuer, hash_password
from natours_core.db import CredentialStore, Database, UserRole
from natours_core.notifications import NotificationError

from auth_service.config import Settings
from auth_service.services import AuthService

TEST_SECRET = "test-signing-secret"
START = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class RecordingSender:
    """Notification sender that records calls and can be told to fail."""

    def __init__(self):
        self.welcome = []
        self.password_reset = []
        self.fail_welcome = False
        self.fail_reset = False

    def send_welcome(self, user, url):
        if self.fail_welcome:
            raise NotificationError("smtp unavailable")
        self.welcome.append((user.email, url))

    def send_password_reset(self, user, url):
        if self.fail_reset:
            raise NotificationError("smtp unavailable")
        self.password_reset.append((user.email, url))

    @property
    def last_reset_secret(self) -> str:
        return self.password_reset[-1][1].rsplit("/", 1)[-1]


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Cheap bcrypt cost so the suite stays quick."""
    monkeypatch.setattr("natours_core.auth.password.BCRYPT_ROUNDS", 4)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        JWT_SECRET_KEY=TEST_SECRET,
        DATABASE_URL="sqlite://",
        RATE_LIMIT_ENABLED=False,
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(START)


@pytest.fixture
def database(settings) -> Database:
    """In-memory SQLite built from the test settings, tables created."""
    database = Database.from_settings(settings)
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def store(db_session) -> CredentialStore:
    return CredentialStore(db_session)


@pytest.fixture
def issuer(settings, clock) -> TokenIssuer:
    return TokenIssuer.from_settings(settings, clock=clock)


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def service(store, issuer, sender, settings, clock) -> AuthService:
    return AuthService(store=store, issuer=issuer, sender=sender, settings=settings, clock=clock)


@pytest.fixture
def make_user(store):
    """Create a user directly in the store."""

    def _make_user(
        email: str = "ana@example.com",
        password: str = "longpass1",
        name: str = "Ana Silva",
        role: UserRole = UserRole.USER,
    ):
        return store.create(name=name, email=email, password_hash=hash_password(password), role=role)

    return _make_user


@pytest.fixture
def app(database, settings, sender, clock):
    from auth_service.main import create_app

    return create_app(settings=settings, sender=sender, clock=clock, database=database)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
