import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from earthwise.database import get_db
from earthwise.models.base import Base
from earthwise.config import settings
# Import all model classes to ensure they're registered with SQLAlchemy
from earthwise.models.user import User
from earthwise.models.notification import Notification
from earthwise.models.report import Report
from earthwise.models.transaction import Transaction
from earthwise.client.identity import Identity
from earthwise.core.exceptions import IdentityProviderError
from earthwise.services.actions import DatabaseActions
# Import FastAPI app AFTER model imports
from earthwise.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def session_factory(db_session):
    """Session factory for code that opens its own sessions"""
    return TestingSessionLocal


@pytest.fixture
def actions(session_factory):
    """Database actions bound to the test database"""
    return DatabaseActions(session_factory)


def create_test_token(
    email: str | None = "test@example.com",
    name: str | None = "Test User",
    sub: str = "wallet-user-123",
    expired: bool = False,
) -> str:
    """
    Generate a signed ID token like the wallet login provider issues.

    Args:
        email: 'email' claim, omitted when None
        name: 'name' claim, omitted when None
        sub: verifier id in the 'sub' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": sub, "exp": exp, "iat": datetime.now(UTC)}
    if email is not None:
        payload["email"] = email
    if name is not None:
        payload["name"] = name

    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def make_token():
    """Factory for ID tokens"""
    return create_test_token


@pytest.fixture
def auth_headers():
    """Authorization headers for authenticated requests"""
    return {"Authorization": f"Bearer {create_test_token()}"}


@pytest.fixture
def user_a_headers():
    """Authorization headers for user A"""
    token = create_test_token(email="a@x.com", name="A", sub="user-a")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_b_headers():
    """Authorization headers for user B"""
    token = create_test_token(email="b@x.com", name="B", sub="user-b")
    return {"Authorization": f"Bearer {token}"}


class FakeIdentityProvider:
    """Scriptable stand-in for the wallet identity provider"""

    def __init__(
        self,
        identity: Identity | None = None,
        connected: bool = False,
        fail_init: bool = False,
        fail_connect: bool = False,
        fail_logout: bool = False,
    ):
        self.identity = identity or Identity(email="a@x.com", name="A")
        self.connected = connected
        self.provider = None
        self.fail_init = fail_init
        self.fail_connect = fail_connect
        self.fail_logout = fail_logout
        self.connect_calls = 0
        self.logout_calls = 0

    async def initialize(self):
        if self.fail_init:
            raise IdentityProviderError("init failed")
        if self.connected:
            self.provider = "restored-provider"

    async def connect(self):
        self.connect_calls += 1
        if self.fail_connect:
            raise IdentityProviderError("user closed the modal")
        self.connected = True
        self.provider = "wallet-provider"
        return self.provider

    async def logout(self):
        self.logout_calls += 1
        if self.fail_logout:
            raise IdentityProviderError("disconnect failed")
        self.connected = False
        self.provider = None

    async def get_user_info(self):
        if not self.connected:
            raise IdentityProviderError("Wallet is not connected")
        return self.identity


@pytest.fixture
def identity_provider_factory():
    return FakeIdentityProvider


@pytest.fixture
def seed_user(db_session):
    """Insert a committed user (and optional unread notifications)"""

    def _seed(email: str = "a@x.com", name: str = "A", notifications: int = 0) -> User:
        user = User(email=email, name=name)
        db_session.add(user)
        db_session.commit()
        for i in range(notifications):
            db_session.add(
                Notification(user_id=user.id, message=f"Notification {i}", type="reward")
            )
        db_session.commit()
        db_session.refresh(user)
        return user

    return _seed
