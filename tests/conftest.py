"""
Shared pytest fixtures.

Every test gets a fresh app bound to an in-memory SQLite database
(StaticPool, so the app and the test share one connection).
"""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.identity import issue_token
from app.core.roles import Role, AccountStatus
from app.db.base import Base
from app.db.models.subscription import Subscription, SubscriptionPlan, SubscriptionStatus
from app.main import create_app
from app.services import account_service
from app.util.time import utcnow

TEST_PASSWORD = "testpass123"


@pytest.fixture
def settings():
    return Settings(
        secret_key="test-secret-key",
        database_url="sqlite://",
        bcrypt_rounds=4,
        rate_limit_max_requests=10_000,
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    application = create_app(settings)
    Base.metadata.create_all(bind=application.state.engine)
    yield application
    Base.metadata.drop_all(bind=application.state.engine)
    application.state.engine.dispose()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db(app):
    """Database session on the app's database."""
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    """Factory creating accounts, active by default."""
    def _make(email, role=Role.CLIENT, status=AccountStatus.ACTIVE, password=TEST_PASSWORD):
        return account_service.create_account(
            db,
            email=email,
            password=password,
            first_name="Test",
            last_name="User",
            role=role,
            status=status,
            bcrypt_rounds=4,
        )
    return _make


@pytest.fixture
def make_subscription(db):
    """Factory inserting a subscription row ending `ends_in` from now."""
    def _make(user, ends_in=timedelta(days=30), status=SubscriptionStatus.ACTIVE, plan=SubscriptionPlan.MONTHLY):
        now = utcnow()
        sub = Subscription(
            user_id=user.id,
            plan=plan,
            status=status,
            starts_at=now + ends_in - plan.duration,
            ends_at=now + ends_in,
        )
        db.add(sub)
        db.commit()
        db.refresh(sub)
        return sub
    return _make


@pytest.fixture
def auth_headers(settings):
    """Build an Authorization header for a user."""
    def _headers(user, now=None):
        token = issue_token(settings, user.id, user.email, user.role, now=now)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", role=Role.ADMIN)


@pytest.fixture
def candidate(make_user):
    return make_user("candidate@example.com", role=Role.CANDIDATE)


@pytest.fixture
def partner(make_user):
    return make_user("partner@example.com", role=Role.PARTNER)


@pytest.fixture
def customer(make_user):
    return make_user("client@example.com", role=Role.CLIENT)
