"""
Test configuration and fixtures for RideWitUS.

Provides shared fixtures for unit and API tests. Every test that touches
storage runs against a fresh schema in a temporary SQLite file.
"""

import os
import tempfile
from pathlib import Path
from typing import AsyncGenerator, Callable, Optional
from unittest.mock import AsyncMock, MagicMock

_TEST_DIR = tempfile.mkdtemp(prefix="ridewitus-tests-")
TEST_DB_PATH = Path(_TEST_DIR) / "test.db"
TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-hs256"

# Settings are read at import time; configure the environment first.
os.environ["JWT_SECRET"] = TEST_JWT_SECRET
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["ENVIRONMENT"] = "testing"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import Session, SQLModel

import ridewitus.infrastructure.db.models  # noqa: F401  registers tables
from ridewitus.domain.models import Role, SubscriptionStatus
from ridewitus.infrastructure.db.database import DatabaseManager
from ridewitus.infrastructure.db.models import Account, PricingTier
from ridewitus.infrastructure.security.passwords import pwd_context


DEFAULT_PASSWORD = "correct-horse-battery"


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def sync_engine():
    """Synchronous engine used to build the schema and seed rows."""
    engine = create_engine(f"sqlite:///{TEST_DB_PATH}")
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
async def session(sync_engine) -> AsyncGenerator[AsyncSession, None]:
    """Async session on the test database for service-level tests."""
    manager = DatabaseManager(os.environ["DATABASE_URL"])
    async with manager.session_factory() as db_session:
        yield db_session
    await manager.close()


@pytest.fixture
def make_account(sync_engine) -> Callable[..., Account]:
    """Insert an account directly and return it."""

    def _make(
        email: str = "rider@example.com",
        name: str = "Rider",
        password: str = DEFAULT_PASSWORD,
        role: Role = Role.USER,
        subscription: SubscriptionStatus = SubscriptionStatus.FREE,
        stripe_customer_id: Optional[str] = None,
    ) -> Account:
        account = Account(
            email=email,
            name=name,
            password_hash=pwd_context.hash(password),
            role=role.value,
            subscription_status=subscription.value,
            stripe_customer_id=stripe_customer_id,
        )
        with Session(sync_engine, expire_on_commit=False) as db_session:
            db_session.add(account)
            db_session.commit()
        return account

    return _make


@pytest.fixture
def seed_pricing(sync_engine):
    """Insert the default pricing tiers."""
    from ridewitus.domain.pricing import DEFAULT_TIERS

    with Session(sync_engine) as db_session:
        for position, tier in enumerate(DEFAULT_TIERS):
            db_session.add(
                PricingTier(
                    id=tier.id,
                    name=tier.name,
                    price=tier.price,
                    interval=tier.interval.value,
                    features=list(tier.features),
                    stripe_price_id=tier.stripe_price_id,
                    position=position,
                )
            )
        db_session.commit()
    return DEFAULT_TIERS


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def mock_billing():
    """Stand-in for StripeService."""
    mock = MagicMock()
    mock.create_customer = AsyncMock(return_value="cus_test_123")
    mock.create_checkout_session = AsyncMock(
        return_value=MagicMock(id="cs_test_123", url="https://checkout.stripe.test/cs_test_123")
    )
    mock.cancel_customer_subscriptions = AsyncMock(return_value=["sub_test_1"])
    return mock


@pytest.fixture
def app(sync_engine, mock_billing):
    """Get the FastAPI application with billing stubbed out."""
    from ridewitus.api.dependencies import get_billing_service
    from ridewitus.main import app

    app.dependency_overrides[get_billing_service] = lambda: mock_billing
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Get synchronous test client."""
    return TestClient(app)


@pytest.fixture
def client_factory(app) -> Callable[[], TestClient]:
    """Build independent clients, each with its own cookie jar."""
    return lambda: TestClient(app)


@pytest.fixture
def login(client_factory, make_account) -> Callable[..., TestClient]:
    """Create an account and return a client signed in as it."""

    def _login(email: str = "rider@example.com", **kwargs) -> TestClient:
        password = kwargs.get("password", DEFAULT_PASSWORD)
        account = make_account(email=email, **kwargs)
        signed_in = client_factory()
        response = signed_in.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        signed_in.account = account
        return signed_in

    return _login


@pytest.fixture
def password() -> str:
    """Password of accounts created by ``make_account`` and ``login``."""
    return DEFAULT_PASSWORD
