"""Shared fixtures: in-memory database, app, HTTP client and auth headers."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlmodel import Session

from catalog.core.config import Settings
from catalog.main import create_app
from catalog.models.product import Product

ADMIN_PASSWORD = "jbstire-test"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-access-secret",
        JWT_REFRESH_SECRET="test-refresh-secret",
        ADMIN_USERNAME="admin",
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        LOG_LEVEL="WARNING",
        DB_CONNECT_RETRIES=1,
    )


@pytest.fixture
def app(settings: Settings):
    app = create_app(settings)
    app.state.db.connect()
    yield app
    app.state.db.disconnect()


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def session(app):
    with app.state.db.session() as s:
        yield s


@pytest.fixture
def admin_headers(app) -> dict[str, str]:
    pair = app.state.tokens.issue("admin_user", "admin")
    return {"Authorization": f"Bearer {pair.access_token}"}


@pytest.fixture
def user_headers(app) -> dict[str, str]:
    pair = app.state.tokens.issue("customer-1", "user")
    return {"Authorization": f"Bearer {pair.access_token}"}


@pytest.fixture
def make_product(session: Session):
    """
    Insert a product row directly.

    Each call gets a creation time one minute after the previous one, so
    "newest first" ordering is predictable.
    """
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(**overrides) -> Product:
        counter["n"] += 1
        fields = {
            "name": f"Test Tire {counter['n']}",
            "brand": "Michelin",
            "price_cents": 10000,
            "size": "225/45R17",
            "description": "A dependable all-round test tire.",
            "category": "tires",
            "stock_quantity": 10,
            "in_stock": True,
            "created_at": base + timedelta(minutes=counter["n"]),
        }
        fields.update(overrides)
        product = Product(**fields)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make
