"""
Pytest configuration and fixtures.
"""

from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from src.auth.jwt import ADMIN_SUBJECT, COOKIE_NAME, ROLE_ADMIN, create_access_token
from src.db import Database, get_db
from src.models import Base
from src.services.agents import AgentService
from src.services.ledger import SalesLedgerService


# Test database URL (use SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def agent_service(db_session):
    return AgentService(db_session, promotion_threshold=Decimal("500000"))


@pytest_asyncio.fixture
async def ledger(db_session):
    return SalesLedgerService(
        db_session,
        promotion_threshold=Decimal("500000"),
        count_cancelled_sales=True,
    )


@pytest_asyncio.fixture
async def make_agent(agent_service):
    """Factory for agents with a 60/40 split unless told otherwise."""
    counter = {"n": 0}

    async def _make_agent(**kwargs):
        counter["n"] += 1
        defaults = {
            "name": f"Agent {counter['n']}",
            "email": f"agent{counter['n']}@example.com",
            "password": "secret123",
            "agent_commission_percentage": Decimal("60"),
            "organization_commission_percentage": Decimal("40"),
        }
        defaults.update(kwargs)
        return await agent_service.create_agent(**defaults)

    return _make_agent


# ── HTTP ──────────────────────────────────────────────────


@pytest_asyncio.fixture
async def client(db_engine):
    """HTTP client against the app, one session per request on the test engine."""
    from src.main import app

    database = Database(db_engine)

    async def override_get_db():
        async with database.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin_client(client):
    client.cookies.set(COOKIE_NAME, create_access_token(ADMIN_SUBJECT, ROLE_ADMIN))
    return client
