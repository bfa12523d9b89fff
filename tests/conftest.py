import os

# Must be set before the app settings are imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_TO_FILE"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["CHAIN_PROVIDER"] = "mock"

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import get_async_session
from app.core.security import get_password_hash
from app.db.seeds.initial_data import create_initial_data
from app.models.auth.user import User
from app.models.base import Base
from app.services.auth.session_provider import SessionIdentity, SessionProvider
from app.services.chain import MockChainProvider
from app.services.logistics.delivery_service import DeliveryService
from main import app

TEST_DATABASE_URL = "sqlite+aiosqlite://"

OPERATOR_EMAIL = "operator@example.com"
OPERATOR_PASSWORD = "Operator123"


@pytest.fixture
async def engine():
    """Fresh in-memory database per test"""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
async def user(db_session: AsyncSession) -> User:
    operator = User(
        email=OPERATOR_EMAIL,
        username="operator",
        full_name="Delivery Operator",
        hashed_password=get_password_hash(OPERATOR_PASSWORD),
        is_active=True,
    )
    db_session.add(operator)
    await db_session.commit()
    await db_session.refresh(operator)
    return operator


@pytest.fixture
def session_provider(user: User) -> SessionProvider:
    return SessionProvider(SessionIdentity(user_id=user.id, email=user.email))


@pytest.fixture
def chain_provider() -> MockChainProvider:
    return MockChainProvider()


@pytest.fixture
def delivery_service(db_session, chain_provider, session_provider) -> DeliveryService:
    return DeliveryService(db_session, chain_provider, session_provider)


@pytest.fixture
async def seeded(session_maker):
    """Demo user plus the three sample deliveries"""
    async with session_maker() as session:
        await create_initial_data(session)


@pytest.fixture
async def client(session_maker, chain_provider) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the test database and the mock chain provider"""
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_db
    app.state.chain_provider = chain_provider
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
    app.state.chain_provider = None


@pytest.fixture
async def auth_headers(client: AsyncClient, user: User) -> dict:
    """Bearer headers for the operator account"""
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": OPERATOR_EMAIL, "password": OPERATOR_PASSWORD},
    )
    tokens = response.json()
    return {"Authorization": f"Bearer {tokens['access_token']}"}
