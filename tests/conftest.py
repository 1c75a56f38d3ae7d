"""Pytest configuration and fixtures."""
import pytest
import pytest_asyncio
from typing import AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from httpx import AsyncClient, ASGITransport

from app.api.deps import get_role_cache, get_token_codec
from app.database import Base, get_db
from app.main import app
from app.models.role import Role
from app.models.user import User
from app.services.tokens import TokenCodec
from app.services.users import UserRepository


# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ALICE_PASSWORD = "Pa55w0rd!"
BOB_PASSWORD = "Bob12345"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest_asyncio.fixture(scope="function")
async def admin_role(db_session: AsyncSession) -> Role:
    role = Role(name="Admin", description="Administrators", permissions={"users": ["*"]})
    db_session.add(role)
    await db_session.commit()
    return role


@pytest_asyncio.fixture(scope="function")
async def sales_role(db_session: AsyncSession) -> Role:
    role = Role(name="Sales", description="Sales team", permissions={})
    db_session.add(role)
    await db_session.commit()
    return role


@pytest_asyncio.fixture(scope="function")
async def alice(repository: UserRepository, admin_role: Role) -> User:
    """Active administrator."""
    user = User(
        username="alice",
        email="alice@example.com",
        first_name="Alice",
        last_name="Anderson",
        role_id=admin_role.id,
        department="IT",
        is_active=True,
    )
    return await repository.create(user, ALICE_PASSWORD)


@pytest_asyncio.fixture(scope="function")
async def bob(repository: UserRepository, sales_role: Role) -> User:
    """Active non-admin user."""
    user = User(
        username="bob",
        email="bob@example.com",
        first_name="Bob",
        last_name="Brown",
        role_id=sales_role.id,
        is_active=True,
    )
    return await repository.create(user, BOB_PASSWORD)


@pytest.fixture
def token_codec() -> TokenCodec:
    return get_token_codec()


@pytest.fixture
def alice_headers(alice: User, token_codec: TokenCodec) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token_codec.mint(alice.id).access_token}"}


@pytest.fixture
def bob_headers(bob: User, token_codec: TokenCodec) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token_codec.mint(bob.id).access_token}"}


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    # Override database dependency
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    get_role_cache().clear()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
