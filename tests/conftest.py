"""Test fixtures — a throwaway SQLite database per test, real session tokens.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own SQLite file (aiosqlite) with the full schema,
   unique constraints included. No Postgres needed, nothing leaks
   between tests.
2. get_db is overridden to hand out the test session, and
   get_identity_provider to hand out a FakeIdentityProvider — so the
   real resolver and gate run, just without calling Clerk.
3. Session tokens are real JWTs, signed HS256 with a test key, so the
   token verification path is exercised too.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from jobhub.auth.identity_provider import (
    IdentityProfile,
    IdentityProvider,
    IdentityProviderError,
    get_identity_provider,
)
from jobhub.config import settings
from jobhub.db.engine import get_db
from jobhub.db.models import Base, Category, Job
from jobhub.main import app

TEST_JWT_KEY = "jobhub-test-session-signing-key-0123456789abcdef"

ADMIN_ID = "user_admin_1"
ALICE_ID = "user_alice"
BOB_ID = "user_bob"


class FakeIdentityProvider(IdentityProvider):
    """In-memory stand-in for Clerk.

    Unknown ids raise IdentityProviderError, like a 404 from Clerk.
    `on_fetch` lets a test run code in the middle of a profile fetch
    (e.g. to simulate a concurrent request).
    """

    def __init__(self):
        self.profiles: dict[str, IdentityProfile] = {}
        self.calls: list[str] = []
        self.on_fetch = None

    def add(self, external_id: str, **fields) -> None:
        self.profiles[external_id] = IdentityProfile(**fields)

    async def get_profile(self, external_id: str) -> IdentityProfile:
        self.calls.append(external_id)
        if self.on_fetch is not None:
            await self.on_fetch(external_id)
        if external_id not in self.profiles:
            raise IdentityProviderError(f"Clerk returned 404 for user {external_id}")
        return self.profiles[external_id]


def make_token(external_id: str, **claims) -> str:
    payload = {
        "sub": external_id,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        "iat": datetime.now(timezone.utc),
        **claims,
    }
    return jwt.encode(payload, TEST_JWT_KEY, algorithm="HS256")


def auth(external_id: str) -> dict:
    """Authorization header for a user."""
    return {"Authorization": f"Bearer {make_token(external_id)}"}


@pytest.fixture(autouse=True)
def auth_settings(monkeypatch):
    """Verify tokens with the test key; ADMIN_ID is the only allow-listed id."""
    monkeypatch.setattr(settings, "clerk_jwt_key", TEST_JWT_KEY)
    monkeypatch.setattr(settings, "clerk_jwt_algorithms", ["HS256"])
    monkeypatch.setattr(settings, "clerk_jwks_url", "")
    monkeypatch.setattr(settings, "clerk_authorized_parties", [])
    monkeypatch.setattr(settings, "admin_external_ids", [ADMIN_ID])
    return settings


@pytest_asyncio.fixture()
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'jobhub.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    """Independent sessions (separate connections) for race simulations."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def provider():
    fake = FakeIdentityProvider()
    fake.add(ADMIN_ID, first_name="Ada", last_name="Admin",
             email_addresses=["ada@jobhub.dev"])
    fake.add(ALICE_ID, first_name="Alice", last_name="Smith",
             email_addresses=["alice@example.com", "alice@work.example.com"],
             image_url="https://img.clerk.com/alice.png")
    fake.add(BOB_ID, username="bobby", email_addresses=["bob@example.com"])
    return fake


@pytest_asyncio.fixture()
async def client(db_session, provider):
    """HTTP client with get_db and the identity provider overridden."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = lambda: provider

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def category(db_session):
    category = Category(name="Engineering", description="Build things")
    db_session.add(category)
    await db_session.commit()
    return category


@pytest_asyncio.fixture()
async def job(db_session, category):
    job = Job(
        title="Backend Engineer",
        company="Acme",
        location="Remote",
        description="Python, FastAPI, Postgres",
        job_type="full-time",
        category_id=category.id,
    )
    db_session.add(job)
    await db_session.commit()
    return job
