"""Shared pytest fixtures configured to use SQLite in-memory for tests."""

import logging
import os
from uuid import uuid4

# must be set before notevault is imported: the app engine is built at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("NOTEVAULT_SKIP_LIFESPAN_DB", "1")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from notevault.core.models import BaseModel, Note, User
from notevault.database import configure_sqlite, get_db_session
from notevault.main import app
from notevault.security.jwt import create_access_token
from notevault.security.password import hash_password

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

TEST_PASSWORD = "TestPassword123!"
# hashing is slow; every fixture user shares one hash
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture
async def test_engine():
    """Fresh SQLite in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,  # keep the same memory DB across connections
        connect_args={"check_same_thread": False},
    )
    configure_sqlite(engine)

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_session(session_factory):
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def test_app(test_session):
    """FastAPI app bound to the test session."""

    async def _override_get_db():
        yield test_session

    app.dependency_overrides[get_db_session] = _override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as ac:
        yield ac


async def make_user(session: AsyncSession, email: str = None, display_name: str = None) -> User:
    user = User(
        email=email or f"user_{uuid4().hex[:8]}@example.com",
        password_hash=TEST_PASSWORD_HASH,
        display_name=display_name,
        is_active=True,
    )
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
def user_factory(test_session):
    async def _make(email: str = None, display_name: str = None) -> User:
        return await make_user(test_session, email, display_name)

    return _make


@pytest.fixture
async def owner(test_session):
    return await make_user(test_session, "alice@example.com", "Alice")


@pytest.fixture
async def recipient(test_session):
    return await make_user(test_session, "bob@example.com", "Bob")


@pytest.fixture
async def stranger(test_session):
    return await make_user(test_session, "carol@example.com", "Carol")


@pytest.fixture
async def note(test_session, owner):
    """A bare PRIVATE note owned by ``owner``."""
    note = Note(title="Trip plan", content="Day 1: train", owner_id=owner.id)
    test_session.add(note)
    await test_session.commit()
    return note


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


@pytest.fixture
def headers_for():
    return bearer


@pytest.fixture
def owner_headers(owner):
    return bearer(owner)


@pytest.fixture
def recipient_headers(recipient):
    return bearer(recipient)
