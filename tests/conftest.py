"""
Shared fixtures: fast bcrypt config, in-memory and SQLite-backed stores.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from auth.config import AuthConfig
from auth.service import AuthService
from auth.store import InMemoryCredentialStore, SqlCredentialStore
from database.session import create_tables

TEST_SECRET = "test-secret-key-with-at-least-32-bytes-of-entropy"
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def auth_config() -> AuthConfig:
    # Minimum bcrypt cost keeps the suite fast.
    return AuthConfig(secret_key=TEST_SECRET, bcrypt_rounds=4)


@pytest.fixture
def memory_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def service(memory_store, auth_config) -> AuthService:
    return AuthService(memory_store, auth_config)


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(engine)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def sql_store(session_factory) -> SqlCredentialStore:
    return SqlCredentialStore(session_factory)


@pytest_asyncio.fixture
async def file_session_factory(tmp_path):
    # Separate pooled connections, so concurrent writers really contend.
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}")
    await create_tables(engine)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()
