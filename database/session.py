"""
Async SQLAlchemy engine and session factory.
"""

from __future__ import annotations

from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import config
from database.models import Base


def _engine_options(database_url: str) -> Dict[str, Any]:
    # SQLite drivers do not take QueuePool sizing arguments.
    if database_url.startswith("sqlite"):
        return {}
    return {"pool_size": 10, "max_overflow": 20, "pool_recycle": 3600}


engine = create_async_engine(
    config.database_url,
    echo=False,
    **_engine_options(config.database_url),
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def create_tables(bind: AsyncEngine = engine) -> None:
    """Create any missing tables (no migrations, ``users`` only)."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

