# src/edutrack/db/session.py
from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from edutrack.core.config import settings

# ---------------------------------------------------------------------------
# Engine configuration
# ---------------------------------------------------------------------------

DATABASE_URL: str | URL = settings.DATABASE_URL

# NullPool in tests (or when explicitly requested) so connections are never
# shared across event loops.
USE_NULLPOOL = (
    os.getenv("SQLALCHEMY_NULLPOOL", "0") == "1"
    or bool(getattr(settings, "TESTING", False))
)


def build_engine(url: str | URL, *, echo: bool = False, nullpool: bool = False) -> AsyncEngine:
    kwargs: dict = {"echo": echo, "pool_pre_ping": True}
    if make_url(url).get_backend_name() == "sqlite":
        # aiosqlite runs the connection on its own thread
        kwargs["connect_args"] = {"check_same_thread": False}
    if nullpool:
        kwargs["poolclass"] = NullPool
    return create_async_engine(url, **kwargs)


# Build the async engine once
engine = build_engine(DATABASE_URL, echo=bool(settings.DB_ECHO), nullpool=USE_NULLPOOL)

AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession,
)


def get_engine() -> AsyncEngine:
    """Expose the engine (e.g., for health checks / create_all)."""
    return engine


# ---------------------------------------------------------------------------
# Session helpers
#   - get_session: async generator (use with `Depends(get_session)`)
#   - session_scope: async context manager (CLI / scripts)
# ---------------------------------------------------------------------------

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def session_scope(
    maker: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncIterator[AsyncSession]:
    async with (maker or AsyncSessionLocal)() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_all(bind: AsyncEngine | None = None) -> None:
    """Create every table known to the metadata (idempotent)."""
    from edutrack.db import models  # noqa: F401  register mappers
    from edutrack.db.base import Base

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
