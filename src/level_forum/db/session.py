"""Database engine and unit-of-work configuration."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from level_forum.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import level_forum.models  # noqa: E402,F401


def build_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine for ``url``."""
    return create_async_engine(url, pool_pre_ping=True, echo=echo)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Return a session factory; each call to it opens one unit of work."""
    return async_sessionmaker(engine, autoflush=False, expire_on_commit=False)


engine = build_engine(settings.effective_database_url, echo=settings.sql_debug)

SessionLocal = build_session_factory(engine)


async def create_tables(bind: AsyncEngine | None = None) -> None:
    """Create all database tables."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
