"""Async SQLAlchemy session factory helpers."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine


def create_session_factory(
    database_url: str,
    *,
    echo: bool = False,
) -> async_sessionmaker[AsyncSession]:
    """Create one session factory for the database URL, shared by all repositories."""

    engine = create_async_engine(database_url, echo=echo)
    return async_sessionmaker(engine, expire_on_commit=False)
