"""SQLAlchemy adapter for local user lookups."""

from __future__ import annotations

from collections.abc import Iterable
from typing import cast

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from friends_reactions.application.ports.user_directory_port import (
    UserDirectoryPort,
    UserRecord,
)
from friends_reactions.infrastructure.db.metadata import users


class SqlAlchemyUserDirectory(UserDirectoryPort):
    """User directory backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_display_names(self, *, user_ids: Iterable[int]) -> dict[int, str]:
        """Return display names keyed by id; unknown ids are omitted."""

        wanted = sorted(set(user_ids))
        if not wanted:
            return {}

        statement = sa.select(users.c.id, users.c.display_name).where(users.c.id.in_(wanted))
        async with self._session_factory() as session:
            result = await session.execute(statement)

        return {
            int(row["id"]): cast(str, row["display_name"])
            for row in result.mappings().all()
        }

    async def get_active_user(self, *, user_id: int) -> UserRecord | None:
        """Return active user by id or None."""

        statement = (
            sa.select(users.c.id, users.c.display_name, users.c.is_active)
            .where(users.c.id == user_id)
            .limit(1)
        )
        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None or not bool(row["is_active"]):
            return None
        return UserRecord(
            user_id=int(row["id"]),
            display_name=cast(str, row["display_name"]),
            is_active=True,
        )
