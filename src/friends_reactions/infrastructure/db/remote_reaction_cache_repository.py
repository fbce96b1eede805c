"""SQLAlchemy adapter for the per-post remote reaction blob."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from friends_reactions.application.ports.remote_reaction_cache_port import (
    RemoteReactionCachePort,
    RemoteReactionEntry,
    RemoteReactionSet,
)
from friends_reactions.domain.reaction_slug import is_valid_slug
from friends_reactions.infrastructure.db.metadata import remote_reactions

logger = logging.getLogger(__name__)


class SqlAlchemyRemoteReactionCache(RemoteReactionCachePort):
    """Remote reaction cache backed by one JSON row per post."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def load_remote_reactions(self, *, post_id: int) -> RemoteReactionSet:
        """Return stored remote reactions, skipping malformed blob entries."""

        statement = (
            sa.select(remote_reactions.c.primary_user_id, remote_reactions.c.reactions)
            .where(remote_reactions.c.post_id == post_id)
            .limit(1)
        )
        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return RemoteReactionSet()
        return RemoteReactionSet(
            primary_user_id=int(row["primary_user_id"]),
            entries=_decode_entries(row["reactions"]),
        )

    async def save_remote_reactions(
        self,
        *,
        post_id: int,
        primary_user_id: int,
        entries: Mapping[str, RemoteReactionEntry],
    ) -> None:
        """Replace the stored blob of the post in one transaction."""

        payload = {
            slug: {"count": entry.count, "usernames": entry.usernames}
            for slug, entry in sorted(entries.items())
        }
        async with self._session_factory() as session:
            async with session.begin():
                await session.execute(
                    sa.delete(remote_reactions).where(remote_reactions.c.post_id == post_id)
                )
                await session.execute(
                    sa.insert(remote_reactions).values(
                        post_id=post_id,
                        primary_user_id=primary_user_id,
                        reactions=payload,
                        updated_at=sa.func.current_timestamp(),
                    )
                )

        logger.info(
            "remote_reactions_saved post_id=%s primary_user_id=%s slugs=%s",
            post_id,
            primary_user_id,
            len(payload),
        )


def _decode_entries(raw: Any) -> dict[str, RemoteReactionEntry]:
    if not isinstance(raw, dict):
        return {}

    entries: dict[str, RemoteReactionEntry] = {}
    for slug, value in raw.items():
        if not is_valid_slug(slug) or not isinstance(value, dict):
            continue
        count = value.get("count")
        usernames = value.get("usernames")
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            continue
        if not isinstance(usernames, str):
            continue
        entries[slug] = RemoteReactionEntry(count=count, usernames=usernames)
    return entries
