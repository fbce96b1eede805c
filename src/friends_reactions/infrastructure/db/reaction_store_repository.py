"""SQLAlchemy adapter for presence-only post reaction records."""

from __future__ import annotations

import logging
from typing import Any, cast

import sqlalchemy as sa
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from friends_reactions.application.ports.reaction_store_port import (
    ReactionStorePort,
    UserReactionRecord,
)
from friends_reactions.infrastructure.db.metadata import post_reactions

logger = logging.getLogger(__name__)


def _is_duplicate_reaction_error(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return (
        "post_reactions.post_id, post_reactions.user_id, post_reactions.slug" in message
        or "uq_post_reactions_post_user_slug" in message
    )


class SqlAlchemyReactionStore(ReactionStorePort):
    """Reaction store backed by SQLAlchemy async sessions.

    Add and remove are single statements guarded by the (post, user, slug) unique
    constraint, so neither needs a prior read.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_reactions(self, *, post_id: int, user_id: int) -> frozenset[str]:
        """Return slugs the user attached to the post."""

        statement = sa.select(post_reactions.c.slug).where(
            post_reactions.c.post_id == post_id,
            post_reactions.c.user_id == user_id,
        )
        async with self._session_factory() as session:
            result = await session.execute(statement)

        return frozenset(cast(str, slug) for slug in result.scalars().all())

    async def list_post_reactions(self, *, post_id: int) -> list[UserReactionRecord]:
        """Return every reaction record of the post ordered by user id and slug."""

        statement = (
            sa.select(post_reactions.c.user_id, post_reactions.c.slug)
            .where(post_reactions.c.post_id == post_id)
            .order_by(post_reactions.c.user_id.asc(), post_reactions.c.slug.asc())
        )
        async with self._session_factory() as session:
            result = await session.execute(statement)

        return [
            UserReactionRecord(
                post_id=post_id,
                user_id=int(row["user_id"]),
                slug=cast(str, row["slug"]),
            )
            for row in result.mappings().all()
        ]

    async def list_reacting_users(self, *, post_id: int) -> frozenset[int]:
        """Return ids of users with at least one reaction on the post."""

        statement = (
            sa.select(post_reactions.c.user_id)
            .where(post_reactions.c.post_id == post_id)
            .distinct()
        )
        async with self._session_factory() as session:
            result = await session.execute(statement)

        return frozenset(int(user_id) for user_id in result.scalars().all())

    async def add_reaction(self, *, post_id: int, user_id: int, slug: str) -> bool:
        """Insert one reaction record and treat a duplicate as already present."""

        statement = sa.insert(post_reactions).values(
            post_id=post_id,
            user_id=user_id,
            slug=slug,
        )
        async with self._session_factory() as session:
            try:
                await session.execute(statement)
                await session.commit()
            except IntegrityError as error:
                await session.rollback()
                if _is_duplicate_reaction_error(error):
                    logger.info(
                        "post_reaction_duplicate_ignored post_id=%s user_id=%s slug=%s",
                        post_id,
                        user_id,
                        slug,
                    )
                    return False
                raise

        logger.info("post_reaction_added post_id=%s user_id=%s slug=%s", post_id, user_id, slug)
        return True

    async def remove_reaction(self, *, post_id: int, user_id: int, slug: str) -> bool:
        """Delete one reaction record; return whether a row was removed."""

        statement = sa.delete(post_reactions).where(
            post_reactions.c.post_id == post_id,
            post_reactions.c.user_id == user_id,
            post_reactions.c.slug == slug,
        )
        async with self._session_factory() as session:
            result = cast(CursorResult[Any], await session.execute(statement))
            await session.commit()

        removed = int(result.rowcount or 0) > 0
        if removed:
            logger.info(
                "post_reaction_removed post_id=%s user_id=%s slug=%s",
                post_id,
                user_id,
                slug,
            )
        return removed
