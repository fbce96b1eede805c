"""Service equalizing one friend's stored reactions with the set they reported."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from friends_reactions.application.ports.reaction_store_port import ReactionStorePort
from friends_reactions.domain.reaction_slug import is_valid_slug

logger = logging.getLogger(__name__)


class FriendReactionReconciler:
    """Replace a friend's reactions on a post with exactly the reported slugs."""

    def __init__(self, *, reaction_store: ReactionStorePort) -> None:
        self._reaction_store = reaction_store

    async def reconcile_friend(
        self,
        *,
        post_id: int,
        friend_user_id: int,
        slugs: Iterable[str],
    ) -> frozenset[str]:
        """Add missing slugs, remove unreported ones and return the applied set."""

        requested = frozenset(slug for slug in slugs if is_valid_slug(slug))
        existing = await self._reaction_store.list_reactions(
            post_id=post_id,
            user_id=friend_user_id,
        )

        to_add = sorted(requested - existing)
        to_remove = sorted(existing - requested)
        for slug in to_add:
            await self._reaction_store.add_reaction(
                post_id=post_id,
                user_id=friend_user_id,
                slug=slug,
            )
        for slug in to_remove:
            await self._reaction_store.remove_reaction(
                post_id=post_id,
                user_id=friend_user_id,
                slug=slug,
            )

        logger.info(
            "friend_reactions_reconciled post_id=%s friend_user_id=%s added=%s removed=%s",
            post_id,
            friend_user_id,
            to_add,
            to_remove,
        )
        return requested
