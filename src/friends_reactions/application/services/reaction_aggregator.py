"""Service merging local and remote reactions into one display-ready list."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from friends_reactions.application.ports.reaction_store_port import ReactionStorePort
from friends_reactions.application.ports.remote_reaction_cache_port import (
    RemoteReactionCachePort,
    RemoteReactionEntry,
)
from friends_reactions.application.ports.user_directory_port import UserDirectoryPort
from friends_reactions.domain.emoji_catalog import EmojiCatalog
from friends_reactions.domain.reaction_slug import canonicalize_slug
from friends_reactions.domain.viewer import Viewer

logger = logging.getLogger(__name__)
_USERNAME_SEPARATOR = ", "


@dataclass(frozen=True)
class AggregatedReaction:
    """One per-slug reaction line shown under a post."""

    slug: str
    emoji: str | None
    count: int
    usernames: str
    user_reacted: bool


class ReactionAggregator:
    """Merge viewer, other local users and remote feed reactions for one post."""

    def __init__(
        self,
        *,
        reaction_store: ReactionStorePort,
        remote_cache: RemoteReactionCachePort,
        users: UserDirectoryPort,
        emoji_catalog: EmojiCatalog,
    ) -> None:
        self._reaction_store = reaction_store
        self._remote_cache = remote_cache
        self._users = users
        self._emoji_catalog = emoji_catalog

    async def aggregate(
        self,
        *,
        post_id: int,
        viewer: Viewer | None,
    ) -> list[AggregatedReaction]:
        """Return reactions of a post sorted by slug, as seen by viewer.

        Local reactors come first in each line, ordered by user id, followed by the
        viewer and then the usernames string reported by the remote feed. A remote
        entry sharing a slug with local reactions is consumed into that line; the
        primary remote identity's own membership is then not counted twice because
        the remote total already includes it.
        """

        if post_id <= 0:
            return []

        viewer_id = viewer.user_id if viewer is not None else None
        viewer_slugs: set[str] = set()
        others_by_slug: dict[str, list[int]] = {}
        for record in await self._reaction_store.list_post_reactions(post_id=post_id):
            slug = canonicalize_slug(record.slug)
            if slug is None:
                continue
            reactors = others_by_slug.setdefault(slug, [])
            if record.user_id == viewer_id:
                viewer_slugs.add(slug)
                continue
            if record.user_id not in reactors:
                reactors.append(record.user_id)

        remote = await self._remote_cache.load_remote_reactions(post_id=post_id)
        remote_entries: dict[str, RemoteReactionEntry] = dict(remote.entries)

        other_user_ids = {user_id for reactors in others_by_slug.values() for user_id in reactors}
        display_names = (
            await self._users.get_display_names(user_ids=sorted(other_user_ids))
            if other_user_ids
            else {}
        )

        reactions: list[AggregatedReaction] = []
        for slug, reactor_ids in others_by_slug.items():
            user_reacted = slug in viewer_slugs
            remote_entry = remote_entries.pop(slug, None)

            counted_ids = sorted(reactor_ids)
            count_viewer = user_reacted
            if remote_entry is not None and remote.primary_user_id is not None:
                counted_ids = [uid for uid in counted_ids if uid != remote.primary_user_id]
                if viewer_id == remote.primary_user_id:
                    count_viewer = False

            usernames = [display_names[uid] for uid in counted_ids if uid in display_names]
            count = len(usernames)
            if count_viewer and viewer is not None:
                count += 1
                usernames.append(viewer.display_name)
            if remote_entry is not None:
                count += remote_entry.count
                usernames.append(remote_entry.usernames)

            usernames = [name for name in usernames if name]
            if not usernames:
                continue

            reactions.append(
                AggregatedReaction(
                    slug=slug,
                    emoji=self._emoji_catalog.resolve_glyph(slug),
                    count=count,
                    usernames=_USERNAME_SEPARATOR.join(usernames),
                    user_reacted=user_reacted,
                )
            )

        for slug, remote_entry in remote_entries.items():
            if not remote_entry.usernames:
                continue
            reactions.append(
                AggregatedReaction(
                    slug=slug,
                    emoji=self._emoji_catalog.resolve_glyph(slug),
                    count=remote_entry.count,
                    usernames=remote_entry.usernames,
                    user_reacted=False,
                )
            )

        reactions.sort(key=lambda reaction: reaction.slug)
        logger.debug(
            "reactions_aggregated post_id=%s viewer_id=%s slugs=%s",
            post_id,
            viewer_id,
            len(reactions),
        )
        return reactions
