"""Service keeping stored remote reactions in sync with a remote feed snapshot."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from friends_reactions.application.ports.reaction_store_port import ReactionStorePort
from friends_reactions.application.ports.remote_reaction_cache_port import (
    RemoteReactionCachePort,
    RemoteReactionEntry,
)
from friends_reactions.domain.reaction_slug import is_valid_slug

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteReactionSnapshot:
    """Reaction state of one slug as reported by the remote feed."""

    count: int | None
    usernames: str | None
    user_reacted: bool = False


@dataclass(frozen=True)
class FeedReaction:
    """One reaction tuple extracted from remote feed markup."""

    slug: str
    count: int | None
    usernames: str | None
    you_reacted: bool = False


@dataclass(frozen=True)
class RemoteReconcileResult:
    """Persisted remote entries and membership changes applied for the primary identity."""

    entries: dict[str, RemoteReactionEntry]
    added: frozenset[str] = field(default_factory=frozenset)
    removed: frozenset[str] = field(default_factory=frozenset)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


class RemoteReactionReconciler:
    """Apply remote snapshots to the reaction store and the remote reaction cache."""

    def __init__(
        self,
        *,
        reaction_store: ReactionStorePort,
        remote_cache: RemoteReactionCachePort,
    ) -> None:
        self._reaction_store = reaction_store
        self._remote_cache = remote_cache

    async def reconcile(
        self,
        *,
        post_id: int,
        primary_user_id: int,
        snapshot: Mapping[str, RemoteReactionSnapshot],
    ) -> RemoteReconcileResult:
        """Make the primary identity's reactions and the cached totals match snapshot.

        The remote source is authoritative for the primary identity on this post:
        any stored slug it does not report is removed.
        """

        current = set(
            await self._reaction_store.list_reactions(post_id=post_id, user_id=primary_user_id)
        )
        entries: dict[str, RemoteReactionEntry] = {}
        added: set[str] = set()
        removed: set[str] = set()
        dropped = 0

        for slug, reported in snapshot.items():
            if not _is_valid_snapshot_entry(slug, reported):
                dropped += 1
                continue
            assert reported.count is not None
            assert reported.usernames is not None

            present = slug in current
            current.discard(slug)
            if reported.user_reacted and not present:
                await self._reaction_store.add_reaction(
                    post_id=post_id,
                    user_id=primary_user_id,
                    slug=slug,
                )
                added.add(slug)
            elif not reported.user_reacted and present:
                await self._reaction_store.remove_reaction(
                    post_id=post_id,
                    user_id=primary_user_id,
                    slug=slug,
                )
                removed.add(slug)

            if reported.count:
                entries[slug] = RemoteReactionEntry(
                    count=reported.count,
                    usernames=reported.usernames,
                )

        for slug in sorted(current):
            await self._reaction_store.remove_reaction(
                post_id=post_id,
                user_id=primary_user_id,
                slug=slug,
            )
            removed.add(slug)

        await self._remote_cache.save_remote_reactions(
            post_id=post_id,
            primary_user_id=primary_user_id,
            entries=entries,
        )
        logger.info(
            (
                "remote_reactions_reconciled post_id=%s primary_user_id=%s "
                "entries=%s added=%s removed=%s dropped=%s"
            ),
            post_id,
            primary_user_id,
            len(entries),
            sorted(added),
            sorted(removed),
            dropped,
        )
        return RemoteReconcileResult(
            entries=entries,
            added=frozenset(added),
            removed=frozenset(removed),
        )

    async def reconcile_feed(
        self,
        *,
        post_id: int,
        primary_user_id: int,
        feed_reactions: Iterable[FeedReaction],
    ) -> RemoteReconcileResult:
        """Reconcile reaction tuples parsed from a remote feed item."""

        snapshot: dict[str, RemoteReactionSnapshot] = {}
        for reaction in feed_reactions:
            if not is_valid_slug(reaction.slug):
                continue
            snapshot[reaction.slug] = RemoteReactionSnapshot(
                count=reaction.count,
                usernames=reaction.usernames,
                user_reacted=reaction.you_reacted,
            )
        return await self.reconcile(
            post_id=post_id,
            primary_user_id=primary_user_id,
            snapshot=snapshot,
        )


def _is_valid_snapshot_entry(slug: str, reported: RemoteReactionSnapshot) -> bool:
    count = reported.count
    if not is_valid_slug(slug):
        return False
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        return False
    return isinstance(reported.usernames, str)
