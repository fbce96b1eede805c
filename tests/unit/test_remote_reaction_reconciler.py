from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

import pytest

from friends_reactions.application.ports.reaction_store_port import UserReactionRecord
from friends_reactions.application.ports.remote_reaction_cache_port import (
    RemoteReactionEntry,
    RemoteReactionSet,
)
from friends_reactions.application.services.remote_reaction_reconciler import (
    FeedReaction,
    RemoteReactionReconciler,
    RemoteReactionSnapshot,
)

POST_ID = 9
PRIMARY_USER_ID = 7


@dataclass
class FakeReactionStore:
    records: set[tuple[int, int, str]] = field(default_factory=set)
    mutations: list[tuple[str, int, int, str]] = field(default_factory=list)

    async def list_reactions(self, *, post_id: int, user_id: int) -> frozenset[str]:
        return frozenset(s for p, u, s in self.records if p == post_id and u == user_id)

    async def list_post_reactions(self, *, post_id: int) -> list[UserReactionRecord]:
        return [
            UserReactionRecord(post_id=p, user_id=u, slug=s)
            for p, u, s in sorted(self.records)
            if p == post_id
        ]

    async def list_reacting_users(self, *, post_id: int) -> frozenset[int]:
        return frozenset(u for p, u, _ in self.records if p == post_id)

    async def add_reaction(self, *, post_id: int, user_id: int, slug: str) -> bool:
        self.mutations.append(("add", post_id, user_id, slug))
        key = (post_id, user_id, slug)
        if key in self.records:
            return False
        self.records.add(key)
        return True

    async def remove_reaction(self, *, post_id: int, user_id: int, slug: str) -> bool:
        self.mutations.append(("remove", post_id, user_id, slug))
        key = (post_id, user_id, slug)
        if key not in self.records:
            return False
        self.records.discard(key)
        return True


@dataclass
class FakeRemoteCache:
    sets: dict[int, RemoteReactionSet] = field(default_factory=dict)
    saved: list[tuple[int, int, dict[str, RemoteReactionEntry]]] = field(default_factory=list)

    async def load_remote_reactions(self, *, post_id: int) -> RemoteReactionSet:
        return self.sets.get(post_id, RemoteReactionSet())

    async def save_remote_reactions(
        self,
        *,
        post_id: int,
        primary_user_id: int,
        entries: Mapping[str, RemoteReactionEntry],
    ) -> None:
        self.saved.append((post_id, primary_user_id, dict(entries)))
        self.sets[post_id] = RemoteReactionSet(
            primary_user_id=primary_user_id,
            entries=dict(entries),
        )


def _build(
    records: set[tuple[int, int, str]] | None = None,
) -> tuple[RemoteReactionReconciler, FakeReactionStore, FakeRemoteCache]:
    store = FakeReactionStore(records=set(records or set()))
    cache = FakeRemoteCache()
    return RemoteReactionReconciler(reaction_store=store, remote_cache=cache), store, cache


@pytest.mark.asyncio
async def test_primary_membership_matches_user_reacted_flags() -> None:
    reconciler, store, _ = _build(
        records={
            (POST_ID, PRIMARY_USER_ID, "heart"),
            (POST_ID, PRIMARY_USER_ID, "stale"),
            (POST_ID, 3, "stale"),
        }
    )

    result = await reconciler.reconcile(
        post_id=POST_ID,
        primary_user_id=PRIMARY_USER_ID,
        snapshot={
            "party": RemoteReactionSnapshot(count=3, usernames="x, y, z", user_reacted=True),
            "heart": RemoteReactionSnapshot(count=1, usernames="x", user_reacted=False),
        },
    )

    assert await store.list_reactions(post_id=POST_ID, user_id=PRIMARY_USER_ID) == {"party"}
    assert (POST_ID, 3, "stale") in store.records
    assert result.added == {"party"}
    assert result.removed == {"heart", "stale"}
    assert result.changed is True


@pytest.mark.asyncio
async def test_persisted_blob_strips_user_reacted_and_replaces_previous_value() -> None:
    reconciler, _, cache = _build()
    cache.sets[POST_ID] = RemoteReactionSet(
        primary_user_id=PRIMARY_USER_ID,
        entries={"old": RemoteReactionEntry(count=5, usernames="gone")},
    )

    result = await reconciler.reconcile(
        post_id=POST_ID,
        primary_user_id=PRIMARY_USER_ID,
        snapshot={
            "party": RemoteReactionSnapshot(count=3, usernames="x, y, z", user_reacted=True),
        },
    )

    expected = {"party": RemoteReactionEntry(count=3, usernames="x, y, z")}
    assert result.entries == expected
    assert cache.saved == [(POST_ID, PRIMARY_USER_ID, expected)]
    assert not hasattr(cache.sets[POST_ID].entries["party"], "user_reacted")


@pytest.mark.asyncio
async def test_negative_count_entry_is_dropped_entirely() -> None:
    reconciler, store, cache = _build(records={(POST_ID, PRIMARY_USER_ID, "heart")})

    result = await reconciler.reconcile(
        post_id=POST_ID,
        primary_user_id=PRIMARY_USER_ID,
        snapshot={
            "heart": RemoteReactionSnapshot(count=-1, usernames="x", user_reacted=True),
            "party": RemoteReactionSnapshot(count=2, usernames="x, y", user_reacted=False),
        },
    )

    assert "heart" not in result.entries
    assert "heart" not in cache.sets[POST_ID].entries
    assert await store.list_reactions(post_id=POST_ID, user_id=PRIMARY_USER_ID) == frozenset()


@pytest.mark.asyncio
async def test_invalid_slugs_and_missing_usernames_are_never_stored() -> None:
    reconciler, store, cache = _build()

    result = await reconciler.reconcile(
        post_id=POST_ID,
        primary_user_id=PRIMARY_USER_ID,
        snapshot={
            "Heart": RemoteReactionSnapshot(count=1, usernames="x", user_reacted=True),
            "\U0001F4A9not-a-slug": RemoteReactionSnapshot(
                count=1,
                usernames="x",
                user_reacted=True,
            ),
            "party": RemoteReactionSnapshot(count=1, usernames=None, user_reacted=True),
            "clap": RemoteReactionSnapshot(count=None, usernames="x", user_reacted=True),
        },
    )

    assert result.entries == {}
    assert cache.sets[POST_ID].entries == {}
    assert store.records == set()


@pytest.mark.asyncio
async def test_zero_count_is_pruned_but_membership_is_still_reconciled() -> None:
    reconciler, store, _ = _build()

    result = await reconciler.reconcile(
        post_id=POST_ID,
        primary_user_id=PRIMARY_USER_ID,
        snapshot={"heart": RemoteReactionSnapshot(count=0, usernames="", user_reacted=True)},
    )

    assert result.entries == {}
    assert await store.list_reactions(post_id=POST_ID, user_id=PRIMARY_USER_ID) == {"heart"}


@pytest.mark.asyncio
async def test_repeated_poll_with_same_snapshot_does_not_mutate_store() -> None:
    reconciler, store, _ = _build()
    snapshot = {
        "party": RemoteReactionSnapshot(count=3, usernames="x, y, z", user_reacted=True),
        "heart": RemoteReactionSnapshot(count=1, usernames="x", user_reacted=False),
    }

    await reconciler.reconcile(post_id=POST_ID, primary_user_id=PRIMARY_USER_ID, snapshot=snapshot)
    store.mutations.clear()
    second = await reconciler.reconcile(
        post_id=POST_ID,
        primary_user_id=PRIMARY_USER_ID,
        snapshot=snapshot,
    )

    assert store.mutations == []
    assert second.changed is False


@pytest.mark.asyncio
async def test_empty_snapshot_clears_primary_reactions_and_blob() -> None:
    reconciler, store, cache = _build(
        records={(POST_ID, PRIMARY_USER_ID, "heart"), (POST_ID, PRIMARY_USER_ID, "party")}
    )

    result = await reconciler.reconcile(
        post_id=POST_ID,
        primary_user_id=PRIMARY_USER_ID,
        snapshot={},
    )

    assert result.removed == {"heart", "party"}
    assert store.records == set()
    assert cache.sets[POST_ID].entries == {}


@pytest.mark.asyncio
async def test_reconcile_feed_uses_last_duplicate_and_skips_invalid_slugs() -> None:
    reconciler, store, _ = _build()

    result = await reconciler.reconcile_feed(
        post_id=POST_ID,
        primary_user_id=PRIMARY_USER_ID,
        feed_reactions=[
            FeedReaction(slug="heart", count=1, usernames="x", you_reacted=False),
            FeedReaction(slug="heart", count=2, usernames="x, y", you_reacted=True),
            FeedReaction(slug="bad slug", count=4, usernames="z", you_reacted=True),
        ],
    )

    assert result.entries == {"heart": RemoteReactionEntry(count=2, usernames="x, y")}
    assert await store.list_reactions(post_id=POST_ID, user_id=PRIMARY_USER_ID) == {"heart"}
