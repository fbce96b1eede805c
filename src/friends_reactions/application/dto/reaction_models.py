"""Pydantic models for picker, toggle and sync HTTP contracts."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from friends_reactions.application.services.reaction_aggregator import AggregatedReaction
from friends_reactions.domain.emoji_catalog import EmojiEntry


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection."""

    model_config = ConfigDict(extra="forbid")


class EmojiModel(StrictModel):
    """One emoji offered by the reaction picker."""

    slug: str
    char: str
    name: str

    @classmethod
    def from_entry(cls, entry: EmojiEntry) -> EmojiModel:
        return cls(slug=entry.slug, char=entry.char, name=entry.name)


class AggregatedReactionModel(StrictModel):
    """Display-ready reaction line of a post."""

    slug: str
    emoji: str | None
    count: int
    usernames: str
    user_reacted: bool

    @classmethod
    def from_reaction(cls, reaction: AggregatedReaction) -> AggregatedReactionModel:
        return cls(
            slug=reaction.slug,
            emoji=reaction.emoji,
            count=reaction.count,
            usernames=reaction.usernames,
            user_reacted=reaction.user_reacted,
        )


class ToggleReactionRequest(BaseModel):
    """Toggle request body; field values are validated by the toggle service."""

    model_config = ConfigDict(extra="ignore")

    post_id: Any = None
    reaction: Any = None


class ToggleReactionResponse(StrictModel):
    """Toggle response carrying the post's reactions after the change."""

    ok: bool
    reacted: bool
    reactions: list[AggregatedReactionModel]


class RemoteReactionsSyncRequest(StrictModel):
    """Signed remote snapshot for one post; reaction entries are checked one by one."""

    primary_user_id: int = Field(gt=0)
    reactions: list[Any]


class RemoteFeedItemSyncRequest(StrictModel):
    """Signed raw feed item for one post, as XML markup or SimplePie-style reaction items."""

    primary_user_id: int = Field(gt=0)
    item_xml: str | None = None
    items: list[Any] | None = None


class RemoteReactionEntryModel(StrictModel):
    """Persisted remote total for one slug."""

    count: int
    usernames: str


class RemoteReactionsSyncResponse(StrictModel):
    """Outcome of remote reconciliation."""

    ok: bool
    entries: dict[str, RemoteReactionEntryModel]
    added: list[str]
    removed: list[str]


class FriendReactionsSyncRequest(StrictModel):
    """Signed list of slugs one friend reacted with on a post."""

    friend_user_id: int = Field(gt=0)
    reactions: list[str]


class FriendReactionsSyncResponse(StrictModel):
    """Outcome of friend reconciliation."""

    ok: bool
    reactions: list[str]
