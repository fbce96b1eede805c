"""Port for per-post reaction totals reported by a remote feed."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class RemoteReactionEntry:
    """Remote-reported total and pre-joined reactor names for one slug."""

    count: int
    usernames: str


@dataclass(frozen=True)
class RemoteReactionSet:
    """Persisted remote reactions of one post and the identity they were synced for."""

    primary_user_id: int | None = None
    entries: Mapping[str, RemoteReactionEntry] = field(default_factory=dict)


class RemoteReactionCachePort(Protocol):
    """Async repository contract for the remote reaction blob of a post."""

    async def load_remote_reactions(self, *, post_id: int) -> RemoteReactionSet:
        """Return stored remote reactions, or an empty set when none were stored."""

    async def save_remote_reactions(
        self,
        *,
        post_id: int,
        primary_user_id: int,
        entries: Mapping[str, RemoteReactionEntry],
    ) -> None:
        """Replace the stored remote reactions of the post wholesale."""
