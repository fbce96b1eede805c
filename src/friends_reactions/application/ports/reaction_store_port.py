"""Port for per-user, per-post reaction membership."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class UserReactionRecord:
    """Presence of one reaction slug attached by one user to one post."""

    post_id: int
    user_id: int
    slug: str


class ReactionStorePort(Protocol):
    """Async repository contract for presence-only reaction records."""

    async def list_reactions(self, *, post_id: int, user_id: int) -> frozenset[str]:
        """Return slugs the user attached to the post."""

    async def list_post_reactions(self, *, post_id: int) -> list[UserReactionRecord]:
        """Return every reaction record of the post ordered by user id and slug."""

    async def list_reacting_users(self, *, post_id: int) -> frozenset[int]:
        """Return ids of users with at least one reaction on the post."""

    async def add_reaction(self, *, post_id: int, user_id: int, slug: str) -> bool:
        """Attach slug to the post for the user; return whether a record was created."""

    async def remove_reaction(self, *, post_id: int, user_id: int, slug: str) -> bool:
        """Detach slug from the post for the user; return whether a record was removed."""
