"""Port for notifying subscribers that a user toggled a reaction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ReactionToggledEvent:
    """Payload of the `user_reacted` notification."""

    post_id: int
    user_id: int
    slug: str
    reacted: bool


class ReactionEventPublisherPort(Protocol):
    """Fire-and-forget publisher contract; publishing never blocks the caller."""

    def publish_user_reacted(self, event: ReactionToggledEvent) -> None:
        """Hand event to subscribers without awaiting them."""
