"""Service flipping one reaction of the current viewer on one post."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from friends_reactions.application.ports.reaction_event_publisher_port import (
    ReactionEventPublisherPort,
    ReactionToggledEvent,
)
from friends_reactions.application.ports.reaction_store_port import ReactionStorePort
from friends_reactions.domain.emoji_catalog import EmojiCatalog
from friends_reactions.domain.reaction_slug import canonicalize_slug
from friends_reactions.domain.viewer import Viewer

logger = logging.getLogger(__name__)


class ToggleOutcome(StrEnum):
    """Typed outcomes of a toggle request."""

    TOGGLED = "toggled"
    UNAUTHORIZED = "unauthorized"
    INVALID_INPUT = "invalid_input"
    UNKNOWN_EMOJI = "unknown_emoji"


@dataclass(frozen=True)
class ToggleResult:
    """Outcome model for toggle handling."""

    outcome: ToggleOutcome
    post_id: int | None = None
    slug: str | None = None
    reacted: bool | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is ToggleOutcome.TOGGLED


class ReactionToggleService:
    """Validate toggle requests and apply exactly one reaction store mutation."""

    def __init__(
        self,
        *,
        reaction_store: ReactionStorePort,
        emoji_catalog: EmojiCatalog,
        event_publisher: ReactionEventPublisherPort,
    ) -> None:
        self._reaction_store = reaction_store
        self._emoji_catalog = emoji_catalog
        self._event_publisher = event_publisher

    async def toggle(
        self,
        *,
        viewer: Viewer | None,
        post_id: object,
        reaction: object,
    ) -> ToggleResult:
        """Toggle presence of reaction on post for viewer."""

        if viewer is None:
            return ToggleResult(outcome=ToggleOutcome.UNAUTHORIZED)

        parsed_post_id = parse_post_id(post_id)
        slug = canonicalize_slug(reaction)
        if parsed_post_id is None or slug is None:
            logger.info(
                "reaction_toggle_rejected reason=invalid_input user_id=%s post_id=%r",
                viewer.user_id,
                post_id,
            )
            return ToggleResult(outcome=ToggleOutcome.INVALID_INPUT)

        if self._emoji_catalog.resolve_glyph(slug) is None:
            logger.info(
                "reaction_toggle_rejected reason=unknown_emoji user_id=%s post_id=%s slug=%s",
                viewer.user_id,
                parsed_post_id,
                slug,
            )
            return ToggleResult(outcome=ToggleOutcome.UNKNOWN_EMOJI, post_id=parsed_post_id)

        removed = await self._reaction_store.remove_reaction(
            post_id=parsed_post_id,
            user_id=viewer.user_id,
            slug=slug,
        )
        if not removed:
            await self._reaction_store.add_reaction(
                post_id=parsed_post_id,
                user_id=viewer.user_id,
                slug=slug,
            )
        reacted = not removed

        logger.info(
            "reaction_toggled post_id=%s user_id=%s slug=%s reacted=%s",
            parsed_post_id,
            viewer.user_id,
            slug,
            reacted,
        )
        self._event_publisher.publish_user_reacted(
            ReactionToggledEvent(
                post_id=parsed_post_id,
                user_id=viewer.user_id,
                slug=slug,
                reacted=reacted,
            )
        )
        return ToggleResult(
            outcome=ToggleOutcome.TOGGLED,
            post_id=parsed_post_id,
            slug=slug,
            reacted=reacted,
        )


def parse_post_id(value: object) -> int | None:
    """Return value as a positive post id, accepting ints and digit strings."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isascii() and stripped.isdigit():
            parsed = int(stripped)
            return parsed if parsed > 0 else None
    return None
