"""In-process fan-out of `user_reacted` notifications to async subscribers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from friends_reactions.application.ports.reaction_event_publisher_port import (
    ReactionEventPublisherPort,
    ReactionToggledEvent,
)

logger = logging.getLogger(__name__)

ReactionEventHandler = Callable[[ReactionToggledEvent], Awaitable[None]]


class InProcessReactionEventBus(ReactionEventPublisherPort):
    """Schedule each subscriber as a background task; publishing never awaits them."""

    def __init__(self) -> None:
        self._handlers: list[ReactionEventHandler] = []
        self._pending: set[asyncio.Task[None]] = set()

    def subscribe(self, handler: ReactionEventHandler) -> None:
        """Register handler for every future `user_reacted` event."""

        self._handlers.append(handler)

    def publish_user_reacted(self, event: ReactionToggledEvent) -> None:
        """Start one task per subscriber and return immediately."""

        if not self._handlers:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                "reaction_event_dropped reason=no_running_loop post_id=%s",
                event.post_id,
            )
            return

        for handler in self._handlers:
            task = loop.create_task(self._run_handler(handler, event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for scheduled handlers; used on shutdown and in tests."""

        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _run_handler(
        self,
        handler: ReactionEventHandler,
        event: ReactionToggledEvent,
    ) -> None:
        try:
            await handler(event)
        except Exception:
            logger.exception(
                "reaction_event_handler_failed post_id=%s user_id=%s slug=%s",
                event.post_id,
                event.user_id,
                event.slug,
            )


async def log_user_reacted(event: ReactionToggledEvent) -> None:
    """Default subscriber recording every toggle in the process log."""

    logger.info(
        "user_reacted post_id=%s user_id=%s slug=%s reacted=%s",
        event.post_id,
        event.user_id,
        event.slug,
        event.reacted,
    )
