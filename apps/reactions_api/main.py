"""reactions-api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI

from friends_reactions.application.services.friend_reaction_reconciler import (
    FriendReactionReconciler,
)
from friends_reactions.application.services.reaction_aggregator import ReactionAggregator
from friends_reactions.application.services.reaction_toggle_service import (
    ReactionToggleService,
)
from friends_reactions.application.services.remote_reaction_reconciler import (
    RemoteReactionReconciler,
)
from friends_reactions.config.settings import Settings, load_settings
from friends_reactions.domain.emoji_catalog import EmojiCatalog
from friends_reactions.infrastructure.db.reaction_store_repository import SqlAlchemyReactionStore
from friends_reactions.infrastructure.db.remote_reaction_cache_repository import (
    SqlAlchemyRemoteReactionCache,
)
from friends_reactions.infrastructure.db.session import create_session_factory
from friends_reactions.infrastructure.db.user_repository import SqlAlchemyUserDirectory
from friends_reactions.infrastructure.emoji.catalog_loader import (
    load_emoji_catalog,
    parse_selected_emojis,
)
from friends_reactions.infrastructure.events.reaction_event_bus import (
    InProcessReactionEventBus,
    log_user_reacted,
)
from friends_reactions.infrastructure.http.auth_guard import ViewerAuthGuard
from friends_reactions.infrastructure.http.reactions_router import build_reactions_router
from friends_reactions.infrastructure.http.sync_router import build_sync_router
from friends_reactions.infrastructure.logging import configure_logging

REACTIONS_API_HOST = "0.0.0.0"
REACTIONS_API_PORT = 8000
logger = logging.getLogger(__name__)


def build_emoji_catalog(settings: Settings) -> EmojiCatalog:
    """Build the process-wide emoji catalog from settings."""

    path = Path(settings.emoji_catalog_path) if settings.emoji_catalog_path else None
    return load_emoji_catalog(
        path=path,
        selected_slugs=parse_selected_emojis(settings.selected_emojis),
    )


def create_app(
    *,
    database_url: str | None = None,
    sync_hmac_secret: str | None = None,
    emoji_catalog: EmojiCatalog | None = None,
    event_bus: InProcessReactionEventBus | None = None,
) -> FastAPI:
    """Create FastAPI app for the reaction picker and sync callbacks."""

    if database_url is None or sync_hmac_secret is None or emoji_catalog is None:
        settings = load_settings()
        configure_logging(level=settings.log_level)
        if database_url is None:
            database_url = settings.database_url
        if sync_hmac_secret is None:
            sync_hmac_secret = settings.sync_hmac_secret
        if emoji_catalog is None:
            emoji_catalog = build_emoji_catalog(settings)

    if event_bus is None:
        event_bus = InProcessReactionEventBus()
        event_bus.subscribe(log_user_reacted)

    session_factory = create_session_factory(database_url)
    reaction_store = SqlAlchemyReactionStore(session_factory)
    remote_cache = SqlAlchemyRemoteReactionCache(session_factory)
    users = SqlAlchemyUserDirectory(session_factory)

    aggregator = ReactionAggregator(
        reaction_store=reaction_store,
        remote_cache=remote_cache,
        users=users,
        emoji_catalog=emoji_catalog,
    )
    toggle_service = ReactionToggleService(
        reaction_store=reaction_store,
        emoji_catalog=emoji_catalog,
        event_publisher=event_bus,
    )

    bus = event_bus

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await bus.drain()
        logger.info("reactions_api_stopped pending_events_drained=true")

    app = FastAPI(lifespan=lifespan)
    app.include_router(
        build_reactions_router(
            toggle_service=toggle_service,
            aggregator=aggregator,
            emoji_catalog=emoji_catalog,
            auth_guard=ViewerAuthGuard(users=users),
        )
    )
    app.include_router(
        build_sync_router(
            sync_hmac_secret=sync_hmac_secret,
            remote_reconciler=RemoteReactionReconciler(
                reaction_store=reaction_store,
                remote_cache=remote_cache,
            ),
            friend_reconciler=FriendReactionReconciler(reaction_store=reaction_store),
            users=users,
        )
    )
    logger.info(
        "reactions_api_created available_emojis=%s",
        len(emoji_catalog.available_emojis()),
    )
    return app


def run_asgi_server(*, host: str = REACTIONS_API_HOST, port: int = REACTIONS_API_PORT) -> None:
    """Run reactions-api as a long-lived ASGI process using application factory mode."""

    uvicorn.run(
        "apps.reactions_api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Run reactions-api runtime process."""

    run_asgi_server()


if __name__ == "__main__":
    main()
