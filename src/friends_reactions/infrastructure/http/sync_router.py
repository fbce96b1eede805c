"""FastAPI router for signed reaction sync callbacks from the feed poller."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ValidationError

from friends_reactions.application.dto.reaction_models import (
    FriendReactionsSyncRequest,
    FriendReactionsSyncResponse,
    RemoteFeedItemSyncRequest,
    RemoteReactionEntryModel,
    RemoteReactionsSyncRequest,
    RemoteReactionsSyncResponse,
)
from friends_reactions.application.ports.user_directory_port import UserDirectoryPort
from friends_reactions.application.services.friend_reaction_reconciler import (
    FriendReactionReconciler,
)
from friends_reactions.application.services.remote_reaction_reconciler import (
    FeedReaction,
    RemoteReactionReconciler,
    RemoteReconcileResult,
)
from friends_reactions.infrastructure.feed.reaction_feed_parser import (
    parse_feed_reaction_items,
    parse_feed_reactions_xml,
    parse_sync_reaction_items,
)
from friends_reactions.infrastructure.http.hmac_auth import SIGNATURE_HEADER, verify_hmac_signature

logger = logging.getLogger(__name__)


def build_sync_router(
    *,
    sync_hmac_secret: str,
    remote_reconciler: RemoteReactionReconciler,
    friend_reconciler: FriendReactionReconciler,
    users: UserDirectoryPort,
) -> APIRouter:
    """Build router exposing remote snapshot, feed item and friend reaction sync endpoints."""

    router = APIRouter(prefix="/sync", tags=["sync"])

    async def reconcile_remote(
        *,
        post_id: int,
        primary_user_id: int,
        feed_reactions: list[FeedReaction],
    ) -> RemoteReactionsSyncResponse:
        _require_positive_post_id(post_id)
        await _require_known_user(users, user_id=primary_user_id, role="primary")

        result = await remote_reconciler.reconcile_feed(
            post_id=post_id,
            primary_user_id=primary_user_id,
            feed_reactions=feed_reactions,
        )
        return _to_remote_response(result)

    @router.post(
        "/posts/{post_id}/remote-reactions",
        response_model=RemoteReactionsSyncResponse,
    )
    async def sync_remote_reactions(post_id: int, request: Request) -> RemoteReactionsSyncResponse:
        payload = await _read_signed_payload(
            request,
            secret=sync_hmac_secret,
            model=RemoteReactionsSyncRequest,
        )
        assert isinstance(payload, RemoteReactionsSyncRequest)

        return await reconcile_remote(
            post_id=post_id,
            primary_user_id=payload.primary_user_id,
            feed_reactions=parse_sync_reaction_items(payload.reactions),
        )

    @router.post(
        "/posts/{post_id}/remote-feed-item",
        response_model=RemoteReactionsSyncResponse,
    )
    async def sync_remote_feed_item(post_id: int, request: Request) -> RemoteReactionsSyncResponse:
        payload = await _read_signed_payload(
            request,
            secret=sync_hmac_secret,
            model=RemoteFeedItemSyncRequest,
        )
        assert isinstance(payload, RemoteFeedItemSyncRequest)
        if payload.item_xml is None and payload.items is None:
            raise HTTPException(status_code=400, detail="item_xml or items is required")

        feed_reactions: list[FeedReaction] = []
        if payload.item_xml is not None:
            feed_reactions.extend(parse_feed_reactions_xml(payload.item_xml))
        if payload.items is not None:
            feed_reactions.extend(parse_feed_reaction_items(payload.items))

        return await reconcile_remote(
            post_id=post_id,
            primary_user_id=payload.primary_user_id,
            feed_reactions=feed_reactions,
        )

    @router.post(
        "/posts/{post_id}/friend-reactions",
        response_model=FriendReactionsSyncResponse,
    )
    async def sync_friend_reactions(post_id: int, request: Request) -> FriendReactionsSyncResponse:
        payload = await _read_signed_payload(
            request,
            secret=sync_hmac_secret,
            model=FriendReactionsSyncRequest,
        )
        assert isinstance(payload, FriendReactionsSyncRequest)
        _require_positive_post_id(post_id)
        await _require_known_user(users, user_id=payload.friend_user_id, role="friend")

        applied = await friend_reconciler.reconcile_friend(
            post_id=post_id,
            friend_user_id=payload.friend_user_id,
            slugs=payload.reactions,
        )
        return FriendReactionsSyncResponse(ok=True, reactions=sorted(applied))

    return router


async def _read_signed_payload(
    request: Request,
    *,
    secret: str,
    model: type[BaseModel],
) -> BaseModel:
    """Verify body signature and parse it into model, mapping failures to HTTP errors."""

    raw_body = await request.body()
    if not verify_hmac_signature(
        secret=secret,
        body=raw_body,
        provided_signature=request.headers.get(SIGNATURE_HEADER),
    ):
        logger.warning("sync_request_rejected reason=invalid_signature path=%s", request.url.path)
        raise HTTPException(status_code=401, detail="invalid signature")

    try:
        return model.model_validate_json(raw_body)
    except ValidationError as error:
        raise HTTPException(status_code=400, detail=str(error)) from error


def _require_positive_post_id(post_id: int) -> None:
    if post_id <= 0:
        raise HTTPException(status_code=400, detail="post_id must be positive")


async def _require_known_user(users: UserDirectoryPort, *, user_id: int, role: str) -> None:
    """Reject sync writes for identities missing from the user directory."""

    if await users.get_active_user(user_id=user_id) is None:
        logger.warning(
            "sync_request_rejected reason=unknown_user role=%s user_id=%s",
            role,
            user_id,
        )
        raise HTTPException(status_code=400, detail=f"unknown {role} user")


def _to_remote_response(result: RemoteReconcileResult) -> RemoteReactionsSyncResponse:
    return RemoteReactionsSyncResponse(
        ok=True,
        entries={
            slug: RemoteReactionEntryModel(count=entry.count, usernames=entry.usernames)
            for slug, entry in sorted(result.entries.items())
        },
        added=sorted(result.added),
        removed=sorted(result.removed),
    )
