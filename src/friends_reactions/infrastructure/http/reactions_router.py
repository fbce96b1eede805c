"""FastAPI router for the reaction picker: available emoji, post reactions, toggle."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Header, HTTPException

from friends_reactions.application.dto.reaction_models import (
    AggregatedReactionModel,
    EmojiModel,
    ToggleReactionRequest,
    ToggleReactionResponse,
)
from friends_reactions.application.services.reaction_aggregator import ReactionAggregator
from friends_reactions.application.services.reaction_toggle_service import (
    ReactionToggleService,
    ToggleOutcome,
)
from friends_reactions.domain.emoji_catalog import EmojiCatalog
from friends_reactions.infrastructure.http.auth_guard import ViewerAuthGuard


def build_reactions_router(
    *,
    toggle_service: ReactionToggleService,
    aggregator: ReactionAggregator,
    emoji_catalog: EmojiCatalog,
    auth_guard: ViewerAuthGuard,
) -> APIRouter:
    """Build router exposing picker read endpoints and the toggle entry point."""

    router = APIRouter(tags=["reactions"])

    @router.get("/reactions/emojis", response_model=list[EmojiModel])
    async def list_available_emojis() -> list[EmojiModel]:
        return [
            EmojiModel.from_entry(entry)
            for entry in emoji_catalog.available_emojis().values()
        ]

    @router.get("/posts/{post_id}/reactions", response_model=list[AggregatedReactionModel])
    async def get_post_reactions(
        post_id: int,
        x_authenticated_user_id: Annotated[str | None, Header()] = None,
    ) -> list[AggregatedReactionModel]:
        viewer = await auth_guard.resolve_viewer(header_value=x_authenticated_user_id)
        reactions = await aggregator.aggregate(post_id=post_id, viewer=viewer)
        return [AggregatedReactionModel.from_reaction(reaction) for reaction in reactions]

    @router.post("/reactions/toggle", response_model=ToggleReactionResponse)
    async def toggle_reaction(
        payload: ToggleReactionRequest,
        x_authenticated_user_id: Annotated[str | None, Header()] = None,
    ) -> ToggleReactionResponse:
        viewer = await auth_guard.resolve_viewer(header_value=x_authenticated_user_id)
        result = await toggle_service.toggle(
            viewer=viewer,
            post_id=payload.post_id,
            reaction=payload.reaction,
        )
        _raise_http_for_toggle_outcome(result.outcome)

        assert result.post_id is not None
        assert result.reacted is not None
        reactions = await aggregator.aggregate(post_id=result.post_id, viewer=viewer)
        return ToggleReactionResponse(
            ok=True,
            reacted=result.reacted,
            reactions=[AggregatedReactionModel.from_reaction(reaction) for reaction in reactions],
        )

    return router


def _raise_http_for_toggle_outcome(outcome: ToggleOutcome) -> None:
    """Map toggle rejections into HTTP response semantics."""

    if outcome is ToggleOutcome.UNAUTHORIZED:
        raise HTTPException(status_code=401, detail="not authorized to send a reaction")
    if outcome is ToggleOutcome.INVALID_INPUT:
        raise HTTPException(status_code=400, detail="invalid post_id or reaction")
    if outcome is ToggleOutcome.UNKNOWN_EMOJI:
        raise HTTPException(status_code=400, detail="unknown emoji")
