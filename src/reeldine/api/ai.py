"""AI content suggestion endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from reeldine.api.models import HashtagRequest, RecipeSuggestionRequest  # noqa: TC001

if TYPE_CHECKING:
    from reeldine.containers import AppContainer

router = APIRouter(prefix="/ai", tags=["ai"])
_logger = logging.getLogger(__name__)


@router.get("/status")
async def ai_status(request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return {"success": True, "data": container.suggestion_service.status()}


@router.post("/recipes/suggestions")
async def recipe_suggestions(
    body: RecipeSuggestionRequest, request: Request
) -> dict[str, object]:
    """Suggest video-friendly recipes for a list of ingredients."""
    container: AppContainer = request.app.state.container
    suggestions, ai_powered = await container.suggestion_service.recipe_suggestions(
        body.ingredients, body.cuisine, body.dietary_restrictions
    )
    _logger.info(
        "Generated %s recipe suggestions (ai=%s)", len(suggestions), ai_powered
    )
    return {"success": True, "data": suggestions, "aiPowered": ai_powered}


@router.post("/hashtags/generate")
async def generate_hashtags(
    body: HashtagRequest, request: Request
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    hashtags, ai_powered = await container.suggestion_service.hashtags(
        body.content, body.content_type, body.platform
    )
    return {"success": True, "data": hashtags, "aiPowered": ai_powered}
