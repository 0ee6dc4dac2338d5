"""Follow graph and preference endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request

from reeldine.api.deps import require_partner_id, require_user_id
from reeldine.api.models import PreferencesUpdate  # noqa: TC001
from reeldine.errors import UnauthorizedError

if TYPE_CHECKING:
    from reeldine.containers import AppContainer

router = APIRouter(prefix="/social", tags=["social"])


@router.post("/partners/{partner_id}/follow")
async def follow_partner(
    partner_id: UUID, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    partner = container.social_service.follow(user_id, partner_id)
    return {
        "success": True,
        "message": "Successfully followed partner",
        "data": {
            "partnerId": str(partner.id),
            "followersCount": partner.followers_count,
        },
    }


@router.delete("/partners/{partner_id}/follow")
async def unfollow_partner(
    partner_id: UUID, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    partner = container.social_service.unfollow(user_id, partner_id)
    return {
        "success": True,
        "message": "Successfully unfollowed partner",
        "data": {
            "partnerId": str(partner.id),
            "followersCount": partner.followers_count,
        },
    }


@router.get("/partners/{partner_id}/follow-status")
async def follow_status(
    partner_id: UUID, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    data = container.social_service.follow_status(user_id, partner_id)
    return {"success": True, "data": data}


@router.get("/users/{user_id}/following")
async def list_following(
    user_id: UUID,
    request: Request,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    data = container.social_service.list_following(user_id, page, limit)
    return {"success": True, "data": data}


@router.get("/partners/{partner_id}/followers")
async def list_followers(
    partner_id: UUID,
    request: Request,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    data = container.social_service.list_followers(partner_id, page, limit)
    return {"success": True, "data": data}


@router.post("/partners/{partner_id}/followers/reconcile")
async def reconcile_followers(
    partner_id: UUID,
    request: Request,
    caller_id: UUID = Depends(require_partner_id),
) -> dict[str, object]:
    """Recompute the partner's follower counter from users' following lists."""
    if caller_id != partner_id:
        raise UnauthorizedError("Cannot reconcile another partner")
    container: AppContainer = request.app.state.container
    count = container.social_service.reconcile_followers_count(partner_id)
    return {"success": True, "data": {"followersCount": count}}


@router.get("/users/{user_id}/stats")
async def social_stats(user_id: UUID, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return {"success": True, "data": container.social_service.stats(user_id)}


@router.put("/preferences")
async def update_preferences(
    body: PreferencesUpdate,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Merge the provided preference lists into the user's preferences."""
    container: AppContainer = request.app.state.container
    preferences = container.social_service.update_preferences(
        user_id,
        cuisines=body.cuisines,
        dietary_restrictions=body.dietary_restrictions,
        favorite_ingredients=body.favorite_ingredients,
    )
    return {
        "success": True,
        "message": "Preferences updated successfully",
        "data": {"preferences": preferences.to_dict()},
    }
