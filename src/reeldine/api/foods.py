"""Food post endpoints: publishing, engagement and curated listings."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from reeldine.api.deps import require_partner_id, require_user_id
from reeldine.domain.foods import FoodDraft  # noqa: TC001
from reeldine.errors import UnauthorizedError
from reeldine.services.foods import food_to_dict

if TYPE_CHECKING:
    from reeldine.containers import AppContainer

router = APIRouter(prefix="/foods", tags=["foods"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_food(
    draft: FoodDraft,
    request: Request,
    partner_id: UUID = Depends(require_partner_id),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    food = container.food_service.create_food(partner_id, draft)
    return {
        "success": True,
        "message": "Food created successfully",
        "data": food_to_dict(food),
    }


@router.get("/trending")
async def trending_foods(
    request: Request, limit: int = Query(default=20, ge=1, le=100)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return {"success": True, "data": container.food_service.list_trending(limit)}


@router.get("/featured")
async def featured_foods(
    request: Request, limit: int = Query(default=10, ge=1, le=100)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return {"success": True, "data": container.food_service.list_featured(limit)}


@router.get("/saved")
async def saved_foods(
    request: Request,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    data = container.food_service.list_saved(user_id, page, limit)
    return {"success": True, "data": data}


@router.post("/partners/{partner_id}/reconcile")
async def reconcile_total_videos(
    partner_id: UUID,
    request: Request,
    caller_id: UUID = Depends(require_partner_id),
) -> dict[str, object]:
    """Recompute the partner's video count from its active foods."""
    if caller_id != partner_id:
        raise UnauthorizedError("Cannot reconcile another partner")
    container: AppContainer = request.app.state.container
    count = container.food_service.reconcile_total_videos(partner_id)
    return {"success": True, "data": {"totalVideos": count}}


@router.get("/{food_id}")
async def get_food(food_id: UUID, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    food = container.food_service.get_food(food_id)
    return {"success": True, "data": container.food_service.populate([food])[0]}


@router.delete("/{food_id}")
async def delete_food(
    food_id: UUID,
    request: Request,
    partner_id: UUID = Depends(require_partner_id),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    container.food_service.delete_food(partner_id, food_id)
    return {"success": True, "message": "Food deleted successfully"}


@router.post("/{food_id}/like")
async def toggle_like(
    food_id: UUID, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    data = container.food_service.toggle_like(user_id, food_id)
    message = "Food liked" if data["liked"] else "Food unliked"
    return {"success": True, "message": message, "data": data}


@router.post("/{food_id}/save")
async def toggle_save(
    food_id: UUID, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    data = container.food_service.toggle_save(user_id, food_id)
    message = "Food saved" if data["saved"] else "Food unsaved"
    return {"success": True, "message": message, "data": data}


@router.post("/{food_id}/view")
async def record_view(food_id: UUID, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    view_count = container.food_service.record_view(food_id)
    return {"success": True, "data": {"viewCount": view_count}}
