"""Comment endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from reeldine.api.deps import require_user_id
from reeldine.api.models import CommentBody  # noqa: TC001
from reeldine.services.comments import comment_to_dict

if TYPE_CHECKING:
    from reeldine.containers import AppContainer

router = APIRouter(tags=["comments"])


@router.post("/foods/{food_id}/comments", status_code=status.HTTP_201_CREATED)
async def create_comment(
    food_id: UUID,
    body: CommentBody,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    comment = container.comment_service.create_comment(user_id, food_id, body.text)
    return {
        "success": True,
        "message": "Comment added successfully",
        "data": comment_to_dict(comment),
    }


@router.get("/foods/{food_id}/comments")
async def list_comments(
    food_id: UUID,
    request: Request,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    data = container.comment_service.list_comments(food_id, page, limit)
    return {"success": True, "data": data}


@router.put("/comments/{comment_id}")
async def update_comment(
    comment_id: UUID,
    body: CommentBody,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    comment = container.comment_service.update_comment(user_id, comment_id, body.text)
    return {
        "success": True,
        "message": "Comment updated successfully",
        "data": comment_to_dict(comment),
    }


@router.delete("/comments/{comment_id}")
async def delete_comment(
    comment_id: UUID, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    container.comment_service.delete_comment(user_id, comment_id)
    return {"success": True, "message": "Comment deleted successfully"}


@router.post("/comments/{comment_id}/like")
async def toggle_comment_like(
    comment_id: UUID, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    data = container.comment_service.toggle_like(user_id, comment_id)
    message = "Comment liked" if data["liked"] else "Comment unliked"
    return {"success": True, "message": message, "data": data}
