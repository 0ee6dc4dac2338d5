"""Search endpoints for foods, partners and suggestions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

if TYPE_CHECKING:
    from reeldine.containers import AppContainer

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/foods")
async def search_foods(request: Request) -> dict[str, object]:
    """Search foods; every query parameter is optional and parsed leniently."""
    container: AppContainer = request.app.state.container
    data, cached = container.search_service.search_foods(dict(request.query_params))
    return {"success": True, "data": data, "cached": cached}


@router.get("/partners")
async def search_partners(request: Request) -> dict[str, object]:
    """Search food partners."""
    container: AppContainer = request.app.state.container
    data, cached = container.search_service.search_partners(
        dict(request.query_params)
    )
    return {"success": True, "data": data, "cached": cached}


@router.get("/suggestions")
async def search_suggestions(
    request: Request, q: str | None = None, type: str = "all"  # noqa: A002
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    suggestions = container.search_service.suggestions(q, type)
    return {"success": True, "data": {"suggestions": suggestions}}
