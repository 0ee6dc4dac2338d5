"""Notification inbox endpoints and the live notification socket."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import (
    APIRouter,
    Depends,
    Query,
    Request,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from reeldine.api.deps import account_from_headers, require_account_id
from reeldine.api.models import MarkReadRequest  # noqa: TC001

if TYPE_CHECKING:
    from reeldine.containers import AppContainer

router = APIRouter(prefix="/notifications", tags=["notifications"])


class QueueListener:
    """Forwards payloads from any thread into an asyncio queue on ``loop``."""

    def __init__(
        self, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue[dict[str, object]]
    ) -> None:
        self._loop = loop
        self._queue = queue

    def deliver(self, payload: dict[str, object]) -> None:
        self._loop.call_soon_threadsafe(self._queue.put_nowait, payload)


@router.get("")
async def list_notifications(
    request: Request,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    account_id: UUID = Depends(require_account_id),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    data = container.notification_service.get_notifications(
        account_id, page=page, limit=limit, unread_only=unread_only
    )
    return {"success": True, "data": data}


@router.put("/read")
async def mark_notifications_read(
    request: Request,
    body: MarkReadRequest | None = None,
    account_id: UUID = Depends(require_account_id),
) -> dict[str, object]:
    """Mark the listed notifications as read, or every one when none are listed."""
    container: AppContainer = request.app.state.container
    ids = body.notification_ids if body else None
    updated = container.notification_service.mark_as_read(account_id, ids)
    return {
        "success": True,
        "message": f"{updated} notifications marked as read",
        "data": {"updated": updated},
    }


@router.get("/stats")
async def notification_stats(
    request: Request, account_id: UUID = Depends(require_account_id)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return {"success": True, "data": container.notification_service.stats(account_id)}


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: UUID,
    request: Request,
    account_id: UUID = Depends(require_account_id),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    container.notification_service.delete(account_id, notification_id)
    return {"success": True, "message": "Notification deleted"}


@router.websocket("/ws")
async def notification_socket(websocket: WebSocket) -> None:
    """Stream notifications for the connected account as they are published."""
    account_id = account_from_headers(websocket.headers)
    if account_id is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    container: AppContainer = websocket.app.state.container
    service = container.notification_service
    await websocket.accept()
    queue: asyncio.Queue[dict[str, object]] = asyncio.Queue()
    listener = QueueListener(asyncio.get_running_loop(), queue)
    service.subscribe(account_id, listener)

    async def forward() -> None:
        while True:
            payload = await queue.get()
            await websocket.send_json({"type": "notification", "notification": payload})

    forwarder = asyncio.create_task(forward())
    try:
        await websocket.send_json({"type": "connected", "accountId": str(account_id)})
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        service.unsubscribe(account_id, listener)
        forwarder.cancel()
        await asyncio.gather(forwarder, return_exceptions=True)
