"""In-process notification fanout with bounded per-account inboxes."""

import logging
import threading
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from reeldine.domain.comments import CommentRecord
from reeldine.domain.foods import FoodRecord
from reeldine.domain.models import FoodPartnerRecord, UserRecord
from reeldine.domain.notifications import (
    FOOD_COMMENTED,
    FOOD_LIKED,
    NEW_FOLLOWER,
    NEW_FOOD_POST,
    NOTIFICATION_TYPES,
    Notification,
    comment_preview,
)
from reeldine.domain.search import Pagination
from reeldine.errors import NotFoundError

_logger = logging.getLogger(__name__)


class NotificationListener(Protocol):
    """A live connection interested in an account's notifications."""

    def deliver(self, payload: dict[str, object]) -> None:
        """Hand a payload to the connection without blocking."""


@dataclass
class NotificationService:
    """Publishes notifications to live listeners and per-account inboxes.

    Inboxes are deques capped at ``capacity``; appending to a full inbox
    evicts the oldest entry. A WebSocket session can live on a different event
    loop thread than the request that publishes to it, so inbox and registry
    mutations happen under a single lock and listeners hand payloads over
    with ``call_soon_threadsafe``.
    """

    capacity: int = 100
    _inboxes: dict[UUID, deque[Notification]] = field(default_factory=dict)
    _listeners: dict[UUID, set[NotificationListener]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def subscribe(self, account_id: UUID, listener: NotificationListener) -> None:
        """Register a live listener for an account."""
        with self._lock:
            self._listeners.setdefault(account_id, set()).add(listener)

    def unsubscribe(self, account_id: UUID, listener: NotificationListener) -> None:
        """Remove a live listener; unknown listeners are ignored."""
        with self._lock:
            listeners = self._listeners.get(account_id)
            if listeners is None:
                return
            listeners.discard(listener)
            if not listeners:
                self._listeners.pop(account_id, None)

    def listener_count(self, account_id: UUID) -> int:
        with self._lock:
            return len(self._listeners.get(account_id, ()))

    def publish(  # noqa: PLR0913
        self,
        account_id: UUID,
        notification_type: str,
        title: str,
        message: str,
        data: dict[str, object] | None = None,
    ) -> Notification:
        """Store a notification and push it to the account's live listeners."""
        notification = Notification(
            id=uuid4(),
            type=notification_type,
            title=title,
            message=message,
            data=data or {},
            created_at=datetime.now(tz=UTC),
        )
        with self._lock:
            inbox = self._inboxes.get(account_id)
            if inbox is None:
                inbox = deque(maxlen=self.capacity)
                self._inboxes[account_id] = inbox
            inbox.append(notification)
            listeners = list(self._listeners.get(account_id, ()))
        payload = notification.to_dict()
        for listener in listeners:
            try:
                listener.deliver(payload)
            except Exception:
                _logger.exception(
                    "Dropping notification listener", extra={"account_id": account_id}
                )
                self.unsubscribe(account_id, listener)
        return notification

    def notify_new_food_post(
        self,
        partner: FoodPartnerRecord,
        food: FoodRecord,
        follower_ids: Iterable[UUID],
    ) -> int:
        """Notify every follower about a new post; returns the recipient count."""
        sent = 0
        for follower_id in follower_ids:
            self.publish(
                follower_id,
                NEW_FOOD_POST,
                "New Food Post",
                f"{partner.name} posted a new dish: {food.name}",
                {
                    "foodId": str(food.id),
                    "partnerId": str(partner.id),
                    "partnerName": partner.name,
                    "foodName": food.name,
                    "thumbnail": food.thumbnail,
                },
            )
            sent += 1
        return sent

    def notify_like(self, food: FoodRecord, user: UserRecord) -> Notification | None:
        """Notify the owning partner that a user liked their food."""
        if user.id == food.partner_id:
            return None
        return self.publish(
            food.partner_id,
            FOOD_LIKED,
            "New Like",
            f"{user.full_name} liked your {food.name}",
            {
                "foodId": str(food.id),
                "userId": str(user.id),
                "userName": user.full_name,
                "foodName": food.name,
            },
        )

    def notify_comment(
        self, food: FoodRecord, user: UserRecord, comment: CommentRecord
    ) -> Notification | None:
        """Notify the owning partner about a new comment."""
        if user.id == food.partner_id:
            return None
        preview = comment_preview(comment.text)
        return self.publish(
            food.partner_id,
            FOOD_COMMENTED,
            "New Comment",
            f'{user.full_name} commented on your {food.name}: "{preview}"',
            {
                "foodId": str(food.id),
                "commentId": str(comment.id),
                "userId": str(user.id),
                "userName": user.full_name,
                "foodName": food.name,
                "comment": comment.text,
            },
        )

    def notify_follow(
        self, partner: FoodPartnerRecord, user: UserRecord
    ) -> Notification:
        """Notify a partner about a new follower."""
        return self.publish(
            partner.id,
            NEW_FOLLOWER,
            "New Follower",
            f"{user.full_name} started following you",
            {
                "userId": str(user.id),
                "userName": user.full_name,
                "userAvatar": user.avatar,
            },
        )

    def get_notifications(
        self,
        account_id: UUID,
        page: int = 1,
        limit: int = 20,
        unread_only: bool = False,
    ) -> dict[str, object]:
        """Return a newest-first page of the account's inbox."""
        page = max(page, 1)
        limit = max(limit, 1)
        with self._lock:
            entries = list(reversed(self._inboxes.get(account_id, ())))
        unread_count = sum(1 for entry in entries if not entry.read)
        if unread_only:
            entries = [entry for entry in entries if not entry.read]
        start = (page - 1) * limit
        selected = entries[start : start + limit]
        return {
            "notifications": [entry.to_dict() for entry in selected],
            "pagination": Pagination.build(page, limit, len(entries)).to_dict(),
            "unreadCount": unread_count,
        }

    def mark_as_read(
        self, account_id: UUID, notification_ids: Iterable[UUID] | None = None
    ) -> int:
        """Mark the given notifications as read; no ids means the whole inbox."""
        wanted = set(notification_ids or ())
        updated = 0
        with self._lock:
            for entry in self._inboxes.get(account_id, ()):
                if entry.read:
                    continue
                if wanted and entry.id not in wanted:
                    continue
                entry.read = True
                updated += 1
        return updated

    def delete(self, account_id: UUID, notification_id: UUID) -> None:
        """Remove a notification from the inbox."""
        with self._lock:
            inbox = self._inboxes.get(account_id)
            target = None
            if inbox is not None:
                target = next(
                    (entry for entry in inbox if entry.id == notification_id), None
                )
            if target is None:
                raise NotFoundError("Notification not found")
            inbox.remove(target)

    def stats(self, account_id: UUID) -> dict[str, object]:
        """Return total, unread and per-type counts for the inbox."""
        with self._lock:
            entries = list(self._inboxes.get(account_id, ()))
        by_type = dict.fromkeys(NOTIFICATION_TYPES, 0)
        for entry in entries:
            by_type[entry.type] = by_type.get(entry.type, 0) + 1
        return {
            "total": len(entries),
            "unread": sum(1 for entry in entries if not entry.read),
            "byType": by_type,
        }
