"""Comments on food posts."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from reeldine.domain.comments import MAX_COMMENT_LENGTH, CommentRecord
from reeldine.domain.models import UserRecord
from reeldine.domain.search import Pagination
from reeldine.errors import NotFoundError, ValidationError
from reeldine.services.foods import FoodRepository
from reeldine.services.notifications import NotificationService
from reeldine.services.social import UserRepository

_logger = logging.getLogger(__name__)


class CommentRepository(Protocol):
    """Persistence interface for comments and comment likes."""

    def create_comment(self, user_id: UUID, food_id: UUID, text: str) -> CommentRecord:
        """Insert a comment and return it."""

    def get_comment(self, comment_id: UUID) -> CommentRecord | None:
        """Return a comment by id, if present."""

    def list_comments(
        self, food_id: UUID, offset: int, limit: int
    ) -> tuple[list[CommentRecord], int]:
        """Return a newest-first page of a food's comments plus the total."""

    def update_comment(self, comment_id: UUID, text: str) -> CommentRecord:
        """Replace a comment's text and return it."""

    def delete_comment(self, comment_id: UUID) -> None:
        """Remove a comment and its likes."""

    def add_like(self, user_id: UUID, comment_id: UUID) -> bool:
        """Insert a comment like; False when the pair already exists."""

    def remove_like(self, user_id: UUID, comment_id: UUID) -> bool:
        """Delete a comment like; False when there was none."""

    def increment_counter(self, comment_id: UUID, column: str, amount: int) -> None:
        """Atomically add ``amount`` to a counter column."""


@dataclass
class CommentService:
    """Creates, edits and likes comments, keeping food counters in step."""

    comments: CommentRepository
    foods: FoodRepository
    users: UserRepository
    notifications: NotificationService

    def create_comment(self, user_id: UUID, food_id: UUID, text: str) -> CommentRecord:
        body = _validate_text(text)
        food = self.foods.get_food(food_id)
        if food is None or not food.is_active:
            raise NotFoundError("Food not found")
        user = self._require_user(user_id)
        comment = self.comments.create_comment(user_id, food_id, body)
        try:
            self.foods.increment_counter(food_id, "comments_count", 1)
        except Exception:
            _logger.exception(
                "Failed to increment comments_count", extra={"food_id": food_id}
            )
        try:
            self.notifications.notify_comment(food, user, comment)
        except Exception:
            _logger.exception("Failed to send comment notification")
        return comment

    def list_comments(
        self, food_id: UUID, page: int = 1, limit: int = 20
    ) -> dict[str, object]:
        comments, total = self.comments.list_comments(
            food_id, (page - 1) * limit, limit
        )
        users = {}
        for user_id in dict.fromkeys(comment.user_id for comment in comments):
            user = self.users.get_user(user_id)
            if user is not None:
                users[user_id] = user
        return {
            "comments": [
                comment_to_dict(comment, users.get(comment.user_id))
                for comment in comments
            ],
            "pagination": Pagination.build(page, limit, total).to_dict(),
        }

    def update_comment(
        self, user_id: UUID, comment_id: UUID, text: str
    ) -> CommentRecord:
        """Edit a comment; only its author may do so."""
        body = _validate_text(text)
        comment = self.comments.get_comment(comment_id)
        if comment is None or comment.user_id != user_id:
            raise NotFoundError("Comment not found or unauthorized")
        return self.comments.update_comment(comment_id, body)

    def delete_comment(self, user_id: UUID, comment_id: UUID) -> None:
        """Delete a comment and decrement the food's comment count."""
        comment = self.comments.get_comment(comment_id)
        if comment is None or comment.user_id != user_id:
            raise NotFoundError("Comment not found or unauthorized")
        self.comments.delete_comment(comment_id)
        try:
            self.foods.increment_counter(comment.food_id, "comments_count", -1)
        except Exception:
            _logger.exception(
                "Failed to decrement comments_count",
                extra={"food_id": comment.food_id},
            )

    def toggle_like(self, user_id: UUID, comment_id: UUID) -> dict[str, object]:
        """Like a comment, or unlike it when a like already exists.

        The storage layer rejects duplicate (user, comment) pairs, so a failed
        insert means the user already liked it.
        """
        comment = self.comments.get_comment(comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        if self.comments.add_like(user_id, comment_id):
            self._adjust(comment_id, 1)
            return {"liked": True, "likeCount": comment.like_count + 1}
        if self.comments.remove_like(user_id, comment_id):
            self._adjust(comment_id, -1)
        return {"liked": False, "likeCount": max(comment.like_count - 1, 0)}

    def _adjust(self, comment_id: UUID, amount: int) -> None:
        try:
            self.comments.increment_counter(comment_id, "like_count", amount)
        except Exception:
            _logger.exception(
                "Failed to adjust comment like_count",
                extra={"comment_id": comment_id},
            )

    def _require_user(self, user_id: UUID) -> UserRecord:
        user = self.users.get_user(user_id)
        if user is None or not user.is_active:
            raise NotFoundError("User not found")
        return user


def comment_to_dict(
    comment: CommentRecord, user: UserRecord | None = None
) -> dict[str, object]:
    author: dict[str, object] = {"id": str(comment.user_id)}
    if user is not None:
        author.update({"fullName": user.full_name, "avatar": user.avatar})
    return {
        "id": str(comment.id),
        "food": str(comment.food_id),
        "user": author,
        "text": comment.text,
        "likeCount": comment.like_count,
        "createdAt": comment.created_at.isoformat() if comment.created_at else None,
    }


def _validate_text(text: str) -> str:
    body = (text or "").strip()
    if not body:
        raise ValidationError("Comment text is required")
    if len(body) > MAX_COMMENT_LENGTH:
        raise ValidationError(
            f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters"
        )
    return body
