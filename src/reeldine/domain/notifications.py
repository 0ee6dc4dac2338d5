"""Domain models for in-process notifications."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

NEW_FOOD_POST = "new_food_post"
FOOD_LIKED = "food_liked"
FOOD_COMMENTED = "food_commented"
NEW_FOLLOWER = "new_follower"

NOTIFICATION_TYPES = (NEW_FOOD_POST, FOOD_LIKED, FOOD_COMMENTED, NEW_FOLLOWER)

COMMENT_PREVIEW_LENGTH = 50


@dataclass
class Notification:
    """A notification held in an account inbox; only ``read`` changes."""

    id: UUID
    type: str
    title: str
    message: str
    created_at: datetime
    data: dict[str, object] = field(default_factory=dict)
    read: bool = False

    def to_dict(self) -> dict[str, object]:
        return {
            "id": str(self.id),
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "data": self.data,
            "read": self.read,
            "createdAt": self.created_at.isoformat(),
        }


def comment_preview(text: str) -> str:
    """Shorten comment text for notification messages."""
    if len(text) <= COMMENT_PREVIEW_LENGTH:
        return text
    return f"{text[:COMMENT_PREVIEW_LENGTH]}..."
