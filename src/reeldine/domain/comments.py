"""Domain models for comments."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

MAX_COMMENT_LENGTH = 500


@dataclass(frozen=True)
class CommentRecord:
    """A user comment on a food post."""

    id: UUID
    user_id: UUID
    food_id: UUID
    text: str
    like_count: int = 0
    created_at: datetime | None = None
