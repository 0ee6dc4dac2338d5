"""Supabase implementation for comments and comment likes."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from reeldine.adapters.supabase_common import increment_counter, parse_datetime
from reeldine.domain.comments import CommentRecord
from reeldine.services.comments import CommentRepository


@dataclass
class SupabaseCommentRepository(CommentRepository):
    """Supabase-backed repository for comments."""

    client: Client

    def create_comment(self, user_id: UUID, food_id: UUID, text: str) -> CommentRecord:
        response = (
            self.client.table("comments")
            .insert({"user_id": str(user_id), "food_id": str(food_id), "text": text})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create comment")
        return _parse_comment(response.data[0])

    def get_comment(self, comment_id: UUID) -> CommentRecord | None:
        response = (
            self.client.table("comments")
            .select("*")
            .eq("id", str(comment_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_comment(response.data[0])

    def list_comments(
        self, food_id: UUID, offset: int, limit: int
    ) -> tuple[list[CommentRecord], int]:
        response = (
            self.client.table("comments")
            .select("*", count="exact")
            .eq("food_id", str(food_id))
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        comments = [_parse_comment(row) for row in response.data or []]
        return comments, response.count or 0

    def update_comment(self, comment_id: UUID, text: str) -> CommentRecord:
        response = (
            self.client.table("comments")
            .update({"text": text})
            .eq("id", str(comment_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update comment")
        return _parse_comment(response.data[0])

    def delete_comment(self, comment_id: UUID) -> None:
        """Delete a comment; its likes go with it through ``on delete cascade``."""
        self.client.table("comments").delete().eq("id", str(comment_id)).execute()

    def add_like(self, user_id: UUID, comment_id: UUID) -> bool:
        response = (
            self.client.table("comment_likes")
            .upsert(
                {"user_id": str(user_id), "comment_id": str(comment_id)},
                on_conflict="user_id,comment_id",
                ignore_duplicates=True,
            )
            .execute()
        )
        return bool(response.data)

    def remove_like(self, user_id: UUID, comment_id: UUID) -> bool:
        response = (
            self.client.table("comment_likes")
            .delete()
            .eq("user_id", str(user_id))
            .eq("comment_id", str(comment_id))
            .execute()
        )
        return bool(response.data)

    def increment_counter(self, comment_id: UUID, column: str, amount: int) -> None:
        increment_counter(self.client, "comments", comment_id, column, amount)


def _parse_comment(row: dict[str, object]) -> CommentRecord:
    return CommentRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        food_id=UUID(str(row["food_id"])),
        text=str(row.get("text") or ""),
        like_count=int(row.get("like_count") or 0),
        created_at=parse_datetime(row.get("created_at")),
    )
