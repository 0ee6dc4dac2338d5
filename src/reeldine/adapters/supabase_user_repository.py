"""Supabase implementation for user accounts and their following lists."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from reeldine.adapters.supabase_common import parse_datetime, parse_strings, parse_uuids
from reeldine.domain.models import UserPreferences, UserRecord
from reeldine.services.social import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase-backed repository for users."""

    client: Client

    def get_user(self, user_id: UUID) -> UserRecord | None:
        response = (
            self.client.table("users")
            .select("*")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_user(response.data[0])

    def add_following(self, user_id: UUID, partner_id: UUID) -> bool:
        """Append the partner to ``users.following`` in one statement."""
        response = self.client.rpc(
            "follow_partner",
            {"p_user_id": str(user_id), "p_partner_id": str(partner_id)},
        ).execute()
        return bool(response.data)

    def remove_following(self, user_id: UUID, partner_id: UUID) -> bool:
        response = self.client.rpc(
            "unfollow_partner",
            {"p_user_id": str(user_id), "p_partner_id": str(partner_id)},
        ).execute()
        return bool(response.data)

    def list_followers(
        self, partner_id: UUID, offset: int, limit: int
    ) -> tuple[list[UserRecord], int]:
        response = (
            self.client.table("users")
            .select("*", count="exact")
            .eq("is_active", True)
            .contains("following", [str(partner_id)])
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        users = [_parse_user(row) for row in response.data or []]
        return users, response.count or 0

    def list_follower_ids(self, partner_id: UUID) -> list[UUID]:
        response = (
            self.client.table("users")
            .select("id")
            .eq("is_active", True)
            .contains("following", [str(partner_id)])
            .execute()
        )
        return [UUID(str(row["id"])) for row in response.data or []]

    def update_preferences(
        self, user_id: UUID, preferences: UserPreferences
    ) -> UserRecord:
        response = (
            self.client.table("users")
            .update({"preferences": preferences.to_dict()})
            .eq("id", str(user_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update preferences")
        return _parse_user(response.data[0])


def _parse_user(row: dict[str, object]) -> UserRecord:
    """Parse a users row into a domain model."""
    raw_preferences = row.get("preferences")
    preferences = raw_preferences if isinstance(raw_preferences, dict) else {}
    return UserRecord(
        id=UUID(str(row["id"])),
        full_name=str(row.get("full_name") or ""),
        email=str(row.get("email") or ""),
        avatar=row.get("avatar"),
        bio=str(row.get("bio") or ""),
        location=str(row.get("location") or ""),
        preferences=UserPreferences(
            cuisines=parse_strings(preferences.get("cuisines")),
            dietary_restrictions=parse_strings(
                preferences.get("dietaryRestrictions")
            ),
            favorite_ingredients=parse_strings(
                preferences.get("favoriteIngredients")
            ),
        ),
        following=parse_uuids(row.get("following")),
        is_active=bool(row.get("is_active", True)),
        last_login=parse_datetime(row.get("last_login")),
        created_at=parse_datetime(row.get("created_at")),
    )
