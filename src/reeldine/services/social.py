"""Social graph between users and food partners."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from reeldine.domain.models import FoodPartnerRecord, UserPreferences, UserRecord
from reeldine.domain.search import Pagination, PartnerFilter, SortOrder
from reeldine.errors import ConflictError, NotFoundError
from reeldine.services.notifications import NotificationService

_logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for user accounts."""

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return a user by id, if present."""

    def add_following(self, user_id: UUID, partner_id: UUID) -> bool:
        """Append a partner to the following list; False if already present."""

    def remove_following(self, user_id: UUID, partner_id: UUID) -> bool:
        """Remove a partner from the following list; False if it was absent."""

    def list_followers(
        self, partner_id: UUID, offset: int, limit: int
    ) -> tuple[list[UserRecord], int]:
        """Return active followers newest account first, plus the total."""

    def list_follower_ids(self, partner_id: UUID) -> list[UUID]:
        """Return ids of every active user following the partner."""

    def update_preferences(
        self, user_id: UUID, preferences: UserPreferences
    ) -> UserRecord:
        """Replace the user's preferences and return the updated user."""


class PartnerRepository(Protocol):
    """Persistence interface for food partners."""

    def get_partner(self, partner_id: UUID) -> FoodPartnerRecord | None:
        """Return a partner by id, if present."""

    def get_partners(self, partner_ids: list[UUID]) -> list[FoodPartnerRecord]:
        """Return the partners with the given ids in any order."""

    def search_partners(
        self, filters: PartnerFilter, order: SortOrder, offset: int, limit: int
    ) -> tuple[list[FoodPartnerRecord], int]:
        """Return a page of matching partners plus the total match count."""

    def suggest_partners(self, prefix: str, limit: int) -> list[FoodPartnerRecord]:
        """Return active partners whose name starts with the prefix."""

    def increment_counter(self, partner_id: UUID, column: str, amount: int) -> None:
        """Atomically add ``amount`` to a counter column."""

    def set_counter(self, partner_id: UUID, column: str, value: int) -> None:
        """Overwrite a counter column."""


@dataclass
class SocialService:
    """Follow management, follower listings and preferences."""

    users: UserRepository
    partners: PartnerRepository
    notifications: NotificationService

    def follow(self, user_id: UUID, partner_id: UUID) -> FoodPartnerRecord:
        """Follow a partner and return it with the updated follower count."""
        user = self._require_user(user_id)
        partner = self._require_partner(partner_id)
        if partner_id in user.following:
            raise ConflictError("Already following this partner")
        if not self.users.add_following(user_id, partner_id):
            raise ConflictError("Already following this partner")
        followers_count = partner.followers_count + 1
        try:
            self.partners.increment_counter(partner_id, "followers_count", 1)
        except Exception:
            _logger.exception(
                "Failed to increment followers_count",
                extra={"partner_id": partner_id, "user_id": user_id},
            )
            followers_count = partner.followers_count
        try:
            self.notifications.notify_follow(partner, user)
        except Exception:
            _logger.exception("Failed to send follow notification")
        return replace(partner, followers_count=followers_count)

    def unfollow(self, user_id: UUID, partner_id: UUID) -> FoodPartnerRecord:
        """Unfollow a partner and return it with the updated follower count."""
        user = self._require_user(user_id)
        partner = self._require_partner(partner_id)
        if partner_id not in user.following:
            raise ConflictError("Not following this partner")
        if not self.users.remove_following(user_id, partner_id):
            raise ConflictError("Not following this partner")
        try:
            self.partners.increment_counter(partner_id, "followers_count", -1)
        except Exception:
            _logger.exception(
                "Failed to decrement followers_count",
                extra={"partner_id": partner_id, "user_id": user_id},
            )
            return partner
        return replace(partner, followers_count=max(partner.followers_count - 1, 0))

    def list_following(
        self, user_id: UUID, page: int = 1, limit: int = 20
    ) -> dict[str, object]:
        """Return the user's followed partners in follow order."""
        user = self._require_user(user_id)
        start = (page - 1) * limit
        ids = list(user.following[start : start + limit])
        by_id = {partner.id: partner for partner in self.partners.get_partners(ids)}
        partners = [
            _following_summary(by_id[partner_id])
            for partner_id in ids
            if partner_id in by_id
        ]
        return {
            "following": partners,
            "pagination": Pagination.build(page, limit, user.following_count).to_dict(),
        }

    def list_followers(
        self, partner_id: UUID, page: int = 1, limit: int = 20
    ) -> dict[str, object]:
        """Return active users following the partner, newest accounts first."""
        self._require_partner(partner_id)
        users, total = self.users.list_followers(partner_id, (page - 1) * limit, limit)
        return {
            "followers": [_follower_summary(user) for user in users],
            "pagination": Pagination.build(page, limit, total).to_dict(),
        }

    def follow_status(self, user_id: UUID, partner_id: UUID) -> dict[str, object]:
        user = self._require_user(user_id)
        return {
            "isFollowing": partner_id in user.following,
            "followingCount": user.following_count,
        }

    def stats(self, user_id: UUID) -> dict[str, object]:
        """Aggregate activity across the partners a user follows.

        The average rating is a plain mean over followed partners, so every
        partner weighs the same regardless of how many videos it posted.
        """
        user = self._require_user(user_id)
        partners = self.partners.get_partners(list(user.following))
        total_videos = sum(partner.total_videos for partner in partners)
        average_rating = 0.0
        if partners:
            average_rating = round(
                sum(partner.rating for partner in partners) / len(partners), 1
            )
        return {
            "following": {
                "count": user.following_count,
                "totalVideos": total_videos,
                "averageRating": average_rating,
            },
            "preferences": user.preferences.to_dict(),
        }

    def update_preferences(
        self,
        user_id: UUID,
        cuisines: list[str] | None = None,
        dietary_restrictions: list[str] | None = None,
        favorite_ingredients: list[str] | None = None,
    ) -> UserPreferences:
        """Merge the provided preference lists; omitted ones stay unchanged."""
        user = self._require_user(user_id)
        current = user.preferences
        merged = UserPreferences(
            cuisines=tuple(cuisines) if cuisines is not None else current.cuisines,
            dietary_restrictions=(
                tuple(dietary_restrictions)
                if dietary_restrictions is not None
                else current.dietary_restrictions
            ),
            favorite_ingredients=(
                tuple(favorite_ingredients)
                if favorite_ingredients is not None
                else current.favorite_ingredients
            ),
        )
        return self.users.update_preferences(user_id, merged).preferences

    def reconcile_followers_count(self, partner_id: UUID) -> int:
        """Recompute a partner's follower counter from users' following lists."""
        self._require_partner(partner_id)
        count = len(self.users.list_follower_ids(partner_id))
        self.partners.set_counter(partner_id, "followers_count", count)
        _logger.info(
            "Reconciled followers_count",
            extra={"partner_id": partner_id, "count": count},
        )
        return count

    def _require_user(self, user_id: UUID) -> UserRecord:
        user = self.users.get_user(user_id)
        if user is None or not user.is_active:
            raise NotFoundError("User not found")
        return user

    def _require_partner(self, partner_id: UUID) -> FoodPartnerRecord:
        partner = self.partners.get_partner(partner_id)
        if partner is None:
            raise NotFoundError("Food partner not found")
        return partner


def partner_summary(partner: FoodPartnerRecord) -> dict[str, object]:
    """Public partner fields embedded in food listings."""
    return {
        "id": str(partner.id),
        "name": partner.name,
        "logo": partner.logo,
        "rating": partner.rating,
        "location": partner.location.to_geojson() if partner.location else None,
    }


def partner_profile(partner: FoodPartnerRecord) -> dict[str, object]:
    return {
        **partner_summary(partner),
        "description": partner.description,
        "address": partner.address,
        "cuisine": list(partner.cuisine),
        "followersCount": partner.followers_count,
        "totalVideos": partner.total_videos,
        "isVerified": partner.is_verified,
    }


def _following_summary(partner: FoodPartnerRecord) -> dict[str, object]:
    return {
        "id": str(partner.id),
        "name": partner.name,
        "logo": partner.logo,
        "description": partner.description,
        "cuisine": list(partner.cuisine),
        "rating": partner.rating,
        "followersCount": partner.followers_count,
        "totalVideos": partner.total_videos,
        "isVerified": partner.is_verified,
    }


def _follower_summary(user: UserRecord) -> dict[str, object]:
    return {
        "id": str(user.id),
        "fullName": user.full_name,
        "avatar": user.avatar,
        "bio": user.bio,
        "location": user.location,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
    }
