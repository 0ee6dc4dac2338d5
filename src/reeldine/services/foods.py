"""Food posts, engagement counters and partner lifecycle hooks."""

import logging
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from reeldine.domain.foods import FoodDraft, FoodRecord
from reeldine.domain.models import FoodPartnerRecord, UserRecord
from reeldine.domain.search import FoodFilter, Pagination, SortOrder, TagCount
from reeldine.errors import NotFoundError
from reeldine.services.notifications import NotificationService
from reeldine.services.social import PartnerRepository, UserRepository, partner_summary

_logger = logging.getLogger(__name__)


class FoodRepository(Protocol):
    """Persistence interface for food posts and their join rows."""

    def create_food(self, row: dict[str, object]) -> FoodRecord:
        """Insert a food row and return it."""

    def get_food(self, food_id: UUID) -> FoodRecord | None:
        """Return a food by id, if present."""

    def get_foods(self, food_ids: list[UUID]) -> list[FoodRecord]:
        """Return the foods with the given ids in any order."""

    def delete_food(self, food_id: UUID) -> None:
        """Permanently remove a food."""

    def search_foods(
        self, filters: FoodFilter, order: SortOrder, offset: int, limit: int
    ) -> tuple[list[FoodRecord], int]:
        """Return a page of matching foods plus the total match count."""

    def suggest_foods(self, prefix: str, limit: int) -> list[FoodRecord]:
        """Return active foods whose name or a tag starts with the prefix."""

    def popular_tags(self, prefix: str, limit: int) -> list[TagCount]:
        """Return the most used tags starting with the prefix."""

    def list_trending(self, limit: int) -> list[FoodRecord]:
        """Return active foods by engagement score, newest first on ties."""

    def list_featured(self, now: datetime, limit: int) -> list[FoodRecord]:
        """Return active featured foods whose feature window is open."""

    def count_active_foods(self, partner_id: UUID) -> int:
        """Return the number of active foods owned by a partner."""

    def increment_counter(self, food_id: UUID, column: str, amount: int) -> None:
        """Atomically add ``amount`` to a counter column."""

    def add_like(self, user_id: UUID, food_id: UUID) -> bool:
        """Insert a like; False when the pair already exists."""

    def remove_like(self, user_id: UUID, food_id: UUID) -> bool:
        """Delete a like; False when there was none."""

    def add_save(self, user_id: UUID, food_id: UUID) -> bool:
        """Insert a save; False when the pair already exists."""

    def remove_save(self, user_id: UUID, food_id: UUID) -> bool:
        """Delete a save; False when there was none."""

    def list_saved_food_ids(self, user_id: UUID) -> list[UUID]:
        """Return ids of foods saved by the user, most recent first."""


@dataclass
class FoodService:
    """Application service for food posts and engagement."""

    foods: FoodRepository
    partners: PartnerRepository
    users: UserRepository
    notifications: NotificationService

    def create_food(self, partner_id: UUID, draft: FoodDraft) -> FoodRecord:
        """Publish a food, then bump the partner's video count and notify."""
        partner = self.partners.get_partner(partner_id)
        if partner is None:
            raise NotFoundError("Food partner not found")
        location = draft.resolved_location() or partner.location
        food = self.foods.create_food(draft.to_row(partner_id, location))
        _logger.info(
            "Food created", extra={"food_id": food.id, "partner_id": partner_id}
        )
        try:
            self.partners.increment_counter(partner_id, "total_videos", 1)
        except Exception:
            _logger.exception(
                "Failed to increment total_videos", extra={"partner_id": partner_id}
            )
        try:
            follower_ids = self.users.list_follower_ids(partner_id)
            self.notifications.notify_new_food_post(partner, food, follower_ids)
        except Exception:
            _logger.exception(
                "Failed to fan out new food post", extra={"food_id": food.id}
            )
        return food

    def delete_food(self, partner_id: UUID, food_id: UUID) -> None:
        """Permanently remove a partner's own food."""
        food = self.foods.get_food(food_id)
        if food is None or food.partner_id != partner_id:
            raise NotFoundError("Food not found")
        self.foods.delete_food(food_id)
        try:
            self.partners.increment_counter(partner_id, "total_videos", -1)
        except Exception:
            _logger.exception(
                "Failed to decrement total_videos", extra={"partner_id": partner_id}
            )

    def get_food(self, food_id: UUID) -> FoodRecord:
        food = self.foods.get_food(food_id)
        if food is None or not food.is_active:
            raise NotFoundError("Food not found")
        return food

    def toggle_like(self, user_id: UUID, food_id: UUID) -> dict[str, object]:
        """Like the food, or unlike it when the user already liked it."""
        food = self.get_food(food_id)
        user = self._require_user(user_id)
        if self.foods.add_like(user_id, food_id):
            self._adjust(food_id, "like_count", 1)
            try:
                self.notifications.notify_like(food, user)
            except Exception:
                _logger.exception("Failed to send like notification")
            return {"liked": True, "likeCount": food.like_count + 1}
        if self.foods.remove_like(user_id, food_id):
            self._adjust(food_id, "like_count", -1)
        return {"liked": False, "likeCount": max(food.like_count - 1, 0)}

    def toggle_save(self, user_id: UUID, food_id: UUID) -> dict[str, object]:
        """Save the food, or unsave it when the user already saved it."""
        food = self.get_food(food_id)
        self._require_user(user_id)
        if self.foods.add_save(user_id, food_id):
            self._adjust(food_id, "saves_count", 1)
            return {"saved": True, "savesCount": food.saves_count + 1}
        if self.foods.remove_save(user_id, food_id):
            self._adjust(food_id, "saves_count", -1)
        return {"saved": False, "savesCount": max(food.saves_count - 1, 0)}

    def record_view(self, food_id: UUID) -> int:
        """Count a view and return the new view count."""
        food = self.get_food(food_id)
        self._adjust(food_id, "view_count", 1)
        return food.view_count + 1

    def list_trending(self, limit: int = 20) -> list[dict[str, object]]:
        return self.populate(self.foods.list_trending(limit))

    def list_featured(self, limit: int = 10) -> list[dict[str, object]]:
        foods = self.foods.list_featured(datetime.now(tz=UTC), limit)
        return self.populate(foods)

    def list_saved(
        self, user_id: UUID, page: int = 1, limit: int = 20
    ) -> dict[str, object]:
        """Return the user's saved foods, most recently saved first."""
        self._require_user(user_id)
        saved_ids = self.foods.list_saved_food_ids(user_id)
        start = (page - 1) * limit
        page_ids = saved_ids[start : start + limit]
        by_id = {food.id: food for food in self.foods.get_foods(page_ids)}
        foods = [by_id[food_id] for food_id in page_ids if food_id in by_id]
        return {
            "foods": self.populate(foods),
            "pagination": Pagination.build(page, limit, len(saved_ids)).to_dict(),
        }

    def reconcile_total_videos(self, partner_id: UUID) -> int:
        """Recompute a partner's video count from its active foods."""
        if self.partners.get_partner(partner_id) is None:
            raise NotFoundError("Food partner not found")
        count = self.foods.count_active_foods(partner_id)
        self.partners.set_counter(partner_id, "total_videos", count)
        _logger.info(
            "Reconciled total_videos",
            extra={"partner_id": partner_id, "count": count},
        )
        return count

    def populate(self, foods: list[FoodRecord]) -> list[dict[str, object]]:
        return populate_foods(self.partners, foods)

    def _adjust(self, food_id: UUID, column: str, amount: int) -> None:
        try:
            self.foods.increment_counter(food_id, column, amount)
        except Exception:
            _logger.exception(
                "Failed to adjust food counter",
                extra={"food_id": food_id, "column": column},
            )

    def _require_user(self, user_id: UUID) -> UserRecord:
        user = self.users.get_user(user_id)
        if user is None or not user.is_active:
            raise NotFoundError("User not found")
        return user


def populate_foods(
    partners: PartnerRepository,
    foods: list[FoodRecord],
    distances: dict[UUID, float] | None = None,
) -> list[dict[str, object]]:
    """Serialize foods with their partner summary attached."""
    partner_ids = list(dict.fromkeys(food.partner_id for food in foods))
    by_id = {partner.id: partner for partner in partners.get_partners(partner_ids)}
    return [
        food_to_dict(
            food,
            by_id.get(food.partner_id),
            None if distances is None else distances.get(food.id),
        )
        for food in foods
    ]


def food_to_dict(
    food: FoodRecord,
    partner: FoodPartnerRecord | None = None,
    distance: float | None = None,
) -> dict[str, object]:
    """Public representation of a food post."""
    payload: dict[str, object] = {
        "id": str(food.id),
        "name": food.name,
        "video": food.video,
        "thumbnail": food.thumbnail,
        "description": food.description,
        "ingredients": [
            {"name": item.name, "quantity": item.quantity, "unit": item.unit}
            for item in food.ingredients
        ],
        "cuisine": food.cuisine,
        "dietaryInfo": list(food.dietary_info),
        "difficulty": food.difficulty,
        "cookingTime": food.cooking_time,
        "servings": food.servings,
        "nutritionalInfo": (
            asdict(food.nutritional_info) if food.nutritional_info else None
        ),
        "price": food.price,
        "location": food.location.to_geojson() if food.location else None,
        "tags": list(food.tags),
        "likeCount": food.like_count,
        "savesCount": food.saves_count,
        "commentsCount": food.comments_count,
        "viewCount": food.view_count,
        "averageRating": food.average_rating,
        "totalRatings": food.total_ratings,
        "engagementScore": food.engagement_score,
        "isFeatured": food.is_featured,
        "createdAt": food.created_at.isoformat() if food.created_at else None,
        "foodPartner": (
            partner_summary(partner) if partner else {"id": str(food.partner_id)}
        ),
    }
    if distance is not None:
        payload["distance"] = round(distance, 3)
    return payload
