"""Supabase implementation for food posts, likes and saves."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from reeldine.adapters.supabase_common import (
    apply_order,
    circle_params,
    increment_counter,
    parse_datetime,
    parse_strings,
)
from reeldine.domain.foods import FoodRecord, Ingredient, NutritionalInfo
from reeldine.domain.geo import GeoPoint
from reeldine.domain.search import FoodFilter, SortOrder, TagCount
from reeldine.services.foods import FoodRepository


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase-backed repository for foods."""

    client: Client

    def create_food(self, row: dict[str, object]) -> FoodRecord:
        response = self.client.table("foods").insert(row).execute()
        if not response.data:
            raise RuntimeError("Failed to create food")
        return _parse_food(response.data[0])

    def get_food(self, food_id: UUID) -> FoodRecord | None:
        response = (
            self.client.table("foods")
            .select("*")
            .eq("id", str(food_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def get_foods(self, food_ids: list[UUID]) -> list[FoodRecord]:
        if not food_ids:
            return []
        response = (
            self.client.table("foods")
            .select("*")
            .in_("id", [str(food_id) for food_id in food_ids])
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def delete_food(self, food_id: UUID) -> None:
        self.client.table("foods").delete().eq("id", str(food_id)).execute()

    def search_foods(
        self, filters: FoodFilter, order: SortOrder, offset: int, limit: int
    ) -> tuple[list[FoodRecord], int]:
        """Run a filtered, ordered and paginated food query.

        Text, ingredient and radius matching happen inside the ``search_foods``
        function; the remaining filters, ordering and paging are applied by
        PostgREST to its result set.
        """
        query = self.client.rpc(
            "search_foods",
            {
                "search_text": filters.query,
                "ingredient_terms": list(filters.ingredients) or None,
                **circle_params(filters.near),
            },
            count="exact",
        )
        if filters.cuisines:
            query = query.in_("cuisine", list(filters.cuisines))
        if filters.price is not None:
            query = query.gte("price", filters.price.minimum)
            if filters.price.maximum is not None:
                query = query.lte("price", filters.price.maximum)
        if filters.min_rating is not None:
            query = query.gte("average_rating", filters.min_rating)
        if filters.dietary_restrictions:
            query = query.ov("dietary_info", list(filters.dietary_restrictions))
        query = apply_order(query, order)
        response = query.range(offset, offset + limit - 1).execute()
        foods = [_parse_food(row) for row in response.data or []]
        return foods, response.count or 0

    def suggest_foods(self, prefix: str, limit: int) -> list[FoodRecord]:
        """Foods whose name or any single tag starts with the prefix."""
        response = self.client.rpc(
            "suggest_foods", {"prefix": prefix, "max_results": limit}
        ).execute()
        return [_parse_food(row) for row in response.data or []]

    def popular_tags(self, prefix: str, limit: int) -> list[TagCount]:
        response = self.client.rpc(
            "popular_tags", {"prefix": prefix, "max_results": limit}
        ).execute()
        return [
            TagCount(tag=str(row["tag"]), count=int(row["count"]))
            for row in response.data or []
        ]

    def list_trending(self, limit: int) -> list[FoodRecord]:
        response = (
            self.client.table("foods")
            .select("*")
            .eq("is_active", True)
            .order("engagement_score", desc=True)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def list_featured(self, now: datetime, limit: int) -> list[FoodRecord]:
        response = (
            self.client.table("foods")
            .select("*")
            .eq("is_active", True)
            .eq("is_featured", True)
            .or_(f"featured_until.is.null,featured_until.gt.{now.isoformat()}")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def count_active_foods(self, partner_id: UUID) -> int:
        response = (
            self.client.table("foods")
            .select("id", count="exact")
            .eq("partner_id", str(partner_id))
            .eq("is_active", True)
            .limit(1)
            .execute()
        )
        return response.count or 0

    def increment_counter(self, food_id: UUID, column: str, amount: int) -> None:
        increment_counter(self.client, "foods", food_id, column, amount)

    def add_like(self, user_id: UUID, food_id: UUID) -> bool:
        return self._insert_pair("food_likes", user_id, food_id)

    def remove_like(self, user_id: UUID, food_id: UUID) -> bool:
        return self._delete_pair("food_likes", user_id, food_id)

    def add_save(self, user_id: UUID, food_id: UUID) -> bool:
        return self._insert_pair("food_saves", user_id, food_id)

    def remove_save(self, user_id: UUID, food_id: UUID) -> bool:
        return self._delete_pair("food_saves", user_id, food_id)

    def list_saved_food_ids(self, user_id: UUID) -> list[UUID]:
        response = (
            self.client.table("food_saves")
            .select("food_id")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [UUID(str(row["food_id"])) for row in response.data or []]

    def _insert_pair(self, table: str, user_id: UUID, food_id: UUID) -> bool:
        """Insert a join row; the unique (user_id, food_id) key rejects repeats."""
        response = (
            self.client.table(table)
            .upsert(
                {"user_id": str(user_id), "food_id": str(food_id)},
                on_conflict="user_id,food_id",
                ignore_duplicates=True,
            )
            .execute()
        )
        return bool(response.data)

    def _delete_pair(self, table: str, user_id: UUID, food_id: UUID) -> bool:
        response = (
            self.client.table(table)
            .delete()
            .eq("user_id", str(user_id))
            .eq("food_id", str(food_id))
            .execute()
        )
        return bool(response.data)


def _parse_food(row: dict[str, object]) -> FoodRecord:
    """Parse a foods row into a domain model."""
    raw_ingredients = row.get("ingredients")
    ingredients = tuple(
        Ingredient(
            name=str(item.get("name") or ""),
            quantity=item.get("quantity"),
            unit=item.get("unit"),
        )
        for item in (raw_ingredients if isinstance(raw_ingredients, list) else [])
        if isinstance(item, dict)
    )
    raw_nutrition = row.get("nutritional_info")
    nutrition = None
    if isinstance(raw_nutrition, dict):
        nutrition = NutritionalInfo(
            calories=raw_nutrition.get("calories"),
            protein=raw_nutrition.get("protein"),
            carbs=raw_nutrition.get("carbs"),
            fat=raw_nutrition.get("fat"),
            fiber=raw_nutrition.get("fiber"),
        )
    price = row.get("price")
    return FoodRecord(
        id=UUID(str(row["id"])),
        name=str(row.get("name") or ""),
        video=str(row.get("video") or ""),
        partner_id=UUID(str(row["partner_id"])),
        thumbnail=row.get("thumbnail"),
        description=str(row.get("description") or ""),
        ingredients=ingredients,
        cuisine=str(row.get("cuisine") or "Other"),
        dietary_info=parse_strings(row.get("dietary_info")),
        difficulty=str(row.get("difficulty") or "Medium"),
        cooking_time=row.get("cooking_time"),
        servings=int(row.get("servings") or 1),
        nutritional_info=nutrition,
        price=float(price) if price is not None else None,
        location=GeoPoint.from_geojson(row.get("location")),
        tags=parse_strings(row.get("tags")),
        like_count=int(row.get("like_count") or 0),
        saves_count=int(row.get("saves_count") or 0),
        comments_count=int(row.get("comments_count") or 0),
        view_count=int(row.get("view_count") or 0),
        average_rating=float(row.get("average_rating") or 0.0),
        total_ratings=int(row.get("total_ratings") or 0),
        is_active=bool(row.get("is_active", True)),
        is_featured=bool(row.get("is_featured", False)),
        featured_until=parse_datetime(row.get("featured_until")),
        created_at=parse_datetime(row.get("created_at")),
    )
