"""Domain models for food video posts."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from reeldine.domain.geo import GeoPoint, is_location_valid

Cuisine = Literal[
    "Italian",
    "Chinese",
    "Indian",
    "Mexican",
    "Japanese",
    "Thai",
    "French",
    "American",
    "Mediterranean",
    "Other",
]
DietaryInfo = Literal[
    "Vegetarian",
    "Vegan",
    "Gluten-Free",
    "Dairy-Free",
    "Nut-Free",
    "Low-Carb",
    "Keto",
    "Halal",
    "Kosher",
]
Difficulty = Literal["Easy", "Medium", "Hard"]

LIKE_WEIGHT = 2
SAVE_WEIGHT = 3
COMMENT_WEIGHT = 4
VIEW_WEIGHT = 0.1


def engagement_score(
    like_count: int, saves_count: int, comments_count: int, view_count: int
) -> float:
    """Weighted engagement signal used for trending and relevance ordering."""
    return (
        like_count * LIKE_WEIGHT
        + saves_count * SAVE_WEIGHT
        + comments_count * COMMENT_WEIGHT
        + view_count * VIEW_WEIGHT
    )


@dataclass(frozen=True)
class Ingredient:
    """Ingredient line of a recipe."""

    name: str
    quantity: str | None = None
    unit: str | None = None


@dataclass(frozen=True)
class NutritionalInfo:
    """Per-serving nutrition values; grams unless noted."""

    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None
    fiber: float | None = None


@dataclass(frozen=True)
class FoodRecord:
    """A food video post."""

    id: UUID
    name: str
    video: str
    partner_id: UUID
    thumbnail: str | None = None
    description: str = ""
    ingredients: tuple[Ingredient, ...] = ()
    cuisine: str = "Other"
    dietary_info: tuple[str, ...] = ()
    difficulty: str = "Medium"
    cooking_time: int | None = None
    servings: int = 1
    nutritional_info: NutritionalInfo | None = None
    price: float | None = None
    location: GeoPoint | None = None
    tags: tuple[str, ...] = ()
    like_count: int = 0
    saves_count: int = 0
    comments_count: int = 0
    view_count: int = 0
    average_rating: float = 0.0
    total_ratings: int = 0
    is_active: bool = True
    is_featured: bool = False
    featured_until: datetime | None = None
    created_at: datetime | None = None

    @property
    def engagement_score(self) -> float:
        return engagement_score(
            self.like_count, self.saves_count, self.comments_count, self.view_count
        )


class _DraftModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True
    )


class IngredientDraft(_DraftModel):
    name: str = Field(min_length=1, max_length=100)
    quantity: str | None = None
    unit: str | None = None


class NutritionDraft(_DraftModel):
    calories: float | None = Field(default=None, ge=0)
    protein: float | None = Field(default=None, ge=0)
    carbs: float | None = Field(default=None, ge=0)
    fat: float | None = Field(default=None, ge=0)
    fiber: float | None = Field(default=None, ge=0)


class LocationDraft(_DraftModel):
    """GeoJSON point as sent by clients: coordinates are [lng, lat]."""

    type: Literal["Point"] = "Point"
    coordinates: tuple[float, float]

    @field_validator("coordinates")
    @classmethod
    def _check_bounds(cls, value: tuple[float, float]) -> tuple[float, float]:
        lng, lat = value
        if not is_location_valid(lat, lng):
            raise ValueError("coordinates out of range")
        return value


class FoodDraft(_DraftModel):
    """Validated payload for publishing a new food video."""

    name: str = Field(min_length=1, max_length=100)
    video: str = Field(min_length=1)
    thumbnail: str | None = None
    description: str = Field(default="", max_length=500)
    ingredients: list[IngredientDraft] = Field(default_factory=list)
    cuisine: Cuisine = "Other"
    dietary_info: list[DietaryInfo] = Field(default_factory=list)
    difficulty: Difficulty = "Medium"
    cooking_time: int | None = Field(default=None, ge=1, le=480)
    servings: int = Field(default=1, ge=1, le=50)
    nutritional_info: NutritionDraft | None = None
    price: float | None = Field(default=None, ge=0)
    location: LocationDraft | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        tags: list[str] = []
        for raw in value:
            tag = raw.strip().lower()
            if tag and tag not in tags:
                tags.append(tag)
        return tags

    def to_row(self, partner_id: UUID, location: GeoPoint | None) -> dict[str, object]:
        """Build the storage row for this draft."""
        return {
            "name": self.name,
            "video": self.video,
            "thumbnail": self.thumbnail,
            "description": self.description,
            "ingredients": [item.model_dump() for item in self.ingredients],
            "cuisine": self.cuisine,
            "dietary_info": list(self.dietary_info),
            "difficulty": self.difficulty,
            "cooking_time": self.cooking_time,
            "servings": self.servings,
            "nutritional_info": (
                self.nutritional_info.model_dump() if self.nutritional_info else None
            ),
            "price": self.price,
            "partner_id": str(partner_id),
            "location": location.to_geojson() if location else None,
            "tags": self.tags,
        }

    def resolved_location(self) -> GeoPoint | None:
        if self.location is None:
            return None
        lng, lat = self.location.coordinates
        return GeoPoint(lng=lng, lat=lat)
