"""Domain models for accounts."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from reeldine.domain.geo import GeoPoint


@dataclass(frozen=True)
class UserPreferences:
    """Content preferences used for personalization."""

    cuisines: tuple[str, ...] = ()
    dietary_restrictions: tuple[str, ...] = ()
    favorite_ingredients: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "cuisines": list(self.cuisines),
            "dietaryRestrictions": list(self.dietary_restrictions),
            "favoriteIngredients": list(self.favorite_ingredients),
        }


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: UUID
    full_name: str
    email: str
    avatar: str | None = None
    bio: str = ""
    location: str = ""
    preferences: UserPreferences = field(default_factory=UserPreferences)
    following: tuple[UUID, ...] = ()
    is_active: bool = True
    last_login: datetime | None = None
    created_at: datetime | None = None

    @property
    def following_count(self) -> int:
        return len(self.following)


@dataclass(frozen=True)
class FoodPartnerRecord:
    """A business account that posts food videos."""

    id: UUID
    name: str
    contact_name: str = ""
    phone: str = ""
    address: str = ""
    email: str = ""
    logo: str | None = None
    description: str = ""
    location: GeoPoint | None = None
    cuisine: tuple[str, ...] = ()
    rating: float = 0.0
    total_reviews: int = 0
    followers_count: int = 0
    total_videos: int = 0
    is_verified: bool = False
    is_active: bool = True
    created_at: datetime | None = None
