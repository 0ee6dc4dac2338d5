"""Domain models for the search and filter engine."""

import math
from collections.abc import Mapping
from dataclasses import dataclass

from reeldine.config import parse_csv
from reeldine.domain.geo import GeoPoint, haversine_km, is_location_valid

SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"
SORT_RATING = "rating"
SORT_PRICE_LOW = "price_low"
SORT_PRICE_HIGH = "price_high"
SORT_TRENDING = "trending"
SORT_DISTANCE = "distance"
SORT_RELEVANCE = "relevance"

# Each entry is a sequence of (field, descending) pairs applied in order.
SortOrder = tuple[tuple[str, bool], ...]

FOOD_SORT_ORDERS: dict[str, SortOrder] = {
    SORT_NEWEST: (("created_at", True),),
    SORT_OLDEST: (("created_at", False),),
    SORT_RATING: (("average_rating", True),),
    SORT_PRICE_LOW: (("price", False),),
    SORT_PRICE_HIGH: (("price", True),),
    SORT_TRENDING: (("engagement_score", True),),
    # Distance is applied to the fetched page afterwards.
    SORT_DISTANCE: (("created_at", True),),
    SORT_RELEVANCE: (("engagement_score", True), ("created_at", True)),
}

PARTNER_SORT_ORDER: SortOrder = (("rating", True), ("followers_count", True))


@dataclass(frozen=True)
class PriceRange:
    """Inclusive price bounds; an absent maximum means no upper bound."""

    minimum: float
    maximum: float | None = None


@dataclass(frozen=True)
class GeoCircle:
    """Search centre with a radius in kilometers."""

    lat: float
    lng: float
    radius_km: float

    @property
    def radius_m(self) -> float:
        return self.radius_km * 1000

    def distance_km(self, point: GeoPoint) -> float:
        return haversine_km(self.lat, self.lng, point.lat, point.lng)


@dataclass(frozen=True)
class FoodFilter:
    """Structured filter over food posts; every field is optional."""

    query: str | None = None
    cuisines: tuple[str, ...] = ()
    near: GeoCircle | None = None
    price: PriceRange | None = None
    min_rating: float | None = None
    ingredients: tuple[str, ...] = ()
    dietary_restrictions: tuple[str, ...] = ()


@dataclass(frozen=True)
class PartnerFilter:
    """Structured filter over food partners."""

    query: str | None = None
    cuisines: tuple[str, ...] = ()
    near: GeoCircle | None = None
    min_rating: float | None = None
    is_verified: bool | None = None


@dataclass(frozen=True)
class FoodSearchRequest:
    """A validated food search request.

    Optional numeric parameters that fail to parse are dropped rather than
    rejected, so a malformed ``rating`` simply disables the rating filter.
    """

    filters: FoodFilter
    sort_by: str
    page: int
    limit: int
    radius_km: float

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, str],
        *,
        default_limit: int,
        max_limit: int,
        default_radius_km: float,
    ) -> "FoodSearchRequest":
        radius_km = _parse_float(params.get("radius"))
        if radius_km is None or radius_km <= 0:
            radius_km = default_radius_km
        sort_by = params.get("sortBy") or SORT_RELEVANCE
        if sort_by not in FOOD_SORT_ORDERS:
            sort_by = SORT_RELEVANCE
        filters = FoodFilter(
            query=_clean_text(params.get("q")),
            cuisines=parse_csv(params.get("cuisine")),
            near=_parse_circle(params, radius_km),
            price=parse_price_range(params.get("priceRange")),
            min_rating=_parse_float(params.get("rating")),
            ingredients=parse_csv(params.get("ingredients")),
            dietary_restrictions=parse_csv(params.get("dietaryRestrictions")),
        )
        page, limit = _parse_page(params, default_limit, max_limit)
        return cls(
            filters=filters,
            sort_by=sort_by,
            page=page,
            limit=limit,
            radius_km=radius_km,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def order(self) -> SortOrder:
        if self.sort_by == SORT_DISTANCE and self.filters.near is None:
            return FOOD_SORT_ORDERS[SORT_NEWEST]
        return FOOD_SORT_ORDERS[self.sort_by]

    def applied_filters(self) -> dict[str, object]:
        """Echo the effective filters back to the caller."""
        filters = self.filters
        price = None
        if filters.price is not None:
            price = {"min": filters.price.minimum, "max": filters.price.maximum}
        coordinates = None
        if filters.near is not None:
            coordinates = [filters.near.lng, filters.near.lat]
        return {
            "query": filters.query,
            "cuisine": list(filters.cuisines),
            "priceRange": price,
            "rating": filters.min_rating,
            "ingredients": list(filters.ingredients),
            "dietaryRestrictions": list(filters.dietary_restrictions),
            "coordinates": coordinates,
            "radius": self.radius_km,
        }


@dataclass(frozen=True)
class PartnerSearchRequest:
    """A validated partner search request."""

    filters: PartnerFilter
    page: int
    limit: int

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, str],
        *,
        default_limit: int,
        max_limit: int,
        default_radius_km: float,
    ) -> "PartnerSearchRequest":
        radius_km = _parse_float(params.get("radius"))
        if radius_km is None or radius_km <= 0:
            radius_km = default_radius_km
        verified_raw = (params.get("isVerified") or "").strip().lower()
        is_verified = {"true": True, "false": False}.get(verified_raw)
        filters = PartnerFilter(
            query=_clean_text(params.get("q")),
            cuisines=parse_csv(params.get("cuisine")),
            near=_parse_circle(params, radius_km),
            min_rating=_parse_float(params.get("rating")),
            is_verified=is_verified,
        )
        page, limit = _parse_page(params, default_limit, max_limit)
        return cls(filters=filters, page=page, limit=limit)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Pagination:
    """Pagination metadata for a result page."""

    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total,
            items_per_page=limit,
            has_next=page < total_pages,
            has_prev=page > 1,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalItems": self.total_items,
            "itemsPerPage": self.items_per_page,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


@dataclass(frozen=True)
class TagCount:
    """Tag with its number of occurrences across active foods."""

    tag: str
    count: int


def parse_price_range(raw: str | None) -> PriceRange | None:
    """Parse ``"min"`` or ``"min-max"`` into a price range."""
    if not raw:
        return None
    lower_raw, _, upper_raw = raw.partition("-")
    minimum = _parse_float(lower_raw)
    if minimum is None:
        return None
    maximum = _parse_float(upper_raw) if upper_raw else None
    return PriceRange(minimum=minimum, maximum=maximum)


def _parse_float(raw: str | None) -> float | None:
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def _parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _parse_page(
    params: Mapping[str, str], default_limit: int, max_limit: int
) -> tuple[int, int]:
    page = _parse_int(params.get("page")) or 1
    limit = _parse_int(params.get("limit")) or default_limit
    return max(page, 1), min(max(limit, 1), max_limit)


def _parse_circle(params: Mapping[str, str], radius_km: float) -> GeoCircle | None:
    lat = _parse_float(params.get("lat"))
    lng = _parse_float(params.get("lng"))
    if lat is None or lng is None or not is_location_valid(lat, lng):
        return None
    return GeoCircle(lat=lat, lng=lng, radius_km=radius_km)


def _clean_text(raw: str | None) -> str | None:
    if raw is None:
        return None
    value = raw.strip()
    return value or None
