"""Search over food posts and partners with cache-aside result pages."""

import hashlib
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from uuid import UUID

from reeldine.domain.foods import FoodRecord
from reeldine.domain.search import (
    PARTNER_SORT_ORDER,
    SORT_DISTANCE,
    FoodSearchRequest,
    GeoCircle,
    Pagination,
    PartnerSearchRequest,
)
from reeldine.services.cache import Cache
from reeldine.services.foods import FoodRepository, populate_foods
from reeldine.services.social import PartnerRepository, partner_profile

_logger = logging.getLogger(__name__)

MIN_SUGGESTION_LENGTH = 2
SUGGESTION_LIMIT = 5
SUGGESTION_TYPES = ("all", "foods", "partners", "tags")

_ID_TIE_BREAK = (("id", False),)


@dataclass
class SearchService:
    """Translates query parameters into repository searches.

    Result pages are cached under a hash of the raw parameters. Entries are
    never invalidated on writes; they simply expire after the TTL.
    """

    foods: FoodRepository
    partners: PartnerRepository
    cache: Cache
    cache_ttl_seconds: int = 300
    default_page_size: int = 20
    max_page_size: int = 100
    default_radius_km: float = 10.0

    def search_foods(self, params: Mapping[str, str]) -> tuple[dict[str, object], bool]:
        """Return a page of foods and whether it came from the cache."""
        cache_key = search_cache_key("foods", params)
        cached = self.cache.get(cache_key)
        if isinstance(cached, dict):
            _logger.debug("Search cache hit: %s", cache_key)
            return cached, True

        request = FoodSearchRequest.from_params(
            params,
            default_limit=self.default_page_size,
            max_limit=self.max_page_size,
            default_radius_km=self.default_radius_km,
        )
        foods, total = self.foods.search_foods(
            request.filters,
            request.order + _ID_TIE_BREAK,
            request.offset,
            request.limit,
        )
        distances = None
        near = request.filters.near
        if near is not None:
            distances = _distances(near, foods)
            if request.sort_by == SORT_DISTANCE:
                foods = sort_by_distance(foods, distances)
        data = {
            "foods": populate_foods(self.partners, foods, distances),
            "pagination": Pagination.build(
                request.page, request.limit, total
            ).to_dict(),
            "filters": {"applied": request.applied_filters()},
        }
        self.cache.set(cache_key, data, self.cache_ttl_seconds)
        return data, False

    def search_partners(
        self, params: Mapping[str, str]
    ) -> tuple[dict[str, object], bool]:
        """Return a page of partners and whether it came from the cache."""
        cache_key = search_cache_key("partners", params)
        cached = self.cache.get(cache_key)
        if isinstance(cached, dict):
            _logger.debug("Search cache hit: %s", cache_key)
            return cached, True

        request = PartnerSearchRequest.from_params(
            params,
            default_limit=self.default_page_size,
            max_limit=self.max_page_size,
            default_radius_km=self.default_radius_km,
        )
        partners, total = self.partners.search_partners(
            request.filters,
            PARTNER_SORT_ORDER + _ID_TIE_BREAK,
            request.offset,
            request.limit,
        )
        near = request.filters.near
        results = []
        for partner in partners:
            payload = partner_profile(partner)
            if near is not None and partner.location is not None:
                payload["distance"] = round(near.distance_km(partner.location), 3)
            results.append(payload)
        data = {
            "partners": results,
            "pagination": Pagination.build(
                request.page, request.limit, total
            ).to_dict(),
        }
        self.cache.set(cache_key, data, self.cache_ttl_seconds)
        return data, False

    def suggestions(
        self, query: str | None, suggestion_type: str = "all"
    ) -> list[dict[str, object]]:
        """Return type-grouped suggestions for a search prefix."""
        prefix = (query or "").strip()
        if len(prefix) < MIN_SUGGESTION_LENGTH:
            return []
        if suggestion_type not in SUGGESTION_TYPES:
            suggestion_type = "all"
        suggestions: list[dict[str, object]] = []
        if suggestion_type in {"all", "foods"}:
            for food in self.foods.suggest_foods(prefix, SUGGESTION_LIMIT):
                suggestions.append(
                    {
                        "type": "food",
                        "text": food.name,
                        "category": food.cuisine,
                        "tags": list(food.tags),
                    }
                )
        if suggestion_type in {"all", "partners"}:
            for partner in self.partners.suggest_partners(prefix, SUGGESTION_LIMIT):
                suggestions.append(
                    {
                        "type": "partner",
                        "text": partner.name,
                        "category": ", ".join(partner.cuisine),
                    }
                )
        if suggestion_type in {"all", "tags"}:
            for tag in self.foods.popular_tags(prefix.lower(), SUGGESTION_LIMIT):
                suggestions.append({"type": "tag", "text": tag.tag, "category": "tag"})
        return suggestions


def search_cache_key(kind: str, params: Mapping[str, str]) -> str:
    """Build a stable cache key from the raw query parameters."""
    serialized = json.dumps(dict(params), sort_keys=True)
    digest = hashlib.sha256(serialized.encode("utf-8")).hexdigest()
    return f"search:{kind}:{digest}"


def sort_by_distance(
    foods: list[FoodRecord], distances: dict[UUID, float]
) -> list[FoodRecord]:
    """Order foods nearest first; foods without a location go last."""
    return sorted(
        foods,
        key=lambda food: (
            food.id not in distances,
            distances.get(food.id, 0.0),
        ),
    )


def _distances(near: GeoCircle, foods: list[FoodRecord]) -> dict[UUID, float]:
    return {
        food.id: near.distance_km(food.location)
        for food in foods
        if food.location is not None
    }
