"""Supabase implementation for food partners."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from reeldine.adapters.supabase_common import (
    apply_order,
    circle_params,
    increment_counter,
    parse_datetime,
    parse_strings,
    quote_filter_value,
)
from reeldine.domain.geo import GeoPoint
from reeldine.domain.models import FoodPartnerRecord
from reeldine.domain.search import PartnerFilter, SortOrder
from reeldine.services.social import PartnerRepository


@dataclass
class SupabasePartnerRepository(PartnerRepository):
    """Supabase-backed repository for food partners."""

    client: Client

    def get_partner(self, partner_id: UUID) -> FoodPartnerRecord | None:
        response = (
            self.client.table("food_partners")
            .select("*")
            .eq("id", str(partner_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_partner(response.data[0])

    def get_partners(self, partner_ids: list[UUID]) -> list[FoodPartnerRecord]:
        if not partner_ids:
            return []
        response = (
            self.client.table("food_partners")
            .select("*")
            .in_("id", [str(partner_id) for partner_id in partner_ids])
            .execute()
        )
        return [_parse_partner(row) for row in response.data or []]

    def search_partners(
        self, filters: PartnerFilter, order: SortOrder, offset: int, limit: int
    ) -> tuple[list[FoodPartnerRecord], int]:
        """Run a filtered, ordered and paginated partner query.

        Radius matching happens inside the ``search_partners`` function.
        """
        query = self.client.rpc(
            "search_partners", circle_params(filters.near), count="exact"
        )
        if filters.query:
            pattern = quote_filter_value(f"%{filters.query}%")
            query = query.or_(
                f"name.ilike.{pattern},"
                f"description.ilike.{pattern},"
                f"address.ilike.{pattern}"
            )
        if filters.cuisines:
            query = query.ov("cuisine", list(filters.cuisines))
        if filters.min_rating is not None:
            query = query.gte("rating", filters.min_rating)
        if filters.is_verified is not None:
            query = query.eq("is_verified", filters.is_verified)
        query = apply_order(query, order)
        response = query.range(offset, offset + limit - 1).execute()
        partners = [_parse_partner(row) for row in response.data or []]
        return partners, response.count or 0

    def suggest_partners(self, prefix: str, limit: int) -> list[FoodPartnerRecord]:
        response = (
            self.client.table("food_partners")
            .select("*")
            .eq("is_active", True)
            .ilike("name", f"{prefix}%")
            .limit(limit)
            .execute()
        )
        return [_parse_partner(row) for row in response.data or []]

    def increment_counter(self, partner_id: UUID, column: str, amount: int) -> None:
        increment_counter(self.client, "food_partners", partner_id, column, amount)

    def set_counter(self, partner_id: UUID, column: str, value: int) -> None:
        self.client.table("food_partners").update({column: value}).eq(
            "id", str(partner_id)
        ).execute()


def _parse_partner(row: dict[str, object]) -> FoodPartnerRecord:
    """Parse a food_partners row into a domain model."""
    return FoodPartnerRecord(
        id=UUID(str(row["id"])),
        name=str(row.get("name") or ""),
        contact_name=str(row.get("contact_name") or ""),
        phone=str(row.get("phone") or ""),
        address=str(row.get("address") or ""),
        email=str(row.get("email") or ""),
        logo=row.get("logo"),
        description=str(row.get("description") or ""),
        location=GeoPoint.from_geojson(row.get("location")),
        cuisine=parse_strings(row.get("cuisine")),
        rating=float(row.get("rating") or 0.0),
        total_reviews=int(row.get("total_reviews") or 0),
        followers_count=int(row.get("followers_count") or 0),
        total_videos=int(row.get("total_videos") or 0),
        is_verified=bool(row.get("is_verified", False)),
        is_active=bool(row.get("is_active", True)),
        created_at=parse_datetime(row.get("created_at")),
    )
