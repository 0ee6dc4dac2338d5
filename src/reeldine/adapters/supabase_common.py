"""Helpers shared by the Supabase repositories."""

from datetime import datetime
from uuid import UUID

from supabase import Client

from reeldine.domain.search import GeoCircle, SortOrder


def parse_datetime(raw: object) -> datetime | None:
    """Parse an ISO timestamp column, tolerating nulls and a trailing Z."""
    if not isinstance(raw, str) or not raw:
        return None
    return datetime.fromisoformat(raw.replace("Z", "+00:00"))


def parse_uuids(raw: object) -> tuple[UUID, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(UUID(str(value)) for value in raw)


def parse_strings(raw: object) -> tuple[str, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(str(value) for value in raw)


def quote_filter_value(value: str) -> str:
    """Quote a value for use inside a PostgREST ``or`` expression."""
    cleaned = value.replace("\\", "").replace('"', "")
    return f'"{cleaned}"'


def apply_order(query, order: SortOrder):  # type: ignore[no-untyped-def]
    """Apply (column, descending) pairs with nulls sorted last."""
    for column, descending in order:
        query = query.order(column, desc=descending, nullsfirst=False)
    return query


def increment_counter(
    client: Client, table: str, row_id: UUID, column: str, amount: int
) -> None:
    """Atomically adjust a counter column through the ``increment_counter`` RPC."""
    client.rpc(
        "increment_counter",
        {
            "target_table": table,
            "row_id": str(row_id),
            "column_name": column,
            "amount": amount,
        },
    ).execute()


def circle_params(near: GeoCircle | None) -> dict[str, float | None]:
    """RPC arguments for an optional search circle; nulls disable the radius."""
    if near is None:
        return {"lat": None, "lng": None, "radius_m": None}
    return {"lat": near.lat, "lng": near.lng, "radius_m": near.radius_m}
