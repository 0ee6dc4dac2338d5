"""Request dependencies shared by the routers."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import Header

from reeldine.errors import UnauthorizedError

if TYPE_CHECKING:
    from collections.abc import Mapping


def parse_identity(raw: str | None) -> UUID | None:
    """Parse an identity header value, returning None when absent or malformed."""
    if not raw:
        return None
    try:
        return UUID(raw.strip())
    except ValueError:
        return None


def account_from_headers(headers: Mapping[str, str]) -> UUID | None:
    """Resolve the caller from ``X-User-Id``, falling back to ``X-Partner-Id``."""
    return parse_identity(headers.get("x-user-id")) or parse_identity(
        headers.get("x-partner-id")
    )


async def require_user_id(x_user_id: str | None = Header(default=None)) -> UUID:
    """Return the authenticated user id set by the gateway."""
    user_id = parse_identity(x_user_id)
    if user_id is None:
        raise UnauthorizedError("User authentication required")
    return user_id


async def require_partner_id(
    x_partner_id: str | None = Header(default=None),
) -> UUID:
    """Return the authenticated food partner id set by the gateway."""
    partner_id = parse_identity(x_partner_id)
    if partner_id is None:
        raise UnauthorizedError("Food partner authentication required")
    return partner_id


async def require_account_id(
    x_user_id: str | None = Header(default=None),
    x_partner_id: str | None = Header(default=None),
) -> UUID:
    """Return whichever account (user or partner) is making the call."""
    account_id = parse_identity(x_user_id) or parse_identity(x_partner_id)
    if account_id is None:
        raise UnauthorizedError("Authentication required")
    return account_id
