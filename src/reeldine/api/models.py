"""Pydantic models for request bodies."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PreferencesUpdate(_Body):
    """Partial preference update; omitted lists are left unchanged."""

    cuisines: list[str] | None = None
    dietary_restrictions: list[str] | None = None
    favorite_ingredients: list[str] | None = None


class MarkReadRequest(_Body):
    """Ids to mark as read; omit them to mark the whole inbox."""

    notification_ids: list[UUID] | None = None


class CommentBody(_Body):
    text: str = ""


class RecipeSuggestionRequest(_Body):
    ingredients: list[str] = Field(default_factory=list)
    cuisine: str | None = None
    dietary_restrictions: list[str] = Field(default_factory=list)


class HashtagRequest(_Body):
    content: str = ""
    content_type: str = "food"
    platform: str = "instagram"
