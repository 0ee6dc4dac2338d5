"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from reeldine.adapters.openai_suggestion_client import OpenAISuggestionClient
from reeldine.adapters.redis_cache import RedisCache
from reeldine.adapters.supabase_comment_repository import SupabaseCommentRepository
from reeldine.adapters.supabase_food_repository import SupabaseFoodRepository
from reeldine.adapters.supabase_partner_repository import SupabasePartnerRepository
from reeldine.adapters.supabase_user_repository import SupabaseUserRepository
from reeldine.config import Settings
from reeldine.services.cache import Cache, InMemoryCache
from reeldine.services.comments import CommentService
from reeldine.services.foods import FoodService
from reeldine.services.notifications import NotificationService
from reeldine.services.search import SearchService
from reeldine.services.social import SocialService
from reeldine.services.suggestions import ContentSuggestionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    cache: Cache
    notification_service: NotificationService
    search_service: SearchService
    social_service: SocialService
    food_service: FoodService
    comment_service: CommentService
    suggestion_service: ContentSuggestionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    partner_repository = SupabasePartnerRepository(supabase_client)
    food_repository = SupabaseFoodRepository(supabase_client)
    comment_repository = SupabaseCommentRepository(supabase_client)

    redis_cache = None
    cache: Cache = InMemoryCache()
    if resolved_settings.redis_url:
        redis_cache = RedisCache.create(resolved_settings.redis_url)
        cache = redis_cache

    suggestion_client = None
    if resolved_settings.openai_api_key:
        suggestion_client = OpenAISuggestionClient.create(
            resolved_settings.openai_api_key,
            resolved_settings.openai_timeout_seconds,
        )

    notification_service = NotificationService(
        capacity=resolved_settings.notification_inbox_capacity
    )
    search_service = SearchService(
        foods=food_repository,
        partners=partner_repository,
        cache=cache,
        cache_ttl_seconds=resolved_settings.search_cache_ttl_seconds,
        default_page_size=resolved_settings.default_page_size,
        max_page_size=resolved_settings.max_page_size,
        default_radius_km=resolved_settings.default_search_radius_km,
    )
    social_service = SocialService(
        users=user_repository,
        partners=partner_repository,
        notifications=notification_service,
    )
    food_service = FoodService(
        foods=food_repository,
        partners=partner_repository,
        users=user_repository,
        notifications=notification_service,
    )
    comment_service = CommentService(
        comments=comment_repository,
        foods=food_repository,
        users=user_repository,
        notifications=notification_service,
    )
    suggestion_service = ContentSuggestionService(
        client=suggestion_client,
        model=resolved_settings.openai_model,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
    )

    async def close_resources() -> None:
        if suggestion_client is not None:
            await suggestion_client.close()
        if redis_cache is not None:
            redis_cache.close()

    return AppContainer(
        settings=resolved_settings,
        cache=cache,
        notification_service=notification_service,
        search_service=search_service,
        social_service=social_service,
        food_service=food_service,
        comment_service=comment_service,
        suggestion_service=suggestion_service,
        close_resources=close_resources,
    )
