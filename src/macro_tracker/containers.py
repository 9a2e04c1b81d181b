"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from macro_tracker.adapters.fixture_catalog import FixtureCatalog
from macro_tracker.adapters.spoonacular_client import SpoonacularCatalog
from macro_tracker.adapters.supabase_custom_food_repository import (
    SupabaseCustomFoodRepository,
)
from macro_tracker.adapters.supabase_day_entry_repository import (
    SupabaseDayEntryRepository,
)
from macro_tracker.adapters.supabase_token_verifier import SupabaseTokenVerifier
from macro_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from macro_tracker.config import Settings
from macro_tracker.services.auth import AuthService
from macro_tracker.services.cache import InMemoryCache
from macro_tracker.services.catalog import FoodCatalogService
from macro_tracker.services.custom_foods import CustomFoodService
from macro_tracker.services.meals import MealEntryService
from macro_tracker.services.stats import StatsService
from macro_tracker.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    user_service: UserService
    catalog_service: FoodCatalogService
    custom_food_service: CustomFoodService
    meal_entry_service: MealEntryService
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    day_entry_repository = SupabaseDayEntryRepository(supabase_client)
    user_service = UserService(SupabaseUserRepository(supabase_client))
    custom_food_service = CustomFoodService(
        SupabaseCustomFoodRepository(supabase_client)
    )
    spoonacular = SpoonacularCatalog.create(
        api_key=resolved_settings.spoonacular_api_key,
        base_url=resolved_settings.spoonacular_base_url,
        timeout_seconds=resolved_settings.catalog_timeout_seconds,
    )
    catalog_service = FoodCatalogService(
        primary=spoonacular,
        fallback=FixtureCatalog(),
        cache=InMemoryCache(),
        search_ttl_seconds=resolved_settings.catalog_search_ttl_seconds,
        food_ttl_seconds=resolved_settings.catalog_food_ttl_seconds,
        retry_attempts=resolved_settings.catalog_retry_attempts,
    )
    meal_entry_service = MealEntryService(
        repository=day_entry_repository,
        goals_provider=user_service,
        catalog_service=catalog_service,
        custom_food_service=custom_food_service,
    )
    stats_service = StatsService(
        repository=day_entry_repository, goals_provider=user_service
    )

    async def close_resources() -> None:
        await spoonacular.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=AuthService(SupabaseTokenVerifier(supabase_client)),
        user_service=user_service,
        catalog_service=catalog_service,
        custom_food_service=custom_food_service,
        meal_entry_service=meal_entry_service,
        stats_service=stats_service,
        close_resources=close_resources,
    )
