"""Shared test fixtures."""

import copy
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from uuid import UUID, uuid4

import pytest

from macro_tracker.adapters.fixture_catalog import FixtureCatalog
from macro_tracker.config import Settings
from macro_tracker.containers import AppContainer
from macro_tracker.domain.custom_foods import CustomFood
from macro_tracker.domain.meals import DayEntry
from macro_tracker.domain.nutrition import CatalogFood, FoodSummary, NutritionProfile
from macro_tracker.domain.users import (
    ActivityLevel,
    Gender,
    GoalType,
    MacroTargets,
    Measurement,
    UserGoals,
    UserProfile,
    UserRecord,
)
from macro_tracker.errors import DuplicateKeyError, FoodNotFoundError
from macro_tracker.services.auth import AuthIdentity, AuthService, TokenVerifier
from macro_tracker.services.cache import InMemoryCache
from macro_tracker.services.catalog import CatalogProvider, FoodCatalogService
from macro_tracker.services.custom_foods import (
    CustomFoodRepository,
    CustomFoodService,
)
from macro_tracker.services.goals import build_goals
from macro_tracker.services.meals import DayEntryRepository, MealEntryService
from macro_tracker.services.stats import StatsService
from macro_tracker.services.users import UserRepository, UserService

TEST_USER_ID = UUID("7b0f5c7e-3f55-4a53-9a8f-6f1d2a9d6b10")
TEST_TOKEN = "test-access-token"
AUTH_HEADERS = {"Authorization": f"Bearer {TEST_TOKEN}"}


def make_profile(**overrides: object) -> UserProfile:
    """Profile of a 34 year old man, 180 cm and 75 kg."""
    profile = UserProfile(
        first_name="Alex",
        last_name="Morgan",
        date_of_birth=date(1990, 3, 15),
        gender=Gender.MALE,
        height=Measurement(180, "cm"),
        weight=Measurement(75, "kg"),
        activity_level=ActivityLevel.MODERATE,
    )
    return replace(profile, **overrides)


def make_goals(
    daily_calories: float = 2000,
    protein: float = 150,
    carbohydrates: float = 250,
    fat: float = 44,
) -> UserGoals:
    return build_goals(
        daily_calories,
        MacroTargets(protein=protein, carbohydrates=carbohydrates, fat=fat),
        GoalType.MAINTAIN_WEIGHT,
    )


@dataclass
class InMemoryDayEntryRepository(DayEntryRepository):
    """In-memory day entry store keyed by user and date."""

    entries: dict[tuple[UUID, date], DayEntry] = field(default_factory=dict)
    saves: int = 0

    def find_one(self, user_id: UUID, day: date) -> DayEntry | None:
        entry = self.entries.get((user_id, day))
        return copy.deepcopy(entry) if entry else None

    def save(self, entry: DayEntry) -> DayEntry:
        key = (entry.user_id, entry.date)
        stored = copy.deepcopy(entry)
        if stored.id is None:
            if key in self.entries:
                raise DuplicateKeyError(f"Day entry for {key} already exists")
            stored.id = uuid4()
        self.entries[key] = stored
        self.saves += 1
        return copy.deepcopy(stored)

    def list_range(self, user_id: UUID, start: date, end: date) -> list[DayEntry]:
        return [
            copy.deepcopy(entry)
            for (owner, day), entry in sorted(
                self.entries.items(), key=lambda item: item[0][1]
            )
            if owner == user_id and start <= day <= end
        ]


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[UUID, UserRecord] = field(default_factory=dict)

    def get_user(self, user_id: UUID) -> UserRecord | None:
        return self.users.get(user_id)

    def create_user(self, user: UserRecord) -> UserRecord:
        self.users[user.id] = user
        return user

    def update_profile(self, user_id: UUID, profile: UserProfile) -> None:
        self.users[user_id] = replace(self.users[user_id], profile=profile)

    def update_goals(self, user_id: UUID, goals: UserGoals) -> None:
        self.users[user_id] = replace(self.users[user_id], goals=goals)


@dataclass
class InMemoryCustomFoodRepository(CustomFoodRepository):
    """In-memory custom food repository for tests."""

    foods: dict[UUID, CustomFood] = field(default_factory=dict)

    def create_food(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        brand: str | None,
        category: str,
        nutrition_per_100g: NutritionProfile,
    ) -> CustomFood:
        food = CustomFood(
            id=uuid4(),
            user_id=user_id,
            name=name,
            brand=brand,
            category=category,
            nutrition_per_100g=nutrition_per_100g,
            times_used=0,
            last_used_at=None,
        )
        self.foods[food.id] = food
        return food

    def get_food(self, food_id: UUID) -> CustomFood | None:
        return self.foods.get(food_id)

    def search_foods(self, user_id: UUID, query: str, limit: int) -> list[CustomFood]:
        needle = query.lower()
        return [
            food
            for food in self.foods.values()
            if food.user_id == user_id and needle in food.name.lower()
        ][:limit]

    def list_top_foods(self, user_id: UUID, limit: int) -> list[CustomFood]:
        owned = [food for food in self.foods.values() if food.user_id == user_id]
        owned.sort(key=lambda food: food.times_used, reverse=True)
        return owned[:limit]

    def delete_food(self, food_id: UUID) -> None:
        self.foods.pop(food_id, None)

    def increment_usage(self, food_id: UUID, used_at: datetime) -> None:
        food = self.foods.get(food_id)
        if food is None:
            return
        self.foods[food_id] = replace(
            food, times_used=food.times_used + 1, last_used_at=used_at
        )


@dataclass
class FakeCatalogProvider(CatalogProvider):
    """Scripted catalog provider that records calls."""

    name: str = "fake"
    available: bool = True
    foods: dict[int, CatalogFood] = field(default_factory=dict)
    errors: list[Exception] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)

    def is_available(self) -> bool:
        return self.available

    async def search_foods(self, query: str, limit: int) -> list[FoodSummary]:
        self.calls.append(f"search:{query}")
        self._raise_next()
        return [
            food.summary
            for food in self.foods.values()
            if query.lower() in food.summary.name.lower()
        ][:limit]

    async def get_food(self, food_id: int) -> CatalogFood:
        self.calls.append(f"get_food:{food_id}")
        self._raise_next()
        if food_id not in self.foods:
            raise FoodNotFoundError(f"No food {food_id}")
        return self.foods[food_id]

    def _raise_next(self) -> None:
        if self.errors:
            raise self.errors.pop(0)


def make_catalog_food(
    food_id: int, name: str, nutrition: NutritionProfile, source: str = "fake"
) -> CatalogFood:
    return CatalogFood(
        summary=FoodSummary(id=food_id, name=name),
        nutrition_per_100g=nutrition,
        source=source,
    )


@dataclass
class FakeTokenVerifier(TokenVerifier):
    """Accepts a fixed set of tokens."""

    identities: dict[str, AuthIdentity] = field(default_factory=dict)

    def verify(self, token: str) -> AuthIdentity | None:
        return self.identities.get(token)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        spoonacular_api_key="spoonacular-key",
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def registered_user(user_repository: InMemoryUserRepository) -> UserRecord:
    user = UserRecord(
        id=TEST_USER_ID,
        email="alex@example.com",
        profile=make_profile(),
        goals=make_goals(),
    )
    return user_repository.create_user(user)


@pytest.fixture
def day_entry_repository() -> InMemoryDayEntryRepository:
    return InMemoryDayEntryRepository()


@pytest.fixture
def custom_food_repository() -> InMemoryCustomFoodRepository:
    return InMemoryCustomFoodRepository()


@pytest.fixture
def primary_catalog() -> FakeCatalogProvider:
    return FakeCatalogProvider(
        name="primary",
        foods={
            1001: make_catalog_food(
                1001,
                "Rolled Oats",
                NutritionProfile(calories=379, protein=13.2, carbohydrates=67.7, fat=6.5),
                source="primary",
            )
        },
    )


@pytest.fixture
def catalog_service(primary_catalog: FakeCatalogProvider) -> FoodCatalogService:
    return FoodCatalogService(
        primary=primary_catalog,
        fallback=FixtureCatalog(),
        cache=InMemoryCache(),
        retry_delay_seconds=0,
    )


@pytest.fixture
def custom_food_service(
    custom_food_repository: InMemoryCustomFoodRepository,
) -> CustomFoodService:
    return CustomFoodService(custom_food_repository)


@pytest.fixture
def user_service(user_repository: InMemoryUserRepository) -> UserService:
    return UserService(user_repository)


@pytest.fixture
def meal_entry_service(
    day_entry_repository: InMemoryDayEntryRepository,
    user_service: UserService,
    catalog_service: FoodCatalogService,
    custom_food_service: CustomFoodService,
) -> MealEntryService:
    return MealEntryService(
        repository=day_entry_repository,
        goals_provider=user_service,
        catalog_service=catalog_service,
        custom_food_service=custom_food_service,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    user_service: UserService,
    catalog_service: FoodCatalogService,
    custom_food_service: CustomFoodService,
    meal_entry_service: MealEntryService,
    day_entry_repository: InMemoryDayEntryRepository,
) -> AppContainer:
    verifier = FakeTokenVerifier(
        identities={
            TEST_TOKEN: AuthIdentity(user_id=TEST_USER_ID, email="alex@example.com")
        }
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_service=AuthService(verifier),
        user_service=user_service,
        catalog_service=catalog_service,
        custom_food_service=custom_food_service,
        meal_entry_service=meal_entry_service,
        stats_service=StatsService(
            repository=day_entry_repository, goals_provider=user_service
        ),
        close_resources=close_resources,
    )
