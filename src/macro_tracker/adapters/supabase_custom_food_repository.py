"""Supabase implementation for custom foods."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from macro_tracker.domain.custom_foods import CustomFood
from macro_tracker.domain.nutrition import NutritionProfile
from macro_tracker.services.custom_foods import CustomFoodRepository

_TABLE = "custom_foods"


@dataclass
class SupabaseCustomFoodRepository(CustomFoodRepository):
    """Supabase-backed repository for user foods."""

    client: Client

    def create_food(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        brand: str | None,
        category: str,
        nutrition_per_100g: NutritionProfile,
    ) -> CustomFood:
        """Create a food row and return it."""
        response = (
            self.client.table(_TABLE)
            .insert(
                {
                    "user_id": str(user_id),
                    "name": name,
                    "brand": brand,
                    "category": category,
                    "nutrition_per_100g": nutrition_per_100g.to_dict(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create custom food")
        return _parse_food(response.data[0])

    def get_food(self, food_id: UUID) -> CustomFood | None:
        """Return a food by id, if present."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("id", str(food_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def search_foods(self, user_id: UUID, query: str, limit: int) -> list[CustomFood]:
        """Search a user's foods by name."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .ilike("name", f"%{query}%")
            .limit(limit)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def list_top_foods(self, user_id: UUID, limit: int) -> list[CustomFood]:
        """Return a user's foods ordered by usage."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .order("times_used", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def delete_food(self, food_id: UUID) -> None:
        """Delete a food row."""
        self.client.table(_TABLE).delete().eq("id", str(food_id)).execute()

    def increment_usage(self, food_id: UUID, used_at: datetime) -> None:
        """Increment the usage counter of a food."""
        current = self.get_food(food_id)
        if current is None:
            return
        self.client.table(_TABLE).update(
            {
                "times_used": current.times_used + 1,
                "last_used_at": used_at.isoformat(),
            }
        ).eq("id", str(food_id)).execute()


def _parse_food(row: dict[str, object]) -> CustomFood:
    last_used_raw = row.get("last_used_at")
    return CustomFood(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name", "")),
        brand=row.get("brand"),
        category=str(row.get("category", "other")),
        nutrition_per_100g=NutritionProfile.from_dict(row.get("nutrition_per_100g")),
        times_used=int(row.get("times_used") or 0),
        last_used_at=(
            datetime.fromisoformat(last_used_raw)
            if isinstance(last_used_raw, str) and last_used_raw
            else None
        ),
    )
