"""Food search, catalog nutrition and custom food endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from macro_tracker.api.auth import require_identity
from macro_tracker.api.models import CustomFoodIn
from macro_tracker.domain.meals import FoodUnit
from macro_tracker.domain.nutrition import NutritionProfile
from macro_tracker.errors import ValidationError
from macro_tracker.services.auth import AuthIdentity  # noqa: TC001

if TYPE_CHECKING:
    from macro_tracker.containers import AppContainer

router = APIRouter(prefix="/foods", tags=["foods"])

_MIN_QUERY_LENGTH = 2


@router.get("/search")
async def search_foods(
    request: Request,
    query: str = "",
    limit: int = Query(default=20, ge=1, le=100),
    identity: AuthIdentity = Depends(require_identity),
) -> dict[str, object]:
    """Search the catalog and the caller's own foods."""
    cleaned = query.strip()
    if len(cleaned) < _MIN_QUERY_LENGTH:
        raise ValidationError(
            "query", f"must be at least {_MIN_QUERY_LENGTH} characters"
        )
    container: AppContainer = request.app.state.container
    foods = await container.catalog_service.search(cleaned, limit)
    custom_foods = container.custom_food_service.search(
        identity.user_id, cleaned, limit
    )
    return {
        "foods": [asdict(food) for food in foods],
        "custom_foods": [asdict(food) for food in custom_foods],
    }


@router.post("/custom", status_code=status.HTTP_201_CREATED)
async def create_custom_food(
    payload: CustomFoodIn,
    request: Request,
    identity: AuthIdentity = Depends(require_identity),
) -> dict[str, object]:
    """Create a food in the caller's library."""
    container: AppContainer = request.app.state.container
    food = container.custom_food_service.create_food(
        identity.user_id,
        name=payload.name,
        category=payload.category,
        nutrition_per_100g=NutritionProfile(**payload.nutrition_per_100g.model_dump()),
        brand=payload.brand,
    )
    return {"food": asdict(food)}


@router.get("/custom")
async def list_custom_foods(
    request: Request,
    query: str | None = None,
    limit: int = Query(default=20, ge=1, le=100),
    identity: AuthIdentity = Depends(require_identity),
) -> dict[str, object]:
    """List the caller's foods, most recently used first."""
    container: AppContainer = request.app.state.container
    foods = container.custom_food_service.search(identity.user_id, query, limit)
    return {"foods": [asdict(food) for food in foods]}


@router.delete("/custom/{food_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_custom_food(
    food_id: UUID,
    request: Request,
    identity: AuthIdentity = Depends(require_identity),
) -> None:
    """Delete one of the caller's foods."""
    container: AppContainer = request.app.state.container
    container.custom_food_service.delete(identity.user_id, food_id)


@router.get("/{food_id}", dependencies=[Depends(require_identity)])
async def food_detail(
    food_id: int,
    request: Request,
    amount: float = 100,
    unit: FoodUnit = FoodUnit.GRAMS,
) -> dict[str, object]:
    """Return a catalog food with nutrition for ``amount`` of ``unit``."""
    container: AppContainer = request.app.state.container
    food = await container.catalog_service.get_food(food_id)
    nutrition = await container.catalog_service.get_nutrition(food_id, amount, unit)
    return {
        "food": asdict(food.summary),
        "source": food.source,
        "amount": amount,
        "unit": unit,
        "nutrition_per_100g": food.nutrition_per_100g.to_dict(),
        "nutrition": nutrition.to_dict(),
    }
