"""
Shopping list API endpoints.

Provides the meal-plan-derived list and the persisted manual list.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from app.api.deps import get_current_user_id, get_db
from app.models.shopping import (
    KNOWN_UNITS,
    AddItemRequest,
    CommitAllResult,
    GeneratedIngredient,
    GeneratedShoppingList,
    ManualShoppingList,
    ShoppingListItem,
    UpdateItemRequest,
)
from app.services.errors import InvalidInputError
from app.services.shopping import (
    add_all_generated_ingredients,
    add_generated_ingredient,
    add_item,
    generate_shopping_list,
    get_manual_list,
    remove_item,
    set_item_purchased,
    toggle_item,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/shopping", tags=["shopping"])


# ============================================================================
# Generated From Meal Plan
# ============================================================================

@router.get("/generated", response_model=GeneratedShoppingList)
async def get_generated_list(
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> GeneratedShoppingList:
    """Aggregate ingredients from the active meal plan.

    Quantities are summed per (ingredient, unit) and scaled by servings.
    Recomputed on every call; nothing is stored.
    """
    try:
        return await generate_shopping_list(client, user_id)
    except Exception:
        logger.exception(f"Error generating shopping list for {user_id[:8]}")
        raise HTTPException(status_code=500, detail="Failed to generate shopping list from meal plan")


@router.post("/generated/commit", response_model=ShoppingListItem)
async def commit_ingredient(
    ingredient: GeneratedIngredient,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> ShoppingListItem:
    """Add one generated ingredient to the manual list."""
    try:
        return await add_generated_ingredient(client, user_id, ingredient)
    except Exception:
        logger.exception("Error adding ingredient")
        raise HTTPException(status_code=500, detail="Failed to add ingredient")


@router.post("/generated/commit-all", response_model=CommitAllResult)
async def commit_all_ingredients(
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> CommitAllResult:
    """Regenerate the list and add every ingredient to the manual list."""
    try:
        generated = await generate_shopping_list(client, user_id)
        return await add_all_generated_ingredients(client, user_id, generated.ingredients)
    except Exception:
        logger.exception("Error adding all ingredients")
        raise HTTPException(status_code=500, detail="Failed to add ingredients")


# ============================================================================
# Manual List
# ============================================================================

@router.get("/items", response_model=ManualShoppingList)
async def get_items(
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> ManualShoppingList:
    """Get the manual shopping list (created on first use)."""
    try:
        return await get_manual_list(client, user_id)
    except Exception:
        logger.exception("Error fetching items")
        raise HTTPException(status_code=500, detail="Failed to load shopping list")


@router.post("/items", response_model=ShoppingListItem)
async def create_item(
    request: AddItemRequest,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> ShoppingListItem:
    """Add a product to the manual list."""
    try:
        return await add_item(client, user_id, request)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Error adding item")
        raise HTTPException(status_code=500, detail="Failed to add item")


@router.patch("/items/{item_id}", response_model=ShoppingListItem)
async def update_item(
    item_id: str,
    request: UpdateItemRequest,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> ShoppingListItem:
    """Mark an item purchased or not purchased."""
    try:
        return await set_item_purchased(client, user_id, item_id, request.is_purchased)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error updating item")
        raise HTTPException(status_code=500, detail="Failed to update item")


@router.post("/items/{item_id}/toggle", response_model=ShoppingListItem)
async def toggle_item_purchased(
    item_id: str,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> ShoppingListItem:
    """Flip an item's purchased flag."""
    try:
        return await toggle_item(client, user_id, item_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error updating item")
        raise HTTPException(status_code=500, detail="Failed to update item")


@router.delete("/items/{item_id}", response_model=dict)
async def delete_item(
    item_id: str,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> dict:
    """Remove an item from the manual list."""
    try:
        success = await remove_item(client, user_id, item_id)
        return {"success": success, "deleted": item_id}
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error removing item")
        raise HTTPException(status_code=500, detail="Failed to remove item")


@router.get("/units", response_model=list[str])
async def get_units() -> list[str]:
    """Units offered by the add-item form."""
    return KNOWN_UNITS
