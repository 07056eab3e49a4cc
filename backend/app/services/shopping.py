"""
Shopping list service.

Two lists live side by side:
- The generated list, recomputed from the active meal plan on every request
- The manual list, a persisted singleton per user (``meal_plan_id IS NULL``)

Generated ingredients only become persisted items when explicitly committed.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from supabase import Client

from app.models.shopping import (
    MANUAL_LIST_NAME,
    AddItemRequest,
    CommitAllResult,
    GeneratedIngredient,
    GeneratedShoppingList,
    ManualShoppingList,
    ShoppingListItem,
)
from app.services.aggregation import aggregate_ingredients, distinct_recipe_ids
from app.services.errors import InvalidInputError
from app.services.meal_plans import get_active_meal_plan, get_plan_entries
from app.services.recipes import get_ingredients_by_recipe
from app.services.supabase import TABLES, first_row

logger = logging.getLogger(__name__)


# ============================================================================
# Generated List
# ============================================================================

async def generate_shopping_list(client: Client, user_id: str) -> GeneratedShoppingList:
    """Aggregate ingredients for every meal in the user's active plan.

    No plan or no entries yields an empty list. Any query failure propagates,
    so callers never see a partially aggregated list.
    """
    plan = await get_active_meal_plan(client, user_id)
    if plan is None:
        return GeneratedShoppingList()

    entries = await get_plan_entries(client, plan)
    recipe_ids = distinct_recipe_ids(entries)
    if not recipe_ids:
        return GeneratedShoppingList(meal_plan=plan, entry_count=len(entries))

    ingredients_by_recipe = await get_ingredients_by_recipe(client, recipe_ids)
    ingredients = aggregate_ingredients(entries, ingredients_by_recipe)

    logger.info(
        f"Generated {len(ingredients)} ingredients from {len(entries)} entries "
        f"({len(recipe_ids)} recipes) for plan {plan.id}"
    )

    return GeneratedShoppingList(
        meal_plan=plan,
        ingredients=ingredients,
        entry_count=len(entries),
        recipe_count=len(recipe_ids),
    )


# ============================================================================
# Manual List
# ============================================================================

async def get_or_create_manual_list(client: Client, user_id: str) -> str:
    """Get the user's manual list ID, creating the list on first use."""
    result = (
        client.table(TABLES["shopping_lists"])
        .select("id")
        .eq("user_id", user_id)
        .is_("meal_plan_id", "null")
        .limit(1)
        .execute()
    )
    row = first_row(result)
    if row:
        return row["id"]

    result = (
        client.table(TABLES["shopping_lists"])
        .insert({"user_id": user_id, "name": MANUAL_LIST_NAME})
        .execute()
    )
    row = first_row(result)
    if not row:
        raise ValueError("Failed to create shopping list")

    logger.info(f"Created manual shopping list {row['id']} for user {user_id[:8]}")
    return row["id"]


async def get_manual_list(client: Client, user_id: str) -> ManualShoppingList:
    """Get the manual list with its items and purchase progress."""
    list_id = await get_or_create_manual_list(client, user_id)

    result = (
        client.table(TABLES["shopping_list_items"])
        .select("*")
        .eq("shopping_list_id", list_id)
        .execute()
    )
    items = [ShoppingListItem(**row) for row in result.data or []]

    return ManualShoppingList(
        id=list_id,
        items=items,
        purchased_count=sum(1 for item in items if item.is_purchased),
        total_count=len(items),
    )


def _item_row(list_id: str, product_name: str, quantity: Decimal, unit: str) -> dict:
    return {
        "shopping_list_id": list_id,
        "product_name": product_name,
        "quantity": float(quantity),
        "unit": unit,
        "is_purchased": False,
    }


async def add_item(client: Client, user_id: str, request: AddItemRequest) -> ShoppingListItem:
    """Add a product to the manual list."""
    product_name = request.product_name.strip()
    if not product_name:
        raise InvalidInputError("Please enter an item name")

    list_id = await get_or_create_manual_list(client, user_id)
    result = (
        client.table(TABLES["shopping_list_items"])
        .insert(_item_row(list_id, product_name, request.quantity, request.unit))
        .execute()
    )
    row = first_row(result)
    if not row:
        raise ValueError("Failed to add item")

    logger.info(f"Added '{product_name}' to shopping list {list_id}")
    return ShoppingListItem(**row)


async def _get_owned_item(client: Client, user_id: str, item_id: str) -> ShoppingListItem:
    """Load an item, verifying it sits on one of the user's lists."""
    result = (
        client.table(TABLES["shopping_list_items"])
        .select("*, shopping_lists!inner(user_id)")
        .eq("id", item_id)
        .eq("shopping_lists.user_id", user_id)
        .limit(1)
        .execute()
    )
    row = first_row(result)
    if not row:
        raise ValueError(f"Shopping list item {item_id} not found")
    return ShoppingListItem(**row)


async def set_item_purchased(
    client: Client,
    user_id: str,
    item_id: str,
    is_purchased: bool,
) -> ShoppingListItem:
    """Set an item's purchased flag.

    Raises:
        ValueError: If the item is not on the user's lists
    """
    item = await _get_owned_item(client, user_id, item_id)

    client.table(TABLES["shopping_list_items"]).update(
        {"is_purchased": is_purchased}
    ).eq("id", item_id).execute()
    logger.info(f"Updated item {item_id} is_purchased={is_purchased}")

    return item.model_copy(update={"is_purchased": is_purchased})


async def toggle_item(client: Client, user_id: str, item_id: str) -> ShoppingListItem:
    """Flip an item's purchased flag."""
    item = await _get_owned_item(client, user_id, item_id)
    return await set_item_purchased(client, user_id, item_id, not item.is_purchased)


async def remove_item(client: Client, user_id: str, item_id: str) -> bool:
    """Remove an item from the user's list."""
    await _get_owned_item(client, user_id, item_id)

    client.table(TABLES["shopping_list_items"]).delete().eq("id", item_id).execute()
    logger.info(f"Removed item {item_id}")
    return True


# ============================================================================
# Committing Generated Ingredients
# ============================================================================

async def add_generated_ingredient(
    client: Client,
    user_id: str,
    ingredient: GeneratedIngredient,
) -> ShoppingListItem:
    """Copy one generated ingredient onto the manual list.

    The generated list is unaffected; it is derived from the plan alone.
    """
    list_id = await get_or_create_manual_list(client, user_id)
    result = (
        client.table(TABLES["shopping_list_items"])
        .insert(_item_row(list_id, ingredient.name, ingredient.quantity, ingredient.unit))
        .execute()
    )
    row = first_row(result)
    if not row:
        raise ValueError("Failed to add ingredient")

    logger.info(f"Committed '{ingredient.name}' to shopping list {list_id}")
    return ShoppingListItem(**row)


async def add_all_generated_ingredients(
    client: Client,
    user_id: str,
    ingredients: list[GeneratedIngredient],
) -> CommitAllResult:
    """Copy every generated ingredient onto the manual list in one insert."""
    list_id = await get_or_create_manual_list(client, user_id)
    if not ingredients:
        return CommitAllResult(shopping_list_id=list_id)

    rows = [_item_row(list_id, i.name, i.quantity, i.unit) for i in ingredients]
    result = client.table(TABLES["shopping_list_items"]).insert(rows).execute()

    added = len(result.data or [])
    logger.info(f"Committed {added} ingredients to shopping list {list_id}")
    return CommitAllResult(shopping_list_id=list_id, items_added=added)
