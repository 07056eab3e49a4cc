"""
Recipe service.

Handles:
- Browsing public, own and selectable recipes with filters
- Recipe authoring (details, ingredients, steps, tags, inline image)
- Copying a public recipe into the user's collection
- Batched ingredient lookup for shopping list aggregation
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Optional

from supabase import Client

from app.config import get_settings
from app.models.recipes import (
    AddIngredientRequest,
    AddStepRequest,
    AddTagRequest,
    Category,
    CategoryList,
    Recipe,
    RecipeData,
    RecipeDetail,
    RecipeFilters,
    RecipeIngredient,
    RecipeStep,
    RecipeSummary,
    RecipeTag,
)
from app.services.errors import InvalidInputError
from app.services.images import validate_image_data_url
from app.services.supabase import TABLES, first_row

logger = logging.getLogger(__name__)

# Max IDs per `in` filter, keeps the request URL short
_IN_BATCH_SIZE = 100

DEFAULT_INGREDIENT_SUGGESTIONS = [
    "Tomato", "Onion", "Garlic", "Bell Pepper", "Carrot", "Broccoli", "Spinach", "Mushroom",
    "Chicken Breast", "Ground Beef", "Salmon", "Shrimp", "Tofu",
    "Pasta", "Rice", "Flour", "Bread", "Potato",
    "Olive Oil", "Butter", "Milk", "Cream", "Cheese", "Egg",
    "Lemon", "Lime", "Orange",
    "Salt", "Pepper", "Soy Sauce", "Ginger", "Basil", "Oregano", "Thyme", "Paprika", "Cumin",
]

# Category name fragment -> ingredient name fragments
CATEGORY_KEYWORDS = {
    "vegetable": ["tomato", "onion", "carrot", "broccoli", "spinach", "pepper"],
    "meat": ["chicken", "beef", "pork", "lamb"],
    "dairy": ["milk", "cheese", "butter", "cream", "yogurt"],
    "grain": ["rice", "pasta", "bread", "flour"],
    "spice": ["salt", "pepper", "cumin", "paprika", "oregano", "basil"],
}


# ============================================================================
# Browsing
# ============================================================================

def _apply_filters(query, filters: RecipeFilters):
    if filters.search:
        query = query.ilike("title", f"%{filters.search}%")
    if filters.max_calories < 1000:
        query = query.lte("calories_per_serving", filters.max_calories)
    if filters.max_prep_time < 120:
        query = query.lte("prep_time", filters.max_prep_time)
    if filters.servings > 0:
        query = query.eq("servings", filters.servings)
    return query


async def list_public_recipes(
    client: Client,
    user_id: str,
    filters: Optional[RecipeFilters] = None,
) -> list[Recipe]:
    """Public recipes from other users and the built-in collection."""
    query = (
        client.table(TABLES["recipes"])
        .select("*")
        .eq("is_public", True)
        .or_(f"user_id.is.null,user_id.neq.{user_id}")
    )
    query = _apply_filters(query, filters or RecipeFilters())
    result = query.order("title").execute()
    return [Recipe(**row) for row in result.data or []]


async def list_my_recipes(
    client: Client,
    user_id: str,
    filters: Optional[RecipeFilters] = None,
) -> list[Recipe]:
    """The user's own recipes."""
    query = client.table(TABLES["recipes"]).select("*").eq("user_id", user_id)
    query = _apply_filters(query, filters or RecipeFilters())
    result = query.order("title").execute()
    return [Recipe(**row) for row in result.data or []]


async def list_selectable_recipes(
    client: Client,
    user_id: str,
    search: Optional[str] = None,
) -> list[RecipeSummary]:
    """Recipes the user can put on the calendar (public or their own)."""
    query = (
        client.table(TABLES["recipes"])
        .select("id, title")
        .or_(f"is_public.eq.true,user_id.eq.{user_id}")
    )
    if search and search.strip():
        query = query.ilike("title", f"%{search.strip()}%")
    result = query.order("title").execute()
    return [RecipeSummary(**row) for row in result.data or []]


async def get_recipe(client: Client, recipe_id: str) -> Recipe:
    """Get a recipe by ID.

    Raises:
        ValueError: If the recipe does not exist
    """
    result = (
        client.table(TABLES["recipes"])
        .select("*")
        .eq("id", recipe_id)
        .limit(1)
        .execute()
    )
    row = first_row(result)
    if not row:
        raise ValueError(f"Recipe {recipe_id} not found")
    return Recipe(**row)


def is_visible_to(recipe: Recipe, user_id: str) -> bool:
    """Public and system recipes are visible to everyone, private ones to their owner."""
    return recipe.is_public or recipe.user_id is None or recipe.user_id == user_id


async def get_visible_recipe(client: Client, user_id: str, recipe_id: str) -> Recipe:
    """Get a recipe the user may read.

    Raises:
        ValueError: If the recipe does not exist or is another user's private recipe
    """
    recipe = await get_recipe(client, recipe_id)
    if not is_visible_to(recipe, user_id):
        raise ValueError(f"Recipe {recipe_id} not found")
    return recipe


async def get_recipe_detail(client: Client, user_id: str, recipe_id: str) -> RecipeDetail:
    """Get a visible recipe with its ingredients, ordered steps and tags."""
    recipe = await get_visible_recipe(client, user_id, recipe_id)

    ingredients = (
        client.table(TABLES["recipe_ingredients"]).select("*").eq("recipe_id", recipe_id).execute()
    )
    steps = (
        client.table(TABLES["recipe_steps"])
        .select("*")
        .eq("recipe_id", recipe_id)
        .order("step_number")
        .execute()
    )
    tags = client.table(TABLES["recipe_tags"]).select("*").eq("recipe_id", recipe_id).execute()

    return RecipeDetail(
        recipe=recipe,
        ingredients=[RecipeIngredient(**row) for row in ingredients.data or []],
        steps=[RecipeStep(**row) for row in steps.data or []],
        tags=[RecipeTag(**row) for row in tags.data or []],
    )


async def get_ingredients_by_recipe(
    client: Client,
    recipe_ids: list[str],
) -> dict[str, list[RecipeIngredient]]:
    """Load ingredients for many recipes, one query per batch of IDs.

    Every requested ID is present in the result, possibly with an empty list.
    """
    by_recipe: dict[str, list[RecipeIngredient]] = {rid: [] for rid in recipe_ids}
    unique_ids = list(by_recipe)

    for i in range(0, len(unique_ids), _IN_BATCH_SIZE):
        batch = unique_ids[i:i + _IN_BATCH_SIZE]
        result = (
            client.table(TABLES["recipe_ingredients"])
            .select("recipe_id, ingredient_name, quantity, unit")
            .in_("recipe_id", batch)
            .execute()
        )
        for row in result.data or []:
            by_recipe.setdefault(row["recipe_id"], []).append(RecipeIngredient(**row))

    return by_recipe


async def get_ingredient_suggestions(client: Client) -> list[str]:
    """Ingredient names already used in recipes, merged with common staples."""
    limit = get_settings().ingredient_suggestion_limit
    result = (
        client.table(TABLES["recipe_ingredients"])
        .select("ingredient_name")
        .limit(limit)
        .execute()
    )
    names = {row["ingredient_name"] for row in result.data or [] if row.get("ingredient_name")}
    names.update(DEFAULT_INGREDIENT_SUGGESTIONS)
    return sorted(names)


async def list_categories(client: Client) -> CategoryList:
    """Recipe and ingredient categories, ordered by name."""
    recipe_cats = client.table(TABLES["recipe_categories"]).select("id, name").order("name").execute()
    ingredient_cats = (
        client.table(TABLES["ingredient_categories"]).select("id, name").order("name").execute()
    )
    return CategoryList(
        recipe_categories=[Category(**row) for row in recipe_cats.data or []],
        ingredient_categories=[Category(**row) for row in ingredient_cats.data or []],
    )


def guess_ingredient_category(name: str, categories: list[Category]) -> Optional[str]:
    """Pick the first category whose family keywords appear in the ingredient name."""
    ingredient = name.lower()
    for category in categories:
        category_name = category.name.lower()
        for family, keywords in CATEGORY_KEYWORDS.items():
            if family in category_name and any(k in ingredient for k in keywords):
                return category.id
    return None


# ============================================================================
# Authoring
# ============================================================================

async def _get_owned_recipe(client: Client, user_id: str, recipe_id: str) -> Recipe:
    recipe = await get_recipe(client, recipe_id)
    if recipe.user_id != user_id:
        raise ValueError(f"Recipe {recipe_id} not found")
    return recipe


def _recipe_row(data: RecipeData) -> dict:
    title = data.title.strip()
    if not title:
        raise InvalidInputError("Please enter a recipe title")

    row = data.model_dump()
    row["title"] = title
    if data.image_url:
        validate_image_data_url(data.image_url)
    return row


async def create_recipe(client: Client, user_id: str, data: Optional[RecipeData] = None) -> Recipe:
    """Create a recipe owned by the user (a private draft by default)."""
    row = _recipe_row(data or RecipeData())
    row["user_id"] = user_id

    result = client.table(TABLES["recipes"]).insert(row).execute()
    created = first_row(result)
    if not created:
        raise ValueError("Failed to create recipe")

    logger.info(f"Created recipe {created['id']} for user {user_id[:8]}")
    return Recipe(**created)


async def update_recipe(client: Client, user_id: str, recipe_id: str, data: RecipeData) -> Recipe:
    """Save the editor's detail fields for a recipe the user owns."""
    await _get_owned_recipe(client, user_id, recipe_id)

    row = _recipe_row(data)
    row["updated_at"] = datetime.utcnow().isoformat()

    result = client.table(TABLES["recipes"]).update(row).eq("id", recipe_id).execute()
    updated = first_row(result)
    logger.info(f"Updated recipe {recipe_id}")

    if updated:
        return Recipe(**updated)
    return Recipe(id=recipe_id, user_id=user_id, **data.model_dump())


async def delete_recipe(client: Client, user_id: str, recipe_id: str) -> bool:
    """Delete a recipe the user owns, children first."""
    await _get_owned_recipe(client, user_id, recipe_id)

    for table in ("recipe_ingredients", "recipe_steps", "recipe_tags"):
        client.table(TABLES[table]).delete().eq("recipe_id", recipe_id).execute()
    client.table(TABLES["recipes"]).delete().eq("id", recipe_id).execute()

    logger.info(f"Deleted recipe {recipe_id}")
    return True


async def copy_recipe(client: Client, user_id: str, recipe_id: str) -> Recipe:
    """Copy a recipe and its children into the user's private collection."""
    detail = await get_recipe_detail(client, user_id, recipe_id)
    source = detail.recipe

    result = (
        client.table(TABLES["recipes"])
        .insert({
            "user_id": user_id,
            "title": f"{source.title} (Copy)",
            "description": source.description,
            "prep_time": source.prep_time,
            "cook_time": source.cook_time,
            "servings": source.servings,
            "calories_per_serving": source.calories_per_serving,
            "image_url": source.image_url,
            "category_id": source.category_id,
            "is_public": False,
        })
        .execute()
    )
    created = first_row(result)
    if not created:
        raise ValueError("Failed to copy recipe")
    new_id = created["id"]

    if detail.ingredients:
        client.table(TABLES["recipe_ingredients"]).insert([
            {
                "recipe_id": new_id,
                "ingredient_name": ing.ingredient_name,
                "quantity": float(ing.quantity),
                "unit": ing.unit,
            }
            for ing in detail.ingredients
        ]).execute()

    if detail.steps:
        client.table(TABLES["recipe_steps"]).insert([
            {"recipe_id": new_id, "step_number": step.step_number, "instruction": step.instruction}
            for step in detail.steps
        ]).execute()

    if detail.tags:
        client.table(TABLES["recipe_tags"]).insert([
            {"recipe_id": new_id, "tag_name": tag.tag_name}
            for tag in detail.tags
        ]).execute()

    logger.info(f"Copied recipe {recipe_id} to {new_id} for user {user_id[:8]}")
    return Recipe(**created)


async def add_ingredient(
    client: Client,
    user_id: str,
    recipe_id: str,
    request: AddIngredientRequest,
) -> RecipeIngredient:
    """Add an ingredient line, tagging it with a guessed category."""
    name = request.ingredient_name.strip()
    if not name:
        raise InvalidInputError("Please enter ingredient name")
    if request.quantity <= 0:
        raise InvalidInputError("Quantity must be greater than zero")

    await _get_owned_recipe(client, user_id, recipe_id)

    categories = await list_categories(client)
    category_id = guess_ingredient_category(name, categories.ingredient_categories)

    result = (
        client.table(TABLES["recipe_ingredients"])
        .insert({
            "recipe_id": recipe_id,
            "ingredient_name": name,
            "quantity": float(request.quantity),
            "unit": request.unit.strip() or "pcs",
            "category_id": category_id,
        })
        .execute()
    )
    row = first_row(result)
    if not row:
        raise ValueError("Failed to add ingredient")
    return RecipeIngredient(**row)


async def remove_ingredient(client: Client, user_id: str, recipe_id: str, ingredient_id: str) -> bool:
    await _get_owned_recipe(client, user_id, recipe_id)
    client.table(TABLES["recipe_ingredients"]).delete().eq("id", ingredient_id).eq(
        "recipe_id", recipe_id
    ).execute()
    return True


async def add_step(client: Client, user_id: str, recipe_id: str, request: AddStepRequest) -> RecipeStep:
    """Append a step after the current last one."""
    instruction = request.instruction.strip()
    if not instruction:
        raise InvalidInputError("Please enter step description")

    await _get_owned_recipe(client, user_id, recipe_id)

    existing = (
        client.table(TABLES["recipe_steps"]).select("step_number").eq("recipe_id", recipe_id).execute()
    )
    numbers = [row.get("step_number") or 0 for row in existing.data or []]
    step_number = max(numbers, default=0) + 1

    result = (
        client.table(TABLES["recipe_steps"])
        .insert({"recipe_id": recipe_id, "step_number": step_number, "instruction": instruction})
        .execute()
    )
    row = first_row(result)
    if not row:
        raise ValueError("Failed to add step")
    return RecipeStep(**row)


async def remove_step(client: Client, user_id: str, recipe_id: str, step_id: str) -> bool:
    await _get_owned_recipe(client, user_id, recipe_id)
    client.table(TABLES["recipe_steps"]).delete().eq("id", step_id).eq("recipe_id", recipe_id).execute()
    return True


async def add_tag(client: Client, user_id: str, recipe_id: str, request: AddTagRequest) -> RecipeTag:
    tag_name = request.tag_name.strip()
    if not tag_name:
        raise InvalidInputError("Please enter a tag")

    await _get_owned_recipe(client, user_id, recipe_id)

    result = (
        client.table(TABLES["recipe_tags"])
        .insert({"recipe_id": recipe_id, "tag_name": tag_name})
        .execute()
    )
    row = first_row(result)
    if not row:
        raise ValueError("Failed to add tag")
    return RecipeTag(**row)


async def remove_tag(client: Client, user_id: str, recipe_id: str, tag_id: str) -> bool:
    await _get_owned_recipe(client, user_id, recipe_id)
    client.table(TABLES["recipe_tags"]).delete().eq("id", tag_id).eq("recipe_id", recipe_id).execute()
    return True
