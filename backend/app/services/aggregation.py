"""
Ingredient aggregation for shopping lists.

Turns the meal entries of a plan into one line per (ingredient, unit):
- Ingredient names are grouped case-insensitively
- Units are kept as written ("g" and "kg" stay separate lines)
- Quantities are scaled by each entry's servings and summed
- Contributing recipe titles are listed once per line
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal

from app.models.meal_plans import MealPlanEntry
from app.models.recipes import RecipeIngredient
from app.models.shopping import GeneratedIngredient

logger = logging.getLogger(__name__)

UNKNOWN_RECIPE_TITLE = "Unknown Recipe"


def ingredient_key(ingredient: RecipeIngredient) -> tuple[str, str]:
    """Grouping key: lower-cased name plus the exact unit string."""
    return (ingredient.ingredient_name.lower(), ingredient.unit)


def distinct_recipe_ids(entries: Iterable[MealPlanEntry]) -> list[str]:
    """Recipe IDs referenced by the entries, first-seen order, no repeats."""
    return list(dict.fromkeys(e.recipe_id for e in entries if e.recipe_id))


def aggregate_ingredients(
    entries: Sequence[MealPlanEntry],
    ingredients_by_recipe: Mapping[str, Sequence[RecipeIngredient]],
) -> list[GeneratedIngredient]:
    """Sum recipe ingredients across planned meals.

    Each (entry, ingredient) pair contributes ``quantity * servings``, so a
    recipe planned twice is counted twice while its title is listed once.
    Entries without a recipe are skipped. The result is sorted by display
    name; the display name and unit come from the first ingredient seen for
    a given key.
    """
    buckets: dict[tuple[str, str], GeneratedIngredient] = {}

    for entry in entries:
        if not entry.recipe_id:
            continue

        title = entry.recipe_title or UNKNOWN_RECIPE_TITLE
        servings = Decimal(entry.servings)

        for ingredient in ingredients_by_recipe.get(entry.recipe_id, ()):
            key = ingredient_key(ingredient)
            bucket = buckets.get(key)
            if bucket is None:
                bucket = GeneratedIngredient(
                    name=ingredient.ingredient_name,
                    quantity=Decimal("0"),
                    unit=ingredient.unit,
                )
                buckets[key] = bucket

            bucket.quantity += ingredient.quantity * servings
            if title not in bucket.recipes:
                bucket.recipes.append(title)

    result = sorted(buckets.values(), key=lambda i: (i.name.casefold(), i.name, i.unit))
    logger.debug(f"Aggregated {len(entries)} entries into {len(result)} ingredients")
    return result
