"""Supabase client service."""

import logging
from functools import lru_cache

from supabase import create_client, Client

from app.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_supabase_client() -> Client:
    """Get Supabase client with service role key (admin access).

    Used as a FastAPI dependency so services receive the client explicitly.
    """
    settings = get_settings()
    logger.info(f"Creating Supabase client for {settings.supabase_url}")
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
    )


# Table names (match the Next.js app)
TABLES = {
    "profiles": "profiles",
    "recipes": "recipes",
    "recipe_ingredients": "recipe_ingredients",
    "recipe_steps": "recipe_steps",
    "recipe_tags": "recipe_tags",
    "recipe_categories": "recipe_categories",
    "ingredient_categories": "ingredient_categories",
    "meal_plans": "meal_plans",
    "meal_plan_entries": "meal_plan_entries",
    "shopping_lists": "shopping_lists",
    "shopping_list_items": "shopping_list_items",
}


def first_row(result) -> dict | None:
    """Return the first row of a query result, or None when it is empty."""
    if result is None or not result.data:
        return None
    return result.data[0]
