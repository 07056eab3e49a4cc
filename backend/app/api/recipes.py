"""
Recipe API endpoints.

Provides recipe browsing, authoring and copying.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from supabase import Client

from app.api.deps import get_current_user_id, get_db
from app.models.recipes import (
    AddIngredientRequest,
    AddStepRequest,
    AddTagRequest,
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
from app.services import recipes as recipe_service
from app.services.errors import InvalidInputError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


def _filters(
    search: Optional[str] = Query(None, description="Title contains (case-insensitive)"),
    max_calories: int = Query(1000, ge=0, description="1000 means no limit"),
    max_prep_time: int = Query(120, ge=0, description="120 means no limit"),
    servings: int = Query(0, ge=0, description="0 means any"),
) -> RecipeFilters:
    return RecipeFilters(
        search=search,
        max_calories=max_calories,
        max_prep_time=max_prep_time,
        servings=servings,
    )


# ============================================================================
# Browsing
# ============================================================================

@router.get("/public", response_model=list[Recipe])
async def get_public_recipes(
    filters: RecipeFilters = Depends(_filters),
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> list[Recipe]:
    """Browse public recipes from other users and the built-in collection."""
    try:
        return await recipe_service.list_public_recipes(client, user_id, filters)
    except Exception:
        logger.exception("Error fetching recipes")
        raise HTTPException(status_code=500, detail="Failed to load recipes")


@router.get("/mine", response_model=list[Recipe])
async def get_my_recipes(
    filters: RecipeFilters = Depends(_filters),
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> list[Recipe]:
    """Browse the user's own recipes."""
    try:
        return await recipe_service.list_my_recipes(client, user_id, filters)
    except Exception:
        logger.exception("Error fetching recipes")
        raise HTTPException(status_code=500, detail="Failed to load recipes")


@router.get("/selectable", response_model=list[RecipeSummary])
async def get_selectable_recipes(
    search: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> list[RecipeSummary]:
    """Recipes that can be put on the meal calendar."""
    try:
        return await recipe_service.list_selectable_recipes(client, user_id, search)
    except Exception:
        logger.exception("Error fetching recipes")
        raise HTTPException(status_code=500, detail="Failed to load recipes")


@router.get("/categories", response_model=CategoryList)
async def get_categories(client: Client = Depends(get_db)) -> CategoryList:
    try:
        return await recipe_service.list_categories(client)
    except Exception:
        logger.exception("Error fetching categories")
        raise HTTPException(status_code=500, detail="Failed to load categories")


@router.get("/ingredient-suggestions", response_model=list[str])
async def get_ingredient_suggestions(client: Client = Depends(get_db)) -> list[str]:
    """Ingredient names for the editor's autocomplete."""
    try:
        return await recipe_service.get_ingredient_suggestions(client)
    except Exception:
        logger.exception("Error fetching ingredients")
        raise HTTPException(status_code=500, detail="Failed to load ingredients")


@router.get("/{recipe_id}", response_model=RecipeDetail)
async def get_recipe_detail(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> RecipeDetail:
    """Get a recipe with ingredients, steps and tags (public, built-in or own)."""
    try:
        return await recipe_service.get_recipe_detail(client, user_id, recipe_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error fetching recipe details")
        raise HTTPException(status_code=500, detail="Failed to load recipe details")


# ============================================================================
# Authoring
# ============================================================================

@router.post("", response_model=Recipe)
async def create_recipe(
    data: Optional[RecipeData] = None,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> Recipe:
    """Create a recipe (a private draft with defaults when no body is sent)."""
    try:
        return await recipe_service.create_recipe(client, user_id, data)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Error creating recipe")
        raise HTTPException(status_code=500, detail="Failed to create recipe")


@router.patch("/{recipe_id}", response_model=Recipe)
async def update_recipe(
    recipe_id: str,
    data: RecipeData,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> Recipe:
    try:
        return await recipe_service.update_recipe(client, user_id, recipe_id, data)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error saving recipe")
        raise HTTPException(status_code=500, detail="Failed to save recipe")


@router.delete("/{recipe_id}", response_model=dict)
async def delete_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> dict:
    try:
        success = await recipe_service.delete_recipe(client, user_id, recipe_id)
        return {"success": success, "deleted": recipe_id}
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error deleting recipe")
        raise HTTPException(status_code=500, detail="Failed to delete recipe")


@router.post("/{recipe_id}/copy", response_model=Recipe)
async def copy_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> Recipe:
    """Copy a recipe into the user's collection."""
    try:
        return await recipe_service.copy_recipe(client, user_id, recipe_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error copying recipe")
        raise HTTPException(status_code=500, detail="Failed to copy recipe")


@router.post("/{recipe_id}/ingredients", response_model=RecipeIngredient)
async def add_ingredient(
    recipe_id: str,
    request: AddIngredientRequest,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> RecipeIngredient:
    try:
        return await recipe_service.add_ingredient(client, user_id, recipe_id, request)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error adding ingredient")
        raise HTTPException(status_code=500, detail="Failed to add ingredient")


@router.delete("/{recipe_id}/ingredients/{ingredient_id}", response_model=dict)
async def remove_ingredient(
    recipe_id: str,
    ingredient_id: str,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> dict:
    try:
        success = await recipe_service.remove_ingredient(client, user_id, recipe_id, ingredient_id)
        return {"success": success, "deleted": ingredient_id}
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error removing ingredient")
        raise HTTPException(status_code=500, detail="Failed to remove ingredient")


@router.post("/{recipe_id}/steps", response_model=RecipeStep)
async def add_step(
    recipe_id: str,
    request: AddStepRequest,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> RecipeStep:
    try:
        return await recipe_service.add_step(client, user_id, recipe_id, request)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error adding step")
        raise HTTPException(status_code=500, detail="Failed to add step")


@router.delete("/{recipe_id}/steps/{step_id}", response_model=dict)
async def remove_step(
    recipe_id: str,
    step_id: str,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> dict:
    try:
        success = await recipe_service.remove_step(client, user_id, recipe_id, step_id)
        return {"success": success, "deleted": step_id}
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error removing step")
        raise HTTPException(status_code=500, detail="Failed to remove step")


@router.post("/{recipe_id}/tags", response_model=RecipeTag)
async def add_tag(
    recipe_id: str,
    request: AddTagRequest,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> RecipeTag:
    try:
        return await recipe_service.add_tag(client, user_id, recipe_id, request)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error adding tag")
        raise HTTPException(status_code=500, detail="Failed to add tag")


@router.delete("/{recipe_id}/tags/{tag_id}", response_model=dict)
async def remove_tag(
    recipe_id: str,
    tag_id: str,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> dict:
    try:
        success = await recipe_service.remove_tag(client, user_id, recipe_id, tag_id)
        return {"success": success, "deleted": tag_id}
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error removing tag")
        raise HTTPException(status_code=500, detail="Failed to remove tag")
