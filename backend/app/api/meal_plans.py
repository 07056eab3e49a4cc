"""
Meal plan API endpoints.

Provides the weekly planner calendar and today's meals.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from supabase import Client

from app.api.deps import get_current_user_id, get_db
from app.models.meal_plans import (
    AddMealEntryRequest,
    CreateMealPlanRequest,
    MealPlan,
    MealPlanEntry,
    WeekView,
)
from app.services.errors import InvalidInputError
from app.services.meal_plans import (
    add_meal_entry,
    create_meal_plan,
    get_active_meal_plan,
    get_entries_for_date,
    get_meal_plan,
    get_plan_entries,
    get_week_view,
    remove_meal_entry,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/meal-plans", tags=["meal-plans"])


@router.get("/active", response_model=Optional[MealPlan])
async def get_active_plan(
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> Optional[MealPlan]:
    """Get the most recently started plan (null when the user has none)."""
    try:
        return await get_active_meal_plan(client, user_id)
    except Exception:
        logger.exception("Error fetching meal plan")
        raise HTTPException(status_code=500, detail="Failed to load meal plan")


@router.post("", response_model=MealPlan)
async def create_plan(
    request: CreateMealPlanRequest,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> MealPlan:
    """Start a new plan covering one week from today."""
    try:
        return await create_meal_plan(client, user_id, request)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Error creating meal plan")
        raise HTTPException(status_code=500, detail="Failed to create meal plan")


@router.get("/week", response_model=WeekView)
async def get_week(
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> WeekView:
    """Get the active plan laid out day by day."""
    try:
        return await get_week_view(client, user_id)
    except Exception:
        logger.exception("Error fetching meals")
        raise HTTPException(status_code=500, detail="Failed to load meal plan")


@router.get("/today", response_model=list[MealPlanEntry])
async def get_todays_meals(
    day: Optional[date] = Query(None, description="Defaults to today"),
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> list[MealPlanEntry]:
    """Get the meals planned for one day."""
    try:
        return await get_entries_for_date(client, user_id, day or date.today())
    except Exception:
        logger.exception("Error fetching meals")
        raise HTTPException(status_code=500, detail="Failed to load meals")


@router.get("/{plan_id}/entries", response_model=list[MealPlanEntry])
async def get_entries(
    plan_id: str,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> list[MealPlanEntry]:
    """Get all entries within a plan's date range."""
    try:
        plan = await get_meal_plan(client, user_id, plan_id)
        return await get_plan_entries(client, plan)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error fetching meals")
        raise HTTPException(status_code=500, detail="Failed to load meals")


@router.post("/entries", response_model=MealPlanEntry)
async def add_entry(
    request: AddMealEntryRequest,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> MealPlanEntry:
    """Add a recipe to a date and meal slot."""
    try:
        return await add_meal_entry(client, user_id, request)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error adding meal")
        raise HTTPException(status_code=500, detail="Failed to add meal")


@router.delete("/entries/{entry_id}", response_model=dict)
async def delete_entry(
    entry_id: str,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> dict:
    """Remove a meal from the calendar."""
    try:
        success = await remove_meal_entry(client, user_id, entry_id)
        return {"success": success, "deleted": entry_id}
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error removing meal")
        raise HTTPException(status_code=500, detail="Failed to remove meal")
