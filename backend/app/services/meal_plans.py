"""
Meal plan service.

Handles:
- Active plan lookup and plan creation
- Calendar entries (add, remove, list by plan or by day)
- Week view grouping for the planner
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Optional

from supabase import Client

from app.config import get_settings
from app.models.meal_plans import (
    MEAL_TYPE_ORDER,
    AddMealEntryRequest,
    CreateMealPlanRequest,
    DayMeals,
    MealPlan,
    MealPlanEntry,
    WeekView,
)
from app.services.errors import InvalidInputError
from app.services.supabase import TABLES, first_row

logger = logging.getLogger(__name__)


def start_of_week(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


# ============================================================================
# Plans
# ============================================================================

async def get_active_meal_plan(client: Client, user_id: str) -> Optional[MealPlan]:
    """Get the user's most recently started plan, or None if they have none."""
    result = (
        client.table(TABLES["meal_plans"])
        .select("*")
        .eq("user_id", user_id)
        .order("start_date", desc=True)
        .limit(1)
        .execute()
    )
    row = first_row(result)
    return MealPlan(**row) if row else None


async def get_meal_plan(client: Client, user_id: str, plan_id: str) -> MealPlan:
    """Get a plan owned by the user.

    Raises:
        ValueError: If the plan does not exist or belongs to someone else
    """
    result = (
        client.table(TABLES["meal_plans"])
        .select("*")
        .eq("id", plan_id)
        .eq("user_id", user_id)
        .limit(1)
        .execute()
    )
    row = first_row(result)
    if not row:
        raise ValueError(f"Meal plan {plan_id} not found")
    return MealPlan(**row)


async def create_meal_plan(
    client: Client,
    user_id: str,
    request: CreateMealPlanRequest,
    today: Optional[date] = None,
) -> MealPlan:
    """Create a plan starting today (or the requested date) for one plan length."""
    name = request.name.strip()
    if not name:
        raise InvalidInputError("Please enter a plan name")

    settings = get_settings()
    start = request.start_date or today or date.today()
    end = start + timedelta(days=settings.plan_length_days - 1)

    result = (
        client.table(TABLES["meal_plans"])
        .insert({
            "user_id": user_id,
            "name": name,
            "start_date": str(start),
            "end_date": str(end),
        })
        .execute()
    )
    row = first_row(result)
    if not row:
        raise ValueError("Failed to create meal plan")

    logger.info(f"Created meal plan {row['id']} for user {user_id[:8]} ({start} to {end})")
    return MealPlan(**row)


async def get_or_create_week_plan(
    client: Client,
    user_id: str,
    today: Optional[date] = None,
) -> MealPlan:
    """Get the plan covering ``today``, creating a Sunday-Saturday plan if none does.

    When several plans cover the day the latest-starting one wins.
    """
    day = today or date.today()

    result = (
        client.table(TABLES["meal_plans"])
        .select("*")
        .eq("user_id", user_id)
        .lte("start_date", str(day))
        .gte("end_date", str(day))
        .order("start_date", desc=True)
        .limit(1)
        .execute()
    )
    row = first_row(result)
    if row:
        return MealPlan(**row)

    week_start = start_of_week(day)
    week_end = week_start + timedelta(days=6)
    result = (
        client.table(TABLES["meal_plans"])
        .insert({
            "user_id": user_id,
            "name": f"Weekly Plan - {week_start.isoformat()}",
            "start_date": str(week_start),
            "end_date": str(week_end),
        })
        .execute()
    )
    row = first_row(result)
    if not row:
        raise ValueError("Could not create meal plan")

    logger.info(f"Created weekly plan {row['id']} for user {user_id[:8]}")
    return MealPlan(**row)


# ============================================================================
# Entries
# ============================================================================

async def get_plan_entries(client: Client, plan: MealPlan) -> list[MealPlanEntry]:
    """Get entries of a plan that fall inside its date range."""
    result = (
        client.table(TABLES["meal_plan_entries"])
        .select("*, recipes(title)")
        .eq("meal_plan_id", plan.id)
        .gte("meal_date", str(plan.start_date))
        .lte("meal_date", str(plan.end_date))
        .order("meal_date")
        .execute()
    )
    entries = [MealPlanEntry.from_row(row) for row in result.data or []]
    entries.sort(key=lambda e: (e.meal_date, MEAL_TYPE_ORDER[e.meal_type]))
    return entries


async def get_entries_for_date(client: Client, user_id: str, day: date) -> list[MealPlanEntry]:
    """Get the user's planned meals for one day across all their plans."""
    result = (
        client.table(TABLES["meal_plan_entries"])
        .select("*, recipes(title), meal_plans!inner(user_id)")
        .eq("meal_date", str(day))
        .eq("meal_plans.user_id", user_id)
        .execute()
    )
    entries = [MealPlanEntry.from_row(row) for row in result.data or []]
    entries.sort(key=lambda e: MEAL_TYPE_ORDER[e.meal_type])
    return entries


async def add_meal_entry(
    client: Client,
    user_id: str,
    request: AddMealEntryRequest,
) -> MealPlanEntry:
    """Put a recipe on the calendar.

    Uses the plan covering the meal date when no plan is given.

    Raises:
        ValueError: If the plan is not the user's
        InvalidInputError: If the date is outside the plan
    """
    if request.meal_plan_id:
        plan = await get_meal_plan(client, user_id, request.meal_plan_id)
    else:
        plan = await get_or_create_week_plan(client, user_id, today=request.meal_date)

    if not plan.contains(request.meal_date):
        raise InvalidInputError(
            f"{request.meal_date} is outside the plan ({plan.start_date} to {plan.end_date})"
        )

    result = (
        client.table(TABLES["meal_plan_entries"])
        .insert({
            "meal_plan_id": plan.id,
            "meal_type": request.meal_type.value,
            "meal_date": str(request.meal_date),
            "recipe_id": request.recipe_id,
            "servings": request.servings,
        })
        .execute()
    )
    row = first_row(result)
    if not row:
        raise ValueError("Failed to add meal")

    logger.info(
        f"Added {request.meal_type.value} on {request.meal_date} to plan {plan.id} "
        f"(recipe {request.recipe_id}, x{request.servings})"
    )
    return MealPlanEntry.from_row(row)


async def remove_meal_entry(client: Client, user_id: str, entry_id: str) -> bool:
    """Remove an entry from one of the user's plans.

    Raises:
        ValueError: If the entry is not found on the user's plans
    """
    result = (
        client.table(TABLES["meal_plan_entries"])
        .select("id, meal_plans!inner(user_id)")
        .eq("id", entry_id)
        .eq("meal_plans.user_id", user_id)
        .limit(1)
        .execute()
    )
    if not first_row(result):
        raise ValueError(f"Meal entry {entry_id} not found")

    client.table(TABLES["meal_plan_entries"]).delete().eq("id", entry_id).execute()
    logger.info(f"Removed meal entry {entry_id}")
    return True


# ============================================================================
# Week View
# ============================================================================

def group_entries_by_day(plan: MealPlan, entries: list[MealPlanEntry]) -> list[DayMeals]:
    """Lay entries out over every day of the plan, keyed by meal type."""
    by_day: dict[date, dict[str, list[MealPlanEntry]]] = defaultdict(lambda: defaultdict(list))
    for entry in entries:
        by_day[entry.meal_date][entry.meal_type.value].append(entry)

    days = []
    current = plan.start_date
    while current <= plan.end_date:
        days.append(DayMeals(day=current, meals=dict(by_day.get(current, {}))))
        current += timedelta(days=1)
    return days


async def get_week_view(client: Client, user_id: str) -> WeekView:
    """Get the active plan laid out as a calendar."""
    plan = await get_active_meal_plan(client, user_id)
    if plan is None:
        return WeekView()

    entries = await get_plan_entries(client, plan)
    return WeekView(
        meal_plan=plan,
        days=group_entries_by_day(plan, entries),
        entry_count=len(entries),
    )
