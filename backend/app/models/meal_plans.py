"""Meal planning Pydantic models."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class MealType(str, Enum):
    """Meal slots in a day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


MEAL_TYPE_ORDER = {
    MealType.BREAKFAST: 1,
    MealType.LUNCH: 2,
    MealType.DINNER: 3,
    MealType.SNACK: 4,
}


def coerce_servings(value: Any) -> int:
    """Parse a servings count, falling back to 1 for absent or invalid values."""
    try:
        servings = int(value)
    except (TypeError, ValueError):
        return 1
    return servings if servings >= 1 else 1


class MealPlan(BaseModel):
    """A dated meal plan owned by a user."""

    id: str
    user_id: str
    name: str = ""
    start_date: date
    end_date: date

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


class MealPlanEntry(BaseModel):
    """A single planned meal."""

    id: Optional[str] = None
    meal_plan_id: Optional[str] = None
    meal_date: date
    meal_type: MealType
    recipe_id: Optional[str] = None
    recipe_title: Optional[str] = None
    servings: int = 1

    @field_validator("servings", mode="before")
    @classmethod
    def _default_servings(cls, value: Any) -> int:
        return coerce_servings(value)

    @classmethod
    def from_row(cls, row: dict) -> "MealPlanEntry":
        """Build an entry from a row joined with ``recipes(title)``."""
        recipe = row.get("recipes") or {}
        return cls(
            id=row.get("id"),
            meal_plan_id=row.get("meal_plan_id"),
            meal_date=row["meal_date"],
            meal_type=row["meal_type"],
            recipe_id=row.get("recipe_id"),
            recipe_title=recipe.get("title") if isinstance(recipe, dict) else None,
            servings=row.get("servings"),
        )


class CreateMealPlanRequest(BaseModel):
    """Request to start a new meal plan."""

    name: str
    start_date: Optional[date] = None


class AddMealEntryRequest(BaseModel):
    """Request to put a recipe on the calendar."""

    meal_plan_id: Optional[str] = None  # Current week plan when omitted
    meal_date: date
    meal_type: MealType
    recipe_id: str
    servings: int = 1

    @field_validator("servings", mode="before")
    @classmethod
    def _default_servings(cls, value: Any) -> int:
        return coerce_servings(value)


class DayMeals(BaseModel):
    """All entries planned for one day, keyed by meal type."""

    day: date
    meals: dict[str, list[MealPlanEntry]] = Field(default_factory=dict)


class WeekView(BaseModel):
    """Calendar view of the active plan."""

    meal_plan: Optional[MealPlan] = None
    days: list[DayMeals] = Field(default_factory=list)
    entry_count: int = 0
