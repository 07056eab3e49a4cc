"""Pydantic models for mealplan-api."""

from .meal_plans import (
    MealType,
    MealPlan,
    MealPlanEntry,
    CreateMealPlanRequest,
    AddMealEntryRequest,
    DayMeals,
    WeekView,
)
from .recipes import (
    Recipe,
    RecipeSummary,
    RecipeIngredient,
    RecipeStep,
    RecipeTag,
    RecipeDetail,
    RecipeFilters,
    RecipeData,
)
from .shopping import (
    GeneratedIngredient,
    GeneratedShoppingList,
    ShoppingListItem,
    ManualShoppingList,
    AddItemRequest,
)
from .profiles import (
    Profile,
    SaveProfileRequest,
)

__all__ = [
    # Meal plans
    "MealType",
    "MealPlan",
    "MealPlanEntry",
    "CreateMealPlanRequest",
    "AddMealEntryRequest",
    "DayMeals",
    "WeekView",
    # Recipes
    "Recipe",
    "RecipeSummary",
    "RecipeIngredient",
    "RecipeStep",
    "RecipeTag",
    "RecipeDetail",
    "RecipeFilters",
    "RecipeData",
    # Shopping
    "GeneratedIngredient",
    "GeneratedShoppingList",
    "ShoppingListItem",
    "ManualShoppingList",
    "AddItemRequest",
    # Profiles
    "Profile",
    "SaveProfileRequest",
]
