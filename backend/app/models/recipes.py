"""Recipe-related Pydantic models."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """Convert a JSON number (or numeric string) to an exact Decimal."""
    if value is None or value == "":
        return default
    if isinstance(value, Decimal):
        return value
    try:
        # Go through str() so 0.1 stays 0.1 instead of its binary expansion
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default


def quantity_to_number(value: Decimal) -> float:
    """JSON clients get quantities as numbers, not Decimal strings."""
    return float(value)


class Recipe(BaseModel):
    """A recipe row."""

    id: str
    user_id: Optional[str] = None
    title: str
    description: Optional[str] = ""
    image_url: Optional[str] = None
    prep_time: int = 0
    cook_time: int = 0
    servings: int = 1
    calories_per_serving: int = 0
    category_id: Optional[str] = None
    is_public: bool = False

    @field_validator("prep_time", "cook_time", "servings", "calories_per_serving", mode="before")
    @classmethod
    def _null_to_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("is_public", mode="before")
    @classmethod
    def _null_to_false(cls, value: Any) -> Any:
        return bool(value)


class RecipeSummary(BaseModel):
    """Recipe reference used by the meal picker."""

    id: str
    title: str


class RecipeIngredient(BaseModel):
    """One ingredient line of a recipe."""

    id: Optional[str] = None
    recipe_id: Optional[str] = None
    ingredient_name: str
    quantity: Decimal = Decimal("1")
    unit: str = "pcs"
    category_id: Optional[str] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _parse_quantity(cls, value: Any) -> Decimal:
        return to_decimal(value)

    @field_serializer("quantity", when_used="json")
    def _quantity_json(self, value: Decimal) -> float:
        return quantity_to_number(value)

    @field_validator("unit", mode="before")
    @classmethod
    def _null_unit(cls, value: Any) -> str:
        return "" if value is None else str(value)


class RecipeStep(BaseModel):
    id: Optional[str] = None
    recipe_id: Optional[str] = None
    step_number: int
    instruction: str


class RecipeTag(BaseModel):
    id: Optional[str] = None
    recipe_id: Optional[str] = None
    tag_name: str


class Category(BaseModel):
    id: str
    name: str


class RecipeDetail(BaseModel):
    """Recipe with all child records."""

    recipe: Recipe
    ingredients: list[RecipeIngredient] = Field(default_factory=list)
    steps: list[RecipeStep] = Field(default_factory=list)
    tags: list[RecipeTag] = Field(default_factory=list)


class RecipeFilters(BaseModel):
    """Browse filters from the recipes tab.

    The sliders' maximum positions mean "no limit", so ``max_calories`` only
    applies below 1000, ``max_prep_time`` below 120 and ``servings`` above 0.
    """

    search: Optional[str] = None
    max_calories: int = 1000
    max_prep_time: int = 120
    servings: int = 0


class RecipeData(BaseModel):
    """Editable recipe fields."""

    title: str = "New Recipe"
    description: str = ""
    image_url: Optional[str] = None
    prep_time: int = Field(default=15, ge=0)
    cook_time: int = Field(default=30, ge=0)
    servings: int = Field(default=4, ge=1)
    calories_per_serving: int = Field(default=300, ge=0)
    category_id: Optional[str] = None
    is_public: bool = False


class AddIngredientRequest(BaseModel):
    ingredient_name: str
    quantity: Decimal = Decimal("1")
    unit: str = "pcs"

    @field_validator("quantity", mode="before")
    @classmethod
    def _parse_quantity(cls, value: Any) -> Decimal:
        return to_decimal(value, default=Decimal("1"))


class AddStepRequest(BaseModel):
    instruction: str


class AddTagRequest(BaseModel):
    tag_name: str


class CategoryList(BaseModel):
    recipe_categories: list[Category] = Field(default_factory=list)
    ingredient_categories: list[Category] = Field(default_factory=list)
