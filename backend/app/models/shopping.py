"""Shopping list Pydantic models."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from .meal_plans import MealPlan
from .recipes import quantity_to_number, to_decimal


# Units offered by the shopping list form. Free-text units are still accepted.
KNOWN_UNITS = ["pcs", "kg", "g", "l", "ml", "lbs", "oz", "tbsp", "tsp", "cup"]

MANUAL_LIST_NAME = "Manual Shopping List"


class GeneratedIngredient(BaseModel):
    """An ingredient total derived from the meal plan (never persisted)."""

    name: str
    quantity: Decimal = Decimal("0")
    unit: str
    recipes: list[str] = Field(default_factory=list)

    @field_serializer("quantity", when_used="json")
    def _quantity_json(self, value: Decimal) -> float:
        return quantity_to_number(value)


class GeneratedShoppingList(BaseModel):
    """Aggregated ingredients for the active meal plan."""

    meal_plan: Optional[MealPlan] = None
    ingredients: list[GeneratedIngredient] = Field(default_factory=list)
    entry_count: int = 0
    recipe_count: int = 0


class ShoppingListItem(BaseModel):
    """An item on the user's manual shopping list."""

    id: str
    shopping_list_id: str
    product_name: str
    quantity: Decimal = Decimal("1")
    unit: str = "pcs"
    is_purchased: bool = False

    @field_validator("quantity", mode="before")
    @classmethod
    def _parse_quantity(cls, value: Any) -> Decimal:
        return to_decimal(value, default=Decimal("1"))

    @field_validator("is_purchased", mode="before")
    @classmethod
    def _null_to_false(cls, value: Any) -> bool:
        return bool(value)

    @field_serializer("quantity", when_used="json")
    def _quantity_json(self, value: Decimal) -> float:
        return quantity_to_number(value)


class ManualShoppingList(BaseModel):
    """The user's singleton manual list with its items."""

    id: str
    name: str = MANUAL_LIST_NAME
    items: list[ShoppingListItem] = Field(default_factory=list)
    purchased_count: int = 0
    total_count: int = 0


class AddItemRequest(BaseModel):
    """Request to add a product to the manual list.

    Quantity is parsed leniently: blank or unparseable input becomes 1.
    """

    product_name: str
    quantity: Decimal = Decimal("1")
    unit: str = "pcs"

    @field_validator("quantity", mode="before")
    @classmethod
    def _parse_quantity(cls, value: Any) -> Decimal:
        quantity = to_decimal(value, default=Decimal("1"))
        return quantity if quantity != 0 else Decimal("1")

    @field_validator("unit", mode="before")
    @classmethod
    def _default_unit(cls, value: Any) -> str:
        return str(value).strip() if value and str(value).strip() else "pcs"


class UpdateItemRequest(BaseModel):
    is_purchased: bool


class CommitAllResult(BaseModel):
    shopping_list_id: str
    items_added: int = 0
