"""User profile Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


DIET_TYPES = ["None", "Vegetarian", "Vegan", "Keto", "Paleo", "Mediterranean"]
ALLERGIES = ["Nuts", "Shellfish", "Dairy", "Gluten", "Eggs", "Soy"]


class Profile(BaseModel):
    """Dietary profile shown on the profile page."""

    first_name: str = ""
    last_name: str = ""
    diet_type: str = "None"
    calorie_goal: int = Field(default=2000, gt=0)
    allergies: list[str] = Field(default_factory=list)

    @field_validator("diet_type")
    @classmethod
    def _known_diet(cls, value: str) -> str:
        if value not in DIET_TYPES:
            raise ValueError(f"Unknown diet type: {value}")
        return value

    @field_validator("allergies")
    @classmethod
    def _known_allergies(cls, value: list[str]) -> list[str]:
        unknown = [a for a in value if a not in ALLERGIES]
        if unknown:
            raise ValueError(f"Unknown allergies: {', '.join(unknown)}")
        # Keep first occurrence order, drop repeats
        return list(dict.fromkeys(value))

    @classmethod
    def from_row(cls, row: dict | None) -> "Profile":
        """Build a profile from a ``profiles`` row, filling gaps with defaults."""
        if not row:
            return cls()
        return cls(
            first_name=row.get("first_name") or "",
            last_name=row.get("last_name") or "",
            diet_type=row.get("diet_type") or "None",
            calorie_goal=row.get("calorie_goal") or 2000,
            allergies=row.get("allergies") or [],
        )


class SaveProfileRequest(Profile):
    email: str | None = None
