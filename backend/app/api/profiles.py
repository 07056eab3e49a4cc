"""Profile API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from app.api.deps import get_current_user_id, get_db
from app.models.profiles import ALLERGIES, DIET_TYPES, Profile, SaveProfileRequest
from app.services.profiles import get_profile, save_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("", response_model=Profile)
async def read_profile(
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> Profile:
    try:
        return await get_profile(client, user_id)
    except Exception:
        logger.exception("Error fetching profile")
        raise HTTPException(status_code=500, detail="Failed to load profile")


@router.put("", response_model=Profile)
async def update_profile(
    request: SaveProfileRequest,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_db),
) -> Profile:
    """Create or update the user's dietary profile."""
    try:
        profile = Profile(**request.model_dump(exclude={"email"}))
        return await save_profile(client, user_id, profile, email=request.email)
    except Exception:
        logger.exception("Error saving profile")
        raise HTTPException(status_code=500, detail="Failed to save profile")


@router.get("/options", response_model=dict)
async def profile_options() -> dict:
    """Choices offered by the profile form."""
    return {"diet_types": DIET_TYPES, "allergies": ALLERGIES}
