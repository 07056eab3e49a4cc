"""User profile persistence service."""

import logging
from datetime import datetime
from typing import Optional

from supabase import Client

from app.models.profiles import Profile
from app.services.supabase import TABLES, first_row

logger = logging.getLogger(__name__)


async def get_profile(client: Client, user_id: str) -> Profile:
    """Get the user's profile, or defaults if they have not saved one yet."""
    result = (
        client.table(TABLES["profiles"])
        .select("*")
        .eq("id", user_id)
        .limit(1)
        .execute()
    )
    return Profile.from_row(first_row(result))


async def save_profile(
    client: Client,
    user_id: str,
    profile: Profile,
    email: Optional[str] = None,
) -> Profile:
    """Create or update the user's profile."""
    row = {
        "id": user_id,
        **profile.model_dump(),
        "updated_at": datetime.utcnow().isoformat(),
    }
    if email:
        row["email"] = email

    client.table(TABLES["profiles"]).upsert(row).execute()
    logger.info(f"Saved profile for user {user_id[:8]}")
    return profile
