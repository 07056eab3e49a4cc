"""
Common dependencies for API endpoints.
"""

from fastapi import Query, HTTPException
from supabase import Client

from app.services.supabase import get_supabase_client


async def get_current_user_id(user_id: str = Query(..., description="User ID")) -> str:
    """
    Extract user_id from query parameter.

    In this architecture, the frontend authenticates via Supabase
    and passes the authenticated user_id directly to API calls.
    """
    if not user_id or not user_id.strip():
        raise HTTPException(status_code=400, detail="user_id is required")
    return user_id


def get_db() -> Client:
    """Supabase client handed to services as an explicit argument."""
    return get_supabase_client()
