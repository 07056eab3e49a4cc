"""
mealplan-api: FastAPI backend for weekly meal planning.

Run with: uvicorn app.main:app --reload

Architecture:
- Recipes, meal plans and shopping lists live in Supabase
- Shopping lists are derived from the active meal plan on request
- The frontend authenticates with Supabase and passes user_id to every call
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.api import health
from app.api import meal_plans as meal_plans_api
from app.api import profiles as profiles_api
from app.api import recipes as recipes_api
from app.api import shopping as shopping_api
from app.services.healthcheck import API_VERSION

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting mealplan-api ({settings.environment})...")
    yield
    logger.info("Shutting down mealplan-api...")


app = FastAPI(
    title="mealplan-api",
    description="Recipes, weekly meal plans and shopping lists",
    version=API_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(meal_plans_api.router)  # /api/meal-plans
app.include_router(recipes_api.router)  # /api/recipes
app.include_router(shopping_api.router)  # /api/shopping
app.include_router(profiles_api.router)  # /api/profile


@app.get("/")
async def root():
    return {
        "name": "mealplan-api",
        "version": API_VERSION,
        "description": "Weekly meal planning with shopping lists built from your plan",
        "docs": "/docs",
        "endpoints": {
            "health": "/health",
            "meal-plans": "/api/meal-plans",
            "recipes": "/api/recipes",
            "shopping": "/api/shopping",
            "profile": "/api/profile",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=not settings.is_production,
    )
