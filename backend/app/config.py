"""Configuration management for mealplan-api."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    environment: str = "development"
    log_level: str = "info"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "*",  # For development - restrict in production
    ]

    # Supabase
    supabase_url: str = "http://localhost:54321"
    supabase_service_role_key: str = ""

    # Meal planning
    plan_length_days: int = 7

    # Recipes
    max_image_bytes: int = 5 * 1024 * 1024  # 5MB, same limit the editor enforces
    ingredient_suggestion_limit: int = 500

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
