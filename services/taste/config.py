"""
Application configuration via pydantic-settings.
All config read from environment variables with sensible defaults for local dev.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # App
    app_name: str = "taste-engine"
    app_version: str = "0.1.0"
    environment: str = Field(default="development", pattern=r"^(development|staging|production)$")
    debug: bool = False
    log_level: str = Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR)$")

    # Redis (profile store). Empty string selects the in-memory store.
    redis_url: str = Field(default="redis://localhost:16379/0")
    redis_key_prefix: str = "taste_profile"

    # Interaction blending
    learning_rate: float = Field(default=0.05, gt=0.0, le=1.0)
    max_interactions: int = Field(default=500, ge=1)
    recompute_stale_hours: float = Field(default=24.0, gt=0.0)

    # Quiz pair selection
    genre_responsive_count: int = Field(default=2, ge=0)
    adaptive_count: int = Field(default=5, ge=0)

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}


settings = Settings()
