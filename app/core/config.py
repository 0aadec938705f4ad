"""
Application configuration.
Values are read from environment variables, falling back to a local .env
file so development works without exporting anything.
"""
import os
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    DATABASE_URL: str
    JWT_SECRET_KEY: str = os.environ.get("JWT_SECRET_KEY", "")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days
    CORS_ORIGINS: list[str] = ["*"]

    # Create tables on startup (local SQLite); production uses alembic
    AUTO_CREATE_TABLES: bool = False

    # Booking engine
    SLOT_STEP_MINUTES: int = Field(15, gt=0)
    # "live": revenue uses the service's current price
    # "booking": revenue uses the price captured when the slot was booked
    REVENUE_PRICE_SOURCE: Literal["live", "booking"] = "live"

    class Config:
        env_file = ".env"


settings = Settings()

# Validate critical security settings
if not settings.JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY is not set. Export it as an environment variable or add it to .env. "
        "Generate one with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
    )
