"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables, with an optional .env file
as a fallback. The settings object is built exactly once per process, so the JWT
signing secret used to issue a token at login is the same one used to verify it
on every later request.

Pydantic Settings automatically:
  1. Reads from environment variables (highest priority)
  2. Falls back to .env file values
  3. Uses defaults defined here (lowest priority)

Usage:
    from artisan_auth.config import settings
    print(settings.JWT_ISSUER)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_BUSINESS_TYPES = [
    "Textiles",
    "Handicrafts",
    "Jewelry",
    "Pottery",
    "Woodwork",
    "Metalwork",
    "Other",
]


class Settings(BaseSettings):
    """
    Central configuration for the Artisan Auth API.

    Required fields (no defaults) MUST be set in .env or environment:
      - SECRET_KEY: Used to sign JWT tokens
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Application ---
    APP_NAME: str = "Artisan Auth API"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # --- Database ---
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/artisan.db"

    # --- Authentication ---
    # REQUIRED: No default, forces the developer to set a real secret
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    JWT_ISSUER: str = "artisan-ai"
    JWT_AUDIENCE: str = "artisan-ai-users"

    # --- Profile ---
    # When RESTRICT_BUSINESS_TYPES is off, businessType is free text
    BUSINESS_TYPES: list[str] = DEFAULT_BUSINESS_TYPES
    RESTRICT_BUSINESS_TYPES: bool = True

    # --- CORS ---
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


# Singleton: import this instance everywhere instead of creating new Settings()
settings = Settings()
