"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables, with an optional .env file
as a fallback. The .env file is gitignored; .env.example provides a safe template.

Pydantic Settings automatically:
  1. Reads from environment variables (highest priority)
  2. Falls back to .env file values
  3. Uses defaults defined here (lowest priority)

Usage:
    from bitsplit.config import settings
    print(settings.DATABASE_URL)
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the BitSplit ledger API.

    Required fields (no defaults) MUST be set in .env or environment:
      - SECRET_KEY: Shared with the identity provider that signs bearer tokens
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Application ---
    APP_NAME: str = "BitSplit Ledger API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # --- Database ---
    # SQLite for single-node deployments; any async SQLAlchemy URL works
    DATABASE_URL: str = "sqlite+aiosqlite:///./bitsplit.db"

    # --- Identity tokens ---
    # REQUIRED: the identity provider signs tokens with this key; we only verify
    SECRET_KEY: str
    ALGORITHM: str = "HS256"

    # Identities allowed to call /admin/* endpoints (system statistics)
    ADMIN_IDENTITIES: list[str] = []

    # --- CORS ---
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]

    # --- Default split policy for newly created accounts ---
    DEFAULT_SPEND_PERCENT: int = 50
    DEFAULT_SAVE_PERCENT: int = 30
    DEFAULT_INVEST_PERCENT: int = 20

    @model_validator(mode="after")
    def default_split_must_total_100(self):
        """Refuse to start with a default policy that could never be stored."""
        total = (
            self.DEFAULT_SPEND_PERCENT
            + self.DEFAULT_SAVE_PERCENT
            + self.DEFAULT_INVEST_PERCENT
        )
        if total != 100:
            raise ValueError(f"Default split percentages must sum to 100, got {total}")
        return self


# Singleton: import this instance everywhere instead of creating new Settings()
settings = Settings()
