"""
Bike Parts API — Application Configuration
All settings loaded from environment variables via pydantic-settings.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Document store ────────────────────────────────────────────────────────
    MONGODB_URI: Optional[str] = None
    DB_USER: Optional[str] = None
    DB_PASS: Optional[str] = None
    DB_HOST: str = "cluster0.puprz.mongodb.net"
    DB_NAME: str = "bikePartsDB"

    # ── Auth ──────────────────────────────────────────────────────────────────
    # No default: a missing secret must stop the process at startup
    ACCESS_TOKEN_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    # ── Server ────────────────────────────────────────────────────────────────
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # ── Application Settings ──────────────────────────────────────────────────
    ENVIRONMENT: str = "development"  # development | staging | production
    APP_TITLE: str = "Bike Parts Manufacturer API"
    APP_VERSION: str = "1.0.0"
    DEVELOPED_BY: str = "Muhammad Touhiduzzaman"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"ENVIRONMENT must be one of {allowed}")
        return v

    @field_validator("ACCESS_TOKEN_SECRET")
    @classmethod
    def validate_secret(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("ACCESS_TOKEN_SECRET must not be empty")
        return v

    @model_validator(mode="after")
    def validate_store_credentials(self) -> "Settings":
        if not self.MONGODB_URI and not (self.DB_USER and self.DB_PASS):
            raise ValueError("Set MONGODB_URI, or both DB_USER and DB_PASS")
        return self

    @property
    def mongodb_uri(self) -> str:
        if self.MONGODB_URI:
            return self.MONGODB_URI
        return (
            f"mongodb+srv://{self.DB_USER}:{self.DB_PASS}@{self.DB_HOST}/"
            "?retryWrites=true&w=majority"
        )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton — safe for FastAPI Depends()."""
    return Settings()
