"""
Configuration and settings for the blog API.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Annotated, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Relational database (any SQLAlchemy URL)
    database_url: Optional[str] = Field(default=None)

    # Document database; takes precedence over DATABASE_URL when set
    mongo_url: Optional[str] = Field(default=None)
    mongo_database: str = Field(default="blog")
    mongo_collection: str = Field(default="posts")

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    # HTTP server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000, ge=1, le=65535)
    log_level: str = Field(default="INFO")
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["*"]
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        # Accept "a,b" as well as a JSON array from the environment.
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
