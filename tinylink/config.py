"""Configuration management for the TinyLink service.

This module provides centralized configuration management using Pydantic BaseSettings
with environment variable support and caching for performance.

Flow Diagram — get_settings()
=============================
::
    ┌─────────────┐
    │  Call get_  │
    │  settings() │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Check cache  │
    │ (lru_cache)  │
    └──────┬──────┘
    HIT?  │
    ┌─────┴─────┐
    │ NO         │ YES
    ▼            ▼
┌─────────┐  ┌─────────┐
│ Create  │  │ Return  │
│ Settings│  │ cached  │
│ instance│  │ value   │
└─────────┘  └─────────┘

How to Use
===========
**Step 1 — Import**::
    from tinylink.config import get_settings

**Step 2 — Get settings**::
    settings = get_settings()
    db_url = settings.DATABASE_URL

**Step 3 — Override through the environment**::
    export DATABASE_URL="sqlite+aiosqlite:///./tinylink.db"
    export SHORT_CODE_LENGTH=7

Key Behaviours
===============
- Settings are cached after first access for performance.
- Environment variables (or a local ``.env`` file) override defaults.
- SHORT_CODE_LENGTH is restricted to the accepted code range (6-8).
- CODE_ALLOCATION_MAX_ATTEMPTS must allow at least one insert attempt.

Classes:
    Settings:  Pydantic model for all configuration values.
"""

__all__ = ["Settings", "get_settings"]

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_CODE_LENGTH = 6
MAX_CODE_LENGTH = 8


class Settings(BaseSettings):
    APP_NAME: str = "tinylink"
    APP_ENV: str = "development"
    VERSION: str = "1.0"
    BASE_URL: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    # PostgreSQL
    DATABASE_URL: str = "postgresql+asyncpg://tinylink:tinylink@db:5432/tinylink"
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 10
    DATABASE_ECHO: bool = False

    # Short code allocation
    SHORT_CODE_LENGTH: int = Field(default=6, ge=MIN_CODE_LENGTH, le=MAX_CODE_LENGTH)
    CODE_ALLOCATION_MAX_ATTEMPTS: int = Field(default=10, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
