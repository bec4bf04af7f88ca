# src/edutrack/core/config.py
from __future__ import annotations

import json
import os
from typing import Any

from pydantic import AliasChoices, AnyHttpUrl, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ---- App ----
    APP_NAME: str = "EduTrack SIS"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias=AliasChoices("EDUTRACK_LOG_LEVEL", "LOG_LEVEL"),
    )

    # ---- DB ----
    # read DATABASE_URL, else ASYNC_DATABASE_URL, else a local sqlite file
    DATABASE_URL: str = (
        os.getenv("DATABASE_URL")
        or os.getenv("ASYNC_DATABASE_URL")
        or "sqlite+aiosqlite:///./edutrack.db"
    )
    DB_ECHO: bool = False
    TESTING: bool = False
    AUTO_CREATE_TABLES: bool = True

    # ---- Web / CORS ----
    # Raw env value (JSON or CSV); the validator fills cors_origins.
    cors_origins_raw: str | None = Field(
        default=None,
        validation_alias=AliasChoices("CORS_ORIGINS"),
    )
    cors_origins: list[AnyHttpUrl] = Field(
        default_factory=list,
        validation_alias=AliasChoices("CORS_ORIGINS_PARSED_DO_NOT_USE"),
    )

    # ---- Auth ----
    JWT_SECRET: str = Field(
        default="change-me-in-production",
        validation_alias=AliasChoices("EDUTRACK_JWT_SECRET", "JWT_SECRET"),
    )
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12
    ALLOW_ADMIN_REGISTRATION: bool = False

    # ---- Document resources ----
    UPLOAD_DIR: str = "./uploads"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # ---- Default page sizes per collection ----
    PAGE_SIZE_STUDENTS: int = 50
    PAGE_SIZE_TEACHERS: int = 30
    PAGE_SIZE_CLASSES: int = 25
    PAGE_SIZE_SUBJECTS: int = 20
    PAGE_SIZE_GRADES: int = 100
    PAGE_SIZE_POINT_TRANSACTIONS: int = 50
    PAGE_SIZE_MESSAGES: int = 30
    PAGE_SIZE_EVENTS: int = 20
    PAGE_SIZE_RESOURCES: int = 25

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_ignore_empty=True,
    )

    @model_validator(mode="after")
    def _compute_cors(self) -> "Settings":
        raw = (self.cors_origins_raw or "").strip()
        if not raw:
            self.cors_origins = []
            return self
        values: Any
        if raw.startswith("["):
            values = json.loads(raw)
        else:
            values = [part.strip() for part in raw.split(",") if part.strip()]
        self.cors_origins = values
        return self

    def page_size(self, collection: str) -> int:
        """Default `limit` for a collection listing (falls back to 50)."""
        return int(getattr(self, f"PAGE_SIZE_{collection.upper()}", 50))


settings = Settings()

__all__ = ["Settings", "settings"]
