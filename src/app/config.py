from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    APP_ENV: str = "local"
    LOG_LEVEL: str = "INFO"

    # Object storage
    STORAGE_BACKEND: Literal["s3", "memory"] = "s3"
    AWS_REGION: str = "us-east-1"
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    S3_BUCKET_NAME: str = "cgas-recipe-data"

    # Collection keys inside the bucket
    USERS_KEY: str = "users/user.csv"
    RECIPES_KEY: str = "recipes/recipe.csv"
    RECIPE_IMAGES_PREFIX: str = "recipes/images"

    # bcrypt cost factor
    PASSWORD_HASH_ROUNDS: int = Field(default=10, ge=4, le=31)

    FRONTEND_CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])


settings = Settings()
