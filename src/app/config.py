from __future__ import annotations

from typing import Literal, Optional

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    SUPABASE_URL: AnyUrl
    SUPABASE_SERVICE_ROLE_KEY: str
    APP_ENV: str = "local"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
    )

    BLOG_TABLE: str = "blogs"
    BLOG_IMAGES_BUCKET: str = "blog-images"
    BLOG_IMAGES_FOLDER: str = "blogs"
    IMAGE_CACHE_CONTROL: str = "3600"
    MAX_IMAGE_SIZE_BYTES: int = 5 * 1024 * 1024

    # "r2" stores images in Cloudflare R2 instead of Supabase Storage
    STORAGE_BACKEND: Literal["supabase", "r2"] = "supabase"
    R2_ACCOUNT_ID: Optional[str] = None
    R2_ACCESS_KEY_ID: Optional[str] = None
    R2_SECRET_ACCESS_KEY: Optional[str] = None
    R2_BUCKET_NAME: Optional[str] = None
    R2_PUBLIC_URL: Optional[str] = None


settings = Settings()
