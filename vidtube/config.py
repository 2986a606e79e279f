from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    APP_ENV: Literal["development", "staging", "production"] = Field(
        default="development"
    )
    DEBUG: bool = Field(default=True)

    DATABASE_URL: Optional[str] = Field(default=None)

    JWT_SECRET: Optional[str] = Field(default=None)
    JWT_ALGORITHM: Optional[str] = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60)
    REFRESH_TOKEN_SECRET: Optional[str] = Field(default=None)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default=10)

    MINIO_ENDPOINT: Optional[str] = Field(default=None)
    MINIO_ACCESS_KEY: Optional[str] = Field(default=None)
    MINIO_SECRET_KEY: Optional[str] = Field(default=None)
    MINIO_BUCKET: Optional[str] = Field(default=None)
    MINIO_USE_SSL: Optional[bool] = Field(default=None)
    # Base URL objects are served from; defaults to the endpoint itself
    MINIO_PUBLIC_URL: Optional[str] = Field(default=None)

    UPLOAD_TEMP_DIR: str = Field(default="./public/temp")
    UPLOAD_ALLOWED_VIDEO_EXTENSIONS: str = Field(default="mp4,mov,mkv,webm,avi")
    UPLOAD_ALLOWED_IMAGE_EXTENSIONS: str = Field(default="jpg,jpeg,png,webp,gif")


settings = Settings()
