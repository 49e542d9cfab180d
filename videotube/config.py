"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import PostgresDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App
    app_env: Literal["development", "production", "test"] = "development"
    app_name: str = "VideoTube"
    cors_origin: str = "http://localhost:3000"

    # Database
    database_url: PostgresDsn

    # Tokens
    access_token_secret: str
    refresh_token_secret: str
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 10

    @field_validator("access_token_secret", "refresh_token_secret")
    @classmethod
    def validate_token_secret(cls, v: str) -> str:
        """Ensure token secrets are strong enough."""
        if len(v) < 32:
            raise ValueError("Token secrets must be at least 32 characters long")
        return v

    # Cookies are HTTP-only always; the secure flag can be relaxed for local http
    cookie_secure: bool = True

    # Password hashing
    bcrypt_rounds: int = 10

    # Cloudinary content store
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""

    # Where multipart uploads are staged before being sent to the content store
    upload_temp_dir: str = "./public/temp"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def database_url_async(self) -> str:
        """Get async database URL (postgresql+asyncpg)."""
        url = str(self.database_url)
        return url.replace("postgresql://", "postgresql+asyncpg://")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]
