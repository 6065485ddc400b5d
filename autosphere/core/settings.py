"""Typed configuration loaded from the environment (and ``.env``).

Field aliases are the environment variable names; ``.env.example`` lists
them all.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOCAL_ENVIRONMENTS = frozenset({"dev", "development", "local", "test"})


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env_name: str = Field(default="development", alias="ENV_NAME")

    # Entity store
    database_url: str = Field(alias="DATABASE_URL")

    # Blob store (Firebase Cloud Storage). Uploads fail with 503 when unset.
    storage_bucket: str | None = Field(default=None, alias="STORAGE_BUCKET")
    upload_max_bytes: int = Field(
        default=5 * 1024 * 1024, alias="UPLOAD_MAX_BYTES", ge=1
    )

    # Identity provider
    firebase_api_key: str | None = Field(default=None, alias="FIREBASE_API_KEY")
    identity_toolkit_url: str = Field(
        default="https://identitytoolkit.googleapis.com",
        alias="IDENTITY_TOOLKIT_URL",
    )
    session_expires_days: int = Field(
        default=5, alias="SESSION_EXPIRES_DAYS", ge=1, le=14
    )

    # Storefront / back-office frontends, comma separated
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    # SQLAdmin back-office operator
    session_secret_key: str = Field(alias="SESSION_SECRET_KEY")
    admin_username: str = Field(alias="ADMIN_USERNAME")
    admin_password: str = Field(alias="ADMIN_PASSWORD")

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        origins = (origin.strip() for origin in self.cors_origins.split(","))
        return [origin for origin in origins if origin]

    @computed_field
    @property
    def is_secure_cookie(self) -> bool:
        """Session cookies are ``Secure`` everywhere but local environments."""
        return self.env_name.lower() not in LOCAL_ENVIRONMENTS

    @computed_field
    @property
    def session_expires_in(self) -> timedelta:
        return timedelta(days=self.session_expires_days)


@lru_cache
def get_settings() -> Settings:
    return Settings()
