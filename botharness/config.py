"""
Configuration settings for the bot fixture harness.

Uses Pydantic Settings to load environment variables for the fixture store
connection, the connection pool, logging, and the bot identity that entities
are built for.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from botharness.domain.models import StoreCredentials


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("bot_fixtures", alias="DB_NAME")

    # Connection pool used by the message store
    pool_min_size: int = Field(1, alias="POOL_MIN_SIZE")
    pool_max_size: int = Field(4, alias="POOL_MAX_SIZE")
    pool_timeout: float = Field(10.0, alias="POOL_TIMEOUT")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Bot identity passed alongside message/update construction
    bot_username: str = Field("testbot", alias="BOT_USERNAME")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def credentials(self) -> StoreCredentials:
        """Credentials for a direct connection to the configured store."""
        return StoreCredentials(
            host=self.db_host,
            database=self.db_name,
            port=self.db_port,
            user=self.db_user,
            password=self.db_password,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
