"""
Configuration module for godo.
Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    host: str = Field(default="localhost", alias="GODO_HOST")
    port: int = Field(default=8001, alias="GODO_PORT")

    # Client
    server_url: str = Field(default="http://localhost:8001", alias="GODO_SERVER_URL")
    default_list: str = Field(default="Inbox", alias="GODO_DEFAULT_LIST")

    # Fetcher
    default_scheme: str = Field(default="http://", alias="GODO_DEFAULT_SCHEME")

    # Logging
    log_level: str = Field(default="info", alias="GODO_LOG_LEVEL")

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
