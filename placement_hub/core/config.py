"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for runtime config values.

Domain rules (application cap, posting cap, slot limits) are NOT settings;
they live beside the entities that enforce them.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Persistence (SQLAlchemy URL, any dialect)
    database_url: str = "sqlite:///./placement_hub.db"
    load_on_startup: bool = False
    persist_on_shutdown: bool = False

    # JWT issued by the external authenticator
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # App
    log_level: str = "INFO"
    debug: bool = False

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PLACEMENT_",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
