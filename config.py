"""Application settings, read from EXPENSES_* environment variables or a .env file"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="EXPENSES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_uri: str = Field(
        default="expenses.db",
        description="Path of the sqlite database file, or :memory:",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    seed_demo_data: bool = Field(
        default=False,
        description="Insert random demo expenses when the app starts",
    )
    seed_count: int = Field(default=20, ge=0)


@lru_cache()
def get_settings() -> Settings:
    """Settings are loaded once per process. Call get_settings.cache_clear() to reload"""
    return Settings()
