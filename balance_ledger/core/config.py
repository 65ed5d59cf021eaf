from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Balance Ledger API"
    database_url: str = "sqlite:///balance_ledger.db"
    log_level: str = "INFO"
    seed_demo_data: bool = True
    mirror_workers: int = Field(default=2, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="LEDGER_",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
