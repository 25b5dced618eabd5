from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # True for production (structured JSON), False for dev (colored)
    log_failures: bool = False  # Emit a debug event for every failed safe_parse

    # Error projections
    format_root_key: str = Field(default="_errors", min_length=1)
    path_separator: str = Field(default=".", min_length=1)

    model_config = SettingsConfigDict(env_prefix="SCHEMATA_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
