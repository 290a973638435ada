from functools import lru_cache
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="QUESTIONBANK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Question Bank Service"
    version: str = "0.0.1"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    database_url: str = "sqlite:///./questionbank.db"
    api_prefix: str = "/api"
    cors_origins: List[str] = ["http://localhost:3000"]

    default_page_size: int = 20
    max_page_size: int = 100
    random_default_limit: int = 20


@lru_cache
def get_settings() -> Settings:
    return Settings()
