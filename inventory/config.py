"""
Configuration for the inventory API
"""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    APP_NAME: str = "shop-inventory"

    # Storage connection string: memory:// or file:///path/to/products.json
    STORE_URL: str = "memory://"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8085
    LOG_LEVEL: str = "INFO"

    # Browser clients are served from another origin
    CORS_ORIGINS: List[str] = ["*"]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
