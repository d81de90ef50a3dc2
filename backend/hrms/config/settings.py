"""Application Settings - read once from the environment and .env"""
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    HRMS configuration

    Every field maps to an upper-case environment variable of the same
    name, e.g. MONGO_URI or SELLER_SYNC_INTERVAL_HOURS.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    environment: str = "development"
    # Enables /api/docs and the OpenAPI schema
    debug: bool = True

    # API server (run.py)
    host: str = "127.0.0.1"
    port: int = 8000
    # Comma separated, or "*" for any origin
    cors_origins: str = "*"

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "hrms_dev"
    mongo_timeout_ms: int = 5000

    # External business API; the source of truth for sellers
    business_api_base: str = "http://localhost:5001/api"
    business_api_timeout_seconds: float = 10.0
    seller_sync_enabled: bool = True
    seller_sync_interval_hours: int = 6

    # Per-client request budget
    rate_limit_max_requests: int = 100
    rate_limit_window_seconds: int = 900

    logs_path: str = "./logs"
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
