from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Literal


class Settings(BaseSettings):
    """Application configuration settings."""

    # Application
    APP_NAME: str = "Sheet Profiler - Spreadsheet Analysis Dashboard API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    API_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Ingestion - payload limits (the profiler itself is unbounded)
    MAX_FILE_SIZE_MB: int = 25
    MAX_ROWS: int = 200_000
    SUPPORTED_FORMATS: list = ["xlsx", "xls", "csv"]

    # Profiling - which rows define the column list
    COLUMN_DISCOVERY: Literal["first_row", "union"] = "first_row"

    # Rate limiting
    RATE_LIMIT_REQUESTS: int = 10_000
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def cors_origin_list(self) -> list:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def max_file_size_bytes(self) -> int:
        return self.MAX_FILE_SIZE_MB * 1024 * 1024


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
