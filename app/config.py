from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


ADMISSIBLE_CONSTANTS = (200_000, 1_000_000)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    port: int = 8000
    host: str = "0.0.0.0"

    safety_api_base_url: str = "http://localhost:4000/api"  # env: SAFETY_API_BASE_URL
    safety_api_timeout: float = 30.0  # env: SAFETY_API_TIMEOUT
    summary_path: str = "/lagging/v2/summary/{year}"
    occurrence_path: str = "/occurrence"
    occurrence_page_size: int = 10000

    default_constant: int = 200_000  # env: DEFAULT_CONSTANT
    fetch_max_workers: int = 8
    year_min: int = 1900
    year_max: int = 2100
    currency: str = "KRW"

    log_level: str = "INFO"  # env: LOG_LEVEL
    log_format: str = "text"  # env: LOG_FORMAT

    @field_validator("default_constant")
    @classmethod
    def _check_constant(cls, value: int) -> int:
        if value not in ADMISSIBLE_CONSTANTS:
            raise ValueError(f"default_constant must be one of {ADMISSIBLE_CONSTANTS}")
        return value

    @field_validator("fetch_max_workers")
    @classmethod
    def _check_workers(cls, value: int) -> int:
        return max(1, value)


@lru_cache
def get_settings() -> Settings:
    return Settings()
