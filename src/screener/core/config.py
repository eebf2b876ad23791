from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Batch Resume Screener"
    app_version: str = "0.1.0"
    debug: bool = False

    # Scoring service
    scoring_endpoint_url: str = "http://localhost:5678/webhook/recruit-ai-screening"
    scoring_timeout_ms: int = 60_000
    scoring_max_retries: int = 1
    scoring_retry_delay_ms: int = 2_000
    default_hiring_manager_email: str = "hr@company.com"

    # History
    history_max_entries: int = 20

    # Batches
    batch_max_runs: int = 10

    # Server
    host: str = "0.0.0.0"
    port: int = 8000


@lru_cache
def get_settings() -> Settings:
    return Settings()
