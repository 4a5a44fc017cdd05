"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Back-office API (accounts payable/receivable, orders)
    backoffice_api_base: str = "http://localhost:8787/api"
    backoffice_api_token: str | None = None

    # Service
    service_name: str = "settlement-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0
    backoffice_max_retries: int = 3
    backoffice_backoff_base: float = 0.5  # Exponential backoff base in seconds


settings = Settings()
