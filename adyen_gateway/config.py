"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./adyen_gateway.db"

    # Adyen
    adyen_api_key: str = ""
    adyen_merchant_account: str = ""
    adyen_mode: str = "test"  # test | live
    adyen_live_url_prefix: str = ""
    adyen_api_version: str = "v41"

    # Gateway
    gateway_config_id: int = 1
    origin_url: str = "http://localhost:8000"
    default_locale: str = "en_US"
    default_country: str | None = None
    rest_namespace: str = "adyen/v1"

    # Service
    service_name: str = "adyen-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0


settings = Settings()
