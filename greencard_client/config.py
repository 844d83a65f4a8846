"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Greencard API
    greencard_api_base: str = "https://greencard.metrotas.com.au/api/v1"
    user_agent: str = "MetroTasMobile/0.0.0 android"

    # Service
    service_name: str = "greencard-client"
    log_level: str = "INFO"

    # HTTP Client
    http_request_timeout_seconds: float = 20.0
    http_resource_timeout_seconds: float = 30.0  # Total budget across redirect hops
    max_redirects: int = 20

    # Fetch orchestration
    detached_fetches: bool = True


settings = Settings()
