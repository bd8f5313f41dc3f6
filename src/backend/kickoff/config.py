"""Application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Kickoff"
    app_version: str = "0.1.0"
    debug: bool = False

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Description generation (uses ANTHROPIC_API_KEY env var by default)
    anthropic_api_key: str | None = None
    description_model: str = "sonnet"
    description_max_tokens: int = 1024
    description_timeout_seconds: float = 60.0

    # Downstream services
    project_service_url: str = "http://project-service:5641"
    project_service_timeout_seconds: float = 10.0
    auth_service_url: str = "http://auth-service:8080"
    auth_service_timeout_seconds: float = 5.0


settings = Settings()
