from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Application
    app_name: str = "bang!"
    app_version: str = "1.1.0"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Record store
    store_backend: str = "redis"  # Options: "redis", "memory"
    redis_url: str = "redis://127.0.0.1:6379/0"
    redis_socket_timeout: float = 2.0

    # Slugs and admin keys
    slug_prefix: str = "!"
    slug_length: int = 5
    admin_key_length: int = 64
    max_retries: int = 5  # Slug regeneration attempts on collision

    # Click tracking
    hit_scheduler: str = "background"  # Options: "background", "inline"
    shutdown_drain_timeout: float = 5.0  # Seconds to wait for pending increments

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
