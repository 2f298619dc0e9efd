from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


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
    app_name: str = "Shortlink"
    app_version: str = "1.0.0"
    secret_key: str = "your-secret-key-here-change-in-production"

    # Admin
    admin_secret: str = "admin123"
    admin_token_expire_minutes: int = 60
    admin_token_algorithm: str = "HS256"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Mapping store
    database_url: str = "sqlite:///./shortlink.db"
    store_backend: str = "sqlalchemy"  # Options: "sqlalchemy", "memory"
    store_timeout: float = 5.0  # Seconds before a store call is abandoned

    # Public base for short links, falls back to the request host when unset
    base_url: Optional[str] = None

    # Short code generation
    short_code_length: int = 6
    short_code_strategy: str = "random"  # Options: "random", "nanoid"
    max_retries: int = 5

    # Redirect cache
    cache_backend: str = "memory"  # Options: "memory", "redis", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 300  # 5 minutes
    cache_max_entries: int = 10_000

    # Admin listing cache
    listing_cache_ttl: int = 10

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
