"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "lifeline"
    mongo_server_selection_timeout_ms: int = 5000

    # Redis
    redis_host: str = "redis"
    redis_port: int = 6379

    # JWT Configuration
    jwt_secret_key: str = "CHANGE_ME_IN_PRODUCTION_USE_STRONG_SECRET"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24
    jwt_remember_me_expire_days: int = 7

    # Rate Limiting
    login_rate_limit_attempts: int = 5
    login_rate_limit_window_seconds: int = 60
    user_lockout_threshold: int = 10
    user_lockout_duration_minutes: int = 30
    global_rate_limit_per_minute: int = 100

    # Bootstrap administrator, created on startup when both are set
    admin_email: str | None = None
    admin_password: str | None = None

    # Logging
    log_level: str = "INFO"

    cors_origins: list[str] = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
    ]

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
