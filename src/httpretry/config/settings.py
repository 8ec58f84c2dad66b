# Assumptions:
# - Configuration management using environment variables
# - Pydantic Settings for validation
# - Defaults mirror the historical behaviour: 10 attempts, 1 second apart


from functools import lru_cache

from pydantic_settings import BaseSettings


class HttpRetrySettings(BaseSettings):
    """Defaults for retryable requests and the shared HTTP transport"""

    # Retries
    max_retries: int = 10
    retries_wait_seconds: float = 1.0

    # Transport
    timeout_seconds: float | None = 30.0
    max_connections: int = 100
    max_keepalive_connections: int = 20

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    class Config:
        env_prefix = "HTTPRETRY_"
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> HttpRetrySettings:
    """Get settings singleton"""
    return HttpRetrySettings()
