"""Service configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # REST backend
    backend_api_url: str = "http://localhost:5001"
    backend_timeout_seconds: float = 30.0

    # Session storage
    session_backend: str = "memory"  # "memory" | "redis"
    redis_url: str = "redis://localhost:6379/0"
    session_key_prefix: str = "asc3:session"
    session_cookie_name: str = "asc3_session"
    session_cookie_secure: bool = False

    # Tenancy
    default_tenant_prefix: str = "default"
    # Legacy global-admin identity; empty string disables the email match
    global_admin_email: str = "global@asc.com"

    # Service
    rest_port: int = 8080
    cors_allow_origins: str = "*"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
