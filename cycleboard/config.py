"""Application configuration loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file)."""

    # --- App ---
    app_name: str = "CycleBoard"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # development | staging | production

    # --- Data service ---
    api_base_url: str = "http://localhost:8000/api"
    api_token: str = ""  # optional bearer token, sent as-is
    request_timeout_seconds: float | None = None  # None = wait indefinitely

    # --- CORS ---
    cors_origins: list[str] = ["http://localhost:5173"]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "CYCLEBOARD_",
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()
