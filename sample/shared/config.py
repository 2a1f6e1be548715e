# sample/shared/config.py
from enum import Enum
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnv(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Central Configuration Registry.
    Strictly typed and validated via Pydantic.
    """

    # --- Application Meta ---
    APP_NAME: str = "clean-architecture-sample"
    APP_ENV: AppEnv = AppEnv.DEVELOPMENT
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    API_PREFIX: str = "/api/v1"

    # --- Logging & Observability ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    OTEL_SERVICE_NAME: str = "clean-architecture-sample"
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = None

    # --- Persistence ---
    # Equivalent of ConnectionStrings:DefaultConnection.
    DATABASE_URL: str = "sqlite+aiosqlite:///./sample.db"
    DB_ECHO: bool = False
    DB_AUTO_CREATE: bool = True

    # --- CORS ---
    # Comma-separated list; "*" allows every origin.
    CORS_ORIGINS: str = "*"
    CORS_ALLOW_CREDENTIALS: bool = False
    CORS_ALLOW_METHODS: str = "*"
    CORS_ALLOW_HEADERS: str = "*"

    # --- Transport ---
    HTTPS_REDIRECT: bool = False

    # --- Health Checks ---
    HEALTH_PATH: str = "/health"
    HEALTH_CHECK_TIMEOUT_SEC: float = 5.0
    # Optional extra readiness target; the database is always checked.
    REDIS_URL: Optional[str] = None

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == AppEnv.DEVELOPMENT

    @property
    def cors_origins(self) -> List[str]:
        return _split_csv(self.CORS_ORIGINS)

    @property
    def cors_methods(self) -> List[str]:
        return _split_csv(self.CORS_ALLOW_METHODS)

    @property
    def cors_headers(self) -> List[str]:
        return _split_csv(self.CORS_ALLOW_HEADERS)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def _split_csv(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


settings = Settings()
