"""Application configuration settings."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def _find_env_file() -> str | None:
    """Find .env file in common locations.

    Checks (in order):
    1. ../.env (running from backend/ directory - local dev)
    2. .env (running from project root or Docker)
    3. None (rely on environment variables - production)
    """
    candidates = [
        Path("../.env"),
        Path(".env"),
        Path("/app/.env"),
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


# Insecure defaults that should never be used in production
_INSECURE_SECRET_KEY = "change-me-in-production"
_INSECURE_ADMIN_PASSWORD = "admin123"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=_find_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    secret_key: str = Field(default=_INSECURE_SECRET_KEY)
    api_prefix: str = "/api"
    log_level: str = "INFO"

    # Database (in-memory SQLite by default; records vanish on restart)
    database_url: str = "sqlite+aiosqlite:///:memory:"

    # JWT Settings
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24  # 24 hours

    # Password hashing
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Session cookie carrying the access token
    session_cookie_name: str = "blogcraft_token"
    session_cookie_secure: bool = False

    # CORS
    cors_origins: list[str] = ["http://localhost:5000", "http://localhost:5173"]

    # Rate limiting
    rate_limit_enabled: bool = True
    auth_rate_limit: int = 10
    auth_rate_window_seconds: int = 15 * 60
    comment_rate_limit: int = 20
    comment_rate_window_seconds: int = 15 * 60

    # Seed data
    seed_sample_data: bool = True
    admin_email: str = "admin@blogcraft.com"
    admin_password: str = Field(default=_INSECURE_ADMIN_PASSWORD)

    # Chat
    chat_max_name_length: int = 50
    chat_max_message_length: int = 1000

    # Quizzes
    quiz_pass_mark: int = Field(default=70, ge=0, le=100)

    @model_validator(mode="after")
    def validate_security_settings(self) -> "Settings":
        """Validate critical security settings based on environment.

        In production the secret key and seeded admin password MUST be
        overridden. Elsewhere insecure defaults are allowed but logged.
        """
        warnings: list[str] = []
        errors: list[str] = []

        if self.secret_key == _INSECURE_SECRET_KEY:
            if self.app_env == "production":
                errors.append(
                    "SECRET_KEY must be set to a secure value in production. "
                    "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\""
                )
            else:
                warnings.append(
                    "Using insecure default SECRET_KEY. Set SECRET_KEY env var for security."
                )

        if self.seed_sample_data and self.admin_password == _INSECURE_ADMIN_PASSWORD:
            if self.app_env == "production":
                errors.append("ADMIN_PASSWORD must be changed from its default in production.")
            else:
                warnings.append(
                    "Seeding the admin account with the default password. Set ADMIN_PASSWORD."
                )

        if self.app_env == "production" and not self.session_cookie_secure:
            warnings.append("SESSION_COOKIE_SECURE is off; cookies will be sent over plain HTTP.")

        for warning in warnings:
            logger.warning(f"CONFIG WARNING: {warning}")

        if errors:
            error_msg = "Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
            raise ValueError(error_msg)

        return self

    @property
    def is_memory_database(self) -> bool:
        """Whether the configured database lives only in this process."""
        return self.database_url.startswith("sqlite") and (
            ":memory:" in self.database_url or self.database_url.endswith("://")
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
