"""Configuration management for the ORB Showcase service.

Loads environment variables using pydantic-settings for type-safe configuration.
Database credentials, query limits, and catalog client tuning are defined here.
"""

import os
from functools import lru_cache
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_LOADED = False
_ENV_LOCK = Lock()


def _resolve_env_file() -> str | None:
    """Locate the .env file regardless of the current working directory.

    Preference order:
        1. ORB_ENV_FILE environment variable (explicit override)
        2. Current working directory (common for local runs)
        3. Ancestors of this file (covers package execution within Docker)
    """
    override = os.getenv("ORB_ENV_FILE")
    if override:
        override_path = Path(override).expanduser()
        if override_path.is_file():
            return str(override_path)

    cwd_candidate = Path.cwd() / ".env"
    if cwd_candidate.is_file():
        return str(cwd_candidate)

    for parent in Path(__file__).resolve().parents:
        candidate = parent / ".env"
        if candidate.is_file():
            return str(candidate)

    return None


_DEFAULT_ENV_FILE = _resolve_env_file()


def ensure_env_loaded() -> None:
    """Load environment variables from disk exactly once."""
    global _ENV_LOADED

    with _ENV_LOCK:
        if _ENV_LOADED:
            return

        env_path = _DEFAULT_ENV_FILE or _resolve_env_file()
        if env_path:
            load_dotenv(env_path, override=False)

        _ENV_LOADED = True


ensure_env_loaded()


class OrbConfig(BaseSettings):
    """Main configuration class for the ORB Showcase service and client.

    Loads database credentials, query limits and client tuning from environment
    variables. Uses pydantic-settings for validation and type safety.
    """

    model_config = SettingsConfigDict(
        env_file=_DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========== Database Credentials ==========
    postgres_user: str = "orb"
    postgres_password: SecretStr = SecretStr("changeme")
    postgres_db: str = "orb"
    postgres_host: str = "localhost"
    postgres_port: int = 5432

    # ========== Connection Pooling ==========
    postgres_min_pool_size: int = Field(default=1, ge=1)
    postgres_max_pool_size: int = Field(default=10, ge=1)
    postgres_statement_timeout_ms: int = Field(default=5000, ge=0)  # 0 disables the timeout

    # ========== Query Service ==========
    default_page_limit: int = Field(default=100, ge=1, le=100)
    max_page_limit: int = Field(default=100, ge=1, le=100)
    strict_sort: bool = Field(
        default=False,
        validation_alias=AliasChoices("orb_strict_sort", "strict_sort"),
    )  # Reject unknown sort fields instead of falling back to stars

    # ========== Client-side Search ==========
    search_min_relevance: float = Field(default=0.4, ge=0.0, le=1.0)
    search_result_limit: int = Field(default=100, ge=1)

    # ========== Catalog Client ==========
    orb_api_url: str = "http://localhost:8000"
    client_timeout: float = Field(default=10.0, gt=0)
    client_max_attempts: int = Field(default=3, ge=1, le=10)
    client_min_wait: float = Field(default=0.5, ge=0)
    client_max_wait: float = Field(default=4.0, ge=0)
    client_page_size: int = Field(default=12, ge=1)

    # ========== External API Credentials (Optional) ==========
    github_api_url: str = "https://api.github.com"
    github_token: SecretStr | None = None

    # ========== Observability ==========
    log_level: str = "INFO"
    health_check_timeout: float = 5.0

    # ========== API Service ==========
    orb_http_port: int = 8000
    host: str = "0.0.0.0"
    cors_allow_origins: list[str] = [
        "http://localhost:3000",
    ]  # Override via CORS_ALLOW_ORIGINS env var (JSON list)

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {value}")
        return level

    @model_validator(mode="after")
    def _validate_pool_bounds(self) -> "OrbConfig":
        if self.postgres_min_pool_size > self.postgres_max_pool_size:
            raise ValueError("postgres_min_pool_size must not exceed postgres_max_pool_size")
        return self

    @property
    def postgres_connection_string(self) -> str:
        """Get PostgreSQL connection string."""
        pwd = self.postgres_password.get_secret_value()
        return f"postgresql://{self.postgres_user}:{pwd}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"


@lru_cache(maxsize=1)
def get_config() -> OrbConfig:
    """Return cached Settings instance (process-local).

    Returns:
        OrbConfig: The configuration instance loaded from environment variables.
    """
    return OrbConfig()


# Export convenience accessors
__all__ = ["OrbConfig", "ensure_env_loaded", "get_config"]
