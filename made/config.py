"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Secrets (the operator credential) come from environment variables, never code
    - get_settings() is cached (lru_cache) — single instance per process
    - Nothing reads settings at import time; the composition root passes them in

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - SQLite default: the ledger is a small local store that works out-of-the-box
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from made.core.domain_types import DEFAULT_INVITE_CODES


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite:///./made_ledger.db"
    database_echo: bool = False

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgres:// which SQLAlchemy rejects."""
        if isinstance(v, str) and v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    # Ledger
    ledger_document_key: str = "made_vault_v1"
    seed_invites: list[str] = list(DEFAULT_INVITE_CODES)

    # Operator credential (login disabled while unset)
    operator_email: str | None = None
    operator_password: str | None = None

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
