"""
VCFolio Configuration

Loads all runtime settings from environment variables (and an optional
.env file) using pydantic-settings. Every layer that validates uploads,
issues admin tokens, or opens the database reads from the same object.

Usage:
    from vcfolio.config import get_settings
    settings = get_settings()
    settings.max_upload_size_bytes

Environment variables:
    DATABASE_URL                 — SQLAlchemy URL (default: SQLite file next to the package)
    UPLOAD_DIR                   — directory for uploaded documents
    MAX_UPLOAD_SIZE_MB           — single upload ceiling in MB
    ALLOWED_EXTENSIONS           — comma-separated list, e.g. ".pdf,.docx"
    ADMIN_PASSWORD               — shared administrator password
    SECRET_KEY                   — HMAC key for signing admin tokens
    ACCESS_TOKEN_EXPIRE_MINUTES  — admin token lifetime
    CORS_ORIGINS                 — comma-separated list of allowed origins
    LOG_LEVEL                    — root log level (DEBUG, INFO, ...)
    SQLALCHEMY_ECHO              — echo SQL statements
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PACKAGE_DIR = Path(__file__).parent


class Settings(BaseSettings):
    """Application settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Database
    # -------------------------------------------------------------------------

    DATABASE_URL: str = Field(
        default=f"sqlite:///{_PACKAGE_DIR / 'vcfolio.db'}",
        description="SQLAlchemy database URL",
    )
    SQLALCHEMY_ECHO: bool = False

    # -------------------------------------------------------------------------
    # Document storage
    # -------------------------------------------------------------------------

    UPLOAD_DIR: Path = Field(
        default=_PACKAGE_DIR.parent / "uploads",
        description="Flat directory holding uploaded document files",
    )
    MAX_UPLOAD_SIZE_MB: int = Field(default=50, ge=1, le=1024)
    ALLOWED_EXTENSIONS: str = Field(
        default=(
            ".pdf,.doc,.docx,.xls,.xlsx,.ppt,.pptx,.jpg,.jpeg,.png,.gif,"
            ".txt,.csv,.zip,.rar,.7z"
        ),
        description="Comma-separated list of accepted file extensions",
    )

    # -------------------------------------------------------------------------
    # Admin access
    # -------------------------------------------------------------------------

    ADMIN_PASSWORD: str = Field(default="change-me", min_length=1)
    SECRET_KEY: str = Field(default="dev-secret-key-change-in-production", min_length=16)
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=480, ge=1)
    TOKEN_ALGORITHM: str = "HS256"

    # -------------------------------------------------------------------------
    # HTTP / logging
    # -------------------------------------------------------------------------

    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"
    LOG_LEVEL: str = "INFO"

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def allowed_extensions_list(self) -> list[str]:
        exts = []
        for ext in self.ALLOWED_EXTENSIONS.split(","):
            ext = ext.strip().lower()
            if not ext:
                continue
            exts.append(ext if ext.startswith(".") else f".{ext}")
        return exts

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance (cached)."""
    return Settings()
