"""
Application configuration using Pydantic Settings.

Automatically loads environment variables from .env files.
"""

import tempfile
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIB = 1024 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OpenAI (required - the service refuses to start without it)
    openai_api_key: str
    openai_model: str = "gpt-4.1"
    openai_timeout_seconds: float = 60.0

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 5002
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",  # Vite development server
        "http://127.0.0.1:5173",
    ]

    # Transient upload storage and size ceilings
    upload_dir: Path = Path(tempfile.gettempdir()) / "id-uploads"
    max_upload_bytes: int = 5 * MIB
    max_document_bytes: int = 20 * MIB

    debug: bool = False

    model_config = SettingsConfigDict(
        # Load from .env file in the package directory
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        # Case insensitive environment variable names
        case_sensitive=False,
    )

    @field_validator("openai_api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Reject blank keys so the service never starts without credentials."""
        v = v.strip()
        if not v:
            raise ValueError("OPENAI_API_KEY must not be empty")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration loaded from environment.

    Raises:
        pydantic.ValidationError: If OPENAI_API_KEY is not configured.
    """
    return Settings()
