"""
Application Configuration

Immutable settings loaded from environment variables.

Author: AI Assistant
Date: 2025-11-18
"""

import os
from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, Field

from api.errors import ConfigurationError


DEFAULT_MAX_UPLOAD_SIZE = 50 * 1024 * 1024  # 50MB


class Config(BaseModel, frozen=True):
    """API configuration from environment variables"""
    # Provider credentials
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    openai_base_url: Optional[str] = Field(default=None, description="Custom provider base URL")

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    api_version: str = "1.0.0"
    cors_allow_origins: Tuple[str, ...] = ("*",)
    log_level: str = "INFO"

    # File storage
    upload_dir: Path = Path("uploads")
    max_upload_size: int = DEFAULT_MAX_UPLOAD_SIZE

    # Provider defaults
    transcription_model: str = "whisper-1"
    transcription_language: str = "pt"
    minutes_model: str = "gpt-4o"
    minutes_temperature: float = 0.3

    @classmethod
    def from_env(cls) -> "Config":
        """
        Build configuration from the process environment.

        Raises:
            ConfigurationError: If OPENAI_API_KEY is missing
        """
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY não configurada no .env")

        origins = os.getenv("CORS_ALLOW_ORIGINS", "*")

        return cls(
            openai_api_key=api_key,
            openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=int(os.getenv("API_PORT", os.getenv("PORT", "3000"))),
            cors_allow_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            upload_dir=Path(os.getenv("UPLOAD_DIR", "uploads")),
            max_upload_size=int(os.getenv("MAX_UPLOAD_SIZE", str(DEFAULT_MAX_UPLOAD_SIZE))),
            transcription_model=os.getenv("TRANSCRIPTION_MODEL", "whisper-1"),
            transcription_language=os.getenv("TRANSCRIPTION_LANGUAGE", "pt"),
            minutes_model=os.getenv("MINUTES_MODEL", "gpt-4o"),
            minutes_temperature=float(os.getenv("MINUTES_TEMPERATURE", "0.3")),
        )

    @property
    def max_upload_size_mb(self) -> float:
        return self.max_upload_size / (1024 * 1024)

    def ensure_directories(self) -> None:
        """Ensure the upload directory exists"""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
