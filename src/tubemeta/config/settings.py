"""
Application settings and configuration management.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from tubemeta import __version__

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_4) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = Field(default="tubemeta")
    app_version: str = Field(default=__version__)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Display
    display_language: str = Field(default="en")

    # Watch page fetching
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    accept_language: str = Field(default="en-US,en;q=0.9")
    request_timeout: float = Field(default=30.0)
    retry_attempts: int = Field(default=3)
    retry_backoff: list[float] = Field(default=[2.0, 5.0, 10.0])
    oembed_fallback: bool = Field(default=True)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("display_language")
    @classmethod
    def validate_display_language(cls, v: str) -> str:
        """Validate display language."""
        valid_languages = ["en", "tr"]
        if v.lower() not in valid_languages:
            raise ValueError(f"Invalid display language: {v}")
        return v.lower()

    @field_validator("retry_backoff", mode="before")
    @classmethod
    def parse_retry_backoff(cls, v: str | list[float]) -> list[float]:
        """Parse retry backoff delays from comma-separated string or list."""
        if isinstance(v, str):
            return [float(part.strip()) for part in v.split(",") if part.strip()]
        return v

    @field_validator("retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        """Validate that at least one attempt is made."""
        if v < 1:
            raise ValueError(f"retry_attempts must be at least 1, got {v}")
        return v

    def backoff_for(self, attempt: int) -> float:
        """Get the backoff delay for a zero-based attempt index."""
        if not self.retry_backoff:
            return 0.0
        return self.retry_backoff[min(attempt, len(self.retry_backoff) - 1)]

    model_config = {
        "env_prefix": "TUBEMETA_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


# Global settings instance
settings = get_settings()
