"""Application configuration settings.

This module defines the application-wide settings using Pydantic's BaseSettings.
It allows for loading configurations from environment variables and .env files,
providing type validation and default values.
"""

from pathlib import Path

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings

# Repository root: app/core/config.py -> app/core -> app -> <root>
BASE_DIR = Path(__file__).resolve().parent.parent.parent

DEFAULT_TEMP_UPLOAD_DIR = BASE_DIR / "uploads" / "temp"

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3120",
    "https://localhost:3000",
]


class Settings(BaseSettings):
    """Manages application settings, loading them from environment variables or an .env file.

    Attributes:
        temp_upload_dir: Directory holding temporary upload artifacts.
        temp_file_max_age: Age in seconds after which a temp file is deleted.
        temp_cleanup_interval: Seconds between two reaper ticks.
        temp_cleanup_on_startup: Run one tick as soon as the reaper starts.
        temp_cleanup_enabled: Start the reaper with the application.
        default_language: Language used when a request does not name one.
        cors_allowed_origins: List of allowed origins for CORS.
    """

    temp_upload_dir: Path = Field(default=DEFAULT_TEMP_UPLOAD_DIR)
    temp_file_max_age: int = Field(default=60 * 60)
    temp_cleanup_interval: int = Field(default=60 * 60)
    temp_cleanup_on_startup: bool = Field(default=True)
    temp_cleanup_enabled: bool = Field(default=True)

    default_language: str = Field(default="ar")

    cors_allowed_origins: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS),
    )

    model_config = {
        "env_file": ".env",
        "env_prefix": "",
        "extra": "ignore",
    }

    @field_validator("temp_file_max_age", "temp_cleanup_interval")
    @classmethod
    def check_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive number of seconds")
        return v

    @field_validator("cors_allowed_origins", mode="before")  # type: ignore
    @classmethod
    def assemble_cors_origins(cls, v: str | list[str] | None) -> list[str]:
        """Assembles the list of CORS allowed origins.

        If 'v' is a string, it splits it by commas. If 'v' is already a list,
        it's used directly. Otherwise, returns the default list of origins.
        """
        if isinstance(v, str) and v:
            return [origin.strip() for origin in v.split(",")]
        elif isinstance(v, list):
            return v
        return list(DEFAULT_CORS_ORIGINS)


settings = Settings()
