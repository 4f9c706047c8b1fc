"""
Application configuration using Pydantic Settings.
Loads environment variables from .env file.

The settings object is immutable: it is built once at startup and handed
explicitly to the engine selection policy, the invokers and the routes.
"""

import sys
from functools import lru_cache
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_ghostscript() -> str:
    return "gswin64c" if sys.platform == "win32" else "gs"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    app_debug: bool = True
    app_name: str = "DocVerse Backend"
    app_version: str = "1.0.0"

    # Engine selection
    prefer_cloud_engine: bool = Field(
        default=False,
        validation_alias=AliasChoices("prefer_cloud_engine", "use_adobe_as_primary"),
    )

    # Cloud PDF API (Adobe PDF Services)
    adobe_client_id: str = ""
    adobe_client_secret: str = ""
    adobe_api_base_url: str = "https://pdf-services.adobe.io"
    adobe_request_timeout_seconds: float = 120.0
    adobe_poll_interval_seconds: float = 2.0
    adobe_poll_max_attempts: int = 150

    # Local executables
    soffice_path: str = "soffice"
    ghostscript_path: str = Field(
        default_factory=_default_ghostscript,
        validation_alias=AliasChoices("ghostscript_path", "gs_path"),
    )
    pdftoppm_path: str = "pdftoppm"
    tesseract_path: str = "tesseract"

    # Processing
    ocr_render_dpi: int = 120
    ocr_max_workers: int = Field(default=1, ge=1)
    conversion_max_workers: int = Field(default=1, ge=1)
    temp_dir: Optional[str] = None

    # Upload limits
    max_file_size_mb: int = 100
    max_files_per_request: int = 20

    # CORS
    cors_origins: str = (
        "http://localhost:3000,http://localhost:5173,http://localhost:8080"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @property
    def cloud_credentials_present(self) -> bool:
        """Both client id and secret are set and non-empty."""
        return bool(self.adobe_client_id.strip() and self.adobe_client_secret.strip())

    @property
    def cloud_engine_enabled(self) -> bool:
        """Cloud engine runs first only when preferred and credentialed."""
        return self.prefer_cloud_engine and self.cloud_credentials_present

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def max_file_size_bytes(self) -> int:
        """Convert max file size to bytes."""
        return self.max_file_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to avoid reading .env file on every request.
    """
    return Settings()


# Global settings instance for app wiring (CORS, logging)
settings = get_settings()
