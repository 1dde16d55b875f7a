# src/drive_relay/config/settings.py
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",  # Vite dev server
    "https://engagment-zozo-yoyo.vercel.app",
]
DEFAULT_PREVIEW_ORIGIN_REGEX = r"^https://engagment-zozo-yoyo-[a-z0-9-]+\.vercel\.app$"

RELAY_REQUIRED_FIELDS = (
    "google_client_id",
    "google_client_secret",
    "google_refresh_token",
    "drive_folder_id",
)
MINTER_REQUIRED_FIELDS = ("google_client_id", "google_client_secret")


class Settings(BaseSettings):
    """
    Single source of truth for relay and token minter settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from drive_relay.config.settings import get_settings
        settings = get_settings()
        root_folder = settings.drive_folder_id
    """

    # Google OAuth client
    google_client_id: str = Field(default="", description="OAuth client id")
    google_client_secret: str = Field(default="", description="OAuth client secret")
    google_refresh_token: str = Field(
        default="",
        description="Long-lived refresh token minted by `drive-relay mint-token`"
    )

    # Drive destination
    drive_folder_id: str = Field(
        default="",
        description="Id of the Drive folder uploads (and subfolders) land in"
    )

    # HTTP listener
    host: str = Field(default="0.0.0.0", description="Interface the relay binds to")
    port: int = Field(default=8080, description="Port the relay listens on")

    # Upload limits
    upload_concurrency: int = Field(
        default=5,
        ge=1,
        description="Process-wide cap on in-flight Drive create-file calls"
    )
    max_files: int = Field(default=50, ge=1, description="Maximum files per request")
    max_file_size_mb: int = Field(default=25, ge=1, description="Maximum size of a single file")

    # Cross-origin policy
    cors_allowed_origins: List[str] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS),
        description="Exact origins allowed to call the relay"
    )
    cors_preview_origin_regex: Optional[str] = Field(
        default=DEFAULT_PREVIEW_ORIGIN_REGEX,
        description="Pattern matching preview-deployment origins"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator(
        "google_client_id",
        "google_client_secret",
        "google_refresh_token",
        "drive_folder_id",
        mode="before",
    )
    @classmethod
    def strip_credentials(cls, v):
        """Credentials pasted into .env files often carry stray whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    def masked_summary(self) -> dict:
        """Configuration as a dict that is safe to log."""
        return {
            "client_id": self.google_client_id,
            "client_secret": bool(self.google_client_secret),
            "refresh_token": bool(self.google_refresh_token),
            "drive_folder_id": self.drive_folder_id,
            "host": self.host,
            "port": self.port,
            "upload_concurrency": self.upload_concurrency,
            "max_files": self.max_files,
            "max_file_size_mb": self.max_file_size_mb,
            "cors_allowed_origins": self.cors_allowed_origins,
            "cors_preview_origin_regex": self.cors_preview_origin_regex,
            "log_level": self.log_level,
        }


@dataclass
class ConfigValidation:
    """Outcome of checking that required settings are present."""
    missing: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing

    @property
    def message(self) -> str:
        if self.ok:
            return "Configuration OK"
        return "Missing required env vars: " + ", ".join(self.missing)


def validate_settings(
    settings: Settings,
    required: Iterable[str] = RELAY_REQUIRED_FIELDS,
) -> ConfigValidation:
    """
    Check required settings before any listener starts.

    Returns:
        ConfigValidation listing the env var names that are empty.
    """
    missing = [name.upper() for name in required if not getattr(settings, name)]
    return ConfigValidation(missing=missing)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
