# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.MONGO_URI)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # MongoDB Configuration
    # -------------------------------------------------------------------------

    MONGO_URI: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string"
    )

    MONGO_DB_NAME: str = Field(
        default="hk_vidya_cms",
        description="Database holding all CMS collections"
    )

    MONGO_TIMEOUT_MS: int = Field(
        default=5000,
        ge=100,
        le=60000,
        description="Server selection timeout in milliseconds"
    )

    # -------------------------------------------------------------------------
    # Payment Gateway (Razorpay)
    # -------------------------------------------------------------------------
    # Optional - donation forms return 503 when these are missing

    RAZORPAY_KEY_ID: str | None = Field(
        default=None,
        description="Razorpay key id"
    )

    RAZORPAY_KEY_SECRET: str | None = Field(
        default=None,
        description="Razorpay key secret (also used to verify payment signatures)"
    )

    RAZORPAY_API_URL: str = Field(
        default="https://api.razorpay.com/v1",
        description="Razorpay REST API base URL"
    )

    # -------------------------------------------------------------------------
    # Email (SMTP)
    # -------------------------------------------------------------------------

    EMAIL_ENABLED: bool = Field(
        default=False,
        description="Send receipt and form notification emails"
    )

    SMTP_HOST: str = Field(default="localhost")

    SMTP_PORT: int = Field(default=587, ge=1, le=65535)

    SMTP_USERNAME: str | None = Field(default=None)

    SMTP_PASSWORD: str | None = Field(default=None)

    SMTP_USE_TLS: bool = Field(default=True)

    EMAIL_FROM: str = Field(
        default="noreply_donations@harekrishnavidya.org",
        description="Sender address for outgoing mail"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=5000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    SECRET_KEY: str = Field(
        default="dev-secret-key-change-in-production",
        min_length=16,
        description="Secret key for signing admin tokens"
    )

    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60 * 24,
        ge=1,
        description="Lifetime of admin access tokens"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # File Upload / Export Settings
    # -------------------------------------------------------------------------

    UPLOAD_DIR: str = Field(
        default="uploads",
        description="Directory uploaded files are written to (served at /uploads)"
    )

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Maximum file upload size in MB"
    )

    EXPORT_DIR: str = Field(
        default="exports",
        description="Directory for donation form CSV exports"
    )

    # -------------------------------------------------------------------------
    # Grocery Kits
    # -------------------------------------------------------------------------

    GROCERY_PROCESSING_FEE_RATE: float = Field(
        default=0.02,
        ge=0.0,
        le=1.0,
        description="Processing fee charged on grocery donations"
    )

    GROCERY_SELECTION_TTL_MINUTES: int = Field(
        default=60,
        ge=1,
        description="How long a grocery selection stays retrievable"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://harekrishnavidya.org" -> [...]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def max_upload_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def razorpay_configured(self) -> bool:
        """Both Razorpay credentials are present."""
        return bool(self.RAZORPAY_KEY_ID and self.RAZORPAY_KEY_SECRET)

    @property
    def email_configured(self) -> bool:
        """Email is switched on and has a host to talk to."""
        return self.EMAIL_ENABLED and bool(self.SMTP_HOST)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
