"""
Configuration Management for the Petty-Cash Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The ledger itself has no external dependencies; the only outbound
service is Gemini, and it is optional. A missing API key degrades the
insights panel to its fallback message instead of failing startup.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseSettings):
    """Gemini LLM configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: Optional[str] = Field(
        default=None,
        description="Gemini API key (insights are disabled without it)"
    )
    model_name: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=1024,
        ge=100,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Model temperature (lower = more deterministic)"
    )
    # One click must stay one request unless explicitly configured
    max_attempts: int = Field(
        default=1,
        ge=1,
        le=5,
        description="Attempts per insight request (retries on failure)"
    )

    @field_validator('api_key')
    @classmethod
    def blank_key_is_missing(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty GEMINI_API_KEY the same as an unset one."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def is_configured(self) -> bool:
        return self.api_key is not None


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Receipt limits
    max_receipt_size_mb: int = Field(
        default=2,
        ge=1,
        le=20,
        description="Maximum receipt image size in MiB"
    )
    supported_image_formats: str = Field(
        default="jpeg,png,webp,gif,bmp",
        description="Comma-separated list of accepted receipt image formats"
    )

    # Validation thresholds
    max_transaction_amount: float = Field(
        default=100000000.0,
        gt=0,
        description="Largest amount a single transaction may carry"
    )
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a transaction date can be before a warning"
    )

    # Display
    currency: str = Field(
        default="EGP",
        min_length=1,
        max_length=8,
        description="Currency label shown next to amounts"
    )
    notice_seconds: int = Field(
        default=3,
        ge=1,
        le=30,
        description="How long transient notices stay visible"
    )
    seed_sample_data: bool = Field(
        default=True,
        description="Start new sessions with the sample ledger"
    )

    @property
    def supported_formats_list(self) -> list[str]:
        """Get supported formats as a list."""
        return [fmt.strip().lower() for fmt in self.supported_image_formats.split(",") if fmt.strip()]

    @property
    def max_receipt_size_bytes(self) -> int:
        """Get max receipt size in bytes."""
        return self.max_receipt_size_mb * 1024 * 1024


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus "<name>_error"
    entries describing what is wrong. Used by the Settings page.
    """
    results = {}

    settings = get_settings()

    try:
        gemini = settings.gemini
        results["gemini"] = gemini.is_configured
        if not gemini.is_configured:
            results["gemini_error"] = "GEMINI_API_KEY is not set"
    except Exception as e:
        results["gemini"] = False
        results["gemini_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
