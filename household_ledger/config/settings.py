"""
Configuration Management for Household Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The calculation core has very few knobs, but the ones it has (display
suffix, sentinel ids, membership defaults, logging) are validated once
at startup instead of being scattered as literals.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_COLOR_PALETTE = (
    "#10B981,#3B82F6,#F59E0B,#EF4444,#8B5CF6,"
    "#06B6D4,#84CC16,#F97316,#EC4899,#6B7280"
)


class LedgerSettings(BaseSettings):
    """Calculation and display settings for the ledger core."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    currency_suffix: str = Field(
        default="kr",
        description="Suffix appended to formatted amounts"
    )
    shared_category_id: str = Field(
        default="shared",
        min_length=1,
        description="Id of the pooled household category (always listed first)"
    )
    uncategorized_label: str = Field(
        default="Uncategorized",
        min_length=1,
        description="Label for personal expenses without a resolvable category"
    )
    split_tolerance: float = Field(
        default=0.001,
        gt=0.0,
        lt=0.1,
        description="Allowed deviation of percentage shares from 1.0"
    )


class MembershipSettings(BaseSettings):
    """Defaults applied to newly approved household members."""

    model_config = SettingsConfigDict(
        env_prefix="MEMBERSHIP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_tax_rate: float = Field(
        default=0.32,
        ge=0.0,
        le=1.0,
        description="Tax rate assigned to new members until they set their own"
    )
    color_palette: str = Field(
        default=DEFAULT_COLOR_PALETTE,
        description="Comma-separated list of member display colors"
    )

    @field_validator('color_palette')
    @classmethod
    def validate_palette(cls, v: str) -> str:
        """Palette must contain at least one color."""
        colors = [c.strip() for c in v.split(",") if c.strip()]
        if not colors:
            raise ValueError("Color palette must contain at least one color")
        return v

    @property
    def palette(self) -> list[str]:
        """Get the palette as a list."""
        return [c.strip() for c in self.color_palette.split(",") if c.strip()]


class LoggingSettings(BaseSettings):
    """structlog output configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum log level"
    )
    json_output: bool = Field(
        default=True,
        description="Render logs as JSON (False renders for the console)"
    )


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
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def membership(self) -> MembershipSettings:
        return MembershipSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries describing failures.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("ledger", "membership", "logging"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
