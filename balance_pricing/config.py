"""
Application Configuration
=========================
Pricing settings loaded once from environment variables using Pydantic Settings.
"""

from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from balance_pricing.exceptions import InvalidConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Pricing
    provider_markup: float = Field(default=0.15, ge=0, allow_inf_nan=False)
    rebalancing_fee: float = Field(default=0.025, ge=0, allow_inf_nan=False)
    fallback_eur_rate: float = Field(default=0.92, gt=0, allow_inf_nan=False)

    # Exchange rate source
    exchange_rate_url: str = "https://api.exchangerate-api.com/v4/latest/USD"
    exchange_rate_timeout: float = Field(default=10.0, gt=0, allow_inf_nan=False)
    exchange_rate_cache_hours: float = Field(default=24.0, gt=0, allow_inf_nan=False)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"


def load_settings(**overrides: object) -> Settings:
    """
    Build settings from the environment.

    Any validation failure is fatal: the service must not start with
    unusable arithmetic constants.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise InvalidConfigurationError(str(e)) from e
