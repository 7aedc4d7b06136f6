"""
Token Cost Engine
=================
EUR-based pricing for token usage.

Calculation flow:
1. Base USD cost from the provider's rate per 1M tokens
2. Provider markup
3. Rebalancing fee
4. Conversion to EUR at the current exchange rate
"""

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

import structlog

from balance_pricing.config import Settings
from balance_pricing.core import credits
from balance_pricing.core.exchange_rate import ExchangeRateCache
from balance_pricing.exceptions import InvalidConfigurationError, InvalidInputError
from balance_pricing.schemas.pricing import CostBreakdown, PricingSnapshot

logger = structlog.get_logger(__name__)

TOKENS_PER_RATE_UNIT = 1_000_000


@dataclass(frozen=True)
class PricingConfig:
    """Pricing constants, fixed for the lifetime of the process."""

    provider_markup: float = 0.15
    rebalancing_fee: float = 0.025
    fallback_rate: float = 0.92
    cache_validity: timedelta = timedelta(hours=24)

    def __post_init__(self) -> None:
        for name in ("provider_markup", "rebalancing_fee"):
            value = getattr(self, name)
            if not _is_number(value) or value < 0:
                raise InvalidConfigurationError(f"{name} must be a non-negative number, got {value!r}")
        if not _is_number(self.fallback_rate) or self.fallback_rate <= 0:
            raise InvalidConfigurationError(
                f"fallback_rate must be a positive number, got {self.fallback_rate!r}"
            )
        if not isinstance(self.cache_validity, timedelta) or self.cache_validity <= timedelta(0):
            raise InvalidConfigurationError(
                f"cache_validity must be a positive time span, got {self.cache_validity!r}"
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PricingConfig":
        return cls(
            provider_markup=settings.provider_markup,
            rebalancing_fee=settings.rebalancing_fee,
            fallback_rate=settings.fallback_eur_rate,
            cache_validity=timedelta(hours=settings.exchange_rate_cache_hours),
        )


def _is_number(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


class PricingService:
    """
    Turns token usage into a billable cost in USD and EUR.

    One instance is created at startup and shared by all callers; it owns
    the process-wide exchange rate cache.
    """

    def __init__(self, config: PricingConfig, rate_cache: ExchangeRateCache):
        self.config = config
        self.rate_cache = rate_cache

        logger.info(
            "Pricing service initialized",
            provider_markup=config.provider_markup,
            rebalancing_fee=config.rebalancing_fee,
            fallback_rate=config.fallback_rate,
            cache_validity_hours=config.cache_validity.total_seconds() / 3600,
        )

    async def get_exchange_rate(self) -> float:
        """Get the current EUR per 1 USD rate."""
        return await self.rate_cache.get_rate()

    def set_exchange_rate(self, rate: float) -> None:
        """Manually set the exchange rate (operator override or tests)."""
        self.rate_cache.set_rate(rate)

    async def calculate_cost(
        self,
        tokens: float,
        rate_usd: float,
        provider: Optional[str] = None,
        model: Optional[str] = None,
    ) -> CostBreakdown:
        """
        Calculate the cost of token usage.

        Args:
            tokens: Number of tokens used
            rate_usd: Provider price in USD per 1M tokens
            provider: Provider name, for logging only
            model: Model name, for logging only

        Returns:
            Cost breakdown with both USD and EUR amounts

        Raises:
            InvalidInputError: If tokens or rate_usd is negative or not finite
        """
        _check_input("tokens", tokens)
        _check_input("rate_usd", rate_usd)

        markup = self.config.provider_markup
        fee = self.config.rebalancing_fee

        cost_usd = (tokens / TOKENS_PER_RATE_UNIT) * rate_usd
        exchange_rate = await self.rate_cache.get_rate()
        cost_with_markup = cost_usd * (1 + markup)
        cost_with_fees = cost_with_markup * (1 + fee)
        cost_eur = cost_with_fees * exchange_rate

        logger.debug(
            "Cost calculation",
            tokens=tokens,
            rate_usd=rate_usd,
            cost_usd=cost_usd,
            provider_markup=markup,
            cost_with_markup=cost_with_markup,
            rebalancing_fee=fee,
            cost_with_fees=cost_with_fees,
            exchange_rate=exchange_rate,
            cost_eur=cost_eur,
            provider=provider,
            model=model,
        )

        return CostBreakdown(
            cost_usd=cost_usd,
            cost_eur=cost_eur,
            exchange_rate=exchange_rate,
            provider_markup=markup,
            rebalancing_fee=fee,
        )

    @staticmethod
    def credits_to_eur(token_credits: float) -> float:
        return credits.credits_to_eur(token_credits)

    @staticmethod
    def eur_to_credits(eur: float) -> float:
        return credits.eur_to_credits(eur)

    def get_config(self) -> PricingSnapshot:
        """Get current pricing configuration and cache state."""
        entry = self.rate_cache.entry
        return PricingSnapshot(
            provider_markup=self.config.provider_markup,
            rebalancing_fee=self.config.rebalancing_fee,
            fallback_rate=self.config.fallback_rate,
            cache_validity_hours=self.config.cache_validity.total_seconds() / 3600,
            exchange_rate=entry.rate if entry else None,
            rate_source=entry.source if entry else None,
            last_fetch=entry.fetched_at.isoformat() if entry else None,
            cache_valid=self.rate_cache.is_valid(),
        )


def _check_input(name: str, value: float) -> None:
    if not _is_number(value) or value < 0:
        raise InvalidInputError(f"{name} must be a non-negative finite number, got {value!r}")
