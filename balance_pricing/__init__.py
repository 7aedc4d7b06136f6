"""
Balance Pricing
===============
EUR-based token pricing with a cached USD to EUR exchange rate.
"""

from balance_pricing.core.credits import credits_to_eur, eur_to_credits
from balance_pricing.core.exchange_rate import ExchangeRateCache, HttpRateFetcher
from balance_pricing.core.pricing import PricingConfig, PricingService
from balance_pricing.exceptions import InvalidConfigurationError, InvalidInputError
from balance_pricing.schemas.pricing import CostBreakdown

__version__ = "1.0.0"

__all__ = [
    "PricingService",
    "PricingConfig",
    "ExchangeRateCache",
    "HttpRateFetcher",
    "CostBreakdown",
    "InvalidConfigurationError",
    "InvalidInputError",
    "credits_to_eur",
    "eur_to_credits",
]
