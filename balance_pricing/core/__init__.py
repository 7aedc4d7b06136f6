"""
Core Business Logic
====================
Exchange rate cache, token cost engine and credit conversion.
"""

from balance_pricing.core.credits import CREDITS_PER_EUR, credits_to_eur, eur_to_credits
from balance_pricing.core.exchange_rate import (
    ExchangeRateCache,
    HttpRateFetcher,
    RateCacheEntry,
)
from balance_pricing.core.pricing import PricingConfig, PricingService

__all__ = [
    "CREDITS_PER_EUR",
    "ExchangeRateCache",
    "HttpRateFetcher",
    "PricingConfig",
    "PricingService",
    "RateCacheEntry",
    "credits_to_eur",
    "eur_to_credits",
]
