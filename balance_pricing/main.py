"""
Balance Pricing
===============
Composition root and diagnostic entry point.
"""

import asyncio
import json
import sys
from typing import Optional

import httpx

from balance_pricing.config import Settings, load_settings
from balance_pricing.core.exchange_rate import ExchangeRateCache, HttpRateFetcher
from balance_pricing.core.pricing import PricingConfig, PricingService
from balance_pricing.exceptions import InvalidConfigurationError
from balance_pricing.logging_config import configure_logging


def create_pricing_service(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> PricingService:
    """
    Build the pricing service and its exchange rate cache.

    Call once at startup and hand the instance to every consumer.
    """
    settings = settings or load_settings()
    config = PricingConfig.from_settings(settings)

    fetcher = HttpRateFetcher(
        url=settings.exchange_rate_url,
        timeout=settings.exchange_rate_timeout,
        client=http_client,
    )
    rate_cache = ExchangeRateCache(
        fetcher=fetcher,
        fallback_rate=config.fallback_rate,
        validity=config.cache_validity,
    )
    return PricingService(config=config, rate_cache=rate_cache)


async def _snapshot(service: PricingService) -> dict:
    await service.get_exchange_rate()
    return service.get_config().model_dump(by_alias=True)


def run() -> None:
    """Resolve the current exchange rate and print the pricing snapshot."""
    try:
        settings = load_settings()
    except InvalidConfigurationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    configure_logging(settings)
    service = create_pricing_service(settings)
    snapshot = asyncio.run(_snapshot(service))
    print(json.dumps(snapshot, indent=2))


if __name__ == "__main__":
    run()
