"""
Test Configuration
==================
Pytest fixtures for pricing tests.
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import pytest

from balance_pricing.core.exchange_rate import ExchangeRateCache, HttpRateFetcher
from balance_pricing.core.pricing import PricingConfig, PricingService

RATE_URL = "https://rates.test/v4/latest/USD"


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class RateSourceStub:
    """
    Request handler for ``httpx.MockTransport`` that imitates the rate API.

    Set ``error`` to raise a transport error, or change ``status_code`` /
    ``body`` to shape the response.
    """

    def __init__(self) -> None:
        self.calls = 0
        self.status_code = 200
        self.body: Any = {"base": "USD", "rates": {"EUR": 0.91, "GBP": 0.79}}
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if self.error is not None:
            raise self.error
        if isinstance(self.body, bytes):
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def pricing_config() -> PricingConfig:
    """Default pricing constants."""
    return PricingConfig(
        provider_markup=0.15,
        rebalancing_fee=0.025,
        fallback_rate=0.92,
        cache_validity=timedelta(hours=24),
    )


@pytest.fixture
def rate_url() -> str:
    return RATE_URL


@pytest.fixture
def rate_source() -> RateSourceStub:
    return RateSourceStub()


@pytest.fixture
async def http_client(rate_source: RateSourceStub) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client routed to the rate source stub."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(rate_source)) as client:
        yield client


@pytest.fixture
def rate_cache(
    http_client: httpx.AsyncClient,
    pricing_config: PricingConfig,
    clock: FakeClock,
) -> ExchangeRateCache:
    return ExchangeRateCache(
        fetcher=HttpRateFetcher(RATE_URL, client=http_client),
        fallback_rate=pricing_config.fallback_rate,
        validity=pricing_config.cache_validity,
        clock=clock,
    )


@pytest.fixture
def pricing_service(
    pricing_config: PricingConfig,
    rate_cache: ExchangeRateCache,
) -> PricingService:
    return PricingService(config=pricing_config, rate_cache=rate_cache)
