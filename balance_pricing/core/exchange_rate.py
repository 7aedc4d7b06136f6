"""
Exchange Rate Cache
===================
Time-cached USD to EUR exchange rate with a deterministic fallback.
"""

import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Literal, Optional

import httpx
import structlog

from balance_pricing.exceptions import (
    InvalidConfigurationError,
    InvalidInputError,
    RateSourceMalformed,
    RateSourceUnavailable,
)

logger = structlog.get_logger(__name__)

RateSource = Literal["remote", "fallback", "manual"]
RateFetcher = Callable[[], Awaitable[float]]
Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_rate(value: Any) -> float:
    """Return ``value`` as a usable EUR rate or raise ``RateSourceMalformed``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RateSourceMalformed(f"EUR rate is not a number: {value!r}")
    rate = float(value)
    if not math.isfinite(rate) or rate <= 0:
        raise RateSourceMalformed(f"EUR rate must be positive and finite, got {rate}")
    return rate


def parse_eur_rate(data: Any) -> float:
    """Extract ``rates.EUR`` from a rate source JSON body."""
    rates = data.get("rates") if isinstance(data, dict) else None
    if not isinstance(rates, dict):
        raise RateSourceMalformed("Response has no 'rates' mapping")
    if "EUR" not in rates:
        raise RateSourceMalformed("Response is missing the EUR rate")
    return validate_rate(rates["EUR"])


class HttpRateFetcher:
    """
    Fetches the USD to EUR rate from a JSON exchange rate API.

    Makes exactly one GET per call. Transport errors and error statuses raise
    ``RateSourceUnavailable``; unusable bodies raise ``RateSourceMalformed``.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._client = client

    async def __call__(self) -> float:
        try:
            if self._client is not None:
                response = await self._client.get(self.url, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(self.url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RateSourceUnavailable(str(e) or type(e).__name__) from e

        try:
            data = response.json()
        except ValueError as e:
            raise RateSourceMalformed("Response body is not valid JSON") from e

        return parse_eur_rate(data)


@dataclass(frozen=True)
class RateCacheEntry:
    """A cached rate (EUR per 1 USD) and when it was stored."""

    rate: float
    fetched_at: datetime
    source: RateSource = "remote"


class ExchangeRateCache:
    """
    Holds the most recent USD to EUR rate for the process.

    The entry is always replaced as a whole, so readers never see a rate
    paired with another entry's timestamp. Concurrent misses may both fetch;
    the last write wins.
    """

    def __init__(
        self,
        fetcher: RateFetcher,
        fallback_rate: float,
        validity: timedelta = timedelta(hours=24),
        clock: Clock = utcnow,
    ):
        try:
            fallback_rate = validate_rate(fallback_rate)
        except RateSourceMalformed as e:
            raise InvalidConfigurationError(f"Unusable fallback rate: {e}") from e

        self._fetcher = fetcher
        self.fallback_rate = fallback_rate
        self.validity = validity
        self._clock = clock
        self._entry: Optional[RateCacheEntry] = None

    @property
    def entry(self) -> Optional[RateCacheEntry]:
        return self._entry

    def _is_fresh(self, entry: Optional[RateCacheEntry]) -> bool:
        return entry is not None and self._clock() - entry.fetched_at < self.validity

    def is_valid(self) -> bool:
        """Whether the cached rate is still inside the validity window."""
        return self._is_fresh(self._entry)

    def _store(self, rate: float, source: RateSource) -> RateCacheEntry:
        entry = RateCacheEntry(rate=rate, fetched_at=self._clock(), source=source)
        self._entry = entry
        return entry

    async def get_rate(self) -> float:
        """
        Get the current EUR per USD rate.

        Serves the cached value while fresh. Otherwise fetches once; on any
        failure the fallback rate is cached for a full validity window.
        """
        entry = self._entry
        if self._is_fresh(entry):
            logger.debug("Using cached exchange rate", rate=entry.rate, source=entry.source)
            return entry.rate

        try:
            rate = validate_rate(await self._fetcher())
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "Failed to fetch exchange rate, using fallback",
                error=str(e),
                error_type=type(e).__name__,
                fallback_rate=self.fallback_rate,
            )
            return self._store(self.fallback_rate, "fallback").rate

        stored = self._store(rate, "remote")
        logger.info(
            "Exchange rate updated",
            rate=stored.rate,
            fetched_at=stored.fetched_at.isoformat(),
        )
        return stored.rate

    def set_rate(self, rate: float) -> None:
        """Override the cached rate, bypassing the rate source."""
        try:
            rate = validate_rate(rate)
        except RateSourceMalformed as e:
            raise InvalidInputError(str(e)) from e
        self._store(rate, "manual")
        logger.info("Exchange rate manually set", rate=rate)
