"""
Pricing Schemas
===============
Pydantic models for cost breakdowns, transaction records and diagnostics.

Fields serialise with the camelCase names used by the storage layer
(``model_dump(by_alias=True)``).
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CostBreakdown(BaseModel):
    """
    Result of a single cost calculation.

    Carries the markup, fee and exchange rate in effect at calculation time
    so the computation can be reconstructed later.
    """

    model_config = ConfigDict(frozen=True)

    cost_usd: float = Field(serialization_alias="costUSD")
    cost_eur: float = Field(serialization_alias="costEUR")
    exchange_rate: float = Field(serialization_alias="exchangeRate")
    provider_markup: float = Field(serialization_alias="providerMarkup")
    rebalancing_fee: float = Field(serialization_alias="rebalancingFee")


class PricingSnapshot(BaseModel):
    """Current configuration and cache state, for diagnostics."""

    model_config = ConfigDict(frozen=True)

    provider_markup: float = Field(serialization_alias="providerMarkup")
    rebalancing_fee: float = Field(serialization_alias="rebalancingFee")
    fallback_rate: float = Field(serialization_alias="fallbackRate")
    cache_validity_hours: float = Field(serialization_alias="cacheValidityHours")
    exchange_rate: float | None = Field(default=None, serialization_alias="exchangeRate")
    rate_source: str | None = Field(default=None, serialization_alias="rateSource")
    last_fetch: str | None = Field(default=None, serialization_alias="lastFetch")
    cache_valid: bool = Field(default=False, serialization_alias="cacheValid")


class TransactionRecord(BaseModel):
    """
    Transaction record handed to the storage layer.

    Spending is recorded as negative ``raw_amount`` (tokens) and negative
    ``token_value`` (credits).
    """

    user_id: str = Field(serialization_alias="user")
    token_type: Literal["prompt", "completion", "credits"] = Field(
        serialization_alias="tokenType"
    )
    model: str | None = None
    provider: str | None = None
    endpoint: str | None = None
    conversation_id: str | None = Field(default=None, serialization_alias="conversationId")
    raw_amount: float = Field(serialization_alias="rawAmount")
    rate: float
    token_value: float = Field(serialization_alias="tokenValue")
    duration_ms: int | None = Field(default=None, ge=0, serialization_alias="durationMs")

    cost_usd: float = Field(serialization_alias="costUSD")
    cost_eur: float = Field(serialization_alias="costEUR")
    exchange_rate: float = Field(serialization_alias="exchangeRate")
    provider_markup: float = Field(serialization_alias="providerMarkup")
    rebalancing_fee: float = Field(serialization_alias="rebalancingFee")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        serialization_alias="createdAt",
    )

    @classmethod
    def from_breakdown(
        cls,
        breakdown: CostBreakdown,
        *,
        user_id: str,
        token_type: Literal["prompt", "completion", "credits"],
        tokens: float,
        rate_usd: float,
        token_value: float,
        model: str | None = None,
        provider: str | None = None,
        endpoint: str | None = None,
        conversation_id: str | None = None,
        duration_ms: int | None = None,
    ) -> "TransactionRecord":
        """Build a record whose cost fields all come from one breakdown."""
        return cls(
            user_id=user_id,
            token_type=token_type,
            model=model,
            provider=provider,
            endpoint=endpoint,
            conversation_id=conversation_id,
            raw_amount=-tokens,
            rate=rate_usd,
            token_value=token_value,
            duration_ms=duration_ms,
            **breakdown.model_dump(),
        )


class BalanceSnapshot(BaseModel):
    """A credit balance expressed in EUR and USD."""

    model_config = ConfigDict(frozen=True)

    token_credits: float = Field(serialization_alias="tokenCredits")
    balance_eur: float = Field(serialization_alias="balanceEUR")
    balance_usd: float = Field(serialization_alias="balanceUSD")
    exchange_rate: float = Field(serialization_alias="exchangeRate")
