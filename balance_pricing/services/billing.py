"""
Billing Service
===============
Builds transaction records and balance views from the pricing core.

Nothing here writes to storage; callers persist the returned records.
"""

from typing import Literal, Optional

import structlog

from balance_pricing.core.credits import credits_to_eur, eur_to_credits
from balance_pricing.core.pricing import PricingService
from balance_pricing.exceptions import InvalidInputError
from balance_pricing.schemas.pricing import BalanceSnapshot, TransactionRecord

logger = structlog.get_logger(__name__)


class BillingService:
    """Service for pricing usage events and presenting balances."""

    def __init__(self, pricing: PricingService):
        self.pricing = pricing

    async def charge_usage(
        self,
        user_id: str,
        tokens: int,
        rate_usd: float,
        token_type: Literal["prompt", "completion", "credits"] = "completion",
        provider: Optional[str] = None,
        model: Optional[str] = None,
        endpoint: Optional[str] = None,
        conversation_id: Optional[str] = None,
        duration_ms: Optional[int] = None,
    ) -> TransactionRecord:
        """
        Price a usage event and build its transaction record.

        The credit debit is the EUR cost expressed in credits, recorded
        as a negative ``token_value``.
        """
        if duration_ms is not None and duration_ms < 0:
            raise InvalidInputError(f"duration_ms must be non-negative, got {duration_ms}")

        breakdown = await self.pricing.calculate_cost(
            tokens=tokens,
            rate_usd=rate_usd,
            provider=provider,
            model=model,
        )

        record = TransactionRecord.from_breakdown(
            breakdown,
            user_id=user_id,
            token_type=token_type,
            tokens=tokens,
            rate_usd=rate_usd,
            token_value=-eur_to_credits(breakdown.cost_eur),
            model=model,
            provider=provider,
            endpoint=endpoint,
            conversation_id=conversation_id,
            duration_ms=duration_ms,
        )

        logger.info(
            "Priced usage event",
            user_id=user_id,
            provider=provider,
            model=model,
            tokens=tokens,
            cost_usd=breakdown.cost_usd,
            cost_eur=breakdown.cost_eur,
            exchange_rate=breakdown.exchange_rate,
        )

        return record

    async def balance_snapshot(self, token_credits: float) -> BalanceSnapshot:
        """Express a credit balance in EUR and, at the current rate, USD."""
        balance_eur = credits_to_eur(token_credits)
        exchange_rate = await self.pricing.get_exchange_rate()

        return BalanceSnapshot(
            token_credits=token_credits,
            balance_eur=balance_eur,
            balance_usd=balance_eur / exchange_rate,
            exchange_rate=exchange_rate,
        )
