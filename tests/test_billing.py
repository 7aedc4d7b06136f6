"""
Billing Service Tests
=====================
Tests for transaction records and balance snapshots.
"""

import pytest

from balance_pricing.core.pricing import PricingService
from balance_pricing.exceptions import InvalidInputError
from balance_pricing.services.billing import BillingService


class TestBillingService:
    """Tests for the billing service."""

    @pytest.fixture
    def billing(self, pricing_service: PricingService) -> BillingService:
        pricing_service.set_exchange_rate(0.92)
        return BillingService(pricing_service)

    async def test_charge_usage_populates_record(self, billing: BillingService):
        """Test that every cost field comes from one calculation."""
        record = await billing.charge_usage(
            user_id="user-1",
            tokens=1_000_000,
            rate_usd=10,
            token_type="completion",
            provider="openai",
            model="gpt-4o",
            endpoint="openAI",
            conversation_id="conv-1",
            duration_ms=1500,
        )

        assert record.user_id == "user-1"
        assert record.token_type == "completion"
        assert record.provider == "openai"
        assert record.model == "gpt-4o"
        assert record.endpoint == "openAI"
        assert record.conversation_id == "conv-1"
        assert record.duration_ms == 1500
        assert record.raw_amount == -1_000_000
        assert record.rate == 10
        assert record.cost_usd == pytest.approx(10.0)
        assert record.cost_eur == pytest.approx(10.8445)
        assert record.exchange_rate == 0.92
        assert record.provider_markup == 0.15
        assert record.rebalancing_fee == 0.025
        assert record.token_value == pytest.approx(-10_844_500)

    async def test_record_serialises_with_storage_names(self, billing: BillingService):
        record = await billing.charge_usage(user_id="user-1", tokens=1000, rate_usd=3)

        data = record.model_dump(by_alias=True)

        for key in (
            "user",
            "tokenType",
            "costUSD",
            "costEUR",
            "exchangeRate",
            "providerMarkup",
            "rebalancingFee",
            "tokenValue",
            "rawAmount",
            "durationMs",
            "createdAt",
        ):
            assert key in data

    async def test_invalid_usage_is_rejected(self, billing: BillingService):
        with pytest.raises(InvalidInputError):
            await billing.charge_usage(user_id="user-1", tokens=-5, rate_usd=3)

    async def test_negative_duration_is_rejected(self, billing: BillingService):
        with pytest.raises(InvalidInputError):
            await billing.charge_usage(
                user_id="user-1", tokens=1000, rate_usd=3, duration_ms=-1
            )

    async def test_balance_snapshot(self, billing: BillingService):
        """Test a credit balance shown in EUR and USD."""
        snapshot = await billing.balance_snapshot(token_credits=9_200_000)

        assert snapshot.balance_eur == pytest.approx(9.2)
        assert snapshot.balance_usd == pytest.approx(10.0)
        assert snapshot.exchange_rate == 0.92
        assert snapshot.model_dump(by_alias=True)["balanceEUR"] == pytest.approx(9.2)

    async def test_empty_balance(self, billing: BillingService):
        snapshot = await billing.balance_snapshot(token_credits=0)

        assert snapshot.balance_eur == 0
        assert snapshot.balance_usd == 0
