"""
Pydantic Schemas
================
Result and record models produced by the pricing core.
"""

from balance_pricing.schemas.pricing import (
    BalanceSnapshot,
    CostBreakdown,
    PricingSnapshot,
    TransactionRecord,
)

__all__ = [
    "BalanceSnapshot",
    "CostBreakdown",
    "PricingSnapshot",
    "TransactionRecord",
]
