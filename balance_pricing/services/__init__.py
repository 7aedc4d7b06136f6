"""
Business Services
=================
Billing glue between the pricing core and the storage layer.
"""

from balance_pricing.services.billing import BillingService

__all__ = ["BillingService"]
